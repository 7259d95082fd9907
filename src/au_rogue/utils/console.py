"""
Central Logging and Console Utilities.

All terminal output goes through the standard ``logging`` module rendered by
``rich``. The console sits behind a small proxy so tests (or an embedding
tool) can swap the destination for an in-memory buffer via ``set_console``
without re-importing modules that already hold ``console``.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "kind.edit": "cyan",
    "kind.add": "green",
    "kind.remove": "magenta",
    "kind.warn": "yellow",
    "kind.note": "dim",
  }
)


class _ConsoleProxy:
  """
  Forwards printing to a swappable ``rich.console.Console``.

  Swapping the backend also re-points the root logger's ``RichHandler`` so
  ``logging`` output follows the console.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._level = logging.INFO
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Resets to a fresh standard output console."""
    self._backend = Console(theme=_THEME)
    self._configure_logging()

  def set_level(self, level: int) -> None:
    """Changes the root logging level (e.g. DEBUG for ``--verbose``)."""
    self._level = level
    logging.getLogger().setLevel(level)

  @property
  def backend(self) -> Console:
    return self._backend

  def _configure_logging(self) -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
      if isinstance(handler, RichHandler):
        root_logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    root_logger.setLevel(self._level)
    root_logger.addHandler(rich_handler)

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Routes console and logging output to another Console (e.g. one recording to a buffer).

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Resets logging and console to standard output."""
  console.reset()


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message content. Can include rich markup like [path].
  """
  logging.info(msg, extra={"markup": True})


def log_success(msg: str) -> None:
  """Logs a success message at the custom SUCCESS level."""
  logging.log(SUCCESS_LEVEL_NUM, msg, extra={"markup": True})


def log_warning(msg: str) -> None:
  """Logs a warning message."""
  logging.warning(msg, extra={"markup": True})


def log_error(msg: str) -> None:
  """Logs an error message."""
  logging.error(msg, extra={"markup": True})
