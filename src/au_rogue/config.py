"""
Runtime Configuration Store.

Settings are read from the nearest ``pyproject.toml`` (``[tool.au_rogue]``
table) and overridden by command line flags.

Example::

    [tool.au_rogue]
    sources = ["src/**/*.ts"]
    templates = ["src/**/*.html"]
    external_classes = ["HttpClient", "EventAggregator"]
"""

import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

DEFAULT_SOURCES = ["src/**/*.ts", "src/**/*.tsx", "src/**/*.js", "src/**/*.jsx"]
DEFAULT_TEMPLATES = ["src/**/*.html", "src/**/*.au"]
DEFAULT_EXCLUDES = ["node_modules", "dist"]


class RuntimeConfig(BaseModel):
  """
  Global configuration container for a migration run.
  """

  dry_run: bool = Field(False, description="If True, nothing is written to disk.")
  sources: List[str] = Field(default_factory=lambda: list(DEFAULT_SOURCES), description="Globs for TS/JS sources.")
  templates: List[str] = Field(
    default_factory=lambda: list(DEFAULT_TEMPLATES), description="Globs for HTML/.au templates."
  )
  exclude: List[str] = Field(
    default_factory=lambda: list(DEFAULT_EXCLUDES), description="Directory names skipped during discovery."
  )
  compat: bool = Field(False, description="Emit compat-v1 assist notes.")
  report_dir: Path = Field(Path("."), description="Directory receiving the report files.")
  external_classes: List[str] = Field(
    default_factory=list,
    description="Type names from packages to treat as injectable classes (e.g. 'HttpClient').",
  )

  @field_validator("sources", "templates")
  @classmethod
  def validate_globs(cls, v: List[str]) -> List[str]:
    """
    Rejects empty glob lists.

    Args:
        v (List[str]): Glob patterns.

    Returns:
        List[str]: The stripped patterns.

    Raises:
        ValueError: If no usable pattern remains.
    """
    cleaned = [p.strip() for p in v if p and p.strip()]
    if not cleaned:
      raise ValueError("At least one glob pattern is required.")
    return cleaned

  def snapshot(self) -> Dict[str, Any]:
    """Options recorded in the change log."""
    return self.model_dump(mode="json")

  @classmethod
  def load(
    cls,
    dry_run: Optional[bool] = None,
    sources: Optional[List[str]] = None,
    templates: Optional[List[str]] = None,
    compat: Optional[bool] = None,
    report_dir: Optional[Path] = None,
    external_classes: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        dry_run: Override for dry-run mode.
        sources: Override for source globs.
        templates: Override for template globs.
        compat: Override for compat notes.
        report_dir: Override for the report directory.
        external_classes: Additional external class names (merged with TOML).
        search_path: Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    final_report = report_dir
    if final_report is None and "report_dir" in toml_config:
      raw = Path(toml_config["report_dir"])
      final_report = (toml_dir / raw) if toml_dir and not raw.is_absolute() else raw

    merged_classes = list(toml_config.get("external_classes", []))
    for name in external_classes or []:
      if name not in merged_classes:
        merged_classes.append(name)

    return cls(
      dry_run=dry_run if dry_run is not None else toml_config.get("dry_run", False),
      sources=sources or toml_config.get("sources", list(DEFAULT_SOURCES)),
      templates=templates or toml_config.get("templates", list(DEFAULT_TEMPLATES)),
      exclude=toml_config.get("exclude", list(DEFAULT_EXCLUDES)),
      compat=compat if compat is not None else toml_config.get("compat", False),
      report_dir=final_report or Path("."),
      external_classes=merged_classes,
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches parents for 'pyproject.toml' and extracts the tool table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError:
        return {}, None
      return data.get("tool", {}).get("au_rogue", {}), parent

  return {}, None
