"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Factories building in-memory projects and running passes over them.
- Console isolation so tests that swap the rich backend do not leak.
"""

import sys
import pytest
from pathlib import Path
from typing import Callable, Dict, List, Optional

# Add src to path so we can import 'au_rogue' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from au_rogue.config import RuntimeConfig
from au_rogue.core.changelog import ChangeKind, ChangeLog
from au_rogue.core.project import Project
from au_rogue.utils.console import reset_console


def _build_project(files: Dict[str, str]) -> Project:
  project = Project()
  for path, text in files.items():
    project.add_file(path, text)
  return project


def _run_pass(pass_instance, project: Project, config: Optional[RuntimeConfig] = None) -> ChangeLog:
  log = ChangeLog()
  pass_instance.run(project, log, config)
  return log


def _messages(log: ChangeLog, kind: Optional[ChangeKind] = None) -> List[str]:
  return [e.message for e in log.entries if kind is None or e.kind == kind]


@pytest.fixture
def make_project() -> Callable[[Dict[str, str]], Project]:
  """Factory: ``make_project({"src/a.ts": "..."})`` builds an in-memory project."""
  return _build_project


@pytest.fixture
def run_pass() -> Callable[..., ChangeLog]:
  """Runs one pass over a project and returns a fresh change log."""
  return _run_pass


@pytest.fixture
def messages() -> Callable[..., List[str]]:
  """Extracts entry messages from a log, optionally filtered by kind."""
  return _messages


@pytest.fixture
def migrate(make_project, run_pass):
  """
  Runs one pass over a single file.

  Returns a function ``(pass, text, path='src/app.ts') -> (new_text, log)``.
  """

  def _migrate(pass_instance, text: str, path: str = "src/app.ts", config: Optional[RuntimeConfig] = None):
    project = make_project({path: text})
    log = run_pass(pass_instance, project, config)
    return project.get_file(path).text, log

  return _migrate


@pytest.fixture(autouse=True)
def isolate_console():
  """Restores the default console backend after each test."""
  yield
  reset_console()
