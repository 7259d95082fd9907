"""
Interface definition for Migration Passes.

A pass is one self-contained detection+rewrite unit for a single legacy-API
concern. The pipeline runs each pass across every file of the project before
starting the next one, so per-pass state (such as the ``TokenRegistry``) lives
in a ``PassContext`` that is created when the pass starts and dropped when it
ends.

``MigrationPass.run`` also enforces the failure policy: if a file cannot be
processed, its text is restored, the change log is rolled back to the state
before that file, and the run continues.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from au_rogue.config import RuntimeConfig
from au_rogue.core.changelog import ChangeLog
from au_rogue.core.project import Project, SourceFile
from au_rogue.core.resolver import SymbolResolver, TypeIndex
from au_rogue.core.tokens import TokenRegistry

logger = logging.getLogger(__name__)


class PassContext:
  """
  State shared by one pass for the duration of its run.

  Attributes:
      project (Project): The project being migrated.
      changelog (ChangeLog): The run-wide log.
      config (RuntimeConfig): Runtime settings.
      resolver (SymbolResolver): Import alias resolution.
      types (TypeIndex): Declaration index for type classification.
      tokens (TokenRegistry): Generated interface tokens.
      findings (Dict[str, Any]): Project-level observations a pass collects for ``finish``.
  """

  def __init__(self, project: Project, changelog: ChangeLog, config: RuntimeConfig) -> None:
    self.project = project
    self.changelog = changelog
    self.config = config
    self.resolver = SymbolResolver()
    self.types = TypeIndex(project, config.external_classes)
    self.tokens = TokenRegistry()
    self.findings: Dict[str, Any] = {}


class MigrationPass(ABC):
  """
  Abstract contract for a migration pass.
  """

  #: Short identifier used in logs.
  name: str = "pass"

  def run(self, project: Project, changelog: ChangeLog, config: Optional[RuntimeConfig] = None) -> None:
    """
    Executes the pass over every parsable file, then ``finish``.

    Args:
        project: The project to migrate.
        changelog: The run-wide change log.
        config: Runtime settings (defaults apply if omitted).
    """
    context = PassContext(project, changelog, config or RuntimeConfig())
    for sf in project.files():
      if sf.has_errors:
        continue
      self._run_file(sf, context)
    self.finish(context)

  def _run_file(self, sf: SourceFile, context: PassContext) -> None:
    mark = context.changelog.checkpoint()
    snapshot = sf.source
    try:
      self.transform_file(sf, context)
    except Exception as e:
      sf.restore(snapshot)
      context.changelog.rollback(mark)
      logger.warning(f"{self.name}: left {sf.path} unchanged after an internal error: {e}")

  @abstractmethod
  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    """
    Detects and rewrites (or flags) one file.

    Args:
        sf: The file.
        context: Pass-scoped state.
    """

  def finish(self, context: PassContext) -> None:
    """Hook for project-level conclusions after all files were visited."""
