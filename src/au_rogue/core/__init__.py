"""
Migration engine: the tree-backed project, the passes and the template rewriter.
"""

from au_rogue.core.changelog import ChangeEntry, ChangeKind, ChangeLog
from au_rogue.core.pipeline import MigrationPipeline, default_passes
from au_rogue.core.project import Project, SourceFile

__all__ = [
  "ChangeEntry",
  "ChangeKind",
  "ChangeLog",
  "MigrationPipeline",
  "Project",
  "SourceFile",
  "default_passes",
]
