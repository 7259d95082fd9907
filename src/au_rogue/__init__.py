"""
au-rogue Package.

Conservative codemods that move an Aurelia 1 application towards Aurelia 2.
Source files are rewritten where the transformation is provably safe; every
other finding is reported as a warning or note in a structured change log.

Usage
-----

.. code-block:: python

    from au_rogue import ChangeLog, MigrationPipeline, Project

    project = Project()
    project.add_file("src/app.ts", code)
    changelog = MigrationPipeline().run(project, ChangeLog())

    print(project.get_file("src/app.ts").text)
    for entry in changelog.entries:
        print(entry.kind.value, entry.message)
"""

from au_rogue.config import RuntimeConfig
from au_rogue.core.changelog import ChangeEntry, ChangeKind, ChangeLog
from au_rogue.core.markup import MarkupRewriter
from au_rogue.core.pipeline import MigrationPipeline
from au_rogue.core.project import Project, SourceFile

__version__ = "0.3.0"

__all__ = [
  "ChangeEntry",
  "ChangeKind",
  "ChangeLog",
  "MarkupRewriter",
  "MigrationPipeline",
  "Project",
  "RuntimeConfig",
  "SourceFile",
  "__version__",
]
