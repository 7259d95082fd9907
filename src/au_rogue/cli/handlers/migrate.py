"""
Migrate Command Handler.

This module implements the ``au-rogue`` run. It orchestrates:
1. Configuration loading (``pyproject.toml`` + CLI overrides).
2. Discovery of sources and templates under the project root.
3. The source passes over a tree-backed project.
4. Writing changed sources (skipped in dry-run mode).
5. The template rewriter.
6. Report writing and the console summary.
"""

from pathlib import Path
from typing import List, Optional

from rich.table import Table

from au_rogue.config import RuntimeConfig
from au_rogue.core.changelog import ChangeLog
from au_rogue.core.markup import MarkupRewriter
from au_rogue.core.pipeline import MigrationPipeline
from au_rogue.core.project import Project
from au_rogue.core.report import write_report
from au_rogue.utils.console import console, log_error, log_info, log_success, log_warning
from au_rogue.utils.discovery import discover

COMPAT_NOTE = "Compat mode requested. Register @aurelia/compat-v1 during migration, then remove it when done."


def handle_migrate(
  root: Path,
  dry_run: Optional[bool] = None,
  sources: Optional[List[str]] = None,
  templates: Optional[List[str]] = None,
  compat: Optional[bool] = None,
  report_dir: Optional[Path] = None,
  external_classes: Optional[List[str]] = None,
) -> int:
  """
  Handles a migration run.

  Args:
      root: Project root; globs and a relative report directory resolve against it.
      dry_run: If True, analyse and report without writing sources or templates.
      sources: Override for source globs.
      templates: Override for template globs.
      compat: If True, add the compat-v1 project note.
      report_dir: Override for the report directory.
      external_classes: Package class names to treat as injectable.

  Returns:
      int: Exit code (0 for success, 1 if the root does not exist).
  """
  if not root.is_dir():
    log_error(f"Project root not found: {root}")
    return 1

  config = RuntimeConfig.load(
    dry_run=dry_run,
    sources=sources,
    templates=templates,
    compat=compat,
    report_dir=report_dir,
    external_classes=external_classes,
    search_path=root,
  )

  source_paths = discover(root, config.sources, config.exclude)
  template_paths = discover(root, config.templates, config.exclude)
  if not source_paths and not template_paths:
    log_warning(f"No sources or templates matched under {root}")
  else:
    log_info(f"Processing {len(source_paths)} source files and {len(template_paths)} templates...")

  changelog = ChangeLog(options=config.snapshot())

  project = Project.from_paths(source_paths)
  MigrationPipeline().run(project, changelog, config)

  if not config.dry_run:
    written = project.save()
    if written:
      log_info(f"Updated {len(written)} source files.")

  MarkupRewriter(changelog, write=not config.dry_run).run(template_paths)

  if config.compat:
    changelog.note("PROJECT", COMPAT_NOTE)

  out_dir = config.report_dir if config.report_dir.is_absolute() else root / config.report_dir
  json_path, md_path = write_report(changelog.finish(), out_dir)

  print_summary(changelog)
  mode = " (dry run)" if config.dry_run else ""
  log_success(f"au-rogue finished{mode}. See [path]{md_path}[/path] and [path]{json_path}[/path].")
  return 0


def print_summary(changelog: ChangeLog) -> None:
  """
  Renders entry counts per kind to the console.

  Args:
      changelog: The finished log.
  """
  counts = changelog.counts()
  table = Table(title="Migration Report")
  table.add_column("Kind", style="cyan")
  table.add_column("Entries", justify="right")
  for kind, count in counts.items():
    table.add_row(kind, str(count))
  console.print(table)

  files = {entry.file for entry in changelog.entries}
  console.print(f"\n[bold]Summary:[/bold] {len(changelog.entries)} entries across {len(files)} files or labels.")
