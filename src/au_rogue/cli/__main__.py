"""
Main Entry Point for the au-rogue CLI.

This module handles argument parsing and dispatches to the migration handler
defined in ``au_rogue.cli.commands``.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from au_rogue import __version__
from au_rogue.cli import commands
from au_rogue.utils.console import console


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and runs the migration.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(
    prog="au-rogue", description="au-rogue: Conservative Aurelia 1 to 2 codemods with reporting"
  )
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("--dry", action="store_true", default=None, help="Dry run, do not write files")
  parser.add_argument("--sources", nargs="+", metavar="GLOB", default=None, help="Globs for ts/js sources")
  parser.add_argument("--templates", nargs="+", metavar="GLOB", default=None, help="Globs for html/au templates")
  parser.add_argument("--compat", action="store_true", default=None, help="Compat assist mode (adds notes only)")
  parser.add_argument("--report-dir", type=Path, default=None, help="Directory for report files (default: root)")
  parser.add_argument(
    "--external-classes",
    nargs="+",
    metavar="NAME",
    default=None,
    help="Type names from packages to treat as injectable classes (e.g. HttpClient)",
  )
  parser.add_argument("--root", type=Path, default=Path("."), help="Project root the globs are relative to")
  parser.add_argument("--verbose", action="store_true", help="Show every change log entry as it is recorded")

  args = parser.parse_args(argv)

  if args.verbose:
    console.set_level(logging.DEBUG)

  return commands.handle_migrate(
    root=args.root,
    dry_run=args.dry,
    sources=args.sources,
    templates=args.templates,
    compat=args.compat,
    report_dir=args.report_dir,
    external_classes=args.external_classes,
  )


if __name__ == "__main__":
  raise SystemExit(main())
