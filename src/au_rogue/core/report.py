"""
Report Writer.

Persists a finished ``ChangeLog`` as two sibling files in the report
directory:

- ``au-rogue.report.json``: The full log as a pydantic JSON dump.
- ``au-rogue.report.md``: Summary counts followed by every entry in recorded
  order, with ``before``/``after`` snippets rendered as diff blocks.
"""

import logging
from pathlib import Path
from typing import List, Tuple

from au_rogue.core.changelog import ChangeLog

logger = logging.getLogger(__name__)

JSON_REPORT = "au-rogue.report.json"
MARKDOWN_REPORT = "au-rogue.report.md"

SNIPPET_LIMIT = 300


def trim_snippet(text: str, limit: int = SNIPPET_LIMIT) -> str:
  """Shortens long snippets to ``limit`` characters followed by ' ...'."""
  return text if len(text) <= limit else text[:limit] + " ..."


def render_markdown(changelog: ChangeLog) -> str:
  """
  Renders the human readable report.

  Args:
      changelog: The log to render.

  Returns:
      str: Markdown text.
  """
  lines: List[str] = ["# au-rogue migration report", "", f"Started: {changelog.started_at}"]
  if changelog.finished_at:
    lines.append(f"Finished: {changelog.finished_at}")
  lines.append("")

  counts = changelog.counts()
  lines.append("## Summary")
  lines.append(
    f"Edits: {counts['edit']}, Adds: {counts['add']}, Removes: {counts['remove']}, "
    f"Warnings: {counts['warn']}, Notes: {counts['note']}"
  )
  lines.append("")

  lines.append("## Entries")
  for entry in changelog.entries:
    lines.append(f"- [{entry.kind.value}] {entry.file}: {entry.message}")
    if entry.before:
      lines.extend(["```diff", f"- {trim_snippet(entry.before)}", "```"])
    if entry.after:
      lines.extend(["```diff", f"+ {trim_snippet(entry.after)}", "```"])
  lines.append("")
  return "\n".join(lines)


def write_report(changelog: ChangeLog, out_dir: Path) -> Tuple[Path, Path]:
  """
  Writes both report files, creating ``out_dir`` if needed.

  Args:
      changelog: The (finished) log.
      out_dir: Target directory.

  Returns:
      Tuple[Path, Path]: Paths of the JSON and Markdown reports.
  """
  out_dir = Path(out_dir)
  out_dir.mkdir(parents=True, exist_ok=True)

  json_path = out_dir / JSON_REPORT
  md_path = out_dir / MARKDOWN_REPORT
  json_path.write_text(changelog.model_dump_json(indent=2), encoding="utf-8")
  md_path.write_text(render_markdown(changelog), encoding="utf-8")
  logger.debug(f"Reports written to {out_dir}")
  return json_path, md_path
