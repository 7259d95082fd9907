"""
Tests for the Report Writer.

Verifies:
1. Markdown layout: header, summary counts, entries in order with diff blocks.
2. Snippet trimming.
3. Both files are written into a (created) directory.
"""

import json

from au_rogue.core.changelog import ChangeLog
from au_rogue.core.report import JSON_REPORT, MARKDOWN_REPORT, SNIPPET_LIMIT, render_markdown, trim_snippet, write_report


def _sample_log() -> ChangeLog:
  log = ChangeLog()
  log.edit("src/a.ts", "Renamed unbind() to unbinding()", before="unbind()", after="unbinding()")
  log.warn("src/b.ts", "Needs review")
  log.note("ROUTER_MIGRATION", "Router Migration Guide:")
  return log.finish()


def test_render_markdown():
  """
  Scenario: Three entries of different kinds.
  Expectation: Summary counts and entries in recorded order with diff blocks.
  """
  text = render_markdown(_sample_log())
  lines = text.split("\n")

  assert lines[0] == "# au-rogue migration report"
  assert lines[2].startswith("Started: ")
  assert lines[3].startswith("Finished: ")
  assert "Edits: 1, Adds: 0, Removes: 0, Warnings: 1, Notes: 1" in lines
  entries = lines[lines.index("## Entries") + 1 :]
  assert entries[:9] == [
    "- [edit] src/a.ts: Renamed unbind() to unbinding()",
    "```diff",
    "- unbind()",
    "```",
    "```diff",
    "+ unbinding()",
    "```",
    "- [warn] src/b.ts: Needs review",
    "- [note] ROUTER_MIGRATION: Router Migration Guide:",
  ]


def test_trim_snippet():
  """
  Scenario: Snippets at and beyond the limit.
  Expectation: Only longer snippets are cut and marked.
  """
  exact = "x" * SNIPPET_LIMIT
  assert trim_snippet(exact) == exact
  assert trim_snippet(exact + "y") == exact + " ..."


def test_long_snippet_in_markdown():
  """
  Scenario: An entry with a 400 character 'after' snippet.
  Expectation: The rendered snippet is trimmed.
  """
  log = ChangeLog()
  log.add("src/a.ts", "Generated code", after="z" * 400)
  text = render_markdown(log)

  assert f"+ {'z' * SNIPPET_LIMIT} ..." in text
  assert "z" * (SNIPPET_LIMIT + 1) not in text


def test_write_report_creates_directory(tmp_path):
  """
  Scenario: Writing into a nested directory that does not exist.
  Expectation: Directory created; JSON round-trips the entries.
  """
  out = tmp_path / "reports" / "run1"
  json_path, md_path = write_report(_sample_log(), out)

  assert json_path == out / JSON_REPORT
  assert md_path == out / MARKDOWN_REPORT
  data = json.loads(json_path.read_text(encoding="utf-8"))
  assert [e["kind"] for e in data["entries"]] == ["edit", "warn", "note"]
  assert data["finished_at"] is not None
  assert md_path.read_text(encoding="utf-8").startswith("# au-rogue migration report")
