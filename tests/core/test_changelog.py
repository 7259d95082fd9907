"""
Tests for the Migration Change Log.

Verifies:
1. Entries keep strict chronological order across files and kinds.
2. `finish` stamps completion once and returns the log.
3. Counting, filtering and rollback helpers.
4. Order preservation across sequential passes.
"""

from au_rogue.core.changelog import ChangeKind, ChangeLog
from au_rogue.core.passes.interface import MigrationPass
from au_rogue.core.pipeline import MigrationPipeline


class _OneEntryPass(MigrationPass):
  """Logs a single note against a fixed file when finishing."""

  def __init__(self, label: str, file: str) -> None:
    self.name = label
    self.file = file

  def transform_file(self, sf, context) -> None:
    pass

  def finish(self, context) -> None:
    context.changelog.note(self.file, self.name)


def test_entries_in_decision_order():
  """
  Scenario: Entries of different kinds and files are interleaved.
  Expectation: The log keeps the exact recording order.
  """
  log = ChangeLog()
  log.warn("b.ts", "first")
  log.edit("a.ts", "second", before="x", after="y", line=3)
  log.note("b.ts", "third")
  log.remove("a.ts", "fourth", before="import z")

  assert [e.message for e in log.entries] == ["first", "second", "third", "fourth"]
  assert log.entries[1].kind == ChangeKind.EDIT
  assert log.entries[1].before == "x"
  assert log.entries[1].after == "y"
  assert log.entries[1].loc.line == 3
  assert log.entries[0].loc is None


def test_finish_stamps_once_and_allows_appending():
  """
  Scenario: `finish` is called twice with an append in between.
  Expectation: The first timestamp sticks; the late entry is kept.
  """
  log = ChangeLog()
  assert log.finished_at is None

  result = log.finish()
  stamped = log.finished_at
  assert result is log
  assert stamped is not None

  log.note("PROJECT", "late note")
  log.finish()
  assert log.finished_at == stamped
  assert log.entries[-1].message == "late note"


def test_counts_and_filters():
  """
  Scenario: A mix of entries.
  Expectation: Counts cover every kind; filters select by kind and file.
  """
  log = ChangeLog()
  log.edit("a.ts", "e1")
  log.edit("b.ts", "e2")
  log.add("a.ts", "a1")
  log.warn("a.ts", "w1")

  assert log.counts() == {"edit": 2, "add": 1, "remove": 0, "warn": 1, "note": 0}
  assert [e.message for e in log.of_kind(ChangeKind.EDIT)] == ["e1", "e2"]
  assert [e.message for e in log.for_file("a.ts")] == ["e1", "a1", "w1"]


def test_checkpoint_rollback():
  """
  Scenario: Entries recorded after a checkpoint are rolled back.
  Expectation: Only earlier entries remain.
  """
  log = ChangeLog()
  log.note("a.ts", "kept")
  mark = log.checkpoint()
  log.edit("a.ts", "dropped")
  log.warn("a.ts", "dropped too")
  log.rollback(mark)

  assert [e.message for e in log.entries] == ["kept"]


def test_json_round_trip_keeps_kind_values():
  """
  Scenario: The log is dumped through pydantic.
  Expectation: Kinds serialize as their plain string values.
  """
  log = ChangeLog(options={"dry_run": True})
  log.add("a.ts", "added", after="const x = 1;")
  data = log.model_dump(mode="json")

  assert data["options"] == {"dry_run": True}
  assert data["entries"][0]["kind"] == "add"
  assert data["entries"][0]["after"] == "const x = 1;"


def test_order_preserved_across_passes(make_project):
  """
  Scenario: Three passes each log one entry against different files.
  Expectation: Entries appear in pass invocation order.
  """
  project = make_project({"src/a.ts": "export const a = 1;\n"})
  passes = [_OneEntryPass("one", "z.ts"), _OneEntryPass("two", "a.ts"), _OneEntryPass("three", "m.ts")]

  log = MigrationPipeline(passes).run(project, ChangeLog())

  assert [e.message for e in log.entries] == ["one", "two", "three"]
  assert [e.file for e in log.entries] == ["z.ts", "a.ts", "m.ts"]
