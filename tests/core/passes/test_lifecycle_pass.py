"""
Tests for the Lifecycle Pass and its advisors.

Verifies:
1. `unbind` is renamed to `unbinding`, including in-class call sites.
2. An existing `unbinding` blocks the rename with a warning.
3. Pattern warnings (missing counterpart, Promise without async, router hooks).
4. Hook suggestions and anti-pattern heuristics.
"""

from au_rogue.core.changelog import ChangeKind
from au_rogue.core.passes import LifecycleAntiPatternAdvisor, LifecycleHookAdvisor, LifecyclePass


def test_unbind_renamed(migrate):
  """
  Scenario: A component with bind/unbind where detached calls unbind.
  Expectation: Declaration and call renamed; edit entry carries before/after.
  """
  source = (
    "export class Panel {\n"
    "  bind() {}\n"
    "  unbind() {}\n"
    "  detached() { this.unbind(); }\n"
    "}\n"
  )
  text, log = migrate(LifecyclePass(), source)

  assert text == (
    "export class Panel {\n"
    "  bind() {}\n"
    "  unbinding() {}\n"
    "  detached() { this.unbinding(); }\n"
    "}\n"
  )
  first = log.entries[0]
  assert first.kind == ChangeKind.EDIT
  assert first.message == "Renamed lifecycle method 'unbind()' to 'unbinding()' in class Panel"
  assert (first.before, first.after) == ("unbind()", "unbinding()")
  assert not any("has bind() but no unbind()" in e.message for e in log.entries)


def test_existing_unbinding_blocks_rename(migrate):
  """
  Scenario: Both unbind and unbinding exist.
  Expectation: Source unchanged; one warning about merging.
  """
  source = "export class A {\n  unbind() {}\n  unbinding() {}\n}\n"
  text, log = migrate(LifecyclePass(), source)

  assert text == source
  assert log.of_kind(ChangeKind.WARN)[0].message == (
    "Class A already has unbinding(); left unbind() unchanged. Merge the two methods manually."
  )


def test_pattern_warnings(migrate):
  """
  Scenario: attached without detached, Promise-returning non-async hook, router hooks.
  Expectation: A warning for each finding plus the bind/attached ordering note.
  """
  source = (
    "export class Page {\n"
    "  bind() {}\n"
    "  attached(): Promise<void> { return Promise.resolve(); }\n"
    "  async canActivate(): Promise<boolean> { return true; }\n"
    "  activate(params) {}\n"
    "}\n"
  )
  _, log = migrate(LifecyclePass(), source)
  messages = [e.message for e in log.entries]

  assert any("'attached()' in class Page returns Promise but is not async" in m for m in messages)
  assert not any("'canActivate()'" in m for m in messages)
  assert "Class Page has attached() but no detached(). Consider if cleanup is needed in detached() for Aurelia 2." in messages
  assert "Class Page has bind() but no unbind()/unbinding(). Consider if cleanup is needed." in messages
  assert any("uses router lifecycle methods (canActivate, activate)" in m for m in messages)
  assert log.entries[-1].kind == ChangeKind.NOTE


def test_second_run_makes_no_edits(migrate, make_project, run_pass):
  """
  Scenario: The pass runs over its own output.
  Expectation: No further edit entries.
  """
  text, _ = migrate(LifecyclePass(), "export class A {\n  unbind() {}\n}\n")
  project = make_project({"src/app.ts": text})
  log = run_pass(LifecyclePass(), project)

  assert project.get_file("src/app.ts").text == text
  assert log.counts()["edit"] == 0


def test_hook_advisor(migrate):
  """
  Scenario: bind() and attached() without bound()/attaching().
  Expectation: Two suggestion notes.
  """
  _, log = migrate(LifecycleHookAdvisor(), "export class A {\n  bind() {}\n  attached() {}\n}\n")
  notes = [e.message for e in log.of_kind(ChangeKind.NOTE)]
  assert len(notes) == 2
  assert "bound()" in notes[0]
  assert "attaching()" in notes[1]


def test_anti_pattern_advisor(migrate):
  """
  Scenario: DOM access in bind(); a timer in attached() without detached().
  Expectation: Both heuristics fire.
  """
  source = (
    "export class A {\n"
    "  bind() { document.querySelector('#x'); }\n"
    "  attached() { this.timer = setInterval(() => this.tick(), 1000); }\n"
    "}\n"
  )
  _, log = migrate(LifecycleAntiPatternAdvisor(), source)
  warnings = [e.message for e in log.of_kind(ChangeKind.WARN)]

  assert warnings == [
    "Class A appears to do DOM manipulation in bind(). Consider moving DOM work to attached() or the new attaching() hook.",
    "Class A sets up async operations or event listeners in attached() but has no detached() for cleanup. "
    "This can cause memory leaks.",
  ]


def test_renamed_unbind_still_checked_for_promise(migrate):
  """
  Scenario: `unbind()` returns a Promise without being async.
  Expectation: Renamed, and the Promise warning names the legacy hook.
  """
  source = "export class Panel {\n  unbind(): Promise<void> { return Promise.resolve(); }\n}\n"
  text, log = migrate(LifecyclePass(), source)

  assert "  unbinding(): Promise<void> {" in text
  assert [(e.kind, e.message) for e in log.entries] == [
    (ChangeKind.EDIT, "Renamed lifecycle method 'unbind()' to 'unbinding()' in class Panel"),
    (
      ChangeKind.WARN,
      "Lifecycle method 'unbind()' in class Panel returns Promise but is not async. "
      "Aurelia 2 has native async support - consider making it async.",
    ),
  ]
  assert log.entries[1].loc.line == 2
