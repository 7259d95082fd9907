"""
Tests for the Computed Property Pass.

Verifies:
1. Getters with dependencies are upgraded verbatim.
2. The modern import is added exactly once for many getters.
3. Methods, fields and dependency-less getters lose the decorator with a warning.
4. Aliased and namespace-qualified decorators are recognised.
"""

from au_rogue.core.changelog import ChangeKind
from au_rogue.core.passes import ComputedPropertyPass


def test_getter_with_dependencies(migrate):
  """
  Scenario: A getter decorated with two string dependencies.
  Expectation: `@computed` carries both arguments; imports swapped.
  """
  source = (
    "import { computedFrom } from 'aurelia-framework';\n"
    "\n"
    "export class Person {\n"
    "  @computedFrom('firstName', 'lastName')\n"
    "  get fullName() {\n"
    "    return `${this.firstName} ${this.lastName}`;\n"
    "  }\n"
    "}\n"
  )
  text, log = migrate(ComputedPropertyPass(), source)

  assert text == (
    "import { computed } from 'aurelia';\n"
    "\n"
    "export class Person {\n"
    "  @computed('firstName', 'lastName')\n"
    "  get fullName() {\n"
    "    return `${this.firstName} ${this.lastName}`;\n"
    "  }\n"
    "}\n"
  )
  assert [e.message for e in log.entries] == [
    "Replaced @computedFrom with @computed",
    "Removed computedFrom import",
    "Added computed import from aurelia",
  ]


def test_ten_getters_one_import(migrate):
  """
  Scenario: Ten upgraded getters in one file.
  Expectation: The modern import appears exactly once.
  """
  getters = "".join(f"  @computedFrom('v{i}')\n  get g{i}() {{ return this.v{i}; }}\n" for i in range(10))
  source = f"import {{ computedFrom }} from 'aurelia-binding';\nexport class Many {{\n{getters}}}\n"
  text, log = migrate(ComputedPropertyPass(), source)

  assert text.count("import { computed } from 'aurelia';") == 1
  assert text.count("@computed('v") == 10
  assert "computedFrom" not in text
  assert len(log.of_kind(ChangeKind.ADD)) == 1


def test_non_getter_attachments(migrate):
  """
  Scenario: Decorator on a method, a field, and a getter without dependencies.
  Expectation: All removed, attachment-specific warnings, no modern import.
  """
  source = (
    "import { computedFrom } from 'aurelia-framework';\n"
    "export class Odd {\n"
    "  @computedFrom('a')\n"
    "  refresh() {}\n"
    "  @computedFrom('b')\n"
    "  count = 0;\n"
    "  @computedFrom()\n"
    "  get empty() { return 1; }\n"
    "}\n"
  )
  text, log = migrate(ComputedPropertyPass(), source)

  assert text == "export class Odd {\n  refresh() {}\n  count = 0;\n  get empty() { return 1; }\n}\n"
  warnings = [e.message for e in log.of_kind(ChangeKind.WARN)]
  assert warnings[0].startswith("A method had @computedFrom.")
  assert warnings[1].startswith("A property had @computedFrom.")
  assert warnings[2].startswith("Getter had @computedFrom with no dependencies.")
  assert "aurelia'" not in text


def test_alias_and_namespace(migrate):
  """
  Scenario: `cf` alias and `fw.computedFrom` qualified access in one file.
  Expectation: Both upgraded; namespace import kept for other uses.
  """
  source = (
    "import { computedFrom as cf } from 'aurelia-binding';\n"
    "import * as fw from 'aurelia-framework';\n"
    "export class A {\n"
    "  @cf('x')\n"
    "  get one() { return 1; }\n"
    "  @fw.computedFrom('y', 'z')\n"
    "  get two() { return 2; }\n"
    "}\n"
  )
  text, _ = migrate(ComputedPropertyPass(), source)

  assert "@computed('x')" in text
  assert "@computed('y', 'z')" in text
  assert "import * as fw from 'aurelia-framework';" in text
  assert "aurelia-binding" not in text
  assert "import { computed } from 'aurelia';" in text


def test_unrelated_decorator_ignored(migrate):
  """
  Scenario: A same-named decorator from another package.
  Expectation: The file is untouched.
  """
  source = "import { computedFrom } from 'my-lib';\nexport class A {\n  @computedFrom('a')\n  get x() { return 1; }\n}\n"
  text, log = migrate(ComputedPropertyPass(), source)
  assert text == source
  assert log.entries == []


def test_second_run_is_a_no_op(migrate, make_project, run_pass):
  """
  Scenario: The pass runs over its own output.
  Expectation: Identical text and no edit/add/remove entries.
  """
  source = (
    "import { computedFrom } from 'aurelia-framework';\n"
    "\n"
    "export class Person {\n"
    "  @computedFrom('firstName')\n"
    "  get name() { return this.firstName; }\n"
    "}\n"
  )
  text, _ = migrate(ComputedPropertyPass(), source)
  project = make_project({"src/app.ts": text})
  counts = run_pass(ComputedPropertyPass(), project).counts()

  assert project.get_file("src/app.ts").text == text
  assert (counts["edit"], counts["add"], counts["remove"]) == (0, 0, 0)
