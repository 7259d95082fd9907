"""
Tests for the Custom Element Declaration Pass.

Verifies:
1. `@inlineView` folds into an existing `@customElement` (string and object forms).
2. `@noView` without a sibling synthesizes `@customElement({ template: null })`.
3. Conflicts and unexpected argument counts warn and leave the source alone.
4. Import bookkeeping moves `customElement` to 'aurelia'.
"""

from au_rogue.core.changelog import ChangeKind
from au_rogue.core.passes import CustomElementPass


def test_string_name_becomes_object(migrate):
  """
  Scenario: `@customElement('user-card')` plus `@inlineView(...)`.
  Expectation: One object-form decorator with name and template.
  """
  source = (
    "import { customElement, inlineView } from 'aurelia-framework';\n"
    "\n"
    "@customElement('user-card')\n"
    "@inlineView('<template>${name}</template>')\n"
    "export class UserCard {}\n"
  )
  text, log = migrate(CustomElementPass(), source)

  assert text == (
    "import { customElement } from 'aurelia';\n"
    "\n"
    "@customElement({ name: 'user-card', template: '<template>${name}</template>' })\n"
    "export class UserCard {}\n"
  )
  assert [e.message for e in log.entries] == [
    "Removed @inlineView from class UserCard",
    "Converted @customElement('user-card') to object form with template on class UserCard",
    "Removed customElement, inlineView import from 'aurelia-framework'",
    "Added customElement import from aurelia",
  ]


def test_object_argument_gains_template(migrate):
  """
  Scenario: `@customElement({ name: 'x' })` with an inline view.
  Expectation: `template` is appended to the object.
  """
  source = (
    "import { customElement } from 'aurelia';\n"
    "import { inlineView } from 'aurelia-templating';\n"
    "@inlineView('<template></template>')\n"
    "@customElement({ name: 'x' })\n"
    "export class X {}\n"
  )
  text, _ = migrate(CustomElementPass(), source)

  assert "@customElement({ name: 'x', template: '<template></template>' })\nexport class X {}\n" in text
  assert "inlineView" not in text
  assert text.count("import { customElement } from 'aurelia';") == 1


def test_no_view_synthesizes_decorator(migrate):
  """
  Scenario: `@noView` alone.
  Expectation: Replaced in place by a customElement with a null template.
  """
  source = "import { noView } from 'aurelia-framework';\n@noView\nexport class Shell {}\n"
  text, log = migrate(CustomElementPass(), source)

  assert text == "import { customElement } from 'aurelia';\n\n@customElement({ template: null })\nexport class Shell {}\n"
  assert [e.message for e in log.entries][:2] == [
    "Removed @noView from class Shell",
    "Added @customElement with template to class Shell",
  ]


def test_existing_template_conflict(migrate):
  """
  Scenario: The object already declares a template.
  Expectation: Warning; source untouched.
  """
  source = (
    "import { customElement, inlineView } from 'aurelia-framework';\n"
    "@customElement({ name: 'x', template: '<template>a</template>' })\n"
    "@inlineView('<template>b</template>')\n"
    "export class X {}\n"
  )
  text, log = migrate(CustomElementPass(), source)

  assert text == source
  assert [e.kind for e in log.entries] == [ChangeKind.WARN]
  assert "already has a template" in log.entries[0].message


def test_inline_view_with_dependencies_skipped(migrate):
  """
  Scenario: `@inlineView` with a template and a dependency list.
  Expectation: Exactly one warning naming the argument count; nothing rewritten.
  """
  source = (
    "import { inlineView } from 'aurelia-framework';\n"
    "@inlineView('<template></template>', ['./dep'])\n"
    "export class X {}\n"
  )
  text, log = migrate(CustomElementPass(), source)

  assert text == source
  warnings = [e.message for e in log.of_kind(ChangeKind.WARN)]
  assert len(warnings) == 1
  assert "has 2 arguments" in warnings[0]


def test_bare_custom_element_reference(migrate):
  """
  Scenario: `@customElement` used without a call.
  Expectation: Turned into a call carrying the template.
  """
  source = (
    "import { customElement, noView } from 'aurelia-framework';\n"
    "@customElement\n"
    "@noView()\n"
    "export class Y {}\n"
  )
  text, _ = migrate(CustomElementPass(), source)
  assert "@customElement({ template: null })\nexport class Y {}\n" in text
  assert "noView" not in text


def test_second_run_is_a_no_op(migrate, make_project, run_pass):
  """
  Scenario: The pass runs over its own output.
  Expectation: Identical text and no edit/add/remove entries.
  """
  source = (
    "import { customElement, inlineView } from 'aurelia-framework';\n"
    "\n"
    "@customElement('user-card')\n"
    "@inlineView('<template>${name}</template>')\n"
    "export class UserCard {}\n"
  )
  text, _ = migrate(CustomElementPass(), source)
  project = make_project({"src/app.ts": text})
  counts = run_pass(CustomElementPass(), project).counts()

  assert project.get_file("src/app.ts").text == text
  assert (counts["edit"], counts["add"], counts["remove"]) == (0, 0, 0)
