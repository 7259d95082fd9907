"""
Computed Property Pass.

Replaces ``@computedFrom('a', 'b')`` with ``@computed('a', 'b')`` on getters.
Anywhere else the decorator has no Aurelia 2 counterpart, so it is removed and
a warning explains what to do instead.
"""

from typing import List, Tuple

from au_rogue.core.imports import ImportEditor
from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.project import SourceFile, TextEdit
from au_rogue.core.structure import remove_node_edit
from au_rogue.core.syntax import Attachment, call_parts, classify_attachment, decorator_expression, descendants_of_type

LEGACY_MODULES = ("aurelia-binding", "aurelia-framework")

_ATTACHMENT_WARNINGS = {
  Attachment.METHOD: (
    "A method had @computedFrom. In v2, use a getter with @computed(...) or a plain getter for dependency tracking."
  ),
  Attachment.FIELD: (
    "A property had @computedFrom. In v2, use a getter with @computed(...) or a plain getter for dependency tracking."
  ),
  Attachment.OTHER: (
    "Found @computedFrom in an unsupported location. In v2, use a getter with @computed(...) or a plain getter."
  ),
}

_NO_DEPENDENCIES = (
  "Getter had @computedFrom with no dependencies. In v2, use @computed(...) with deps or remove the decorator."
)


class ComputedPropertyPass(MigrationPass):
  """
  Migrates ``@computedFrom`` decorators.
  """

  name = "computed"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    local = context.resolver.local_names(sf, LEGACY_MODULES, "computedFrom")
    if not local:
      return

    log = context.changelog
    edits: List[TextEdit] = []
    # (kind, message, line) in decision order
    entries: List[Tuple[str, str, int]] = []
    upgraded = 0

    for deco in descendants_of_type(sf.root, "decorator"):
      callee, args = call_parts(decorator_expression(deco))
      if not local.matches(sf, callee):
        continue
      line = sf.line_of(deco)
      attachment = classify_attachment(deco)

      if attachment != Attachment.GETTER:
        edits.append(remove_node_edit(sf, deco))
        entries.append(("edit", "Removed @computedFrom decorator", line))
        entries.append(("warn", _ATTACHMENT_WARNINGS[attachment], line))
        continue

      if not args:
        edits.append(remove_node_edit(sf, deco))
        entries.append(("edit", "Removed @computedFrom decorator", line))
        entries.append(("warn", _NO_DEPENDENCIES, line))
        continue

      args_text = ", ".join(sf.text_of(a) for a in args)
      edits.append(TextEdit.replace(deco, f"@computed({args_text})"))
      entries.append(("edit", "Replaced @computedFrom with @computed", line))
      upgraded += 1

    sf.apply_edits(edits)
    for kind, message, line in entries:
      if kind == "warn":
        log.warn(sf.path, message, line=line)
      else:
        log.edit(sf.path, message, line=line)

    editor = ImportEditor(sf)
    for removal in editor.remove_named(LEGACY_MODULES, ["computedFrom"]):
      log.edit(sf.path, "Removed computedFrom import", before=removal.before)

    if upgraded and editor.ensure_named("aurelia", ["computed"]):
      log.add(sf.path, "Added computed import from aurelia")
