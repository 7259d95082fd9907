"""
PLATFORM Pass.

``PLATFORM.moduleName('./x')`` only existed so webpack could see module
references. Aurelia 2 needs the plain string, so every call is unwrapped::

    PLATFORM.moduleName('./my-component')  ->  './my-component'

Calls are unwrapped wherever they occur (object literals, arrays, nested
calls). The ``PLATFORM`` import is dropped once the name no longer appears
outside import statements. That check is a word-boundary scan over the file
text, not a scoped reference count: a comment mentioning ``PLATFORM`` keeps
the import alive.

``PlatformUsageAdvisor`` reports the other ``PLATFORM`` members, which have no
mechanical replacement.
"""

import re
from typing import List, Set

from tree_sitter import Node

from au_rogue.core.imports import ImportEditor
from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.project import SourceFile, TextEdit
from au_rogue.core.resolver import LocalNames
from au_rogue.core.syntax import call_parts, contains, descendants_of_type

PLATFORM_MODULES = ("aurelia-pal", "aurelia-framework")

PLATFORM_MEMBERS = (
  "PLATFORM.global",
  "PLATFORM.location",
  "PLATFORM.history",
  "PLATFORM.eachModule",
  "PLATFORM.requestAnimationFrame",
)


def text_outside_imports(sf: SourceFile) -> str:
  """File text with every import statement blanked out."""
  text = sf.source
  for stmt in reversed(sf.root.named_children):
    if stmt.type == "import_statement":
      text = text[: stmt.start_byte] + b" " * (stmt.end_byte - stmt.start_byte) + text[stmt.end_byte :]
  return text.decode("utf-8")


def mentions(text: str, name: str) -> bool:
  """Word-boundary search for an identifier."""
  return re.search(rf"(?<![\w$]){re.escape(name)}(?![\w$])", text) is not None


class PlatformPass(MigrationPass):
  """
  Unwraps ``PLATFORM.moduleName(...)`` calls.
  """

  name = "platform"

  def _wrapper_calls(self, sf: SourceFile, platform: LocalNames) -> List[Node]:
    result = []
    for call in descendants_of_type(sf.root, "call_expression"):
      fn = call.child_by_field_name("function")
      if fn is None or fn.type != "member_expression":
        continue
      if sf.text_of(fn.child_by_field_name("property")) != "moduleName":
        continue
      if platform.matches(sf, fn.child_by_field_name("object")):
        result.append(call)
    return result

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    log = context.changelog
    platform = context.resolver.local_names(sf, PLATFORM_MODULES, "PLATFORM")
    platform.named.add("PLATFORM")

    for call in self._wrapper_calls(sf, platform):
      _, args = call_parts(call)
      if len(args) != 1:
        log.warn(
          sf.path,
          f"PLATFORM.moduleName() call with {len(args)} arguments needs manual review",
          line=sf.line_of(call),
        )

    removed = 0
    while True:
      calls = [c for c in self._wrapper_calls(sf, platform) if len(call_parts(c)[1]) == 1]
      outermost = [c for c in calls if not any(contains(other, c) for other in calls)]
      if not outermost:
        break
      edits = []
      entries = []
      for call in outermost:
        arg = sf.text_of(call_parts(call)[1][0])
        edits.append(TextEdit.replace(call, arg))
        entries.append((sf.text_of(call), arg, sf.line_of(call)))
      sf.apply_edits(edits)
      for before, after, line in entries:
        log.edit(sf.path, "Removed PLATFORM.moduleName() call", before=before, after=after, line=line)
      removed += len(entries)

    if not removed:
      return

    self._drop_unused_import(sf, platform, log)
    plural = "" if removed == 1 else "s"
    log.edit(sf.path, f"Removed {removed} PLATFORM.moduleName() call{plural}")

  def _drop_unused_import(self, sf: SourceFile, platform: LocalNames, log) -> None:
    editor = ImportEditor(sf)
    bound: Set[str] = set()
    for decl in editor.imports():
      if decl.module in PLATFORM_MODULES:
        bound.update(s.local for s in decl.specifiers if s.name == "PLATFORM")
    if not bound:
      return

    remaining = text_outside_imports(sf)
    if any(mentions(remaining, name) for name in bound):
      return

    for removal in editor.remove_named(PLATFORM_MODULES, ["PLATFORM"]):
      log.edit(sf.path, f"Removed unused PLATFORM import from {removal.module}")
      if removal.statement_removed:
        log.remove(sf.path, f"Removed empty import declaration for {removal.module}", before=removal.before)


class PlatformUsageAdvisor(MigrationPass):
  """
  Flags ``PLATFORM`` members that need a manual replacement.
  """

  name = "platform-usage"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    text = sf.text
    for member in PLATFORM_MEMBERS:
      if member in text:
        context.changelog.warn(
          sf.path, f"Found {member} - this PLATFORM method needs manual migration to Aurelia 2 equivalents"
        )
    if "PLATFORM.DOM" in text:
      context.changelog.warn(sf.path, "Found PLATFORM.DOM - migrate to native DOM APIs or @aurelia/dom package")
