"""
Custom Element Declaration Pass.

Aurelia 1 declares inline templates with ``@inlineView('<template>...')`` and
template-less elements with ``@noView``. Aurelia 2 carries the template on
``@customElement`` instead::

    @customElement('user-card')
    @inlineView('<template>${name}</template>')
    export class UserCard {}

becomes::

    @customElement({ name: 'user-card', template: '<template>${name}</template>' })
    export class UserCard {}

``@noView`` maps to ``template: null``. A class whose ``@customElement``
already declares a template keeps its legacy decorator and gets a warning.
"""

from typing import List, Optional, Tuple

from tree_sitter import Node

from au_rogue.core.imports import ImportEditor
from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.project import SourceFile, TextEdit
from au_rogue.core.resolver import LocalNames
from au_rogue.core.structure import remove_node_edit, replace_arguments_edit
from au_rogue.core.syntax import ClassView, call_parts, classes, decorator_expression, references_outside_imports

LEGACY_MODULES = ("aurelia-framework", "aurelia-templating")


def _object_has_key(sf: SourceFile, obj: Node, key: str) -> bool:
  for prop in obj.named_children:
    if prop.type == "pair":
      name = sf.text_of(prop.child_by_field_name("key")).strip("'\"")
      if name == key:
        return True
    elif prop.type in ("shorthand_property_identifier", "method_definition"):
      name_node = prop.child_by_field_name("name") if prop.type == "method_definition" else prop
      if sf.text_of(name_node) == key:
        return True
  return False


class CustomElementPass(MigrationPass):
  """
  Folds ``@inlineView``/``@noView`` into ``@customElement``.
  """

  name = "custom-element"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    resolver = context.resolver
    inline_view = resolver.local_names(sf, LEGACY_MODULES, "inlineView")
    no_view = resolver.local_names(sf, LEGACY_MODULES, "noView")
    if not inline_view and not no_view:
      return
    custom_element = resolver.local_names(sf, LEGACY_MODULES + ("aurelia",), "customElement")

    touched = False
    synthesized = False
    for index in range(len(classes(sf))):
      result = self._rewrite_class(sf, classes(sf)[index], inline_view, no_view, custom_element, context)
      if result is None:
        continue
      touched = True
      synthesized = synthesized or result

    if touched:
      self._fix_imports(sf, inline_view, no_view, synthesized, context)

  # --- Class rewrite ---

  def _template_of(
    self, sf: SourceFile, cls: ClassView, deco: Node, inline_view: LocalNames, context: PassContext
  ) -> Optional[Tuple[str, str]]:
    """
    Extracts the template expression a legacy decorator declares.

    Returns:
        Optional[Tuple[str, str]]: (decorator label, template expression), or None
        when the decorator cannot be migrated (a warning has been logged).
    """
    callee, args = call_parts(decorator_expression(deco))
    if not inline_view.matches(sf, callee):
      return "@noView", "null"

    log = context.changelog
    line = sf.line_of(deco)
    if args is None:
      log.warn(sf.path, f"@inlineView on class {cls.name} is not a call expression. Manual migration required.", line=line)
      return None
    if not args:
      log.warn(sf.path, f"@inlineView on class {cls.name} has no template argument. Manual migration required.", line=line)
      return None
    if len(args) > 1:
      log.warn(
        sf.path,
        f"@inlineView on class {cls.name} has {len(args)} arguments. Dependencies need manual migration.",
        line=line,
      )
      return None
    return "@inlineView", sf.text_of(args[0])

  def _rewrite_class(
    self,
    sf: SourceFile,
    cls: ClassView,
    inline_view: LocalNames,
    no_view: LocalNames,
    custom_element: LocalNames,
    context: PassContext,
  ) -> Optional[bool]:
    """
    Migrates one class.

    Returns:
        Optional[bool]: None if nothing changed, otherwise whether a new
        ``@customElement`` decorator was written.
    """
    log = context.changelog
    legacy = []
    for deco in cls.decorators:
      callee, _ = call_parts(decorator_expression(deco))
      if inline_view.matches(sf, callee) or no_view.matches(sf, callee):
        legacy.append(deco)
    if not legacy:
      return None
    if len(legacy) > 1:
      log.warn(sf.path, f"Class {cls.name} declares more than one of @inlineView/@noView. Manual migration required.")
      return None

    deco = legacy[0]
    extracted = self._template_of(sf, cls, deco, inline_view, context)
    if extracted is None:
      return None
    label, template = extracted

    target = None
    for candidate in cls.decorators:
      callee, _ = call_parts(decorator_expression(candidate))
      if custom_element.matches(sf, callee):
        target = candidate
        break

    removed = f"Removed {label} from class {cls.name}"
    if target is None:
      sf.apply_edits([TextEdit.replace(deco, f"@customElement({{ template: {template} }})")])
      log.edit(sf.path, removed)
      log.add(sf.path, f"Added @customElement with template to class {cls.name}")
      return True

    expr = decorator_expression(target)
    callee, args = call_parts(expr)
    callee_text = sf.text_of(callee)
    if args is None:
      merge = TextEdit.replace(expr, f"{callee_text}({{ template: {template} }})")
      message = f"Updated @customElement on class {cls.name} to include template"
    elif not args:
      merge = replace_arguments_edit(sf, expr, [f"{{ template: {template} }}"])
      message = f"Updated @customElement on class {cls.name} to include template"
    elif len(args) == 1 and args[0].type == "object":
      obj = args[0]
      if _object_has_key(sf, obj, "template"):
        log.warn(
          sf.path,
          f"@customElement on class {cls.name} already has a template. Verify inlineView/noView migration.",
          line=sf.line_of(target),
        )
        return None
      props = [c for c in obj.named_children if c.type != "comment"]
      if props:
        merge = TextEdit.insert(props[-1].end_byte, f", template: {template}")
      else:
        merge = TextEdit.replace(obj, f"{{ template: {template} }}")
      message = f"Added template to @customElement on class {cls.name}"
    elif len(args) == 1:
      name_arg = sf.text_of(args[0])
      merge = replace_arguments_edit(sf, expr, [f"{{ name: {name_arg}, template: {template} }}"])
      message = f"Converted @customElement({name_arg}) to object form with template on class {cls.name}"
    else:
      log.warn(
        sf.path,
        f"@customElement on class {cls.name} has unexpected arguments. Manual migration required.",
        line=sf.line_of(target),
      )
      return None

    sf.apply_edits([remove_node_edit(sf, deco), merge])
    log.edit(sf.path, removed)
    log.edit(sf.path, message)
    return False

  # --- Imports ---

  def _fix_imports(
    self, sf: SourceFile, inline_view: LocalNames, no_view: LocalNames, synthesized: bool, context: PassContext
  ) -> None:
    log = context.changelog
    editor = ImportEditor(sf)

    drop = [
      local.export for local in (inline_view, no_view) if local.named and not references_outside_imports(sf, local.named)
    ]
    # Unaliased legacy customElement moves to 'aurelia'; an alias stays bound to its legacy module
    moved = False
    for decl in editor.imports():
      if decl.module in LEGACY_MODULES:
        for spec in decl.specifiers:
          if spec.name == "customElement" and spec.alias is None:
            moved = True
    if moved:
      drop.append("customElement")

    for removal in editor.remove_named(LEGACY_MODULES, drop):
      log.remove(sf.path, f"Removed {', '.join(removal.names)} import from '{removal.module}'", before=removal.before)

    if (synthesized or moved) and editor.ensure_named("aurelia", ["customElement"]):
      log.add(sf.path, "Added customElement import from aurelia")
