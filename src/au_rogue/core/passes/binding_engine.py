"""
BindingEngine Replacement Pass.

Aurelia 1 components observe values through an injected ``BindingEngine``.
Aurelia 2 has no such service, so each ``BindingEngine`` parameter property is
replaced by a field initialised with a file-local helper,
``createAureliaBindingEngine()``, which rebuilds ``propertyObserver``,
``collectionObserver`` and ``expressionObserver`` on top of the observer
locator and expression parser.

``BindingEngine`` is also stripped from ``@inject(...)`` argument lists. The
legacy import is only removed once no other reference to it remains in the
file.
"""

from typing import List

from au_rogue.core.imports import ImportEditor
from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.project import SourceFile, TextEdit
from au_rogue.core.resolver import LocalNames
from au_rogue.core.structure import (
  append_statement_edit,
  insert_members_edit,
  remove_node_edit,
  remove_params_edits,
  replace_arguments_edit,
)
from au_rogue.core.syntax import (
  ClassView,
  ParamView,
  call_parts,
  classes,
  decorator_expression,
  has_function,
  references_outside_imports,
)

LEGACY_MODULES = ("aurelia-binding", "aurelia-framework")
INJECT_MODULES = ("aurelia-framework", "aurelia-dependency-injection")

HELPER_NAME = "createAureliaBindingEngine"

HELPER_SOURCE = """
function createAureliaBindingEngine() {
  const parser = resolve(IExpressionParser);
  const observerLocator = resolve(IObserverLocator);

  return {
    propertyObserver(object: object, prop: PropertyKey) {
      return {
        subscribe(callback: (newValue: unknown, oldValue: unknown) => unknown) {
          const observer = observerLocator.getObserver(object, prop);
          const subscriber = { handleChange: (newValue: unknown, oldValue: unknown) => callback(newValue, oldValue) };
          observer.subscribe(subscriber);
          return {
            dispose: () => observer.unsubscribe(subscriber)
          };
        }
      };
    },
    collectionObserver(collection: unknown) {
      return {
        subscribe(callback: (collection: unknown, indexMap: unknown) => unknown) {
          const observer = getCollectionObserver(collection as any);
          const subscriber = { handleCollectionChange: (coll: unknown, indexMap: unknown) => callback(coll, indexMap) };
          observer?.subscribe(subscriber as any);
          return {
            dispose: () => observer?.unsubscribe(subscriber as any)
          };
        }
      };
    },
    expressionObserver(bindingContext: object, expression: string) {
      const scope = Scope.create(bindingContext as any, {}, true);
      return {
        subscribe: (callback: (newValue: unknown, oldValue: unknown) => unknown) => {
          const observer = new ExpressionWatcher(
            scope,
            null as any,
            observerLocator,
            parser.parse(expression, 'IsProperty'),
            callback
          );
          observer.bind();
          return {
            dispose: () => observer.unbind()
          };
        }
      };
    }
  };
}
"""

HELPER_IMPORTS = (
  ("aurelia", ("resolve", "IObserverLocator", "IExpressionParser", "Scope")),
  ("@aurelia/runtime", ("getCollectionObserver",)),
  ("@aurelia/runtime-html", ("ExpressionWatcher",)),
)


class BindingEngineRewritePass(MigrationPass):
  """
  Replaces injected ``BindingEngine`` instances with a generated helper.
  """

  name = "binding-engine"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    locals_ = context.resolver.local_names(sf, LEGACY_MODULES, "BindingEngine")
    if not locals_:
      return
    inject = context.resolver.local_names(sf, INJECT_MODULES, "inject")
    inject.named.add("inject")

    touched = False
    helper_needed = False
    for index in range(len(classes(sf))):
      converted = self._rewrite_class(sf, classes(sf)[index], locals_, inject, context)
      touched = touched or converted is not None
      helper_needed = helper_needed or bool(converted)

    log = context.changelog
    if helper_needed:
      if not has_function(sf, HELPER_NAME):
        sf.apply_edits([append_statement_edit(sf, HELPER_SOURCE)])
      editor = ImportEditor(sf)
      for module, names in HELPER_IMPORTS:
        editor.ensure_named(module, names)
      log.add(sf.path, f"Added {HELPER_NAME}() helper based on Aurelia 2 APIs")

    if not touched:
      return
    if references_outside_imports(sf, locals_.named):
      log.warn(sf.path, "BindingEngine references remain after migration. Manual update required.")
      return
    for removal in ImportEditor(sf).remove_named(LEGACY_MODULES, ["BindingEngine"]):
      log.remove(sf.path, f"Removed BindingEngine import from '{removal.module}'", before=removal.before)

  def _is_binding_engine(self, param: ParamView, locals_: LocalNames) -> bool:
    type_node = param.type_node
    if type_node is None:
      return False
    text = param.type_text
    return locals_.matches(param.sf, type_node) or text == "BindingEngine" or text.endswith(".BindingEngine")

  def _rewrite_class(self, sf: SourceFile, cls: ClassView, locals_: LocalNames, inject: LocalNames, context: PassContext):
    """
    Converts the BindingEngine parameters of one class.

    Returns:
        Optional[int]: Number of converted parameters, or None if the class was left as is.
    """
    log = context.changelog
    params = [p for p in cls.constructor_params() if self._is_binding_engine(p, locals_)]
    if not params:
      return None

    converted: List[ParamView] = []
    blocked = False
    for param in params:
      if not param.is_property:
        log.warn(
          sf.path,
          f"BindingEngine parameter '{param.name}' is not a parameter property. Manual migration required.",
          line=sf.line_of(param.node),
        )
        blocked = True
        continue
      if cls.has_member(param.name):
        log.warn(sf.path, f"Class {cls.name} already has a '{param.name}' property. Skipped BindingEngine replacement.")
        blocked = True
        continue
      converted.append(param)

    edits: List[TextEdit] = []
    if converted:
      fields = [f"{p.field_prefix()}{p.name} = {HELPER_NAME}();" for p in converted]
      edits.append(insert_members_edit(sf, cls, fields))
      edits.extend(remove_params_edits(cls, converted))

    messages = [
      f"Replaced BindingEngine injection with {HELPER_NAME}() for '{p.name}' on class {cls.name}" for p in converted
    ]
    for deco in cls.decorators:
      callee, args = call_parts(decorator_expression(deco))
      if not args or not inject.matches(sf, callee):
        continue
      kept = [a for a in args if not locals_.matches(sf, a)]
      if len(kept) == len(args):
        continue
      if blocked:
        log.warn(
          sf.path,
          f"Kept @inject(...) on class {cls.name} because a BindingEngine parameter was not converted.",
          line=sf.line_of(deco),
        )
        continue
      if kept:
        edits.append(replace_arguments_edit(sf, decorator_expression(deco), [sf.text_of(a) for a in kept]))
        messages.append(f"Removed BindingEngine from @inject(...) on class {cls.name}")
      else:
        edits.append(remove_node_edit(sf, deco))
        messages.append(f"Removed @inject(BindingEngine) from class {cls.name}")

    if not edits:
      return None
    sf.apply_edits(edits)
    for message in messages:
      log.edit(sf.path, message)
    return len(converted)
