"""
Component Lifecycle Pass.

The only mechanical change is ``unbind()`` -> ``unbinding()``. Everything else
here is advisory: lifecycle methods are checked for missing counterparts,
Promise-returning signatures without ``async``, and router hooks whose
semantics changed.

The two advisors at the end of the module run after all rewriting passes and
never modify a file.
"""

from typing import Dict

from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.project import SourceFile
from au_rogue.core.structure import rename_method_edits
from au_rogue.core.syntax import ClassView, classes, is_async, method_body_text, return_type_text

RENAMES = {"unbind": "unbinding"}

LEGACY_LIFECYCLE = (
  "attached",
  "detached",
  "bind",
  "unbind",
  "activate",
  "deactivate",
  "canActivate",
  "canDeactivate",
  "created",
  "beforeBind",
  "afterBind",
  "beforeUnbind",
  "afterUnbind",
)

ROUTER_HOOKS = ("canActivate", "activate", "canDeactivate", "deactivate")

DOM_ACCESS = ("querySelector", "getElementById", ".focus()", "scrollTo")
ASYNC_SETUP = ("setInterval", "setTimeout", "addEventListener")


class LifecyclePass(MigrationPass):
  """
  Renames ``unbind`` and reports lifecycle patterns.
  """

  name = "lifecycle"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    for index in range(len(classes(sf))):
      renamed = self._rename(sf, classes(sf)[index], context)
      cls = classes(sf)[index]
      lifecycle = bool(renamed)
      for method in cls.methods():
        # Renamed methods are checked under their legacy name
        current = sf.text_of(method.child_by_field_name("name"))
        name = renamed.get(current, current)
        if name not in LEGACY_LIFECYCLE:
          continue
        lifecycle = True
        if not is_async(method) and "Promise" in return_type_text(sf, method):
          context.changelog.warn(
            sf.path,
            f"Lifecycle method '{name}()' in class {cls.name} returns Promise but is not async. "
            "Aurelia 2 has native async support - consider making it async.",
            line=sf.line_of(method),
          )
      if lifecycle:
        self._analyze(sf, cls, context)

  def _rename(self, sf: SourceFile, cls: ClassView, context: PassContext) -> Dict[str, str]:
    """Applies RENAMES to one class; returns new name -> old name for every rename made."""
    log = context.changelog
    names = cls.method_names()
    edits = []
    entries = []
    for old, new in RENAMES.items():
      method = cls.method(old)
      if method is None:
        continue
      if new in names:
        log.warn(
          sf.path,
          f"Class {cls.name} already has {new}(); left {old}() unchanged. Merge the two methods manually.",
          line=sf.line_of(method),
        )
        continue
      edits.extend(rename_method_edits(sf, cls, method, new))
      entries.append((old, new, sf.line_of(method)))
    name = cls.name
    sf.apply_edits(edits)
    for old, new, line in entries:
      log.edit(
        sf.path,
        f"Renamed lifecycle method '{old}()' to '{new}()' in class {name}",
        before=f"{old}()",
        after=f"{new}()",
        line=line,
      )
    return {new: old for old, new, _ in entries}

  def _analyze(self, sf: SourceFile, cls: ClassView, context: PassContext) -> None:
    log = context.changelog
    names = cls.method_names()

    if "attached" in names and "detached" not in names:
      log.warn(
        sf.path,
        f"Class {cls.name} has attached() but no detached(). Consider if cleanup is needed in detached() for Aurelia 2.",
      )
    if "bind" in names and "unbind" not in names and "unbinding" not in names:
      log.warn(sf.path, f"Class {cls.name} has bind() but no unbind()/unbinding(). Consider if cleanup is needed.")

    hooks = [n for n in names if n in ROUTER_HOOKS]
    if hooks:
      log.warn(
        sf.path,
        f"Class {cls.name} uses router lifecycle methods ({', '.join(hooks)}). "
        "These work differently in Aurelia 2's new router - review router migration guide.",
      )

    if "attached" in names and "bind" in names:
      log.note(
        sf.path,
        f"Class {cls.name} has both bind() and attached(). In Aurelia 2, the lifecycle order is more predictable: "
        "binding → bound → attaching → attached.",
      )


class LifecycleHookAdvisor(MigrationPass):
  """
  Suggests the hooks Aurelia 2 added (``bound``, ``attaching``).
  """

  name = "lifecycle-hooks"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    for cls in classes(sf):
      names = cls.method_names()
      if "bind" in names and "bound" not in names:
        context.changelog.note(
          sf.path,
          f"Class {cls.name} has bind(). Consider using the new bound() lifecycle hook "
          "for work that needs to happen after binding is complete.",
        )
      if "attached" in names and "attaching" not in names:
        context.changelog.note(
          sf.path,
          f"Class {cls.name} has attached(). Consider using the new attaching() lifecycle hook "
          "for work that needs to happen before DOM attachment.",
        )


class LifecycleAntiPatternAdvisor(MigrationPass):
  """
  Text heuristics over lifecycle method bodies.

  False positives are expected; every finding names the method it came from.
  """

  name = "lifecycle-anti-patterns"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    log = context.changelog
    for cls in classes(sf):
      bind_body = method_body_text(sf, cls.method("bind"))
      if any(marker in bind_body for marker in DOM_ACCESS):
        log.warn(
          sf.path,
          f"Class {cls.name} appears to do DOM manipulation in bind(). "
          "Consider moving DOM work to attached() or the new attaching() hook.",
        )

      attached = cls.method("attached")
      if attached is not None and cls.method("detached") is None:
        if any(marker in method_body_text(sf, attached) for marker in ASYNC_SETUP):
          log.warn(
            sf.path,
            f"Class {cls.name} sets up async operations or event listeners in attached() "
            "but has no detached() for cleanup. This can cause memory leaks.",
          )
