"""
Dependency Injection Pass.

Migrates ``@autoinject`` classes to Aurelia 2 property injection::

    @autoinject                         export class Users {
    export class Users {          ->      private http: HttpClient = resolve(HttpClient);
      constructor(private http: HttpClient) {}   constructor() {}
    }                                   }

Per parameter property the declared type decides the strategy:

- A concrete class is resolved directly.
- A pure interface is resolved through a generated token
  (``const ILoggerToken = DI.createInterface<ILogger>('ILogger');``), created
  once per file via the ``TokenRegistry``.
- Anything else (unions, primitives, unresolvable names) is left untouched with
  a warning.

Classes without the marker decorator are never modified.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from au_rogue.core.imports import ImportEditor
from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.project import SourceFile
from au_rogue.core.resolver import LocalNames, TypeKind
from au_rogue.core.structure import insert_members_edit, remove_node_edit, remove_params_edits
from au_rogue.core.syntax import ParamView, call_parts, classes, decorator_expression, walk

LEGACY_MODULES = ("aurelia-framework", "aurelia-dependency-injection", "aurelia-binding")


@dataclass
class _Conversion:
  name: str
  type_text: str
  target: str
  token: Optional[str] = None


class DependencyInjectionPass(MigrationPass):
  """
  Converts ``@autoinject`` constructor injection into ``resolve(...)`` fields.
  """

  name = "di"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    marker = context.resolver.local_names(sf, LEGACY_MODULES, "autoinject")
    if not marker:
      return

    touched = False
    converted = 0
    need_di = False
    for index in range(len(classes(sf))):
      result = self._rewrite_class(sf, index, marker, context)
      if result is None:
        continue
      touched = True
      converted += result[0]
      need_di = need_di or result[1]

    if not touched:
      return

    log = context.changelog
    editor = ImportEditor(sf)
    if converted:
      editor.ensure_named("aurelia", ["DI", "resolve"] if need_di else ["resolve"])

    removals = editor.remove_named(LEGACY_MODULES, ["autoinject"])
    removals += editor.prune_empty(LEGACY_MODULES)
    for removal in removals:
      if removal.statement_removed:
        log.remove(sf.path, f"Removed empty import '{removal.module}'", before=removal.before)

  def _is_marker(self, sf: SourceFile, deco, marker: LocalNames) -> bool:
    callee, _ = call_parts(decorator_expression(deco))
    return marker.matches(sf, callee)

  def _unsafe_reason(self, param: ParamView, ctor) -> Optional[str]:
    if param.is_optional:
      return "optional parameter"
    if param.decorators:
      return "decorated parameter"
    body = ctor.child_by_field_name("body")
    if body is not None:
      for node in walk(body):
        if node.type in ("identifier", "shorthand_property_identifier") and param.sf.text_of(node) == param.name:
          return "referenced in the constructor body"
    return None

  def _rewrite_class(
    self, sf: SourceFile, index: int, marker: LocalNames, context: PassContext
  ) -> Optional[Tuple[int, bool]]:
    """
    Migrates one class.

    Args:
        sf: The file.
        index: Position of the class in ``classes(sf)``.
        marker: Local names of ``autoinject``.
        context: Pass state.

    Returns:
        Optional[Tuple[int, bool]]: None if the class carries no marker,
        otherwise the number of converted parameters and whether a generated
        token was used.
    """
    log = context.changelog
    cls = classes(sf)[index]
    if not any(self._is_marker(sf, d, marker) for d in cls.decorators):
      return None

    # Decide every parameter before editing; entries are recorded afterwards in parameter order
    plan: List[_Conversion] = []
    steps: List[Union[_Conversion, Tuple[str, int]]] = []
    ctor = cls.constructor
    for param in cls.constructor_params():
      if not param.is_property:
        continue
      type_text = param.type_text
      shown = f"{param.name}: {type_text}" if type_text else param.name
      reason = self._unsafe_reason(param, ctor)
      if reason is not None:
        steps.append(
          (
            f"Skipped converting parameter property '{shown}' on class {cls.name} ({reason}). "
            "Replace with resolve(...) or @inject manually.",
            sf.line_of(param.node),
          )
        )
        continue

      info = context.types.classify(sf, param.type_node)
      if info.kind == TypeKind.CLASS:
        plan.append(_Conversion(param.name, type_text, info.name))
        steps.append(plan[-1])
      elif info.kind == TypeKind.INTERFACE:
        plan.append(_Conversion(param.name, type_text, info.name, token=info.name))
        steps.append(plan[-1])
      else:
        steps.append(
          (
            f"Skipped converting parameter property '{shown}' on class {cls.name} due to non-runtime type. "
            "Replace with resolve(...) or @inject manually.",
            sf.line_of(param.node),
          )
        )

    # Tokens are inserted first; they sit above the class so the class is re-read afterwards
    used_token = False
    created = []
    for conv in plan:
      if conv.token is None:
        continue
      token, is_new = context.tokens.ensure(sf, conv.token, conv.type_text)
      conv.target = token
      used_token = True
      if is_new:
        created.append((token, conv.token))

    cls = classes(sf)[index]
    params_by_name = {p.name: p for p in cls.constructor_params()}
    params = [params_by_name[c.name] for c in plan]

    edits = [remove_node_edit(sf, d) for d in cls.decorators if self._is_marker(sf, d, marker)]
    if plan:
      fields = [f"{p.field_prefix()}{c.name}: {c.type_text} = resolve({c.target});" for p, c in zip(params, plan)]
      edits.append(insert_members_edit(sf, cls, fields))
      edits.extend(remove_params_edits(cls, params))
    name = cls.name
    sf.apply_edits(edits)

    log.edit(sf.path, f"Removed @autoinject on class {name}")
    for token, interface in created:
      log.add(sf.path, f"Added interface token '{token}' for type '{interface}'")
    for step in steps:
      if isinstance(step, _Conversion):
        log.edit(
          sf.path,
          f"Converted parameter property '{step.name}: {step.type_text}' to 'resolve({step.target})' on class {name}"
          + (" (generated token)" if step.token else ""),
        )
      else:
        log.warn(sf.path, step[0], line=step[1])
    for token, interface in created:
      log.warn(sf.path, f"Generated DI token '{token}' for interface '{interface}'. Confirm registrations match this token.")
    return len(plan), used_token
