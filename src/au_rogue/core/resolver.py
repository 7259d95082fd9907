"""
Symbol and Type Resolution.

Two lookups are needed before any rewrite can be decided:

1.  **Local names of a legacy export** (``SymbolResolver``): which identifiers in
    a file denote, say, ``computedFrom`` from ``aurelia-binding``. This covers
    plain named imports, aliased imports (``computedFrom as cf``) and qualified
    access through a namespace import (``au.computedFrom``). The result is a
    ``LocalNames`` set built once per file, so call-site checks are plain set
    membership tests.
2.  **Type classification** (``TypeIndex``): whether a parameter's declared type
    is a concrete class, a pure interface, or something that cannot be
    resolved. The index reads declarations across the project and follows
    relative imports; it is not a type checker. Anything it cannot classify is
    reported as UNRESOLVED and the caller must degrade to a warning.
"""

import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from tree_sitter import Node

from au_rogue.core.imports import parse_imports
from au_rogue.core.project import Project, SourceFile
from au_rogue.core.syntax import string_value


@dataclass
class LocalNames:
  """
  Identifiers denoting one canonical export inside one file.

  Attributes:
      export (str): Canonical exported name (e.g. 'autoinject').
      named (Set[str]): Local identifiers bound by named imports (aliases included).
      namespaces (Set[str]): Namespace identifiers through which ``ns.export`` is reachable.
  """

  export: str
  named: Set[str] = field(default_factory=set)
  namespaces: Set[str] = field(default_factory=set)

  def __bool__(self) -> bool:
    return bool(self.named or self.namespaces)

  def matches(self, sf: SourceFile, node: Optional[Node]) -> bool:
    """
    Tests whether an expression or type node refers to the export.

    Args:
        sf: Owning file.
        node: Identifier, member expression or (nested) type identifier.

    Returns:
        bool: True on a match.
    """
    if node is None:
      return False
    if node.type in ("identifier", "type_identifier"):
      return sf.text_of(node) in self.named
    if node.type == "member_expression":
      obj = node.child_by_field_name("object")
      prop = node.child_by_field_name("property")
      return (
        obj is not None
        and obj.type == "identifier"
        and sf.text_of(obj) in self.namespaces
        and sf.text_of(prop) == self.export
      )
    if node.type == "nested_type_identifier":
      module = node.child_by_field_name("module")
      name = node.child_by_field_name("name")
      return sf.text_of(module) in self.namespaces and sf.text_of(name) == self.export
    return False


class SymbolResolver:
  """
  Resolves legacy exports to the local names used in a file.
  """

  def local_names(self, sf: SourceFile, modules: Iterable[str], export: str) -> LocalNames:
    """
    Builds the local-name set for an export.

    Args:
        sf: The file to inspect.
        modules: Module specifiers that provide the export.
        export: Canonical exported name.

    Returns:
        LocalNames: Possibly empty name set.
    """
    modules = set(modules)
    result = LocalNames(export=export)
    for decl in parse_imports(sf):
      if decl.module not in modules:
        continue
      if decl.namespace is not None:
        result.namespaces.add(sf.text_of(decl.namespace))
      for spec in decl.specifiers:
        if spec.name == export:
          result.named.add(spec.local)
    return result


class TypeKind(str, Enum):
  """
  Classification of a declared type.
  """

  CLASS = "class"
  INTERFACE = "interface"
  UNRESOLVED = "unresolved"


@dataclass
class TypeInfo:
  """
  Result of classifying a type annotation.

  Attributes:
      kind (TypeKind): The classification.
      name (Optional[str]): Base name without type arguments (e.g. 'Repo' for 'Repo<User>').
  """

  kind: TypeKind
  name: Optional[str] = None


_DECL_KINDS = {
  "class_declaration": TypeKind.CLASS,
  "abstract_class_declaration": TypeKind.CLASS,
  "interface_declaration": TypeKind.INTERFACE,
  "type_alias_declaration": TypeKind.UNRESOLVED,
  "enum_declaration": TypeKind.UNRESOLVED,
}

_CANDIDATE_SUFFIXES = (".ts", ".tsx", ".d.ts", ".js", ".jsx")

_MAX_DEPTH = 8


class TypeIndex:
  """
  Project-wide declaration index used to classify parameter types.

  Built lazily per file and scoped to the pass that created it.
  """

  def __init__(self, project: Project, external_classes: Iterable[str] = ()) -> None:
    """
    Args:
        project: The project whose files provide declarations.
        external_classes: Type names shipped by packages to treat as classes.
    """
    self.project = project
    self.external_classes = set(external_classes)
    self._by_path: Dict[str, SourceFile] = {posixpath.normpath(sf.path.replace("\\", "/")): sf for sf in project}
    self._decls: Dict[str, Dict[str, TypeKind]] = {}

  # --- Public API ---

  def classify(self, sf: SourceFile, type_node: Optional[Node]) -> TypeInfo:
    """
    Classifies the type inside a parameter annotation.

    Args:
        sf: File declaring the parameter.
        type_node: The type node (not the ``: T`` annotation).

    Returns:
        TypeInfo: CLASS / INTERFACE with the base name, or UNRESOLVED.
    """
    if type_node is None:
      return TypeInfo(TypeKind.UNRESOLVED)

    if type_node.type == "generic_type":
      base = type_node.child_by_field_name("name")
      info = self.classify(sf, base)
      return info

    if type_node.type == "type_identifier":
      name = sf.text_of(type_node)
      return TypeInfo(self._lookup_local(sf, name, 0), name)

    if type_node.type == "nested_type_identifier":
      module = sf.text_of(type_node.child_by_field_name("module"))
      name = sf.text_of(type_node.child_by_field_name("name"))
      qualified = f"{module}.{name}"
      if name in self.external_classes or qualified in self.external_classes:
        return TypeInfo(TypeKind.CLASS, qualified)
      for decl in parse_imports(sf):
        if decl.namespace is not None and sf.text_of(decl.namespace) == module:
          target = self._resolve_module(sf, decl.module)
          if target is not None:
            return TypeInfo(self._lookup_export(target, name, 1), qualified)
      return TypeInfo(TypeKind.UNRESOLVED, qualified)

    return TypeInfo(TypeKind.UNRESOLVED)

  # --- Lookup ---

  def _lookup_local(self, sf: SourceFile, name: str, depth: int) -> TypeKind:
    if name in self.external_classes:
      return TypeKind.CLASS
    if depth > _MAX_DEPTH:
      return TypeKind.UNRESOLVED

    decls = self._declarations(sf)
    if name in decls:
      return decls[name]

    for decl in parse_imports(sf):
      exported = None
      if decl.default is not None and sf.text_of(decl.default) == name:
        exported = "default"
      for spec in decl.specifiers:
        if spec.local == name:
          exported = spec.name
      if exported is None:
        continue
      target = self._resolve_module(sf, decl.module)
      if target is None:
        return TypeKind.UNRESOLVED
      return self._lookup_export(target, exported, depth + 1)

    return TypeKind.UNRESOLVED

  def _lookup_export(self, sf: SourceFile, name: str, depth: int) -> TypeKind:
    if depth > _MAX_DEPTH:
      return TypeKind.UNRESOLVED

    if name == "default":
      return self._default_export(sf)

    decls = self._declarations(sf)
    if name in decls:
      return decls[name]

    for stmt in sf.root.named_children:
      if stmt.type != "export_statement":
        continue
      source = string_value(sf, stmt.child_by_field_name("source"))
      clause = next((c for c in stmt.named_children if c.type == "export_clause"), None)

      if clause is None:
        # export * from './x'
        if source is not None and any(c.type == "*" for c in stmt.children):
          target = self._resolve_module(sf, source)
          if target is not None:
            kind = self._lookup_export(target, name, depth + 1)
            if kind != TypeKind.UNRESOLVED:
              return kind
        continue

      for spec in clause.named_children:
        if spec.type != "export_specifier":
          continue
        original = sf.text_of(spec.child_by_field_name("name"))
        alias_node = spec.child_by_field_name("alias")
        public = sf.text_of(alias_node) if alias_node is not None else original
        if public != name:
          continue
        if source is None:
          return self._lookup_local(sf, original, depth + 1)
        target = self._resolve_module(sf, source)
        if target is None:
          return TypeKind.UNRESOLVED
        return self._lookup_export(target, original, depth + 1)

    return TypeKind.UNRESOLVED

  def _default_export(self, sf: SourceFile) -> TypeKind:
    for stmt in sf.root.named_children:
      if stmt.type != "export_statement" or not any(c.type == "default" for c in stmt.children):
        continue
      for child in stmt.named_children:
        if child.type in _DECL_KINDS:
          return _DECL_KINDS[child.type]
        if child.type == "class":
          return TypeKind.CLASS
    return TypeKind.UNRESOLVED

  def _declarations(self, sf: SourceFile) -> Dict[str, TypeKind]:
    key = sf.path
    if key not in self._decls:
      found: Dict[str, TypeKind] = {}
      for node in self._top_level_declarations(sf):
        name_node = node.child_by_field_name("name")
        if name_node is None:
          continue
        name = sf.text_of(name_node)
        kind = _DECL_KINDS[node.type]
        # Declaration merging: a class merged with an interface is still a class
        if found.get(name) != TypeKind.CLASS:
          found[name] = kind
      self._decls[key] = found
    return self._decls[key]

  def _top_level_declarations(self, sf: SourceFile) -> List[Node]:
    result = []
    for stmt in sf.root.named_children:
      candidates = [stmt]
      if stmt.type in ("export_statement", "ambient_declaration"):
        candidates = list(stmt.named_children)
      result.extend(c for c in candidates if c.type in _DECL_KINDS)
    return result


  # --- Module resolution ---

  def _resolve_module(self, sf: SourceFile, specifier: str) -> Optional[SourceFile]:
    if not specifier.startswith("."):
      return None
    base = posixpath.normpath(posixpath.join(posixpath.dirname(sf.path.replace("\\", "/")), specifier))
    for candidate in self._candidates(base):
      target = self._by_path.get(candidate)
      if target is not None:
        return target
    return None

  def _candidates(self, base: str) -> Tuple[str, ...]:
    stems = [base]
    root, ext = posixpath.splitext(base)
    if ext in (".js", ".jsx", ".mjs", ".cjs"):
      stems.append(root)
    result = [base]
    for stem in stems:
      result.extend(stem + suffix for suffix in _CANDIDATE_SUFFIXES)
      result.extend(posixpath.join(stem, "index" + suffix) for suffix in _CANDIDATE_SUFFIXES)
    return tuple(result)
