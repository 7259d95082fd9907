"""
Import Statement Model and Editor.

Parses ES ``import`` statements into ``ImportDecl`` records and provides the
``ImportEditor``, which keeps a file's import list minimal while passes
migrate symbols:

- Removing the last named binding of a statement removes the statement, unless
  a default or namespace binding keeps it alive.
- Adding a name merges into an existing statement for the same module rather
  than creating a duplicate statement.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from tree_sitter import Node

from au_rogue.core.project import SourceFile, TextEdit
from au_rogue.core.structure import insert_after_imports_edit, list_removal_edits, remove_node_edit
from au_rogue.core.syntax import has_token, string_value


@dataclass
class ImportBinding:
  """
  A single name brought into scope by an import.

  Attributes:
      module (str): Module specifier.
      exported (str): Name exported by the module ('default' / '*' for those forms).
      local (str): Name visible in the importing file.
  """

  module: str
  exported: str
  local: str


@dataclass
class ImportSpecifier:
  node: Node
  name: str
  alias: Optional[str] = None

  @property
  def local(self) -> str:
    return self.alias or self.name


@dataclass
class ImportDecl:
  """
  One ``import`` statement.

  Attributes:
      node (Node): The ``import_statement``.
      module (str): Module specifier value.
      default (Optional[Node]): Default binding identifier.
      namespace (Optional[Node]): Identifier of ``* as ns``.
      named_imports (Optional[Node]): The ``{ ... }`` node.
      specifiers (List[ImportSpecifier]): Named bindings.
      type_only (bool): True for ``import type``.
  """

  node: Node
  module: str
  default: Optional[Node] = None
  namespace: Optional[Node] = None
  named_imports: Optional[Node] = None
  specifiers: List[ImportSpecifier] = field(default_factory=list)
  type_only: bool = False

  def is_empty(self) -> bool:
    return not self.specifiers and self.default is None and self.namespace is None

  def bindings(self, sf: SourceFile) -> List[ImportBinding]:
    result = []
    if self.default is not None:
      result.append(ImportBinding(self.module, "default", sf.text_of(self.default)))
    if self.namespace is not None:
      result.append(ImportBinding(self.module, "*", sf.text_of(self.namespace)))
    for spec in self.specifiers:
      result.append(ImportBinding(self.module, spec.name, spec.local))
    return result


def parse_imports(sf: SourceFile) -> List[ImportDecl]:
  """
  Reads every top-level import statement of a file.

  Args:
      sf: The file.

  Returns:
      List[ImportDecl]: Statements in source order.
  """
  result = []
  for stmt in sf.root.named_children:
    if stmt.type != "import_statement":
      continue
    module = string_value(sf, stmt.child_by_field_name("source"))
    if module is None:
      continue
    decl = ImportDecl(node=stmt, module=module, type_only=has_token(stmt, "type"))
    clause = next((c for c in stmt.named_children if c.type == "import_clause"), None)
    if clause is not None:
      for part in clause.named_children:
        if part.type == "identifier":
          decl.default = part
        elif part.type == "namespace_import":
          decl.namespace = next((c for c in part.named_children if c.type == "identifier"), None)
        elif part.type == "named_imports":
          decl.named_imports = part
          for spec in part.named_children:
            if spec.type != "import_specifier":
              continue
            name = spec.child_by_field_name("name")
            alias = spec.child_by_field_name("alias")
            decl.specifiers.append(
              ImportSpecifier(
                node=spec,
                name=sf.text_of(name).strip("'\""),
                alias=sf.text_of(alias) if alias is not None else None,
              )
            )
    result.append(decl)
  return result


@dataclass
class ImportRemoval:
  """
  Outcome of removing named bindings from one statement.

  Attributes:
      module (str): Module specifier.
      names (List[str]): Exported names removed.
      statement_removed (bool): True if the whole statement was dropped.
      before (str): Statement text before the edit.
  """

  module: str
  names: List[str]
  statement_removed: bool
  before: str


class ImportEditor:
  """
  Adds and removes named imports on a single file.

  Every method re-reads the import statements from the current tree, so the
  editor stays valid across other edits to the same file.
  """

  def __init__(self, sf: SourceFile) -> None:
    self.sf = sf

  def imports(self) -> List[ImportDecl]:
    return parse_imports(self.sf)

  def bound_names(self, module: str) -> List[str]:
    """Exported names bound by value imports of ``module``."""
    names = []
    for decl in self.imports():
      if decl.module == module and not decl.type_only:
        names.extend(s.name for s in decl.specifiers)
    return names

  def remove_named(self, modules: Iterable[str], names: Iterable[str]) -> List[ImportRemoval]:
    """
    Removes named bindings (matched by exported name) from the given modules.

    Args:
        modules: Module specifiers to edit.
        names: Exported names to drop.

    Returns:
        List[ImportRemoval]: One record per edited statement.
    """
    modules = set(modules)
    names = set(names)
    edits: List[TextEdit] = []
    removals: List[ImportRemoval] = []

    for decl in self.imports():
      if decl.module not in modules:
        continue
      drop = {i for i, spec in enumerate(decl.specifiers) if spec.name in names}
      if not drop:
        continue
      removed_names = [decl.specifiers[i].name for i in sorted(drop)]
      before = self.sf.text_of(decl.node)
      remaining = len(decl.specifiers) - len(drop)

      if remaining == 0 and decl.default is None and decl.namespace is None:
        edits.append(remove_node_edit(self.sf, decl.node))
        removals.append(ImportRemoval(decl.module, removed_names, True, before))
        continue

      if remaining == 0:
        # "Default, { a }" -> "Default"
        edits.append(TextEdit(decl.default.end_byte, decl.named_imports.end_byte, ""))
      else:
        named = decl.named_imports
        edits.extend(
          list_removal_edits(
            [s.node for s in decl.specifiers],
            drop,
            named.start_byte + 1,
            named.end_byte - 1,
          )
        )
      removals.append(ImportRemoval(decl.module, removed_names, False, before))

    self.sf.apply_edits(edits)
    return removals

  def prune_empty(self, modules: Iterable[str]) -> List[ImportRemoval]:
    """
    Drops statements of the given modules that bind nothing at all.

    Args:
        modules: Module specifiers to inspect.

    Returns:
        List[ImportRemoval]: Removed statements.
    """
    modules = set(modules)
    edits = []
    removals = []
    for decl in self.imports():
      if decl.module in modules and decl.is_empty() and decl.named_imports is not None:
        edits.append(remove_node_edit(self.sf, decl.node))
        removals.append(ImportRemoval(decl.module, [], True, self.sf.text_of(decl.node)))
    self.sf.apply_edits(edits)
    return removals

  def ensure_named(self, module: str, names: Sequence[str]) -> List[str]:
    """
    Makes sure each name is imported from ``module``.

    Args:
        module: Module specifier (e.g. 'aurelia').
        names: Exported names required.

    Returns:
        List[str]: The names that had to be added.
    """
    present = set(self.bound_names(module))
    missing = []
    for name in names:
      if name not in present and name not in missing:
        missing.append(name)
    if not missing:
      return []

    decls = [d for d in self.imports() if d.module == module and not d.type_only and d.namespace is None]
    target = next((d for d in decls if d.named_imports is not None), None)
    joined = ", ".join(missing)

    if target is not None and target.specifiers:
      edit = TextEdit.insert(target.specifiers[-1].node.end_byte, f", {joined}")
    elif target is not None:
      edit = TextEdit.replace(target.named_imports, f"{{ {joined} }}")
    elif decls and decls[0].default is not None:
      edit = TextEdit.insert(decls[0].default.end_byte, f", {{ {joined} }}")
    else:
      edit = insert_after_imports_edit(self.sf, self._statement_text(module, missing))

    self.sf.apply_edits([edit])
    return missing

  def _statement_text(self, module: str, names: Sequence[str]) -> str:
    quote, semi = "'", ";"
    existing = self.imports()
    if existing:
      source = existing[0].node.child_by_field_name("source")
      quote = self.sf.text_of(source)[:1] or quote
      semi = ";" if self.sf.text_of(existing[0].node).rstrip().endswith(";") else ""
    return f"import {{ {', '.join(names)} }} from {quote}{module}{quote}{semi}"
