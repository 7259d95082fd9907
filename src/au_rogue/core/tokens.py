"""
Synthetic Token Registry.

Interfaces have no runtime representation, so resolving one needs a generated
lookup token::

    const ILoggerToken = DI.createInterface<ILogger>('ILogger');

The registry guarantees one declaration per (file, interface) pair no matter
how many classes depend on it. It is constructed when a pass starts and
discarded when it ends; it is never shared between runs.
"""

from typing import Dict, Optional, Tuple

from au_rogue.core.project import SourceFile
from au_rogue.core.structure import insert_after_imports_edit


def token_name_for(interface_name: str) -> str:
  """
  Deterministic token identifier for an interface.

  Args:
      interface_name: Interface name, possibly with type arguments.

  Returns:
      str: e.g. 'ILoggerToken' for 'ILogger<T>'.
  """
  base = interface_name.split("<", 1)[0].strip().replace(".", "_")
  return f"{base}Token"


def declared_names(sf: SourceFile) -> set:
  """Names declared by top-level ``const``/``let``/``var`` statements."""
  names = set()
  for stmt in sf.root.named_children:
    node = stmt
    if stmt.type == "export_statement":
      node = stmt.child_by_field_name("declaration") or stmt
    if node.type not in ("lexical_declaration", "variable_declaration"):
      continue
    for declarator in node.named_children:
      if declarator.type == "variable_declarator":
        names.add(sf.text_of(declarator.child_by_field_name("name")))
  return names


class TokenRegistry:
  """
  Pass-scoped registry of generated interface tokens.
  """

  def __init__(self) -> None:
    self._entries: Dict[Tuple[str, str], str] = {}

  def lookup(self, sf: SourceFile, interface_name: str) -> Optional[str]:
    """Returns the token already registered for an interface in a file."""
    return self._entries.get((sf.path, interface_name))

  def ensure(self, sf: SourceFile, interface_name: str, type_text: str) -> Tuple[str, bool]:
    """
    Returns the token for an interface, declaring it if necessary.

    A declaration already present in the file (for example from a previous run)
    is reused rather than duplicated.

    Args:
        sf: The file that needs the token.
        interface_name: Canonical interface name (no type arguments).
        type_text: The annotation text used as the token's type argument.

    Returns:
        Tuple[str, bool]: The token identifier and whether a declaration was inserted.
    """
    key = (sf.path, interface_name)
    if key in self._entries:
      return self._entries[key], False

    token = token_name_for(interface_name)
    self._entries[key] = token
    if token in declared_names(sf):
      return token, False

    declaration = f"const {token} = DI.createInterface<{type_text}>('{interface_name}');"
    sf.apply_edits([insert_after_imports_edit(sf, declaration)])
    return token, True

  def __len__(self) -> int:
    return len(self._entries)
