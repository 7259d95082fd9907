"""
Structural Rewriters.

Primitive edit builders shared by the passes. Each function inspects the
current tree and returns ``TextEdit`` objects; nothing here mutates a file, so
callers can combine several primitives into one ``apply_edits`` batch.
"""

from typing import List, Optional, Sequence, Set

from tree_sitter import Node

from au_rogue.core.project import SourceFile, TextEdit
from au_rogue.core.syntax import ClassView, ParamView, descendants_of_type, method_name


def remove_node_edit(sf: SourceFile, node: Node) -> TextEdit:
  """
  Removes a node, taking its whole line when it stands alone on it.

  Args:
      sf: Owning file.
      node: Statement, decorator or other line-oriented node.

  Returns:
      TextEdit: The removal.
  """
  line_start = sf.line_start(node.start_byte)
  line_end = sf.line_end(node.end_byte)
  prefix = sf.slice(line_start, node.start_byte)
  suffix = sf.slice(node.end_byte, line_end)

  if not prefix.strip() and not suffix.strip():
    end = line_end + 1 if line_end < len(sf.source) else line_end
    # A leading statement also takes the blank line that separated it from the rest
    if line_start == 0 and sf.source[end : end + 1] == b"\n":
      end += 1
    return TextEdit(line_start, end, "")

  # Inline: swallow trailing horizontal whitespace only
  end = node.end_byte
  while end < len(sf.source) and sf.source[end : end + 1] in (b" ", b"\t"):
    end += 1
  return TextEdit(node.start_byte, end, "")


def list_removal_edits(items: Sequence[Node], remove: Set[int], open_end: int, close_start: int) -> List[TextEdit]:
  """
  Removes elements from a comma-separated list, keeping separators valid.

  Args:
      items: The list elements in order.
      remove: Indices of the elements to drop.
      open_end: Offset just after the opening delimiter.
      close_start: Offset of the closing delimiter.

  Returns:
      List[TextEdit]: Non-overlapping removals.
  """
  remove = {i for i in remove if 0 <= i < len(items)}
  if not remove:
    return []
  kept = [i for i in range(len(items)) if i not in remove]
  if not kept:
    return [TextEdit(open_end, close_start, "")]

  last_kept = kept[-1]
  edits = []
  for i in sorted(remove):
    if i < last_kept:
      edits.append(TextEdit(items[i].start_byte, items[i + 1].start_byte, ""))

  if any(i > last_kept for i in remove):
    edits.append(TextEdit(items[last_kept].end_byte, items[-1].end_byte, ""))
  return edits


def remove_params_edits(cls: ClassView, params: Sequence[ParamView]) -> List[TextEdit]:
  """
  Removes constructor parameters.

  Args:
      cls: The class whose constructor is edited.
      params: Parameters (views over the current tree) to drop.

  Returns:
      List[TextEdit]: Removals inside the parameter list.
  """
  ctor = cls.constructor
  if ctor is None or not params:
    return []
  plist = ctor.child_by_field_name("parameters")
  all_params = cls.constructor_params()
  targets = {(p.node.start_byte, p.node.end_byte) for p in params}
  remove = {i for i, p in enumerate(all_params) if (p.node.start_byte, p.node.end_byte) in targets}
  return list_removal_edits([p.node for p in all_params], remove, plist.start_byte + 1, plist.end_byte - 1)


def member_indent(sf: SourceFile, cls: ClassView) -> str:
  """Indentation used for members of a class."""
  body = cls.body
  members = cls.members()
  if members and body is not None and members[0].start_point[0] != body.start_point[0]:
    return sf.indent_of(members[0])
  return sf.indent_of(cls.statement) + "  "


def insert_members_edit(sf: SourceFile, cls: ClassView, member_texts: Sequence[str]) -> Optional[TextEdit]:
  """
  Inserts member declarations at the front of a class body.

  The members keep the given order, so repeated runs produce the same output.

  Args:
      sf: Owning file.
      cls: Target class.
      member_texts: Complete member declarations (e.g. ``a: A = resolve(A);``).

  Returns:
      Optional[TextEdit]: The insertion, or None if the class has no body.
  """
  body = cls.body
  if body is None or not member_texts:
    return None
  indent = member_indent(sf, cls)
  text = "".join(f"\n{indent}{member}" for member in member_texts)
  return TextEdit.insert(body.start_byte + 1, text)


def replace_arguments_edit(sf: SourceFile, call: Node, args: Sequence[str]) -> TextEdit:
  """
  Rewrites the argument list of a call expression.

  Args:
      sf: Owning file.
      call: A ``call_expression`` node.
      args: New argument texts.

  Returns:
      TextEdit: Replacement of the ``(...)`` node.
  """
  arguments = call.child_by_field_name("arguments")
  return TextEdit.replace(arguments, f"({', '.join(args)})")


def insert_after_imports_edit(sf: SourceFile, text: str) -> TextEdit:
  """
  Inserts a top-level statement after the last import statement.

  Args:
      sf: Owning file.
      text: The statement text (without trailing newline).

  Returns:
      TextEdit: The insertion.
  """
  imports = [n for n in sf.root.named_children if n.type == "import_statement"]
  if imports:
    return TextEdit.insert(imports[-1].end_byte, f"\n{text}")
  separator = "\n" if sf.source.startswith(b"\n") or not sf.source else "\n\n"
  return TextEdit.insert(0, f"{text}{separator}")


def append_statement_edit(sf: SourceFile, text: str) -> TextEdit:
  """Appends a top-level statement at the end of the file."""
  source = sf.source
  lead = "" if not source or source.endswith(b"\n") else "\n"
  return TextEdit.insert(len(source), f"{lead}\n{text.strip()}\n")


def rename_method_edits(sf: SourceFile, cls: ClassView, method: Node, new_name: str) -> List[TextEdit]:
  """
  Renames a method and its ``this.``/``super.`` call sites inside the class.

  Args:
      sf: Owning file.
      cls: The declaring class.
      method: The ``method_definition`` node.
      new_name: Replacement name.

  Returns:
      List[TextEdit]: Declaration rename plus in-class reference renames.
  """
  old_name = method_name(sf, method)
  edits = [TextEdit.replace(method.child_by_field_name("name"), new_name)]
  body = cls.body
  if body is None:
    return edits
  for member in descendants_of_type(body, "member_expression"):
    obj = member.child_by_field_name("object")
    prop = member.child_by_field_name("property")
    if obj is None or prop is None:
      continue
    if obj.type in ("this", "super") and sf.text_of(prop) == old_name:
      edits.append(TextEdit.replace(prop, new_name))
  return edits
