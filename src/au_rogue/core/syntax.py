"""
Syntax Views over tree-sitter TypeScript nodes.

The raw tree-sitter tree is generic; this module gives the passes the handful
of shapes they reason about:

- ``ClassView``: A top-level class declaration with its decorators,
  constructor, methods, accessors and fields.
- ``ParamView``: A constructor parameter, including parameter-property
  modifiers.
- ``Attachment``: Closed classification of what a decorator is attached to.

Views are cheap, stateless wrappers. They must be re-created after every
``SourceFile.apply_edits`` call because the underlying nodes are replaced on
re-parse.
"""

from enum import Enum
from typing import Iterator, List, Optional

from tree_sitter import Node

from au_rogue.core.project import SourceFile

CLASS_TYPES = ("class_declaration", "abstract_class_declaration", "class")
PARAM_TYPES = ("required_parameter", "optional_parameter")
ACCESSIBILITY = ("private", "protected", "public")


class Attachment(str, Enum):
  """
  What a decorator is attached to.
  """

  GETTER = "getter"
  METHOD = "method"
  FIELD = "field"
  OTHER = "other"


# --- Generic node helpers ---


def walk(node: Node) -> Iterator[Node]:
  """
  Depth-first pre-order traversal.

  Args:
      node: Root of the traversal.

  Yields:
      Node: Every node of the subtree, including ``node``.
  """
  stack = [node]
  while stack:
    current = stack.pop()
    yield current
    stack.extend(reversed(current.children))


def descendants_of_type(node: Node, *types: str) -> List[Node]:
  """Returns all descendants (and self) whose type is one of ``types``."""
  return [n for n in walk(node) if n.type in types]


def has_ancestor(node: Node, *types: str) -> bool:
  """True if any ancestor of ``node`` has one of the given types."""
  parent = node.parent
  while parent is not None:
    if parent.type in types:
      return True
    parent = parent.parent
  return False


def contains(outer: Node, inner: Node) -> bool:
  """True if ``inner`` lies within ``outer`` (and is not identical to it)."""
  if outer.start_byte == inner.start_byte and outer.end_byte == inner.end_byte:
    return False
  return outer.start_byte <= inner.start_byte and inner.end_byte <= outer.end_byte


def significant_children(node: Node) -> List[Node]:
  """Named children excluding comments."""
  return [c for c in node.named_children if c.type != "comment"]


def has_token(node: Node, token: str) -> bool:
  """True if ``node`` has a direct (usually anonymous) child of type ``token``."""
  return any(c.type == token for c in node.children)


def string_value(sf: SourceFile, node: Optional[Node]) -> Optional[str]:
  """
  Returns the literal content of a plain string node.

  Args:
      sf: Owning file.
      node: A ``string`` node.

  Returns:
      Optional[str]: The unquoted text, or None if ``node`` is not a string.
  """
  if node is None or node.type != "string":
    return None
  raw = sf.text_of(node)
  return raw[1:-1] if len(raw) >= 2 else raw


# --- Decorators & calls ---


def decorator_expression(deco: Node) -> Optional[Node]:
  """The expression following ``@`` in a decorator."""
  children = significant_children(deco)
  return children[0] if children else None


def call_parts(expr: Optional[Node]):
  """
  Splits a call expression into callee and argument nodes.

  Args:
      expr: Any expression node.

  Returns:
      Tuple[Optional[Node], Optional[List[Node]]]: ``(callee, args)`` for a
      call, or ``(expr, None)`` for a non-call expression.
  """
  if expr is None:
    return None, None
  if expr.type == "call_expression":
    callee = expr.child_by_field_name("function")
    args_node = expr.child_by_field_name("arguments")
    args = significant_children(args_node) if args_node is not None else []
    return callee, args
  return expr, None


def decorator_target(deco: Node) -> Optional[Node]:
  """
  Finds the member a decorator is attached to.

  tree-sitter places method decorators as siblings inside ``class_body`` and
  field decorators inside ``public_field_definition``; both layouts resolve
  here.

  Args:
      deco: A ``decorator`` node.

  Returns:
      Optional[Node]: The decorated member, class, or parameter node.
  """
  parent = deco.parent
  if parent is None:
    return None
  if parent.type == "class_body":
    sibling = deco.next_named_sibling
    while sibling is not None and sibling.type in ("decorator", "comment"):
      sibling = sibling.next_named_sibling
    return sibling
  if parent.type == "export_statement":
    return parent.child_by_field_name("declaration")
  return parent


def classify_attachment(deco: Node) -> Attachment:
  """
  Classifies the construct a decorator is attached to.

  Args:
      deco: A ``decorator`` node.

  Returns:
      Attachment: GETTER, METHOD, FIELD, or OTHER.
  """
  target = decorator_target(deco)
  if target is None:
    return Attachment.OTHER
  if target.type == "method_definition":
    if has_token(target, "get"):
      return Attachment.GETTER
    if has_token(target, "set"):
      return Attachment.OTHER
    return Attachment.METHOD
  if target.type == "public_field_definition":
    return Attachment.FIELD
  return Attachment.OTHER


# --- Parameters ---


class ParamView:
  """
  A constructor parameter.

  Attributes:
      node (Node): The ``required_parameter``/``optional_parameter`` node.
  """

  def __init__(self, sf: SourceFile, node: Node) -> None:
    self.sf = sf
    self.node = node

  @property
  def pattern(self) -> Optional[Node]:
    return self.node.child_by_field_name("pattern")

  @property
  def name(self) -> str:
    return self.sf.text_of(self.pattern)

  @property
  def type_node(self) -> Optional[Node]:
    """The type inside the ``: T`` annotation, if any."""
    annotation = self.node.child_by_field_name("type")
    if annotation is None:
      return None
    children = significant_children(annotation)
    return children[0] if children else None

  @property
  def type_text(self) -> Optional[str]:
    node = self.type_node
    return self.sf.text_of(node) if node is not None else None

  @property
  def accessibility(self) -> Optional[str]:
    for child in self.node.children:
      if child.type == "accessibility_modifier":
        return self.sf.text_of(child)
    return None

  @property
  def is_readonly(self) -> bool:
    return has_token(self.node, "readonly")

  @property
  def is_optional(self) -> bool:
    return self.node.type == "optional_parameter"

  @property
  def decorators(self) -> List[Node]:
    return [c for c in self.node.children if c.type == "decorator"]

  @property
  def is_property(self) -> bool:
    """True for parameter properties (``private x: T``, ``readonly x: T``)."""
    return self.accessibility is not None or self.is_readonly

  def field_prefix(self) -> str:
    """Modifiers to carry over to a field declaration (e.g. ``private readonly ``)."""
    parts = []
    if self.accessibility:
      parts.append(self.accessibility)
    if self.is_readonly:
      parts.append("readonly")
    return "".join(f"{p} " for p in parts)


# --- Classes ---


class ClassView:
  """
  A class declaration.

  Attributes:
      node (Node): The class declaration node.
  """

  def __init__(self, sf: SourceFile, node: Node) -> None:
    self.sf = sf
    self.node = node

  @property
  def name(self) -> str:
    name_node = self.node.child_by_field_name("name")
    return self.sf.text_of(name_node) if name_node is not None else "(anonymous)"

  @property
  def body(self) -> Optional[Node]:
    return self.node.child_by_field_name("body")

  @property
  def decorators(self) -> List[Node]:
    """Class decorators, including those written before ``export``."""
    result: List[Node] = []
    parent = self.node.parent
    if parent is not None and parent.type == "export_statement":
      result.extend(c for c in parent.children if c.type == "decorator")
    result.extend(c for c in self.node.children if c.type == "decorator")
    return result

  @property
  def statement(self) -> Node:
    """The outermost statement (the ``export_statement`` when exported)."""
    parent = self.node.parent
    if parent is not None and parent.type == "export_statement":
      return parent
    return self.node

  def members(self) -> List[Node]:
    """Member nodes of the class body, excluding decorators and punctuation."""
    body = self.body
    if body is None:
      return []
    return [c for c in significant_children(body) if c.type != "decorator"]

  def _member_name(self, member: Node) -> str:
    return self.sf.text_of(member.child_by_field_name("name"))

  @property
  def constructor(self) -> Optional[Node]:
    for member in self.members():
      if member.type == "method_definition" and self._member_name(member) == "constructor":
        return member
    return None

  def constructor_params(self) -> List[ParamView]:
    ctor = self.constructor
    if ctor is None:
      return []
    params = ctor.child_by_field_name("parameters")
    if params is None:
      return []
    return [ParamView(self.sf, p) for p in params.named_children if p.type in PARAM_TYPES]

  def methods(self) -> List[Node]:
    """Plain methods (no constructor, getters or setters)."""
    result = []
    for member in self.members():
      if member.type != "method_definition":
        continue
      if has_token(member, "get") or has_token(member, "set"):
        continue
      if self._member_name(member) == "constructor":
        continue
      result.append(member)
    return result

  def method_names(self) -> List[str]:
    return [self._member_name(m) for m in self.methods()]

  def method(self, name: str) -> Optional[Node]:
    for member in self.methods():
      if self._member_name(member) == name:
        return member
    return None

  def field_names(self) -> List[str]:
    names = []
    for member in self.members():
      if member.type == "public_field_definition":
        names.append(self._member_name(member))
      elif member.type == "method_definition" and (has_token(member, "get") or has_token(member, "set")):
        names.append(self._member_name(member))
    return names

  def has_member(self, name: str) -> bool:
    """True if a field or accessor with this name exists."""
    return name in self.field_names()


def classes(sf: SourceFile) -> List[ClassView]:
  """
  Top-level class declarations of a file, in source order.

  Args:
      sf: The file.

  Returns:
      List[ClassView]: Views over ``class`` statements, exported or not.
  """
  result = []
  for stmt in sf.root.named_children:
    node = stmt
    if stmt.type == "export_statement":
      node = stmt.child_by_field_name("declaration")
      if node is None:
        node = next((c for c in stmt.named_children if c.type in CLASS_TYPES), None)
    if node is not None and node.type in CLASS_TYPES:
      result.append(ClassView(sf, node))
  return result


def method_body_text(sf: SourceFile, method: Optional[Node]) -> str:
  """Text between the braces of a method body."""
  if method is None:
    return ""
  body = method.child_by_field_name("body")
  if body is None:
    return ""
  return sf.slice(body.start_byte + 1, body.end_byte - 1)


def method_name(sf: SourceFile, method: Node) -> str:
  return sf.text_of(method.child_by_field_name("name"))


def is_async(method: Node) -> bool:
  return has_token(method, "async")


def return_type_text(sf: SourceFile, method: Node) -> str:
  annotation = method.child_by_field_name("return_type")
  return sf.text_of(annotation)


def has_function(sf: SourceFile, name: str) -> bool:
  """True if the file declares a top-level function called ``name``."""
  for stmt in sf.root.named_children:
    node = stmt
    if stmt.type == "export_statement":
      node = stmt.child_by_field_name("declaration") or stmt
    if node.type == "function_declaration" and sf.text_of(node.child_by_field_name("name")) == name:
      return True
  return False


def references_outside_imports(sf: SourceFile, names) -> bool:
  """
  True if any identifier with one of ``names`` occurs outside import statements.

  Args:
      sf: The file.
      names: Identifier texts to look for.

  Returns:
      bool: Whether a non-import reference exists.
  """
  names = set(names)
  if not names:
    return False
  for node in walk(sf.root):
    if node.type not in ("identifier", "type_identifier", "shorthand_property_identifier"):
      continue
    if sf.text_of(node) in names and not has_ancestor(node, "import_statement"):
      return True
  return False
