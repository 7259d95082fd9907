"""
Markup Tree Nodes.

Defines the structure the template rewriter works on:
- MarkupAttribute: A ``name="value"`` pair with the source spans of both parts.
- MarkupNode: An element with its tag name, ordered attributes, children and,
  for ``<template>``, a secondary ``content`` list.

Nodes remember where every name and value came from, so ``serialize`` can
rewrite only the parts that changed and leave every other byte of the
document as written (quoting, whitespace, comments, entities).
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

Span = Tuple[int, int]


@dataclass
class MarkupAttribute:
  """
  A single attribute.

  Attributes:
      name (str): Current attribute name (case as written).
      value (Optional[str]): Current raw value (no quotes, entities untouched), or None for a bare attribute.
      name_span (Span): Source span of the name.
      value_span (Optional[Span]): Source span of the value including its quotes.
      quote (str): Quote character of the value in the source ('' if unquoted).
  """

  name: str
  value: Optional[str]
  name_span: Span
  value_span: Optional[Span] = None
  quote: str = '"'
  original_name: str = ""
  original_value: Optional[str] = None

  def __post_init__(self) -> None:
    self.original_name = self.name
    self.original_value = self.value

  @property
  def modified(self) -> bool:
    return self.name != self.original_name or self.value != self.original_value

  def render_value(self) -> str:
    """The value as it should appear in the output, quotes included."""
    value = self.value or ""
    quote = self.quote or '"'
    if quote in value:
      quote = "'" if quote == '"' else '"'
    return f"{quote}{value}{quote}"


@dataclass
class MarkupNode:
  """
  An element (or the document root, whose tag is ``#document``).

  Attributes:
      tag (str): Tag name, lowercased.
      attrs (List[MarkupAttribute]): Attributes in source order.
      children (List[MarkupNode]): Child elements.
      content (List[MarkupNode]): Children of a ``<template>`` element.
      line (int): 1-based line of the start tag.
  """

  tag: str
  attrs: List[MarkupAttribute] = field(default_factory=list)
  children: List["MarkupNode"] = field(default_factory=list)
  content: List["MarkupNode"] = field(default_factory=list)
  parent: Optional["MarkupNode"] = field(default=None, repr=False)
  line: int = 0
  tag_span: Optional[Span] = None
  end_tag_span: Optional[Span] = None
  original_tag: str = ""

  def __post_init__(self) -> None:
    self.original_tag = self.tag

  def attr(self, name: str) -> Optional[MarkupAttribute]:
    """First attribute with the given (case-insensitive) name."""
    lowered = name.lower()
    for attribute in self.attrs:
      if attribute.name.lower() == lowered:
        return attribute
    return None

  def get(self, name: str) -> Optional[str]:
    attribute = self.attr(name)
    return attribute.value if attribute is not None else None

  def walk(self) -> Iterator["MarkupNode"]:
    """Depth-first traversal including ``content`` subtrees."""
    yield self
    for child in self.children:
      yield from child.walk()
    for child in self.content:
      yield from child.walk()


def serialize(source: str, root: MarkupNode) -> str:
  """
  Renders a parsed document back to text.

  Only renamed tags and changed attribute names/values are rewritten.

  Args:
      source: The text the tree was parsed from.
      root: The document root.

  Returns:
      str: The updated document.
  """
  replacements: List[Tuple[int, int, str]] = []
  for node in root.walk():
    if node.tag != node.original_tag:
      if node.tag_span is not None:
        replacements.append((node.tag_span[0], node.tag_span[1], node.tag))
      if node.end_tag_span is not None:
        replacements.append((node.end_tag_span[0], node.end_tag_span[1], node.tag))
    for attribute in node.attrs:
      if attribute.name != attribute.original_name:
        replacements.append((attribute.name_span[0], attribute.name_span[1], attribute.name))
      if attribute.value != attribute.original_value:
        if attribute.value_span is not None:
          replacements.append((attribute.value_span[0], attribute.value_span[1], attribute.render_value()))
        else:
          end = attribute.name_span[1]
          replacements.append((end, end, f"={attribute.render_value()}"))

  result = source
  for start, end, text in sorted(replacements, key=lambda r: (r[0], r[1]), reverse=True):
    result = result[:start] + text + result[end:]
  return result
