"""
Markup Parser.

Builds ``MarkupNode`` trees from HTML/Aurelia templates using the standard
library ``html.parser``. The parser is tolerant: unclosed elements are closed
when an ancestor closes, and stray end tags are ignored.

``HTMLParser`` reports tags and attributes normalised (lowercase, unescaped).
The original start-tag text is re-scanned so every node keeps the exact spans
the serializer needs.
"""

import re
from bisect import bisect_right
from html.parser import HTMLParser
from typing import List, Optional, Tuple

from au_rogue.core.markup.nodes import MarkupAttribute, MarkupNode

VOID_ELEMENTS = {
  "area",
  "base",
  "br",
  "col",
  "embed",
  "hr",
  "img",
  "input",
  "link",
  "meta",
  "param",
  "source",
  "track",
  "wbr",
}

_TAG_NAME = re.compile(r"<\s*([^\s/>]+)")
_END_TAG_NAME = re.compile(r"</\s*([^\s>]+)")
_ATTR = re.compile(r"""([^\s/>"'=]+)(?:\s*=\s*("[^"]*"|'[^']*'|[^\s>"'`=<]+))?""")


class TemplateParser(HTMLParser):
  """
  HTML Parser callback handler building a span-preserving tree.
  """

  def __init__(self, source: str) -> None:
    super().__init__(convert_charrefs=False)
    self.source = source
    self.root = MarkupNode(tag="#document")
    self._stack: List[MarkupNode] = [self.root]
    self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]

  def _offset(self) -> int:
    line, col = self.getpos()
    return self._line_starts[line - 1] + col

  def _line_of(self, offset: int) -> int:
    return bisect_right(self._line_starts, offset)

  def _append(self, node: MarkupNode) -> None:
    parent = self._stack[-1]
    node.parent = parent
    if parent.tag == "template":
      parent.content.append(node)
    else:
      parent.children.append(node)

  def _build(self, tag: str) -> MarkupNode:
    start = self._offset()
    text = self.get_starttag_text() or ""
    name_match = _TAG_NAME.match(text)
    node = MarkupNode(tag=tag, line=self._line_of(start))
    if name_match is None:
      return node
    node.tag_span = (start + name_match.start(1), start + name_match.end(1))
    node.attrs = self._scan_attrs(text, name_match.end(), start)
    return node

  def _scan_attrs(self, text: str, pos: int, base: int) -> List[MarkupAttribute]:
    attrs = []
    for match in _ATTR.finditer(text, pos):
      name = match.group(1)
      raw = match.group(2)
      name_span = (base + match.start(1), base + match.end(1))
      if raw is None:
        attrs.append(MarkupAttribute(name=name, value=None, name_span=name_span))
        continue
      quote = raw[0] if raw[:1] in ("'", '"') else ""
      value = raw[1:-1] if quote else raw
      value_span = (base + match.start(2), base + match.end(2))
      attrs.append(MarkupAttribute(name=name, value=value, name_span=name_span, value_span=value_span, quote=quote))
    return attrs

  def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
    node = self._build(tag)
    self._append(node)
    if tag not in VOID_ELEMENTS:
      self._stack.append(node)

  def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
    self._append(self._build(tag))

  def handle_endtag(self, tag: str) -> None:
    for depth in range(len(self._stack) - 1, 0, -1):
      if self._stack[depth].tag == tag:
        node = self._stack[depth]
        start = self._offset()
        match = _END_TAG_NAME.match(self.source, start)
        if match is not None:
          node.end_tag_span = (match.start(1), match.end(1))
        del self._stack[depth:]
        return


def parse_markup(source: str) -> MarkupNode:
  """
  Parses a template into a tree.

  Args:
      source: Template text.

  Returns:
      MarkupNode: The ``#document`` root.
  """
  parser = TemplateParser(source)
  parser.feed(source)
  parser.close()
  return parser.root
