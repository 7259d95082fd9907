"""
Tree-backed Project.

This module provides the in-memory model the migration passes operate on:

- ``SourceFile``: The text of one TypeScript/JavaScript file together with its
  tree-sitter concrete syntax tree. All mutations go through ``apply_edits``,
  which splices a batch of non-overlapping byte ranges into the source and
  re-parses the file. Node references taken before an edit are stale after it.
- ``Project``: An ordered collection of source files sharing one parser
  configuration. The project owns the trees; passes only hold transient node
  references while they work on a file.

Writing back to disk is only performed by ``Project.save``, which the CLI
skips in dry-run mode.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from au_rogue.core.errors import EditConflictError

logger = logging.getLogger(__name__)

TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())
TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())

_TSX_SUFFIXES = {".tsx", ".jsx"}

SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")


@dataclass
class TextEdit:
  """
  A single byte-range replacement.

  Attributes:
      start (int): Start byte offset (inclusive).
      end (int): End byte offset (exclusive). Equal to ``start`` for inserts.
      text (str): Replacement text.
  """

  start: int
  end: int
  text: str = ""

  @classmethod
  def replace(cls, node: Node, text: str) -> "TextEdit":
    """Replaces the full extent of a node."""
    return cls(node.start_byte, node.end_byte, text)

  @classmethod
  def insert(cls, offset: int, text: str) -> "TextEdit":
    """Inserts text at an offset without removing anything."""
    return cls(offset, offset, text)


def _parser_for(path: str) -> Parser:
  suffix = Path(path).suffix.lower()
  return Parser(TSX_LANGUAGE if suffix in _TSX_SUFFIXES else TS_LANGUAGE)


class SourceFile:
  """
  One source file and its syntax tree.

  Attributes:
      path (str): The file path used for reporting and saving.
      original (bytes): The text as it was loaded.
  """

  def __init__(self, path: str, text: str) -> None:
    """
    Parses the given text.

    Args:
        path: File path (also selects the TS or TSX grammar by suffix).
        text: Source text.
    """
    self.path = path
    self._parser = _parser_for(path)
    self._source: bytes = text.encode("utf-8")
    self.original: bytes = self._source
    self._tree: Tree = self._parser.parse(self._source)

  # --- Accessors ---

  @property
  def source(self) -> bytes:
    """The current source as UTF-8 bytes."""
    return self._source

  @property
  def text(self) -> str:
    """The current source as a string."""
    return self._source.decode("utf-8")

  @property
  def root(self) -> Node:
    """The ``program`` node of the current tree."""
    return self._tree.root_node

  @property
  def name(self) -> str:
    """The base file name."""
    return Path(self.path).name

  @property
  def has_errors(self) -> bool:
    """True if tree-sitter could not parse the file cleanly."""
    return self.root.has_error

  @property
  def modified(self) -> bool:
    """True if the text differs from what was loaded."""
    return self._source != self.original

  def text_of(self, node: Optional[Node]) -> str:
    """
    Returns the source text spanned by a node.

    Args:
        node: Any node of this file's current tree, or None.

    Returns:
        str: The node text, or an empty string for None.
    """
    if node is None:
      return ""
    return self._source[node.start_byte : node.end_byte].decode("utf-8")

  def slice(self, start: int, end: int) -> str:
    """Returns the text between two byte offsets."""
    return self._source[start:end].decode("utf-8")

  def line_of(self, node: Node) -> int:
    """1-based line number of a node."""
    return node.start_point[0] + 1

  def line_start(self, offset: int) -> int:
    """Byte offset of the start of the line containing ``offset``."""
    return self._source.rfind(b"\n", 0, offset) + 1

  def line_end(self, offset: int) -> int:
    """Byte offset of the newline ending the line containing ``offset`` (or EOF)."""
    idx = self._source.find(b"\n", offset)
    return len(self._source) if idx < 0 else idx

  def indent_of(self, node: Node) -> str:
    """Leading whitespace of the line a node starts on."""
    start = self.line_start(node.start_byte)
    line = self._source[start : node.start_byte].decode("utf-8")
    return line[: len(line) - len(line.lstrip())]

  # --- Mutation ---

  def apply_edits(self, edits: Iterable[TextEdit]) -> bool:
    """
    Applies a batch of edits and re-parses the file.

    Edits are applied from the end of the file backwards. Inserts sharing an
    offset keep the order in which they were given.

    Args:
        edits: Non-overlapping edits expressed against the current text.

    Returns:
        bool: True if the text changed.

    Raises:
        EditConflictError: If two edits overlap.
    """
    indexed = sorted(enumerate(edits), key=lambda pair: (pair[1].start, pair[1].end, pair[0]))
    if not indexed:
      return False

    for (_, prev), (_, cur) in zip(indexed, indexed[1:]):
      if cur.start < prev.end:
        raise EditConflictError((prev.start, prev.end), (cur.start, cur.end))

    buf = self._source
    for _, edit in reversed(indexed):
      buf = buf[: edit.start] + edit.text.encode("utf-8") + buf[edit.end :]

    if buf == self._source:
      return False
    self._set_source(buf)
    return True

  def replace_text(self, text: str) -> None:
    """Replaces the whole file text."""
    self._set_source(text.encode("utf-8"))

  def restore(self, source: bytes) -> None:
    """Restores a snapshot previously read from ``source``."""
    self._set_source(source)

  def _set_source(self, buf: bytes) -> None:
    self._source = buf
    self._tree = self._parser.parse(buf)

  def save(self) -> bool:
    """
    Writes the current text to ``path`` if it changed.

    Returns:
        bool: True if the file was written.
    """
    if not self.modified:
      return False
    Path(self.path).write_bytes(self._source)
    self.original = self._source
    return True

  def __repr__(self) -> str:
    return f"SourceFile({self.path!r})"


class Project:
  """
  Ordered collection of source files.
  """

  def __init__(self) -> None:
    self._files: Dict[str, SourceFile] = {}

  @classmethod
  def from_paths(cls, paths: Iterable[Union[str, Path]]) -> "Project":
    """
    Loads every path into a new project.

    Args:
        paths: Files to load (decoded as UTF-8).

    Returns:
        Project: The populated project.
    """
    project = cls()
    for path in paths:
      p = Path(path)
      try:
        text = p.read_text(encoding="utf-8")
      except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping {p}: {e}")
        continue
      project.add_file(str(p), text)
    return project

  def add_file(self, path: str, text: str) -> SourceFile:
    """
    Adds (or replaces) a file from in-memory text.

    Args:
        path: The file path.
        text: Source text.

    Returns:
        SourceFile: The parsed file.
    """
    sf = SourceFile(path, text)
    if sf.has_errors:
      logger.warning(f"Syntax errors in {path}; passes will leave it untouched.")
    self._files[path] = sf
    return sf

  def get_file(self, path: str) -> Optional[SourceFile]:
    """Looks a file up by its exact path."""
    return self._files.get(path)

  def files(self) -> List[SourceFile]:
    """All files in insertion order."""
    return list(self._files.values())

  def __iter__(self) -> Iterator[SourceFile]:
    return iter(self.files())

  def __len__(self) -> int:
    return len(self._files)

  def save(self) -> List[str]:
    """
    Writes every modified file.

    Returns:
        List[str]: Paths that were written.
    """
    return [sf.path for sf in self._files.values() if sf.save()]
