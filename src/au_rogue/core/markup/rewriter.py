"""
Template Rewriter.

Migrates Aurelia 1 view templates (``.html``/``.au``) to Aurelia 2 syntax:

- ``<require>`` -> ``<import>``, ``<router-view>`` -> ``<au-viewport>``,
  ``<compose view view-model>`` -> ``<au-compose template component>``.
- ``x.delegate`` -> ``x.trigger``.
- ``view-model.ref`` -> ``component.ref``.
- ``x.call="fn(a)"`` -> ``x.bind="($event) => fn(a)"``.

Aurelia 1 called ``preventDefault()`` for every delegated/triggered event; Aurelia
2 does not. Handlers that most likely relied on it (form submits, submit
buttons, links with an ``href``, key events) are reported so a ``:prevent``
modifier can be added where needed.
"""

import logging
from pathlib import Path
from typing import Iterable, Tuple

from au_rogue.core.changelog import ChangeLog
from au_rogue.core.markup.nodes import MarkupAttribute, MarkupNode, serialize
from au_rogue.core.markup.parser import parse_markup

logger = logging.getLogger(__name__)

TAG_RENAMES = {
  "require": "import",
  "router-view": "au-viewport",
  "compose": "au-compose",
}

COMPOSE_ATTR_RENAMES = {
  "view": "template",
  "view-model": "component",
}

KEY_EVENTS = ("keydown", "keyup", "keypress")


def needs_prevent_default(node: MarkupNode, event: str, value: str) -> bool:
  """
  Heuristic: did this handler likely rely on Aurelia 1's automatic preventDefault?

  Args:
      node: The element carrying the handler.
      event: Event name (e.g. 'click').
      value: Handler expression.

  Returns:
      bool: True if the handler should be reviewed.
  """
  if "preventDefault" in value:
    return False
  tag = node.tag
  if event == "submit" and tag == "form":
    return True
  if event == "click" and tag == "button":
    return (node.get("type") or "").strip().lower() not in ("button", "reset")
  if event == "click" and tag == "a":
    href = (node.get("href") or "").strip()
    return bool(href) and not href.lower().startswith("javascript:")
  return event in KEY_EVENTS


class MarkupRewriter:
  """
  Applies the template migrations to markup files.

  Attributes:
      changelog (ChangeLog): Log receiving every edit and warning.
      write (bool): If False, files are analysed and logged but never written.
  """

  def __init__(self, changelog: ChangeLog, write: bool = True) -> None:
    self.changelog = changelog
    self.write = write

  def run(self, paths: Iterable[Path]) -> int:
    """
    Rewrites every template.

    A template that cannot be read, decoded or parsed is skipped: its entries
    are rolled back and the remaining templates are still processed.

    Args:
        paths: Template files.

    Returns:
        int: Number of files written (or that would be written when ``write`` is off).
    """
    changed = 0
    for path in paths:
      mark = self.changelog.checkpoint()
      try:
        if self.rewrite_file(Path(path)):
          changed += 1
      except Exception as e:
        self.changelog.rollback(mark)
        logger.warning(f"templates: left {path} unchanged after an error: {e}")
    return changed

  def rewrite_file(self, path: Path) -> bool:
    """
    Rewrites one template on disk.

    Args:
        path: The template file.

    Returns:
        bool: True if at least one structural edit was made.
    """
    source = path.read_text(encoding="utf-8")
    text, edits = self.rewrite_text(str(path), source)
    if edits and self.write:
      path.write_text(text, encoding="utf-8")
      logger.debug(f"Wrote {path} ({edits} edits)")
    return edits > 0

  def rewrite_text(self, file: str, source: str) -> Tuple[str, int]:
    """
    Rewrites template text.

    Args:
        file: Path used in log entries.
        source: Template text.

    Returns:
        Tuple[str, int]: The new text and the number of structural edits.
    """
    root = parse_markup(source)
    edits = 0
    for node in root.walk():
      if node is root:
        continue
      edits += self._visit(file, node)
    if not edits:
      return source, 0
    return serialize(source, root), edits

  def _visit(self, file: str, node: MarkupNode) -> int:
    log = self.changelog
    edits = 0

    new_tag = TAG_RENAMES.get(node.tag)
    if new_tag is not None:
      old_tag = node.tag
      node.tag = new_tag
      edits += 1
      log.edit(file, f"<{old_tag}> -> <{new_tag}>", line=node.line)
      if old_tag == "compose":
        for attribute in node.attrs:
          renamed = COMPOSE_ATTR_RENAMES.get(attribute.name.lower())
          if renamed is not None:
            attribute.name = renamed

    for attribute in node.attrs:
      edits += self._rewrite_attribute(file, node, attribute)
      self._check_event(file, node, attribute)
    return edits

  def _rewrite_attribute(self, file: str, node: MarkupNode, attribute: MarkupAttribute) -> int:
    log = self.changelog
    name = attribute.name
    lowered = name.lower()

    if lowered == "aurelia-app":
      log.warn(
        file,
        f'Found aurelia-app="{attribute.value or ""}". Aurelia 2 bootstraps explicitly in main.ts; remove this attribute.',
        line=node.line,
      )
      return 0

    if lowered.endswith(".delegate"):
      attribute.name = name[: -len(".delegate")] + ".trigger"
      log.edit(file, "*.delegate -> *.trigger", line=node.line)
      return 1

    if lowered == "view-model.ref":
      attribute.name = "component.ref"
      log.edit(file, "view-model.ref -> component.ref", line=node.line)
      return 1

    if lowered.endswith(".call"):
      attribute.name = name[: -len(".call")] + ".bind"
      value = (attribute.value or "").strip()
      if "=>" in value:
        log.edit(file, "*.call -> *.bind (kept existing arrow function)", line=node.line)
      else:
        attribute.value = f"($event) => {value}"
        log.edit(file, "*.call -> *.bind with lambda wrapper", line=node.line)
      return 1

    return 0

  def _check_event(self, file: str, node: MarkupNode, attribute: MarkupAttribute) -> None:
    name = attribute.name
    if not (name.endswith(".trigger") or name.endswith(".delegate")):
      return
    event = name.split(".", 1)[0].lower()
    value = attribute.value or ""
    if needs_prevent_default(node, event, value):
      self.changelog.warn(
        file,
        f"Event handler '{name}=\"{value}\"' may need :prevent modifier in Aurelia 2. "
        "In v1, preventDefault was called automatically, but not in v2. "
        f"Consider '{event}.trigger:prevent' if needed.",
        line=node.line,
      )
