"""
Migration Change Log.

This module defines the ``ChangeLog`` Pydantic model, the single piece of state
every pass shares during a run. Entries are appended in the order decisions are
made (not grouped by file or by kind), which is the order reports present them
in.

Each entry is also mirrored to the ``au_rogue.changelog`` logger at DEBUG level
so that ``--verbose`` runs show decisions as they happen.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger("au_rogue.changelog")


def _now() -> str:
  return datetime.now(timezone.utc).isoformat()


class ChangeKind(str, Enum):
  """
  Category of a change entry.
  """

  EDIT = "edit"
  ADD = "add"
  REMOVE = "remove"
  WARN = "warn"
  NOTE = "note"


class Location(BaseModel):
  """
  Optional source position of an entry.
  """

  line: Optional[int] = Field(None, description="1-based line number.")
  col: Optional[int] = Field(None, description="1-based column number.")


class ChangeEntry(BaseModel):
  """
  A single recorded decision.
  """

  file: str = Field(..., description="File path, or a project-level label such as 'ROUTER_MIGRATION'.")
  kind: ChangeKind = Field(..., description="What kind of decision this is.")
  message: str = Field(..., description="Human readable description naming the matched construct.")
  loc: Optional[Location] = Field(None, description="Where the construct was found.")
  before: Optional[str] = Field(None, description="Source snippet before the change.")
  after: Optional[str] = Field(None, description="Source snippet after the change.")


class ChangeLog(BaseModel):
  """
  Ordered record of everything a run decided.

  Created once per run and handed to every pass by reference. ``finish`` stamps
  the completion time once; appending afterwards is permitted.
  """

  started_at: str = Field(default_factory=_now)
  finished_at: Optional[str] = None
  options: Dict[str, Any] = Field(default_factory=dict)
  entries: List[ChangeEntry] = Field(default_factory=list)

  # --- Recording ---

  def _append(
    self,
    file: str,
    kind: ChangeKind,
    message: str,
    before: Optional[str] = None,
    after: Optional[str] = None,
    line: Optional[int] = None,
  ) -> ChangeEntry:
    entry = ChangeEntry(
      file=file,
      kind=kind,
      message=message,
      before=before,
      after=after,
      loc=Location(line=line) if line is not None else None,
    )
    self.entries.append(entry)
    logger.debug(f"[{kind.value}] {file}: {message}")
    return entry

  def edit(
    self,
    file: str,
    message: str,
    before: Optional[str] = None,
    after: Optional[str] = None,
    line: Optional[int] = None,
  ) -> ChangeEntry:
    """
    Records an in-place rewrite.

    Args:
        file: File the change applies to.
        message: Description of the change.
        before: Optional snippet of the original code.
        after: Optional snippet of the replacement.
        line: Optional 1-based line number.

    Returns:
        ChangeEntry: The appended entry.
    """
    return self._append(file, ChangeKind.EDIT, message, before=before, after=after, line=line)

  def add(self, file: str, message: str, after: Optional[str] = None, line: Optional[int] = None) -> ChangeEntry:
    """Records newly generated code."""
    return self._append(file, ChangeKind.ADD, message, after=after, line=line)

  def remove(self, file: str, message: str, before: Optional[str] = None, line: Optional[int] = None) -> ChangeEntry:
    """Records deleted code."""
    return self._append(file, ChangeKind.REMOVE, message, before=before, line=line)

  def warn(self, file: str, message: str, line: Optional[int] = None) -> ChangeEntry:
    """Records a construct that needs manual attention."""
    return self._append(file, ChangeKind.WARN, message, line=line)

  def note(self, file: str, message: str, line: Optional[int] = None) -> ChangeEntry:
    """Records informational guidance."""
    return self._append(file, ChangeKind.NOTE, message, line=line)

  def finish(self) -> "ChangeLog":
    """
    Stamps the completion time (first call only).

    Returns:
        ChangeLog: This log, ready for serialization.
    """
    if self.finished_at is None:
      self.finished_at = _now()
    return self

  # --- Queries ---

  def counts(self) -> Dict[str, int]:
    """
    Number of entries per kind.

    Returns:
        Dict[str, int]: Keys for every ``ChangeKind`` value.
    """
    result = {kind.value: 0 for kind in ChangeKind}
    for entry in self.entries:
      result[entry.kind.value] += 1
    return result

  def of_kind(self, kind: ChangeKind) -> List[ChangeEntry]:
    return [e for e in self.entries if e.kind == kind]

  def for_file(self, file: str) -> List[ChangeEntry]:
    return [e for e in self.entries if e.file == file]

  # --- Failure guard support ---

  def checkpoint(self) -> int:
    """Marker for ``rollback``."""
    return len(self.entries)

  def rollback(self, mark: int) -> None:
    """Drops entries recorded after ``mark``."""
    del self.entries[mark:]
