"""
Engine Error Types.

Passes never raise for unrecognised or ambiguous legacy code; they degrade to
warnings in the ChangeLog instead. The exceptions defined here signal misuse
of the editing primitives and are caught by the per-file guard in
``MigrationPass`` so that a single bad file cannot abort a run.
"""


class RewriteError(Exception):
  """
  Base class for failures raised while editing a syntax tree.
  """


class EditConflictError(RewriteError):
  """
  Raised when a batch of text edits contains overlapping ranges.

  Attributes:
      first (tuple): The (start, end) range of the earlier edit.
      second (tuple): The (start, end) range of the conflicting edit.
  """

  def __init__(self, first: tuple, second: tuple) -> None:
    self.first = first
    self.second = second
    super().__init__(f"Overlapping edits {first} and {second}")
