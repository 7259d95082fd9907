"""
File Discovery.

Expands the configured glob patterns relative to a project root. Directories
named in the exclude list (``node_modules``, ``dist`` by default) are skipped
wherever they appear in a path.

``pathlib`` globs have no brace groups, so ``src/**/*.{ts,js}`` is expanded to
one pattern per alternative before globbing.
"""

import re
from pathlib import Path
from typing import Iterable, List

_BRACE_GROUP = re.compile(r"\{([^{}]*,[^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
  """
  Expands ``{a,b}`` groups into separate patterns.

  Args:
      pattern: A glob such as ``src/**/*.{ts,js}``.

  Returns:
      List[str]: Patterns without brace groups, in the order written.
  """
  match = _BRACE_GROUP.search(pattern)
  if match is None:
    return [pattern]
  head, tail = pattern[: match.start()], pattern[match.end() :]
  result = []
  for option in match.group(1).split(","):
    for expanded in expand_braces(f"{head}{option}{tail}"):
      if expanded not in result:
        result.append(expanded)
  return result


def discover(root: Path, patterns: Iterable[str], exclude: Iterable[str] = ()) -> List[Path]:
  """
  Finds files matching any of the patterns.

  Args:
      root: Directory the patterns are relative to.
      patterns: Glob patterns such as ``src/**/*.ts`` or ``src/**/*.{ts,js}``.
      exclude: Directory names to skip.

  Returns:
      List[Path]: Matching files, de-duplicated and sorted.
  """
  excluded = set(exclude)
  found = set()
  for raw in patterns:
    for pattern in expand_braces(raw.strip()):
      if not pattern:
        continue
      if Path(pattern).is_absolute():
        candidates = [Path(pattern)] if Path(pattern).is_file() else []
      else:
        candidates = root.glob(pattern)
      for path in candidates:
        if not path.is_file():
          continue
        try:
          parts = path.relative_to(root).parts
        except ValueError:
          parts = path.parts
        if excluded.intersection(parts[:-1]):
          continue
        found.add(path)
  return sorted(found)
