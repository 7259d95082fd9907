"""
Entry point for module execution (``python -m au_rogue``).

This module delegates execution to the CLI handler in ``au_rogue.cli.__main__``.
"""

import sys
from au_rogue.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
