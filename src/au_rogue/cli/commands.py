"""
CLI Command Handlers Facade.

Re-exports handlers from ``au_rogue.cli.handlers`` so the entry point and tests
import them from one place.
"""

from au_rogue.cli.handlers.migrate import handle_migrate, print_summary

__all__ = ["handle_migrate", "print_summary"]
