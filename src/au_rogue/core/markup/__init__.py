"""
Markup Core Package.

Span-preserving template trees and the Aurelia template rewriter.
"""

from au_rogue.core.markup.nodes import MarkupAttribute, MarkupNode, serialize
from au_rogue.core.markup.parser import parse_markup
from au_rogue.core.markup.rewriter import MarkupRewriter

__all__ = ["MarkupAttribute", "MarkupNode", "serialize", "parse_markup", "MarkupRewriter"]
