"""
Binding Syntax Pass.

Aurelia 2 renamed ``binding.sourceExpression`` to ``binding.ast`` and turned
the AST instance methods into free functions (``astEvaluate(ast, ...)`` and
friends). The property rename is mechanical; the method calls change their
argument order, so they are only flagged.
"""

from typing import List

from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.project import SourceFile, TextEdit
from au_rogue.core.syntax import descendants_of_type, string_value

AST_METHODS = {
  "evaluate": "astEvaluate",
  "assign": "astAssign",
  "bind": "astBind",
  "unbind": "astUnbind",
  "accept": "astVisit",
}

_AST_RECEIVERS = ("ast", "sourceExpression")


class BindingSyntaxPass(MigrationPass):
  """
  Renames ``sourceExpression`` and flags AST method calls.
  """

  name = "binding-syntax"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    log = context.changelog
    edits: List[TextEdit] = []
    messages: List[str] = []

    for member in descendants_of_type(sf.root, "member_expression"):
      prop = member.child_by_field_name("property")
      if prop is not None and sf.text_of(prop) == "sourceExpression":
        edits.append(TextEdit.replace(prop, "ast"))
        messages.append("Replaced .sourceExpression with .ast")

    for subscript in descendants_of_type(sf.root, "subscript_expression"):
      index = subscript.child_by_field_name("index")
      if string_value(sf, index) == "sourceExpression":
        quote = sf.text_of(index)[0]
        edits.append(TextEdit.replace(index, f"{quote}ast{quote}"))
        messages.append('Replaced ["sourceExpression"] with ["ast"]')

    sf.apply_edits(edits)
    for message in messages:
      log.edit(sf.path, message)

    for call in descendants_of_type(sf.root, "call_expression"):
      fn = call.child_by_field_name("function")
      if fn is None or fn.type != "member_expression":
        continue
      method = sf.text_of(fn.child_by_field_name("property"))
      helper = AST_METHODS.get(method)
      if helper is None or not self._is_ast_receiver(sf, fn.child_by_field_name("object")):
        continue
      log.warn(sf.path, f'Found AST method call ".{method}()". Use {helper}(...) instead.', line=sf.line_of(call))

  def _is_ast_receiver(self, sf: SourceFile, obj) -> bool:
    if obj is None:
      return False
    if obj.type == "identifier":
      return sf.text_of(obj) in _AST_RECEIVERS
    if obj.type == "member_expression":
      return sf.text_of(obj.child_by_field_name("property")) in _AST_RECEIVERS
    if obj.type == "subscript_expression":
      return string_value(sf, obj.child_by_field_name("index")) in _AST_RECEIVERS
    return False
