"""
Tests for the Tree-backed Project.

Verifies:
1. Batched edits apply back to front and re-parse the tree.
2. Overlapping edits raise `EditConflictError`.
3. Files with syntax errors are flagged.
4. `Project.save` writes only modified files.
"""

import pytest

from au_rogue.core.errors import EditConflictError, RewriteError
from au_rogue.core.project import Project, SourceFile, TextEdit


def test_apply_edits_batch_and_reparse():
  """
  Scenario: Two replacements expressed against the original text.
  Expectation: Both land; the tree reflects the new text.
  """
  sf = SourceFile("src/a.ts", "const a = 1;\nconst b = 2;\n")
  first = sf.root.named_children[0]
  second = sf.root.named_children[1]

  changed = sf.apply_edits([TextEdit.replace(second, "let b = 3;"), TextEdit.replace(first, "let a = 0;")])

  assert changed
  assert sf.text == "let a = 0;\nlet b = 3;\n"
  assert sf.text_of(sf.root.named_children[1]) == "let b = 3;"
  assert sf.modified


def test_inserts_at_same_offset_keep_order():
  """
  Scenario: Two inserts at the same offset.
  Expectation: They appear in the order given.
  """
  sf = SourceFile("src/a.ts", "x;\n")
  sf.apply_edits([TextEdit.insert(0, "a;"), TextEdit.insert(0, "b;")])
  assert sf.text == "a;b;x;\n"


def test_overlapping_edits_raise():
  """
  Scenario: Two edits overlap.
  Expectation: EditConflictError (a RewriteError) and no change.
  """
  sf = SourceFile("src/a.ts", "const value = 1;\n")
  with pytest.raises(EditConflictError) as exc:
    sf.apply_edits([TextEdit(0, 10, ""), TextEdit(5, 12, "")])
  assert isinstance(exc.value, RewriteError)
  assert sf.text == "const value = 1;\n"


def test_noop_edit_reports_unchanged():
  """
  Scenario: An edit replaces text with itself.
  Expectation: apply_edits returns False.
  """
  sf = SourceFile("src/a.ts", "const a = 1;\n")
  node = sf.root.named_children[0]
  assert sf.apply_edits([TextEdit.replace(node, "const a = 1;")]) is False
  assert not sf.modified


def test_syntax_errors_flagged():
  """
  Scenario: Malformed source.
  Expectation: has_errors is True.
  """
  assert SourceFile("src/bad.ts", "class {{{ ;").has_errors
  assert not SourceFile("src/ok.ts", "export class A {}\n").has_errors


def test_tsx_grammar_for_jsx_files():
  """
  Scenario: A .tsx file containing JSX.
  Expectation: Parses without errors using the TSX grammar.
  """
  sf = SourceFile("src/view.tsx", "export const v = <div className='a'>hi</div>;\n")
  assert not sf.has_errors


def test_project_save_writes_only_modified(tmp_path):
  """
  Scenario: Two files loaded from disk, one edited.
  Expectation: Only the edited file is written and reported.
  """
  a = tmp_path / "a.ts"
  b = tmp_path / "b.ts"
  a.write_text("const a = 1;\n", encoding="utf-8")
  b.write_text("const b = 1;\n", encoding="utf-8")

  project = Project.from_paths([a, b])
  assert len(project) == 2
  sf = project.get_file(str(a))
  sf.replace_text("const a = 2;\n")

  written = project.save()

  assert written == [str(a)]
  assert a.read_text(encoding="utf-8") == "const a = 2;\n"
  assert b.read_text(encoding="utf-8") == "const b = 1;\n"
  assert project.save() == []


def test_undecodable_file_skipped(tmp_path):
  """
  Scenario: One of two files on disk is not valid UTF-8.
  Expectation: It is skipped; the other file is loaded.
  """
  bad = tmp_path / "bad.ts"
  bad.write_bytes(b"const a = '\xff';\n")
  good = tmp_path / "good.ts"
  good.write_text("const b = 1;\n", encoding="utf-8")

  project = Project.from_paths([bad, good])

  assert len(project) == 1
  assert project.get_file(str(bad)) is None
  assert project.get_file(str(good)).text == "const b = 1;\n"
