"""
Tests for the Migration Pipeline.

Verifies:
1. The default pass order.
2. An end-to-end run over a small project, and that a second run makes no edits.
3. The per-file failure guard: a failing file is restored and its entries rolled back.
"""

from au_rogue.core.changelog import ChangeKind, ChangeLog
from au_rogue.core.passes import (
  BindingEngineRewritePass,
  BindingSyntaxPass,
  BootstrapAdvisor,
  CompatAdvisor,
  ComputedPropertyPass,
  CustomElementPass,
  DependencyInjectionPass,
  LifecycleAntiPatternAdvisor,
  LifecycleHookAdvisor,
  LifecyclePass,
  MigrationPass,
  PlatformPass,
  PlatformUsageAdvisor,
  RouterAdvisor,
  RouterGuideAdvisor,
)
from au_rogue.core.pipeline import MigrationPipeline, default_passes

SAMPLE = {
  "src/http.ts": "export class HttpClient {}\n",
  "src/users.ts": (
    "import { autoinject } from 'aurelia-framework';\n"
    "import { HttpClient } from './http';\n"
    "\n"
    "@autoinject\n"
    "export class Users {\n"
    "  constructor(private http: HttpClient) {}\n"
    "  bind() {}\n"
    "  unbind() {}\n"
    "}\n"
  ),
}


def test_default_order():
  """
  Scenario: The standard sequence.
  Expectation: Rewriting passes first, advisors after, guide last.
  """
  assert [type(p) for p in default_passes()] == [
    BindingEngineRewritePass,
    DependencyInjectionPass,
    ComputedPropertyPass,
    CustomElementPass,
    BindingSyntaxPass,
    PlatformPass,
    LifecyclePass,
    BootstrapAdvisor,
    RouterAdvisor,
    PlatformUsageAdvisor,
    LifecycleHookAdvisor,
    LifecycleAntiPatternAdvisor,
    CompatAdvisor,
    RouterGuideAdvisor,
  ]


def test_end_to_end_and_idempotent(make_project):
  """
  Scenario: Full pipeline over a marker class with a lifecycle pair, then again over the output.
  Expectation: DI and lifecycle rewrites applied; the second run records no edits, adds or removes.
  """
  project = make_project(SAMPLE)
  MigrationPipeline().run(project, ChangeLog())
  users = project.get_file("src/users.ts").text

  assert "resolve(HttpClient)" in users
  assert "@autoinject" not in users
  assert "  unbinding() {}\n" in users

  again = make_project({sf.path: sf.text for sf in project.files()})
  second = MigrationPipeline().run(again, ChangeLog())

  counts = second.counts()
  assert (counts["edit"], counts["add"], counts["remove"]) == (0, 0, 0)
  assert again.get_file("src/users.ts").text == users


class _RewriteThenFailPass(MigrationPass):
  name = "explode"

  def transform_file(self, sf, context):
    context.changelog.edit(sf.path, f"touched {sf.name}")
    sf.replace_text("// rewritten\n")
    if "boom" in sf.path:
      raise RuntimeError("unexpected shape")


def test_failure_guard(make_project):
  """
  Scenario: A pass edits every file but raises on one of them.
  Expectation: That file is restored and its entry dropped; the other file keeps its change.
  """
  project = make_project({"src/boom.ts": "export const a = 1;\n", "src/ok.ts": "export const b = 2;\n"})
  log = MigrationPipeline([_RewriteThenFailPass()]).run(project, ChangeLog())

  assert project.get_file("src/boom.ts").text == "export const a = 1;\n"
  assert project.get_file("src/ok.ts").text == "// rewritten\n"
  assert [(e.kind, e.file) for e in log.entries] == [(ChangeKind.EDIT, "src/ok.ts")]
