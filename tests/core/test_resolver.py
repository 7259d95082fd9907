"""
Tests for Symbol Resolution and Type Classification.

Verifies:
1. Local-name sets cover plain, aliased and namespace imports.
2. Types classify as CLASS / INTERFACE / UNRESOLVED across relative imports,
   re-exports, generics and configured external classes.
"""

from au_rogue.core.project import SourceFile
from au_rogue.core.resolver import SymbolResolver, TypeIndex, TypeKind
from au_rogue.core.syntax import classes, descendants_of_type


def _param_type(sf, index=0):
  (cls,) = classes(sf)
  return cls.constructor_params()[index].type_node


def test_local_names_plain_alias_namespace():
  """
  Scenario: The export is reachable three ways.
  Expectation: All forms are collected; unrelated modules are ignored.
  """
  sf = SourceFile(
    "src/a.ts",
    "import { computedFrom, computedFrom as cf } from 'aurelia-binding';\n"
    "import * as fw from 'aurelia-framework';\n"
    "import { computedFrom as other } from 'somewhere-else';\n"
    "fw.computedFrom; fw.inject;\n",
  )
  names = SymbolResolver().local_names(sf, ["aurelia-binding", "aurelia-framework"], "computedFrom")

  assert names.named == {"computedFrom", "cf"}
  assert names.namespaces == {"fw"}

  members = descendants_of_type(sf.root, "member_expression")
  assert [names.matches(sf, m) for m in members] == [True, False]


def test_local_names_empty_is_falsy():
  """
  Scenario: No legacy import.
  Expectation: The set is falsy so passes can return early.
  """
  sf = SourceFile("src/a.ts", "export const a = 1;\n")
  assert not SymbolResolver().local_names(sf, ["aurelia-framework"], "autoinject")


def test_classify_same_file(make_project):
  """
  Scenario: Class and interface declared in the same file.
  Expectation: CLASS and INTERFACE; primitives and unions UNRESOLVED.
  """
  project = make_project(
    {
      "src/a.ts": (
        "export class Http {}\n"
        "interface ILogger {}\n"
        "export class A {\n"
        "  constructor(private h: Http, private l: ILogger, private n: string, private u: Http | null) {}\n"
        "}\n"
      )
    }
  )
  sf = project.get_file("src/a.ts")
  index = TypeIndex(project)
  (_, cls) = classes(sf)
  kinds = [index.classify(sf, p.type_node).kind for p in cls.constructor_params()]

  assert kinds == [TypeKind.CLASS, TypeKind.INTERFACE, TypeKind.UNRESOLVED, TypeKind.UNRESOLVED]


def test_classify_across_relative_imports(make_project):
  """
  Scenario: Types imported from sibling modules, one via an index re-export.
  Expectation: Declarations are found through the import chain.
  """
  project = make_project(
    {
      "src/services/http.ts": "export class HttpService {}\n",
      "src/services/logger.ts": "export interface ILogger { log(m: string): void; }\n",
      "src/services/index.ts": "export * from './http';\nexport { ILogger as Log } from './logger';\n",
      "src/app.ts": (
        "import { HttpService, Log } from './services';\n"
        "export class App { constructor(private http: HttpService, private log: Log) {} }\n"
      ),
    }
  )
  sf = project.get_file("src/app.ts")
  index = TypeIndex(project)
  (cls,) = classes(sf)
  http, log = cls.constructor_params()

  assert index.classify(sf, http.type_node).kind == TypeKind.CLASS
  info = index.classify(sf, log.type_node)
  assert info.kind == TypeKind.INTERFACE
  assert info.name == "Log"


def test_classify_generic_and_external(make_project):
  """
  Scenario: A generic class type and a package class listed as external.
  Expectation: Generic resolves by base name; the external name is a CLASS.
  """
  project = make_project(
    {
      "src/repo.ts": "export class Repo<T> {}\n",
      "src/app.ts": (
        "import { Repo } from './repo';\n"
        "import { HttpClient } from 'aurelia-fetch-client';\n"
        "import { Router } from 'aurelia-router';\n"
        "export class App { constructor(private r: Repo<User>, private h: HttpClient, private x: Router) {} }\n"
      ),
    }
  )
  sf = project.get_file("src/app.ts")
  index = TypeIndex(project, external_classes=["HttpClient"])
  repo, http, router = classes(sf)[0].constructor_params()

  info = index.classify(sf, repo.type_node)
  assert (info.kind, info.name) == (TypeKind.CLASS, "Repo")
  assert index.classify(sf, http.type_node).kind == TypeKind.CLASS
  assert index.classify(sf, router.type_node).kind == TypeKind.UNRESOLVED


def test_classify_namespace_qualified(make_project):
  """
  Scenario: A type referenced as `svc.Api` through a namespace import.
  Expectation: Classified via the target module; name keeps the qualifier.
  """
  project = make_project(
    {
      "src/api.ts": "export class Api {}\n",
      "src/app.ts": "import * as svc from './api';\nexport class App { constructor(private api: svc.Api) {} }\n",
    }
  )
  sf = project.get_file("src/app.ts")
  info = TypeIndex(project).classify(sf, _param_type(sf))
  assert (info.kind, info.name) == (TypeKind.CLASS, "svc.Api")
