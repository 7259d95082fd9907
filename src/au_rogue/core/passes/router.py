"""
Router Advisor.

The Aurelia 1 router (``configureRouter(config, router)`` with
``config.map([...])``) and the Aurelia 2 router share little API surface, so
nothing is rewritten here. For every class the advisor reports:

- ``configureRouter`` itself, with the routes it could read from
  ``config.map([...])`` rendered as Aurelia 2 static routes and ``@route``
  decorators.
- Router lifecycle hooks taking a ``NavigationInstruction`` or reading
  ``instruction.config``/``instruction.params``.
- Navigation, URL generation and router event usage anywhere in the class.

``RouterGuideAdvisor`` adds a five-point guide to the report once if any router
usage exists in the project.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.project import SourceFile
from au_rogue.core.syntax import ClassView, classes, method_body_text

ROUTER_HOOKS = ("canActivate", "activate", "canDeactivate", "deactivate")

ROUTER_MARKERS = ("configureRouter", "NavigationInstruction", "canActivate", "router.navigate")

GUIDE_LABEL = "ROUTER_MIGRATION"

GUIDE = (
  "Router Migration Guide:",
  "1. Replace configureRouter() with static routes in main.ts or @route decorators on components",
  "2. Update router lifecycle methods - parameters and context have changed",
  "3. Install new router: npm install @aurelia/router",
  "4. Consider @aurelia/router-lite for simpler applications",
  "5. Review Aurelia 2 router documentation for viewport and navigation changes",
)

_MAP_RE = re.compile(r"config\.map\(\s*\[([\s\S]*?)\]\s*\)")
_OBJECT_RE = re.compile(r"\{[^{}]*\}")
_PARAM_ROUTE_RE = re.compile(r"""route:\s*['"`][^'"`]*:[^'"`]*['"`]""")
_WILDCARD_ROUTE_RE = re.compile(r"""route:\s*['"`][^'"`]*\*[^'"`]*['"`]""")


def _string_prop(text: str, key: str) -> Optional[str]:
  match = re.search(rf"""\b{key}:\s*['"`]([^'"`]*)['"`]""", text)
  return match.group(1) if match else None


@dataclass
class RouteConfig:
  """
  One entry of a legacy ``config.map([...])`` call.
  """

  route: str
  module_id: str
  name: Optional[str] = None
  title: Optional[str] = None
  nav: bool = False

  @property
  def component(self) -> str:
    component = re.sub(r"^\./", "", self.module_id)
    return re.sub(r"\.(ts|js)$", "", component)


def extract_routes(body: str) -> List[RouteConfig]:
  """
  Reads route objects from ``config.map([...])``.

  Entries without both ``route`` and ``moduleId`` string values are skipped.

  Args:
      body: Text of the ``configureRouter`` method body.

  Returns:
      List[RouteConfig]: Routes in declaration order.
  """
  match = _MAP_RE.search(body)
  if not match:
    return []
  routes = []
  for obj in _OBJECT_RE.findall(match.group(1)):
    route = _string_prop(obj, "route")
    module_id = _string_prop(obj, "moduleId")
    if route is None or module_id is None:
      continue
    nav = "nav: true" in obj or re.search(r"nav:\s*\d+", obj) is not None
    routes.append(RouteConfig(route, module_id, _string_prop(obj, "name"), _string_prop(obj, "title"), nav))
  return routes


def static_routes(routes: List[RouteConfig]) -> str:
  """Renders routes as an Aurelia 2 static route array."""
  entries = []
  for route in routes:
    lines = [
      f"    path: '{route.route or '/'}'",
      f"    component: () => import('./{route.component}')",
      f"    title: '{route.title or route.name or route.component}'",
    ]
    if route.name:
      lines.append(f"    name: '{route.name}'")
    entries.append("  {\n" + ",\n".join(lines) + "\n  }")
  return "[\n" + ",\n".join(entries) + "\n]"


def route_decorators(routes: List[RouteConfig]) -> str:
  """Renders one ``@route(...)`` decorator per route."""
  result = []
  for route in routes:
    options = []
    if route.title:
      options.append(f"title: '{route.title}'")
    if route.name:
      options.append(f"name: '{route.name}'")
    args = f"{{ {', '.join(options)} }}" if options else f"'{route.route}'"
    result.append(f"@route({args})")
  return "\n".join(result)


class RouterAdvisor(MigrationPass):
  """
  Reports router configuration and usage per class.
  """

  name = "router"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    for cls in classes(sf):
      configure = cls.method("configureRouter")
      if configure is not None:
        self._configure_router(sf, cls, method_body_text(sf, configure), context)
      self._router_hooks(sf, cls, context)
      self._class_usage(sf, cls, context)

  def _configure_router(self, sf: SourceFile, cls: ClassView, body: str, context: PassContext) -> None:
    log = context.changelog
    name = cls.name
    log.warn(sf.path, f"configureRouter() method in {name} needs manual migration to Aurelia 2.")
    log.note(
      sf.path,
      "Migration options: 1) Use static routes in main.ts, 2) Use @route decorators on components, "
      "3) Use router-lite for simpler apps.",
    )

    if "childRoutes" in body:
      log.warn(
        sf.path,
        f"{name} uses child routes. Aurelia 2 handles nested routing differently - review nested routing documentation.",
      )
    if _PARAM_ROUTE_RE.search(body):
      log.note(
        sf.path,
        f"{name} uses route parameters. Aurelia 2 supports parameters but syntax may differ: use {{id}} instead of :id",
      )
    if _WILDCARD_ROUTE_RE.search(body):
      log.note(
        sf.path,
        f"{name} uses wildcard routes. Review Aurelia 2 wildcard syntax: use {{...rest}} for catch-all routes",
      )
    if "router.generate" in body or "generateUrl" in body:
      log.warn(
        sf.path, f"{name} generates route URLs programmatically. Aurelia 2 router has different URL generation APIs."
      )

    routes = extract_routes(body)
    if routes:
      log.note(sf.path, f"Suggested Aurelia 2 static routes for {name}:\n{static_routes(routes)}")
      log.note(sf.path, f"Alternatively decorate the routed components of {name}:\n{route_decorators(routes)}")

    if "router.title" in body or "config.title" in body:
      log.note(
        sf.path,
        f"Router title configuration found in {name}. "
        "In Aurelia 2, set titles using @route({ title: 'Page Title' }) or page metadata.",
      )

  def _router_hooks(self, sf: SourceFile, cls: ClassView, context: PassContext) -> None:
    log = context.changelog
    for hook in ROUTER_HOOKS:
      method = cls.method(hook)
      if method is None:
        continue
      params = method.child_by_field_name("parameters")
      if params is not None and "NavigationInstruction" in sf.text_of(params):
        log.warn(
          sf.path,
          f"{hook}() in {cls.name} uses NavigationInstruction. Aurelia 2 router has different parameter types.",
          line=sf.line_of(method),
        )
      text = sf.text_of(method)
      if "instruction.config" in text or "Instruction.config" in text:
        log.warn(
          sf.path,
          f"{hook}() in {cls.name} accesses instruction.config. Route configuration access has changed in Aurelia 2.",
        )
      if re.search(r"[iI]nstruction\.(params|queryParams)", text):
        log.note(
          sf.path,
          f"{hook}() in {cls.name} accesses route parameters. Aurelia 2 injects parameters differently - "
          "use @newInstanceForScope or resolve IRouteContext.",
        )

  def _class_usage(self, sf: SourceFile, cls: ClassView, context: PassContext) -> None:
    log = context.changelog
    text = sf.text_of(cls.node)
    name = cls.name
    if "NavigationInstruction" in text:
      log.warn(
        sf.path, f"{name} imports or uses NavigationInstruction. This interface has changed significantly in Aurelia 2."
      )
    if "router.navigate" in text:
      log.note(
        sf.path,
        f"{name} calls router navigation methods. Aurelia 2 router navigation APIs are similar but may have different options.",
      )
    if "router.generate" in text or "generateUrl" in text:
      log.warn(
        sf.path, f"{name} generates route URLs programmatically. Aurelia 2 router has different URL generation APIs."
      )
    if "router:navigation:" in text or "RouterEvent" in text:
      log.warn(sf.path, f"{name} uses router events. Aurelia 2 has a different event system for router navigation.")


class RouterGuideAdvisor(MigrationPass):
  """
  Adds the router migration guide once per project.
  """

  name = "router-guide"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    text = sf.text
    if any(marker in text for marker in ROUTER_MARKERS):
      context.findings["router_usage"] = True

  def finish(self, context: PassContext) -> None:
    if not context.findings.get("router_usage"):
      return
    for line in GUIDE:
      context.changelog.note(GUIDE_LABEL, line)
