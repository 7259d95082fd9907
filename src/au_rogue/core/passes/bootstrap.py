"""
Bootstrap Advisor.

Aurelia 1 applications start from ``export function configure(aurelia)`` and a
fluent ``aurelia.use.standardConfiguration().plugin(...).feature(...)`` chain.
Aurelia 2 registers everything on ``Aurelia.register(...).app(Root).start()``.
There is no 1:1 mapping between the two, so this pass only reads the legacy
chain (with regular expressions over the raw text) and reports a worked
example of the equivalent Aurelia 2 entry point.

``CompatAdvisor`` suggests ``@aurelia/compat-v1`` when legacy view decorators
survive the rewriting passes.
"""

import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, List, Optional

from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.project import SourceFile

ENTRY_NAMES = ("main.ts", "main.js", "index.ts", "index.js")
ENTRY_MARKERS = ("aurelia", "configure", "start")
MODERN_MARKERS = ("Aurelia.register", "@aurelia/kernel", "new Aurelia(")
LEGACY_MARKERS = ("aurelia.configure", "aurelia.use")
WEBPACK_MARKERS = ("webpack_require", "require.ensure")

# Aurelia 1 plugin -> (Aurelia 2 registration, module)
PLUGIN_MAP: Dict[str, tuple] = {
  "aurelia-validation": ("ValidationConfiguration", "@aurelia/validation"),
  "aurelia-i18n": ("I18nConfiguration", "@aurelia/i18n"),
  "aurelia-dialog": ("DialogConfiguration", "@aurelia/dialog"),
  "aurelia-fetch-client": ("HttpClientConfiguration", "@aurelia/fetch-client"),
  "aurelia-router": ("RouterConfiguration", "@aurelia/router"),
}

COMPAT_MARKERS = ("@noView", "@inlineView", "@viewResources", "@processContent")

_PLUGIN_RE = re.compile(r"""\.plugin\(\s*['"`](.*?)['"`]""")
_FEATURE_RE = re.compile(r"""\.feature\(\s*['"`](.*?)['"`]""")
_RESOURCES_RE = re.compile(r"""\.globalResources\(([\s\S]*?)\)""")
_STRING_RE = re.compile(r"""['"`]([^'"`]+)['"`]""")
_ROOT_AFTER_START_RE = re.compile(r"""\.start\(\)\s*\.then\(\s*\(?\w*\)?\s*=>\s*\w+\.setRoot\(\s*['"`](.*?)['"`]""")
_ROOT_RE = re.compile(r"""setRoot\(\s*['"`](.*?)['"`]""")


@dataclass
class BootstrapAnalysis:
  """
  What could be read from a legacy ``configure`` function.

  Attributes:
      plugins (List[str]): Plugin module names, in order of appearance.
      features (List[str]): Feature module paths.
      global_resources (List[str]): Resource module paths.
      root (Optional[str]): Module passed to ``setRoot``.
  """

  plugins: List[str] = field(default_factory=list)
  features: List[str] = field(default_factory=list)
  global_resources: List[str] = field(default_factory=list)
  root: Optional[str] = None


def analyze_bootstrap(content: str) -> BootstrapAnalysis:
  """
  Extracts the configuration chain of a legacy entry file.

  Args:
      content: Raw file text.

  Returns:
      BootstrapAnalysis: Best-effort model of the chain.
  """
  analysis = BootstrapAnalysis()
  analysis.plugins = _PLUGIN_RE.findall(content)
  analysis.features = _FEATURE_RE.findall(content)
  for match in _RESOURCES_RE.finditer(content):
    analysis.global_resources.extend(_STRING_RE.findall(match.group(1)))

  root = _ROOT_AFTER_START_RE.search(content) or _ROOT_RE.search(content)
  if root:
    analysis.root = root.group(1)
  return analysis


def component_name(module: str) -> str:
  """
  Class name conventionally exported by a module.

  Args:
      module: Module path (e.g. './shell/app-root').

  Returns:
      str: PascalCase name (e.g. 'AppRoot').
  """
  stem = PurePath(module).name
  for suffix in (".ts", ".js"):
    if stem.endswith(suffix):
      stem = stem[: -len(suffix)]
  parts = [p for p in re.split(r"[^A-Za-z0-9]+", stem) if p]
  return "".join(p[:1].upper() + p[1:] for p in parts) or "App"


def bootstrap_example(analysis: BootstrapAnalysis) -> str:
  """
  Renders the Aurelia 2 entry point equivalent to a legacy chain.

  Args:
      analysis: The extracted chain.

  Returns:
      str: TypeScript source for ``main.ts``.
  """
  root = analysis.root or "app"
  root_class = component_name(root)
  root_path = root if root.startswith(".") else f"./{root}"

  imports = ["import Aurelia from 'aurelia';", f"import {{ {root_class} }} from '{root_path}';"]
  registrations = []
  for plugin in analysis.plugins:
    if plugin in PLUGIN_MAP:
      registration, module = PLUGIN_MAP[plugin]
      imports.append(f"import {{ {registration} }} from '{module}';")
      registrations.append(f"    {registration},")
  for resource in analysis.global_resources:
    registrations.append(f"    // Register global resource '{resource}'")
  for feature in analysis.features:
    registrations.append(f"    // Migrate feature '{feature}' manually")

  lines = imports + ["", "Aurelia", "  .register("] + registrations + ["  )", f"  .app({root_class})", "  .start();"]
  return "\n".join(lines) + "\n"


def is_entry_file(sf: SourceFile) -> bool:
  """True for ``main``/``index`` files that mention Aurelia bootstrapping."""
  if sf.name not in ENTRY_NAMES:
    return False
  text = sf.text
  return any(marker in text for marker in ENTRY_MARKERS)


class BootstrapAdvisor(MigrationPass):
  """
  Reports how to migrate legacy entry points.
  """

  name = "bootstrap"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    if not is_entry_file(sf):
      return
    content = sf.text
    if any(marker in content for marker in MODERN_MARKERS):
      return

    log = context.changelog
    if any(marker in content for marker in WEBPACK_MARKERS):
      log.warn(
        sf.path,
        "Webpack-specific bootstrap patterns detected. Aurelia 2 works with modern bundlers without special "
        "configuration. Review bundler setup.",
      )

    if not any(marker in content for marker in LEGACY_MARKERS):
      return
    context.findings["legacy_bootstrap"] = True

    analysis = analyze_bootstrap(content)
    log.warn(sf.path, f"Aurelia 1 bootstrap detected in {sf.name}. This needs manual migration to Aurelia 2.")
    log.note(sf.path, f"Example Aurelia 2 bootstrap code:\n{bootstrap_example(analysis)}")

    for plugin in analysis.plugins:
      if plugin in PLUGIN_MAP:
        log.note(sf.path, f"Plugin '{plugin}' has an Aurelia 2 equivalent available ({PLUGIN_MAP[plugin][1]}).")
      else:
        log.warn(
          sf.path, f"Plugin '{plugin}' needs manual migration to Aurelia 2. Check if an Aurelia 2 version is available."
        )

    if analysis.features:
      log.warn(
        sf.path,
        f"Features detected: {', '.join(analysis.features)}. "
        "These need manual migration - features work differently in Aurelia 2.",
      )
    if analysis.global_resources:
      log.note(
        sf.path,
        f"Global resources detected: {', '.join(analysis.global_resources)}. "
        "Import them and pass them to Aurelia.register(...).",
      )

  def finish(self, context: PassContext) -> None:
    if not context.findings.get("legacy_bootstrap"):
      return
    context.changelog.note(
      "HTML_FILES",
      "Remember to remove aurelia-app attributes from HTML files. Aurelia 2 uses explicit bootstrap in main.ts instead.",
    )
    context.changelog.note(
      "HTML_FILES", "Update script tags to load the new main.js bundle. Remove aurelia-bootstrapper references."
    )


class CompatAdvisor(MigrationPass):
  """
  Suggests ``@aurelia/compat-v1`` for decorators the passes could not migrate.
  """

  name = "compat"

  def transform_file(self, sf: SourceFile, context: PassContext) -> None:
    text = sf.text
    if any(marker in text for marker in COMPAT_MARKERS):
      context.findings["needs_compat"] = True

  def finish(self, context: PassContext) -> None:
    if not context.findings.get("needs_compat"):
      return
    context.changelog.note(
      "COMPATIBILITY",
      "Consider installing @aurelia/compat-v1 for easier migration. Run: npm install @aurelia/compat-v1",
    )
    context.changelog.note(
      "COMPATIBILITY",
      "With compat package, add compatRegistration to your bootstrap: Aurelia.register(compatRegistration, ...)",
    )
