"""
Orchestration logic for executing sequential migration passes.

This module provides the ``MigrationPipeline``, which runs each pass across the
whole project before the next one starts. Later passes rely on earlier ones
having already added or removed imports and decorators, so the default order
is fixed.
"""

import logging
from typing import List, Optional

from au_rogue.config import RuntimeConfig
from au_rogue.core.changelog import ChangeLog
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
from au_rogue.core.project import Project

logger = logging.getLogger(__name__)


def default_passes() -> List[MigrationPass]:
  """
  The standard pass sequence: the nine migration passes, then the advisors.

  Returns:
      List[MigrationPass]: Fresh pass instances.
  """
  return [
    BindingEngineRewritePass(),
    DependencyInjectionPass(),
    ComputedPropertyPass(),
    CustomElementPass(),
    BindingSyntaxPass(),
    PlatformPass(),
    LifecyclePass(),
    BootstrapAdvisor(),
    RouterAdvisor(),
    PlatformUsageAdvisor(),
    LifecycleHookAdvisor(),
    LifecycleAntiPatternAdvisor(),
    CompatAdvisor(),
    RouterGuideAdvisor(),
  ]


class MigrationPipeline:
  """
  Manages a sequence of migration passes and executes them in order.
  """

  def __init__(self, passes: Optional[List[MigrationPass]] = None) -> None:
    """
    Initializes the pipeline with a list of passes.

    Args:
        passes: Sequenced list of passes to execute. Defaults to ``default_passes()``.
    """
    self.passes = passes if passes is not None else default_passes()

  def run(self, project: Project, changelog: ChangeLog, config: Optional[RuntimeConfig] = None) -> ChangeLog:
    """
    Executes all registered passes sequentially over the project.

    Args:
        project: The tree-backed project; files are edited in memory.
        changelog: The run-wide log every pass appends to.
        config: Runtime settings.

    Returns:
        ChangeLog: The same log, for chaining.
    """
    for pass_instance in self.passes:
      before = len(changelog.entries)
      pass_instance.run(project, changelog, config)
      logger.debug(f"Pass '{pass_instance.name}' recorded {len(changelog.entries) - before} entries.")
    return changelog
