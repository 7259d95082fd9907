"""
Migration Passes Package.

Rewriting passes, in the order the pipeline runs them, followed by the
project-level advisors that run once rewriting is complete.
"""

from au_rogue.core.passes.interface import MigrationPass, PassContext
from au_rogue.core.passes.binding_engine import BindingEngineRewritePass
from au_rogue.core.passes.di import DependencyInjectionPass
from au_rogue.core.passes.computed import ComputedPropertyPass
from au_rogue.core.passes.custom_element import CustomElementPass
from au_rogue.core.passes.binding_syntax import BindingSyntaxPass
from au_rogue.core.passes.platform import PlatformPass, PlatformUsageAdvisor
from au_rogue.core.passes.lifecycle import LifecycleAntiPatternAdvisor, LifecycleHookAdvisor, LifecyclePass
from au_rogue.core.passes.bootstrap import BootstrapAdvisor, CompatAdvisor
from au_rogue.core.passes.router import RouterAdvisor, RouterGuideAdvisor

__all__ = [
  "MigrationPass",
  "PassContext",
  "BindingEngineRewritePass",
  "DependencyInjectionPass",
  "ComputedPropertyPass",
  "CustomElementPass",
  "BindingSyntaxPass",
  "PlatformPass",
  "LifecyclePass",
  "BootstrapAdvisor",
  "RouterAdvisor",
  "PlatformUsageAdvisor",
  "LifecycleHookAdvisor",
  "LifecycleAntiPatternAdvisor",
  "CompatAdvisor",
  "RouterGuideAdvisor",
]
