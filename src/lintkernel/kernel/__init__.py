"""Kernel module - processors, rules, messages and the lint/fix pipeline."""

from lintkernel.kernel.context import (
    FilterRule,
    FilterRuleContext,
    Rule,
    RuleContext,
    RuleError,
    RuleFixer,
)
from lintkernel.kernel.fixer import FixReconciler, splice_fixes
from lintkernel.kernel.kernel import LintKernel
from lintkernel.kernel.messages import Fix, FixResult, LintResult, Message, Severity
from lintkernel.kernel.options import FilterRuleEntry, KernelOptions, PluginEntry, RuleEntry
from lintkernel.kernel.processor import Plugin, Processor, ProcessorAdapter, select_processor
from lintkernel.kernel.runner import RuleRunner
from lintkernel.kernel.tree import TxtNode, traverse

__all__ = [
    "FilterRule",
    "FilterRuleContext",
    "FilterRuleEntry",
    "Fix",
    "FixReconciler",
    "FixResult",
    "KernelOptions",
    "LintKernel",
    "LintResult",
    "Message",
    "Plugin",
    "PluginEntry",
    "Processor",
    "ProcessorAdapter",
    "Rule",
    "RuleContext",
    "RuleEntry",
    "RuleError",
    "RuleFixer",
    "RuleRunner",
    "Severity",
    "TxtNode",
    "select_processor",
    "splice_fixes",
    "traverse",
]
