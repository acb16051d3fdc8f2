"""Kernel orchestrator - lint_text and fix_text entry points."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lintkernel.config.models import KernelConfig
from lintkernel.core.errors import ConfigurationError
from lintkernel.core.logging import bind_run, get_logger
from lintkernel.kernel.fixer import FixReconciler
from lintkernel.kernel.messages import FixResult, LintResult, Message
from lintkernel.kernel.options import KernelOptions, validate_options
from lintkernel.kernel.processor import ProcessorAdapter, select_processor
from lintkernel.kernel.runner import RuleRunner

log = get_logger("kernel")


class LintKernel:
    """Runs rules from plugins' processors over text, and fixes it.

    Every call builds its own processor, contexts and runner from the options
    it is given, so one kernel can serve concurrent calls. The kernel itself
    only holds its settings.

    Failures surface as typed errors and never come with a partial result:
    ConfigurationError (including NoMatchingProcessorError), ParseError and
    ProcessorError, RuleExecutionError.

    Routine events are logged at debug level. Call
    ``lintkernel.core.configure_logging`` once at startup to route them;
    without it structlog prints every event to stdout.
    """

    def __init__(self, config: KernelConfig | None = None) -> None:
        self._config = config or KernelConfig()

    @property
    def config(self) -> KernelConfig:
        return self._config

    async def lint_text(self, text: str, options: KernelOptions | Mapping[str, Any]) -> LintResult:
        """Lint text once and return its messages.

        Args:
            text: Source text; never modified.
            options: KernelOptions or an equivalent mapping.

        Returns:
            LintResult with messages ordered by index, then rule configuration order.
        """
        validated = _validate(text, options)
        with bind_run(operation="lint", file_path=validated.file_path):
            processor = select_processor(validated.ext, validated.plugins)
            runner = RuleRunner(validated.rules, validated.filter_rules)
            messages = await _run_pass(text, validated, processor, runner)
            log.debug("lint_complete", message_count=len(messages))
            return LintResult(file_path=validated.file_path, messages=messages)

    async def fix_text(self, text: str, options: KernelOptions | Mapping[str, Any]) -> FixResult:
        """Apply rule fixes until the text settles, then return it.

        Each round lints the current text, applies the non-overlapping fixes
        chosen by FixReconciler and starts over on the new text. The loop ends
        when a pass accepts no fix, when the fixes no longer change the text,
        or after ``max_fix_iterations`` applications; in the last case the
        messages of one final pass over the output are returned.

        Args:
            text: Source text; never modified.
            options: KernelOptions or an equivalent mapping.

        Returns:
            FixResult with the fixed output and the messages still unfixed.
        """
        validated = _validate(text, options)
        with bind_run(operation="fix", file_path=validated.file_path):
            processor = select_processor(validated.ext, validated.plugins)
            runner = RuleRunner(validated.rules, validated.filter_rules)
            reconciler = FixReconciler(validated.rule_order)

            current = text
            applied: list[Message] = []
            rounds = 0
            passes = 0
            while True:
                messages = await _run_pass(current, validated, processor, runner)
                passes += 1

                if rounds >= self._config.max_fix_iterations:
                    log.warning(
                        "fix_iteration_cap_reached",
                        max_fix_iterations=self._config.max_fix_iterations,
                        remaining=len(messages),
                    )
                    return _fix_result(validated, current, messages, applied, passes)

                reconciliation = reconciler.reconcile(messages)
                if not reconciliation.accepted:
                    return _fix_result(validated, current, reconciliation.remaining, applied, passes)

                output = processor.apply_fixes(current, reconciliation.fixes)
                if output == current:
                    log.debug("fix_text_stable", accepted=len(reconciliation.accepted))
                    return _fix_result(validated, current, messages, applied, passes)

                applied.extend(reconciliation.accepted)
                current = output
                rounds += 1
                log.debug(
                    "fix_pass_applied",
                    round=rounds,
                    applied=len(reconciliation.accepted),
                    deferred=len(reconciliation.remaining),
                )


def _validate(text: Any, options: KernelOptions | Mapping[str, Any]) -> KernelOptions:
    if not isinstance(text, str):
        raise ConfigurationError.invalid_value("text", type(text).__name__, "text must be str")
    return validate_options(options)


async def _run_pass(
    text: str,
    options: KernelOptions,
    processor: ProcessorAdapter,
    runner: RuleRunner,
) -> list[Message]:
    tree = processor.parse(text)
    messages = await runner.run(text=text, tree=tree, file_path=options.file_path)
    log.debug("lint_pass_complete", plugin_id=processor.plugin_id, message_count=len(messages))
    return messages


def _fix_result(
    options: KernelOptions,
    output: str,
    messages: list[Message],
    applied: list[Message],
    passes: int,
) -> FixResult:
    log.debug("fix_complete", applied=len(applied), remaining=len(messages), passes=passes)
    return FixResult(
        file_path=options.file_path,
        output=output,
        messages=messages,
        applied_messages=list(applied),
        iterations=passes,
    )
