"""Rule runner - execute every rule of a pass and collect ordered messages."""

from __future__ import annotations

import asyncio
import inspect
import re
from bisect import bisect_right
from collections.abc import Awaitable, Mapping, Sequence
from typing import Any

from lintkernel.core.errors import RuleExecutionError
from lintkernel.core.logging import get_logger
from lintkernel.kernel.context import (
    FilterRuleContext,
    IgnoreRange,
    Report,
    RuleContext,
)
from lintkernel.kernel.messages import Message
from lintkernel.kernel.options import FilterRuleEntry, RuleEntry
from lintkernel.kernel.tree import TxtNode, traverse

log = get_logger("kernel.runner")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class LineIndex:
    """Maps absolute offsets to 1-based (line, column) pairs."""

    def __init__(self, text: str) -> None:
        self._line_starts = [0] + [m.end() for m in _LINE_BREAK.finditer(text)]

    def position(self, index: int) -> tuple[int, int]:
        line = bisect_right(self._line_starts, index)
        return line, index - self._line_starts[line - 1] + 1


async def _visit(
    rule: Any,
    context: RuleContext | FilterRuleContext,
    events: Sequence[tuple[str, TxtNode]],
) -> None:
    handlers = rule.create(context)
    if inspect.isawaitable(handlers):
        handlers = await handlers
    if handlers is None:
        return
    if not isinstance(handlers, Mapping):
        raise TypeError(f"create() must return a mapping of handlers, got {type(handlers).__name__}")
    for key, handler in handlers.items():
        if not callable(handler):
            raise TypeError(f"handler for '{key}' is not callable")

    pending: list[Awaitable[Any]] = []
    try:
        for key, node in events:
            handler = handlers.get(key)
            if handler is None:
                continue
            outcome = handler(node)
            if inspect.isawaitable(outcome):
                pending.append(outcome)
    except BaseException:
        for awaitable in pending:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
        raise

    if pending:
        outcomes = await asyncio.gather(*pending, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome


class RuleRunner:
    """Runs the configured rules over one parsed tree.

    Each rule runs as its own task; the runner waits for all of them before
    looking at any result. Message order is rebuilt from (index, configuration
    order, report order) so it never depends on which task finished first.
    """

    def __init__(
        self,
        rules: Sequence[RuleEntry],
        filter_rules: Sequence[FilterRuleEntry] = (),
    ) -> None:
        self._rules = list(rules)
        self._filter_rules = list(filter_rules)

    async def run(self, *, text: str, tree: TxtNode, file_path: str | None = None) -> list[Message]:
        """Execute one pass.

        Raises:
            RuleExecutionError: A rule or filter rule raised. When several
                fail, the earliest configured one is reported.
        """
        events = list(traverse(tree))

        rule_contexts = [
            RuleContext(e.rule_id, text=text, tree=tree, options=e.options, file_path=file_path)
            for e in self._rules
        ]
        filter_contexts = [
            FilterRuleContext(e.rule_id, text=text, tree=tree, options=e.options, file_path=file_path)
            for e in self._filter_rules
        ]

        entries: list[RuleEntry | FilterRuleEntry] = [*self._rules, *self._filter_rules]
        contexts: list[RuleContext | FilterRuleContext] = [*rule_contexts, *filter_contexts]
        outcomes = await asyncio.gather(
            *(_visit(entry.rule, context, events) for entry, context in zip(entries, contexts)),
            return_exceptions=True,
        )

        for entry, outcome in zip(entries, outcomes):
            if not isinstance(outcome, BaseException):
                continue
            if not isinstance(outcome, Exception):
                raise outcome
            log.error(
                "rule_execution_failed",
                rule_id=entry.rule_id,
                error=f"{type(outcome).__name__}: {outcome}",
            )
            raise RuleExecutionError.from_rule(
                entry.rule_id, f"{type(outcome).__name__}: {outcome}"
            ) from outcome

        ignored = [r for context in filter_contexts for r in context.ignored]
        messages = self._collect(text, rule_contexts, ignored)
        log.debug(
            "rules_executed",
            rule_count=len(self._rules),
            filter_rule_count=len(self._filter_rules),
            message_count=len(messages),
        )
        return messages

    def _collect(
        self,
        text: str,
        contexts: Sequence[RuleContext],
        ignored: Sequence[IgnoreRange],
    ) -> list[Message]:
        line_index = LineIndex(text)
        keyed: list[tuple[tuple[int, int, int], Message]] = []
        for order, context in enumerate(contexts):
            for report in context.reports:
                if any(r.covers(report.index, context.rule_id) for r in ignored):
                    continue
                message = _to_message(context.rule_id, report, line_index)
                keyed.append(((report.index, order, report.sequence), message))
        keyed.sort(key=lambda item: item[0])
        return [message for _, message in keyed]


def _to_message(rule_id: str, report: Report, line_index: LineIndex) -> Message:
    line, column = line_index.position(report.index)
    return Message(
        rule_id=rule_id,
        message=report.message,
        index=report.index,
        line=line,
        column=column,
        severity=report.severity,
        fix=report.fix,
        data=report.data,
    )
