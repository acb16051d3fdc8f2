"""Tests for the rule runner."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from lintkernel.core.errors import RuleExecutionError
from lintkernel.kernel.context import FilterRuleContext, RuleContext
from lintkernel.kernel.options import FilterRuleEntry, RuleEntry
from lintkernel.kernel.runner import LineIndex, RuleRunner
from lintkernel.kernel.tree import TxtNode

Parse = Callable[[str], TxtNode]


class WordRule:
    """Reports every occurrence of a word, from async Str handlers."""

    def __init__(self, word: str, delay: float = 0.0) -> None:
        self.word = word
        self.delay = delay

    def create(self, context: RuleContext) -> dict[str, Any]:
        async def on_str(node: TxtNode) -> None:
            await asyncio.sleep(self.delay)
            start = (node.value or "").find(self.word)
            if start >= 0:
                context.report({"message": f"found {self.word}", "index": start}, node=node)

        return {"Str": on_str}


class AsyncCreateRule:
    def __init__(self) -> None:
        self.visited: list[str] = []

    async def create(self, context: RuleContext) -> dict[str, Any]:
        await asyncio.sleep(0)

        return {
            "Paragraph": lambda node: self.visited.append(f"enter {node.raw}"),
            "Paragraph:exit": lambda node: self.visited.append(f"exit {node.raw}"),
        }


class IgnoreFirstLine:
    def create(self, context: FilterRuleContext) -> dict[str, Any]:
        def on_document(node: TxtNode) -> None:
            first = node.children[0]
            context.should_ignore(first.range, rule_id=context.options)

        return {"Document": on_document}


class Failing:
    def __init__(self, delay: float) -> None:
        self.delay = delay

    def create(self, context: RuleContext) -> dict[str, Any]:
        async def on_document(node: TxtNode) -> None:
            await asyncio.sleep(self.delay)
            raise ValueError(f"failed after {self.delay}")

        return {"Document": on_document}


def _entry(rule_id: str, rule: Any, options: Any = None) -> RuleEntry:
    return RuleEntry(rule_id=rule_id, rule=rule, options=options)


async def _run(runner: RuleRunner, text: str, parse: Parse) -> list[Any]:
    return await runner.run(text=text, tree=parse(text), file_path="f.md")


class TestLineIndex:
    @pytest.mark.parametrize(
        ("text", "index", "expected"),
        [
            ("abc", 0, (1, 1)),
            ("abc", 3, (1, 4)),
            ("ab\ncd", 3, (2, 1)),
            ("ab\r\ncd", 4, (2, 1)),
            ("ab\rcd\nef", 6, (3, 1)),
            ("", 0, (1, 1)),
        ],
    )
    def test_position(self, text: str, index: int, expected: tuple[int, int]) -> None:
        assert LineIndex(text).position(index) == expected


class TestRuleRunner:
    @pytest.mark.asyncio
    async def test_orders_by_index_then_configuration(self, parse_tree: Parse) -> None:
        runner = RuleRunner(
            [
                _entry("slow-foo", WordRule("foo", delay=0.02)),
                _entry("bar", WordRule("bar")),
                _entry("fast-foo", WordRule("foo")),
            ]
        )

        messages = await _run(runner, "bar foo\nfoo bar", parse_tree)

        assert [(m.rule_id, m.index, m.line, m.column) for m in messages] == [
            ("bar", 0, 1, 1),
            ("slow-foo", 4, 1, 5),
            ("fast-foo", 4, 1, 5),
            ("slow-foo", 8, 2, 1),
            ("fast-foo", 8, 2, 1),
            ("bar", 12, 2, 5),
        ]

    @pytest.mark.asyncio
    async def test_stamps_rule_id_and_type(self, parse_tree: Parse) -> None:
        messages = await _run(RuleRunner([_entry("w", WordRule("x"))]), "x", parse_tree)

        assert messages[0].rule_id == "w"
        assert messages[0].type == "lint message"

    @pytest.mark.asyncio
    async def test_async_create_and_exit_handlers(self, parse_tree: Parse) -> None:
        rule = AsyncCreateRule()

        await _run(RuleRunner([_entry("a", rule)]), "one\ntwo", parse_tree)

        assert rule.visited == ["enter one", "exit one", "enter two", "exit two"]

    @pytest.mark.asyncio
    async def test_create_returning_non_mapping_fails(self, parse_tree: Parse) -> None:
        class BadCreate:
            def create(self, context: RuleContext) -> list[str]:
                return ["Str"]

        with pytest.raises(RuleExecutionError) as exc_info:
            await _run(RuleRunner([_entry("bad", BadCreate())]), "x", parse_tree)

        assert exc_info.value.rule_id == "bad"
        assert isinstance(exc_info.value.cause, TypeError)

    @pytest.mark.asyncio
    async def test_earliest_configured_failure_reported(self, parse_tree: Parse) -> None:
        runner = RuleRunner(
            [
                _entry("ok", WordRule("x")),
                _entry("second", Failing(delay=0.02)),
                _entry("third", Failing(delay=0.0)),
            ]
        )

        with pytest.raises(RuleExecutionError) as exc_info:
            await _run(runner, "x", parse_tree)

        assert exc_info.value.rule_id == "second"

    @pytest.mark.asyncio
    async def test_rule_sees_only_its_own_reports(self, parse_tree: Parse) -> None:
        seen: dict[str, int] = {}

        class Counting:
            def __init__(self, name: str) -> None:
                self.name = name

            def create(self, context: RuleContext) -> dict[str, Any]:
                def on_document(node: TxtNode) -> None:
                    context.report({"message": self.name})

                def on_exit(node: TxtNode) -> None:
                    seen[self.name] = len(context.reports)

                return {"Document": on_document, "Document:exit": on_exit}

        runner = RuleRunner([_entry("a", Counting("a")), _entry("b", Counting("b"))])

        messages = await _run(runner, "x", parse_tree)

        assert seen == {"a": 1, "b": 1}
        assert len(messages) == 2

    @pytest.mark.asyncio
    async def test_filter_rule_drops_messages(self, parse_tree: Parse) -> None:
        runner = RuleRunner(
            [_entry("foo", WordRule("foo")), _entry("bar", WordRule("bar"))],
            [FilterRuleEntry(rule_id="ignore-first", rule=IgnoreFirstLine(), options="foo")],
        )

        messages = await _run(runner, "foo bar\nfoo bar", parse_tree)

        assert [(m.rule_id, m.line) for m in messages] == [("bar", 1), ("foo", 2), ("bar", 2)]

    @pytest.mark.asyncio
    async def test_filter_rule_failure_raises(self, parse_tree: Parse) -> None:
        class BrokenFilter:
            def create(self, context: FilterRuleContext) -> None:
                raise RuntimeError("filter broke")

        runner = RuleRunner([], [FilterRuleEntry(rule_id="broken", rule=BrokenFilter())])

        with pytest.raises(RuleExecutionError, match="broken"):
            await _run(runner, "x", parse_tree)
