"""Plugin and rule stubs with call-count probes."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

import pytest

from lintkernel.kernel import RuleContext, TxtNode

_LINE = re.compile(r"[^\r\n]+")


def parse_paragraphs(text: str) -> TxtNode:
    """Document > Paragraph > Str, one paragraph per non-empty line."""
    paragraphs = [
        TxtNode(
            type="Paragraph",
            range=(m.start(), m.end()),
            raw=m.group(),
            children=[TxtNode(type="Str", range=(m.start(), m.end()), raw=m.group(), value=m.group())],
        )
        for m in _LINE.finditer(text)
    ]
    return TxtNode(type="Document", range=(0, len(text)), raw=text, children=paragraphs)


class StubProcessor:
    def __init__(self, options: Any) -> None:
        self.options = options
        self.parse_calls = 0

    def parse(self, text: str) -> TxtNode:
        self.parse_calls += 1
        return parse_paragraphs(text)


class StubPlugin:
    """Plugin whose processor handles the declared extensions."""

    def __init__(self, extensions: tuple[str, ...] | str = (".md",)) -> None:
        self.extensions = extensions
        self.create_calls = 0
        self.received_options: list[Any] = []
        self.processors: list[StubProcessor] = []

    def create(self, options: Any) -> StubProcessor:
        self.create_calls += 1
        self.received_options.append(options)
        processor = StubProcessor(options)
        self.processors.append(processor)
        return processor

    def get_options(self) -> Any:
        return self.received_options[-1]


class ErrorRule:
    """Reports every entry of ``options["errors"]``.

    Entries look like ``{"message", "index", "range"?, "output"?}``; range and
    output become the fix.
    """

    def __init__(self) -> None:
        self.create_calls = 0

    def create(self, context: RuleContext) -> dict[str, Callable[[TxtNode], None]]:
        self.create_calls += 1
        errors = (context.options or {}).get("errors", [])

        def on_document(node: TxtNode) -> None:
            for error in errors:
                descriptor: dict[str, Any] = {"message": error["message"], "index": error["index"]}
                if "range" in error:
                    descriptor["fix"] = {"range": error["range"], "text": error["output"]}
                context.report(descriptor)

        return {"Document": on_document}


class FixPrefixRule:
    """Replaces the first five characters with "fixed" until the text starts with it."""

    def create(self, context: RuleContext) -> dict[str, Callable[[TxtNode], None]]:
        def on_document(node: TxtNode) -> None:
            if not context.text.startswith("fixed"):
                context.report(
                    {
                        "message": "must start with 'fixed'",
                        "index": 0,
                        "fix": context.fixer.replace_text_range((0, 5), "fixed"),
                    }
                )

        return {"Document": on_document}


@pytest.fixture
def plugin() -> StubPlugin:
    return StubPlugin()


@pytest.fixture
def make_plugin() -> type[StubPlugin]:
    return StubPlugin


@pytest.fixture
def error_rule() -> ErrorRule:
    return ErrorRule()


@pytest.fixture
def fix_prefix_rule() -> FixPrefixRule:
    return FixPrefixRule()


@pytest.fixture
def make_options(plugin: StubPlugin) -> Callable[..., dict[str, Any]]:
    """Build wire-shaped options around the stub plugin."""

    def _make(
        rules: list[dict[str, Any]] | None = None,
        *,
        ext: str = ".md",
        plugin_options: Any = None,
        **extra: Any,
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"pluginId": "markdown", "plugin": plugin}
        if plugin_options is not None:
            entry["options"] = plugin_options
        return {
            "filePath": "/path/to/file.md",
            "ext": ext,
            "plugins": [entry],
            "rules": rules or [],
            **extra,
        }

    return _make


@pytest.fixture
def parse_tree() -> Callable[[str], TxtNode]:
    return parse_paragraphs
