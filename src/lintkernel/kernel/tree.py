"""Structural tree produced by processors and observed by rules."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from lintkernel.config.constants import EXIT_SUFFIX


@dataclass
class TxtNode:
    """One node of a parsed document.

    ``range`` is the half-open [start, end) character span of the node in
    the parsed text. ``value`` holds the literal text of leaf nodes and is
    None for parents.
    """

    type: str
    range: tuple[int, int]
    raw: str = ""
    value: str | None = None
    children: list[TxtNode] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)  # Processor-specific extras

    @property
    def start(self) -> int:
        return self.range[0]

    @property
    def end(self) -> int:
        return self.range[1]


def traverse(root: TxtNode) -> Iterator[tuple[str, TxtNode]]:
    """Yield (event key, node) pairs in document order.

    Each node yields its type on enter and ``<type>:exit`` after all of its
    children. Iterative so deeply nested trees do not hit the recursion limit.
    """
    stack: list[tuple[TxtNode, bool]] = [(root, False)]
    while stack:
        node, leaving = stack.pop()
        if leaving:
            yield node.type + EXIT_SUFFIX, node
            continue
        yield node.type, node
        stack.append((node, True))
        for child in reversed(node.children):
            stack.append((child, False))
