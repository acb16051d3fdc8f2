"""Rule context - what a rule sees of the pass and how it reports.

A rule gets read-only access to the parsed tree and the source text, its
own options, a ``report`` sink and a ``fixer`` for building patches. Reports
are write-only: nothing a rule reports is visible to other rules.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from lintkernel.kernel.messages import Fix, Severity
from lintkernel.kernel.tree import TxtNode

Handler = Callable[[TxtNode], "Awaitable[None] | None"]
Handlers = Mapping[str, Handler]

_DESCRIPTOR_KEYS = frozenset({"message", "index", "severity", "fix", "data"})


@dataclass(frozen=True)
class RuleError:
    """A report descriptor.

    ``index`` is absolute in the pass text, or relative to the node start
    when reported with ``node=``. Fix ranges are always absolute.
    """

    message: str
    index: int = 0
    severity: Severity | str | None = None
    fix: Fix | dict[str, Any] | None = None
    data: Any = None


@dataclass(frozen=True)
class Report:
    """A validated report, before the runner stamps rule metadata on it."""

    message: str
    index: int
    severity: Severity
    fix: Fix | None
    data: Any
    sequence: int  # Report order within the rule


class RuleFixer:
    """Builds Fix patches against the pass text."""

    def replace_text_range(self, range: tuple[int, int], text: str) -> Fix:
        return Fix(range=range, text=text)

    def insert_text_at(self, index: int, text: str) -> Fix:
        return Fix(range=(index, index), text=text)

    def remove_range(self, range: tuple[int, int]) -> Fix:
        return Fix(range=range, text="")

    def replace_text(self, node: TxtNode, text: str) -> Fix:
        return Fix(range=node.range, text=text)

    def insert_text_before(self, node: TxtNode, text: str) -> Fix:
        return self.insert_text_at(node.start, text)

    def insert_text_after(self, node: TxtNode, text: str) -> Fix:
        return self.insert_text_at(node.end, text)

    def remove(self, node: TxtNode) -> Fix:
        return self.remove_range(node.range)


class _PassView:
    """Read-only view of the pass shared by rule and filter-rule contexts."""

    def __init__(
        self,
        rule_id: str,
        *,
        text: str,
        tree: TxtNode,
        options: Any,
        file_path: str | None,
    ) -> None:
        self._rule_id = rule_id
        self._text = text
        self._tree = tree
        self._options = options
        self._file_path = file_path

    @property
    def rule_id(self) -> str:
        return self._rule_id

    @property
    def text(self) -> str:
        return self._text

    @property
    def tree(self) -> TxtNode:
        return self._tree

    @property
    def options(self) -> Any:
        return self._options

    @property
    def file_path(self) -> str | None:
        return self._file_path

    def get_source(self, node: TxtNode | None = None, before: int = 0, after: int = 0) -> str:
        """Source text of ``node`` (or the whole text), widened by before/after."""
        if node is None:
            return self._text
        start = max(node.start - before, 0)
        end = min(node.end + after, len(self._text))
        return self._text[start:end]


class RuleContext(_PassView):
    """Per-pass capability object handed to a rule's ``create``."""

    def __init__(
        self,
        rule_id: str,
        *,
        text: str,
        tree: TxtNode,
        options: Any = None,
        file_path: str | None = None,
    ) -> None:
        super().__init__(rule_id, text=text, tree=tree, options=options, file_path=file_path)
        self.fixer = RuleFixer()
        self._reports: list[Report] = []

    @property
    def reports(self) -> list[Report]:
        return list(self._reports)

    def report(self, descriptor: RuleError | Mapping[str, Any], *, node: TxtNode | None = None) -> None:
        """Record a diagnostic.

        Raises:
            ValueError: The descriptor is malformed or its index is out of bounds.
            TypeError: A descriptor field has the wrong type.
        """
        if isinstance(descriptor, Mapping):
            unknown = set(descriptor) - _DESCRIPTOR_KEYS
            if unknown:
                raise ValueError(f"unknown report fields: {', '.join(sorted(unknown))}")
            if "message" not in descriptor:
                raise ValueError("report is missing 'message'")
            descriptor = RuleError(**descriptor)
        elif not isinstance(descriptor, RuleError):
            raise TypeError(f"report expects a RuleError or mapping, got {type(descriptor).__name__}")

        if not isinstance(descriptor.message, str):
            raise TypeError(f"message must be str, got {type(descriptor.message).__name__}")
        index = descriptor.index
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"index must be int, got {type(index).__name__}")
        if node is not None:
            index += node.start
        if not (0 <= index <= len(self._text)):
            raise ValueError(f"index {index} is outside the text (length {len(self._text)})")

        fix = Fix.from_value(descriptor.fix) if descriptor.fix is not None else None
        self._reports.append(
            Report(
                message=descriptor.message,
                index=index,
                severity=Severity.coerce(descriptor.severity),
                fix=fix,
                data=descriptor.data,
                sequence=len(self._reports),
            )
        )


@dataclass(frozen=True)
class IgnoreRange:
    start: int
    end: int
    rule_id: str | None = None  # None ignores every rule

    def covers(self, index: int, rule_id: str) -> bool:
        if self.rule_id is not None and self.rule_id != rule_id:
            return False
        # Zero-width ranges still cover their own offset
        return self.start <= index < max(self.end, self.start + 1)


class FilterRuleContext(_PassView):
    """Per-pass capability object handed to a filter rule's ``create``."""

    def __init__(
        self,
        rule_id: str,
        *,
        text: str,
        tree: TxtNode,
        options: Any = None,
        file_path: str | None = None,
    ) -> None:
        super().__init__(rule_id, text=text, tree=tree, options=options, file_path=file_path)
        self._ignored: list[IgnoreRange] = []

    @property
    def ignored(self) -> list[IgnoreRange]:
        return list(self._ignored)

    def should_ignore(self, range: tuple[int, int], *, rule_id: str | None = None) -> None:
        """Drop messages whose index falls in ``range`` (for ``rule_id``, or all rules)."""
        start, end = range
        if start < 0 or start > end:
            raise ValueError(f"ignore range must satisfy 0 <= start <= end, got {range!r}")
        self._ignored.append(IgnoreRange(start=start, end=end, rule_id=rule_id))


@runtime_checkable
class Rule(Protocol):
    """Lint rule: registers node handlers and reports through the context.

    ``create`` returns a mapping of node type (or ``<type>:exit``) to handler,
    None, or an awaitable of either. Handlers may be coroutine functions.
    """

    def create(self, context: RuleContext) -> Handlers | Awaitable[Handlers | None] | None: ...


@runtime_checkable
class FilterRule(Protocol):
    """Filter rule: marks ranges whose messages are dropped."""

    def create(self, context: FilterRuleContext) -> Handlers | Awaitable[Handlers | None] | None: ...
