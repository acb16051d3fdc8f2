"""Message model - diagnostics, fixes and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lintkernel.config.constants import MESSAGE_TYPE


class Severity(Enum):
    """Diagnostic severity level."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def coerce(cls, value: Severity | str | None) -> Severity:
        """Accept a Severity or its string value; None means error."""
        if value is None:
            return cls.ERROR
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise ValueError(f"severity must be one of info, warning, error; got {value!r}")


@dataclass(frozen=True)
class Fix:
    """Replace the half-open range [start, end) with text."""

    range: tuple[int, int]
    text: str

    def __post_init__(self) -> None:
        start, end = self.range
        if not isinstance(self.text, str):
            raise TypeError(f"fix text must be str, got {type(self.text).__name__}")
        if not isinstance(start, int) or not isinstance(end, int):
            raise TypeError(f"fix range must hold ints, got {self.range!r}")
        if start < 0 or start > end:
            raise ValueError(f"fix range must satisfy 0 <= start <= end, got {self.range!r}")
        # Normalize list input to a tuple
        object.__setattr__(self, "range", (start, end))

    @property
    def start(self) -> int:
        return self.range[0]

    @property
    def end(self) -> int:
        return self.range[1]

    def to_dict(self) -> dict[str, Any]:
        return {"range": [self.range[0], self.range[1]], "text": self.text}

    @classmethod
    def from_value(cls, value: Fix | dict[str, Any]) -> Fix:
        if isinstance(value, cls):
            return value
        if isinstance(value, dict) and set(value) == {"range", "text"}:
            rng = value["range"]
            if not isinstance(rng, (list, tuple)) or len(rng) != 2:
                raise ValueError(f"fix range must be a [start, end] pair, got {rng!r}")
            return cls(range=(rng[0], rng[1]), text=value["text"])
        raise ValueError(f"fix must be a Fix or {{'range', 'text'}} mapping, got {value!r}")


@dataclass(frozen=True)
class Message:
    """A single diagnostic reported by a rule."""

    rule_id: str
    message: str
    index: int
    line: int
    column: int
    severity: Severity = Severity.ERROR
    fix: Fix | None = None
    data: Any = None  # Opaque rule payload
    type: str = MESSAGE_TYPE

    def to_dict(self) -> dict[str, Any]:
        """Wire shape consumed by formatters and editor integrations."""
        result: dict[str, Any] = {
            "type": self.type,
            "ruleId": self.rule_id,
            "message": self.message,
            "index": self.index,
            "line": self.line,
            "column": self.column,
            "severity": self.severity.value,
        }
        if self.fix is not None:
            result["fix"] = self.fix.to_dict()
        if self.data is not None:
            result["data"] = self.data
        return result


@dataclass
class LintResult:
    """Messages of one lint pass."""

    file_path: str | None
    messages: list[Message] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(m.severity == Severity.ERROR for m in self.messages)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "messages": [m.to_dict() for m in self.messages],
        }


@dataclass
class FixResult:
    """Outcome of the lint/fix loop."""

    file_path: str | None
    output: str
    messages: list[Message] = field(default_factory=list)  # Remaining, unfixed
    applied_messages: list[Message] = field(default_factory=list)
    iterations: int = 0  # Lint passes run

    @property
    def fixed(self) -> bool:
        return bool(self.applied_messages)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "output": self.output,
            "messages": [m.to_dict() for m in self.messages],
            "applyingMessages": [m.to_dict() for m in self.applied_messages],
        }
