"""Kernel error types with typed error codes.

Error code ranges:
- 2xxx: Configuration
- 3xxx: Processor
- 4xxx: Rule

Every error aborts the current lint/fix call. The original exception, when
there is one, is chained via ``raise ... from`` and exposed as ``cause``.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Configuration (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_INVALID_OPTIONS = 2003
    CONFIG_DUPLICATE_ID = 2004
    CONFIG_NO_MATCHING_PROCESSOR = 2005

    # Processor (3xxx)
    PROCESSOR_PARSE_ERROR = 3001
    PROCESSOR_FIX_ERROR = 3002
    PROCESSOR_CREATE_ERROR = 3003

    # Rule (4xxx)
    RULE_EXECUTION_ERROR = 4001


@dataclass(frozen=True, eq=False)
class LintKernelError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_INVALID_OPTIONS')."""
        return self.code.name

    @property
    def cause(self) -> BaseException | None:
        """The lower-layer exception this error wraps, if any."""
        return self.__cause__

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigurationError(LintKernelError):
    """Caller-fixable problems with options or settings."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigurationError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigurationError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def invalid_options(cls, errors: list[str]) -> "ConfigurationError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_OPTIONS,
            message="Invalid kernel options: " + "; ".join(errors),
            details={"errors": errors},
        )

    @classmethod
    def duplicate_id(cls, kind: str, entry_id: str) -> "ConfigurationError":
        return cls(
            code=ErrorCode.CONFIG_DUPLICATE_ID,
            message=f"Duplicate {kind} id: {entry_id}",
            details={"kind": kind, "id": entry_id},
        )


class NoMatchingProcessorError(ConfigurationError):
    """No configured plugin claims the requested extension."""

    @classmethod
    def for_extension(cls, ext: str, plugin_ids: list[str]) -> "NoMatchingProcessorError":
        return cls(
            code=ErrorCode.CONFIG_NO_MATCHING_PROCESSOR,
            message=f"No processor supports extension '{ext}'",
            details={"ext": ext, "plugin_ids": plugin_ids},
        )


class ProcessorError(LintKernelError):
    """A processor faulted outside of parsing (e.g. applying fixes)."""

    @classmethod
    def creation_failed(cls, plugin_id: str, reason: str) -> "ProcessorError":
        return cls(
            code=ErrorCode.PROCESSOR_CREATE_ERROR,
            message=f"Plugin '{plugin_id}' failed to provide a processor: {reason}",
            details={"plugin_id": plugin_id, "reason": reason},
        )

    @classmethod
    def fix_failed(cls, plugin_id: str, reason: str) -> "ProcessorError":
        return cls(
            code=ErrorCode.PROCESSOR_FIX_ERROR,
            message=f"Processor of plugin '{plugin_id}' failed to apply fixes: {reason}",
            details={"plugin_id": plugin_id, "reason": reason},
        )


class ParseError(ProcessorError):
    """A processor failed to turn text into a structural tree."""

    @classmethod
    def from_processor(cls, plugin_id: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PROCESSOR_PARSE_ERROR,
            message=f"Processor of plugin '{plugin_id}' failed to parse text: {reason}",
            details={"plugin_id": plugin_id, "reason": reason},
        )


class RuleExecutionError(LintKernelError):
    """A rule raised while it was being created or visiting the tree."""

    @property
    def rule_id(self) -> str:
        return str(self.details["rule_id"])

    @classmethod
    def from_rule(cls, rule_id: str, reason: str) -> "RuleExecutionError":
        return cls(
            code=ErrorCode.RULE_EXECUTION_ERROR,
            message=f"Rule '{rule_id}' failed: {reason}",
            details={"rule_id": rule_id, "reason": reason},
        )
