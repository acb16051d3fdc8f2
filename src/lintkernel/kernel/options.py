"""Kernel options - per-call plugin and rule configuration.

Options are validated before any plugin or rule code runs. Both wire names
(``filePath``, ``pluginId``, ``ruleId``, ``filterRules``) and snake_case
field names are accepted. Plugin and rule ``options`` are opaque: they are
passed through by reference and never inspected.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from lintkernel.core.errors import ConfigurationError
from lintkernel.kernel.context import FilterRule, Rule
from lintkernel.kernel.processor import Plugin


class _Entry(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class PluginEntry(_Entry):
    """A configured plugin."""

    plugin_id: StrictStr = Field(alias="pluginId", min_length=1)
    plugin: Any
    options: Any = None

    @field_validator("plugin")
    @classmethod
    def validate_plugin(cls, v: Any) -> Any:
        if not isinstance(v, Plugin):
            raise ValueError(f"{type(v).__name__} does not implement Plugin (missing create())")
        return v


class RuleEntry(_Entry):
    """A configured lint rule."""

    rule_id: StrictStr = Field(alias="ruleId", min_length=1)
    rule: Any
    options: Any = None

    @field_validator("rule")
    @classmethod
    def validate_rule(cls, v: Any) -> Any:
        if not isinstance(v, Rule):
            raise ValueError(f"{type(v).__name__} does not implement Rule (missing create())")
        return v


class FilterRuleEntry(_Entry):
    """A configured filter rule."""

    rule_id: StrictStr = Field(alias="ruleId", min_length=1)
    rule: Any
    options: Any = None

    @field_validator("rule")
    @classmethod
    def validate_rule(cls, v: Any) -> Any:
        if not isinstance(v, FilterRule):
            raise ValueError(f"{type(v).__name__} does not implement FilterRule (missing create())")
        return v


class KernelOptions(_Entry):
    """Everything one lint_text/fix_text call needs besides the text."""

    file_path: StrictStr | None = Field(default=None, alias="filePath")
    ext: StrictStr
    plugins: list[PluginEntry] = Field(min_length=1)
    rules: list[RuleEntry] = Field(default_factory=list)
    filter_rules: list[FilterRuleEntry] = Field(default_factory=list, alias="filterRules")

    @field_validator("ext")
    @classmethod
    def validate_ext(cls, v: str) -> str:
        if len(v) < 2 or not v.startswith("."):
            raise ValueError(f"ext must be a leading-dot extension like '.md', got {v!r}")
        return v

    @property
    def rule_order(self) -> dict[str, int]:
        """Configuration position of each lint rule."""
        return {entry.rule_id: position for position, entry in enumerate(self.rules)}


def _format_validation_errors(error: ValidationError) -> list[str]:
    messages: list[str] = []
    for err in error.errors():
        location = ".".join(str(loc) for loc in err["loc"]) or "<root>"
        messages.append(f"{location}: {err['msg']}")
    return messages


def _check_unique_ids(options: KernelOptions) -> None:
    seen: set[str] = set()
    for entry in options.plugins:
        if entry.plugin_id in seen:
            raise ConfigurationError.duplicate_id("plugin", entry.plugin_id)
        seen.add(entry.plugin_id)

    # Lint rules and filter rules share one id namespace
    seen = set()
    for rule_entry in [*options.rules, *options.filter_rules]:
        if rule_entry.rule_id in seen:
            raise ConfigurationError.duplicate_id("rule", rule_entry.rule_id)
        seen.add(rule_entry.rule_id)


def validate_options(options: KernelOptions | Mapping[str, Any]) -> KernelOptions:
    """Validate caller options without touching any plugin or rule.

    Raises:
        ConfigurationError: On malformed options or duplicate ids.
    """
    if isinstance(options, KernelOptions):
        validated = options
    elif isinstance(options, Mapping):
        try:
            validated = KernelOptions.model_validate(dict(options))
        except ValidationError as e:
            raise ConfigurationError.invalid_options(_format_validation_errors(e)) from e
    else:
        raise ConfigurationError.invalid_options(
            [f"options must be KernelOptions or a mapping, got {type(options).__name__}"]
        )

    _check_unique_ids(validated)
    return validated
