"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LINTKERNEL__SECTION__KEY)
3. YAML file passed to load_config()
4. Built-in defaults (this file)

Environment Variable Format:
    LINTKERNEL__<SECTION>__<KEY>=<VALUE>

Examples:
    LINTKERNEL__LOGGING__LEVEL=DEBUG
    LINTKERNEL__KERNEL__MAX_FIX_ITERATIONS=5

These settings tune the kernel itself. Plugin and rule configuration is
supplied per call through KernelOptions and never read from here.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from lintkernel.config.constants import MAX_FIX_ITERATIONS_CEILING

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LINTKERNEL__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every lint pass.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class KernelConfig(BaseModel):
    """Lint/fix pipeline configuration.

    Env vars:
        LINTKERNEL__KERNEL__MAX_FIX_ITERATIONS: Fix applications per fix_text call
    """

    max_fix_iterations: int = Field(
        default=10,
        description="Upper bound on fix applications in one fix_text call. "
        "Stops fixers that keep reintroducing the violation they fixed.",
    )

    @field_validator("max_fix_iterations")
    @classmethod
    def validate_max_fix_iterations(cls, v: int) -> int:
        if not (1 <= v <= MAX_FIX_ITERATIONS_CEILING):
            raise ValueError(f"max_fix_iterations must be 1-{MAX_FIX_ITERATIONS_CEILING}, got {v}")
        return v


class LintKernelConfig(BaseModel):
    """Root configuration for the lint kernel.

    All settings can be configured via:
    1. Environment variables: LINTKERNEL__SECTION__KEY
    2. A YAML config file
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    kernel: KernelConfig = Field(default_factory=KernelConfig)
