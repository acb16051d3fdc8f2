"""Config module exports."""

from lintkernel.config.loader import load_config
from lintkernel.config.models import (
    KernelConfig,
    LintKernelConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "KernelConfig",
    "LintKernelConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
