"""Core module exports."""

from lintkernel.core.errors import (
    ConfigurationError,
    ErrorCode,
    LintKernelError,
    NoMatchingProcessorError,
    ParseError,
    ProcessorError,
    RuleExecutionError,
)
from lintkernel.core.logging import (
    bind_run,
    configure_logging,
    get_logger,
    get_run_id,
    new_run_id,
)

__all__ = [
    # Errors
    "ConfigurationError",
    "ErrorCode",
    "LintKernelError",
    "NoMatchingProcessorError",
    "ParseError",
    "ProcessorError",
    "RuleExecutionError",
    # Logging
    "bind_run",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "new_run_id",
]
