"""Tests for configuration models.

Covers:
- KernelConfig bounds on max_fix_iterations
- LogOutputConfig destination validation
- LintKernelConfig defaults
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from lintkernel.config.constants import MAX_FIX_ITERATIONS_CEILING
from lintkernel.config.models import KernelConfig, LintKernelConfig, LogOutputConfig


class TestKernelConfig:
    """KernelConfig validation tests."""

    def test_given_defaults_when_created_then_ten_iterations(self) -> None:
        assert KernelConfig().max_fix_iterations == 10

    @pytest.mark.parametrize("value", [1, 5, MAX_FIX_ITERATIONS_CEILING])
    def test_given_value_in_range_when_created_then_accepted(self, value: int) -> None:
        assert KernelConfig(max_fix_iterations=value).max_fix_iterations == value

    @pytest.mark.parametrize("value", [0, -1, MAX_FIX_ITERATIONS_CEILING + 1])
    def test_given_value_out_of_range_when_created_then_rejected(self, value: int) -> None:
        with pytest.raises(ValidationError, match="max_fix_iterations must be"):
            KernelConfig(max_fix_iterations=value)


class TestLogOutputConfig:
    """Log destination validation tests."""

    @pytest.mark.parametrize("destination", ["stderr", "stdout"])
    def test_given_stream_when_validated_then_kept(self, destination: str) -> None:
        assert LogOutputConfig(destination=destination).destination == destination

    def test_given_absolute_path_when_validated_then_kept(self, tmp_path: Path) -> None:
        target = tmp_path / "kernel.log"

        assert LogOutputConfig(destination=str(target)).destination == str(target)

    def test_given_relative_path_when_validated_then_rejected(self) -> None:
        with pytest.raises(ValidationError, match="absolute path"):
            LogOutputConfig(destination="logs/kernel.log")


class TestLintKernelConfig:
    def test_defaults(self) -> None:
        config = LintKernelConfig()

        assert config.logging.level == "INFO"
        assert len(config.logging.outputs) == 1
        assert config.logging.outputs[0].destination == "stderr"
        assert config.kernel.max_fix_iterations == 10
