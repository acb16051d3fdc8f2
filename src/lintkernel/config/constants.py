"""Configuration constants.

Values here are implementation limits and wire-contract literals, not
user-configurable settings. For configurable values, see models.py.
"""

MAX_FIX_ITERATIONS_CEILING = 100
"""Hard ceiling for KernelConfig.max_fix_iterations."""

MESSAGE_TYPE = "lint message"
"""Discriminator carried by every Message."""

EXIT_SUFFIX = ":exit"
"""Suffix of handler keys that fire when leaving a node."""
