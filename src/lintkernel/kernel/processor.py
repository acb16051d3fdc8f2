"""Processor adapter - plugin resolution, parsing and fix application.

A plugin turns its options into a Processor. The kernel picks the first
configured plugin that claims the requested extension and talks to its
processor only through ProcessorAdapter, which turns processor faults into
typed kernel errors.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from lintkernel.core.errors import (
    NoMatchingProcessorError,
    ParseError,
    ProcessorError,
)
from lintkernel.core.logging import get_logger
from lintkernel.kernel.fixer import splice_fixes
from lintkernel.kernel.messages import Fix
from lintkernel.kernel.tree import TxtNode

if TYPE_CHECKING:
    from lintkernel.kernel.options import PluginEntry

log = get_logger("kernel.processor")


@runtime_checkable
class Processor(Protocol):
    """Parses raw text into a structural tree."""

    def parse(self, text: str) -> TxtNode: ...


@runtime_checkable
class SupportsExtension(Protocol):
    """Optional processor capability: claim extensions dynamically."""

    def supports(self, ext: str) -> bool: ...


@runtime_checkable
class AppliesFixes(Protocol):
    """Optional processor capability: apply accepted fixes itself."""

    def apply_fixes(self, text: str, fixes: Sequence[Fix]) -> str: ...


@runtime_checkable
class Plugin(Protocol):
    """Produces a Processor from plugin options.

    A plugin may also expose a static ``extensions`` sequence (e.g.
    ``(".md", ".markdown")``). When present it is the complete list: the plugin
    is only instantiated for those extensions and ``supports`` is not consulted.
    """

    def create(self, options: Any) -> Processor: ...


class ProcessorAdapter:
    """Uniform interface over the selected plugin's processor."""

    def __init__(self, plugin_id: str, processor: Processor) -> None:
        self.plugin_id = plugin_id
        self._processor = processor

    @property
    def processor(self) -> Processor:
        return self._processor

    def parse(self, text: str) -> TxtNode:
        """Parse text, wrapping any processor fault in ParseError."""
        try:
            tree = self._processor.parse(text)
        except Exception as e:
            raise ParseError.from_processor(self.plugin_id, f"{type(e).__name__}: {e}") from e
        if not isinstance(tree, TxtNode):
            raise ParseError.from_processor(
                self.plugin_id, f"parse() returned {type(tree).__name__}, expected TxtNode"
            )
        return tree

    def apply_fixes(self, text: str, fixes: Sequence[Fix]) -> str:
        """Apply non-overlapping fixes sorted by start offset.

        Delegates to the processor when it implements apply_fixes, otherwise
        splices the text directly.
        """
        if not isinstance(self._processor, AppliesFixes):
            return splice_fixes(text, fixes)
        try:
            output = self._processor.apply_fixes(text, list(fixes))
        except Exception as e:
            raise ProcessorError.fix_failed(self.plugin_id, f"{type(e).__name__}: {e}") from e
        if not isinstance(output, str):
            raise ProcessorError.fix_failed(
                self.plugin_id, f"apply_fixes() returned {type(output).__name__}, expected str"
            )
        return output


def _declared_extensions(plugin: Plugin) -> tuple[str, ...]:
    extensions = getattr(plugin, "extensions", None) or ()
    if isinstance(extensions, str):
        return (extensions,)
    return tuple(extensions)


def select_processor(ext: str, plugins: Sequence[PluginEntry]) -> ProcessorAdapter:
    """Select the processor of the first plugin claiming ``ext``.

    Plugins are consulted in configuration order. A static ``extensions``
    declaration is authoritative: a plugin declaring other extensions is
    skipped without being instantiated. Plugins without one are instantiated
    with their options and match when the processor's ``supports(ext)`` is true.

    Raises:
        NoMatchingProcessorError: No plugin claims the extension.
        ProcessorError: A plugin failed to create a Processor or to answer supports().
    """
    for entry in plugins:
        declared = _declared_extensions(entry.plugin)
        if declared and ext not in declared:
            continue
        try:
            processor = entry.plugin.create(entry.options)
        except Exception as e:
            raise ProcessorError.creation_failed(entry.plugin_id, f"{type(e).__name__}: {e}") from e
        if not isinstance(processor, Processor):
            raise ProcessorError.creation_failed(
                entry.plugin_id,
                f"create() returned {type(processor).__name__}, expected a Processor",
            )

        matched = bool(declared)
        if not matched and isinstance(processor, SupportsExtension):
            try:
                matched = bool(processor.supports(ext))
            except Exception as e:
                raise ProcessorError.creation_failed(
                    entry.plugin_id, f"supports() raised {type(e).__name__}: {e}"
                ) from e
        if matched:
            log.debug("processor_selected", plugin_id=entry.plugin_id, ext=ext)
            return ProcessorAdapter(entry.plugin_id, processor)

    raise NoMatchingProcessorError.for_extension(ext, [p.plugin_id for p in plugins])
