"""Fix reconciliation - pick non-overlapping fixes and splice them in."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from lintkernel.kernel.messages import Fix, Message


@dataclass
class Reconciliation:
    """Fixes accepted for one pass and the messages left over."""

    accepted: list[Message] = field(default_factory=list)
    remaining: list[Message] = field(default_factory=list)

    @property
    def fixes(self) -> list[Fix]:
        return [m.fix for m in self.accepted if m.fix is not None]


class FixReconciler:
    """Select a maximal non-overlapping set of fixes from one pass.

    Candidates are ordered by fix start, then by the configuration order of
    the reporting rule. A candidate is accepted when it starts at or after the
    end of the last accepted fix; everything else is left for a later pass.
    """

    def __init__(self, rule_order: Mapping[str, int]) -> None:
        self._rule_order = rule_order

    def reconcile(self, messages: Sequence[Message]) -> Reconciliation:
        candidates = sorted(
            (
                (position, message)
                for position, message in enumerate(messages)
                if message.fix is not None
            ),
            key=lambda item: (
                item[1].fix.start,  # type: ignore[union-attr]
                self._rule_order.get(item[1].rule_id, math.inf),
                item[0],
            ),
        )

        accepted_positions: set[int] = set()
        accepted: list[Message] = []
        last_end: float = -math.inf
        for position, message in candidates:
            fix = message.fix
            assert fix is not None
            if fix.start >= last_end:
                accepted.append(message)
                accepted_positions.add(position)
                last_end = fix.end

        remaining = [m for i, m in enumerate(messages) if i not in accepted_positions]
        return Reconciliation(accepted=accepted, remaining=remaining)


def splice_fixes(text: str, fixes: Sequence[Fix]) -> str:
    """Rewrite text in one pass, substituting each fix's text for its range.

    Fixes must be sorted by start and must not overlap. Ranges reaching past
    the end of the text are clamped to it.
    """
    parts: list[str] = []
    cursor = 0
    for fix in fixes:
        start = min(fix.start, len(text))
        end = min(fix.end, len(text))
        if start < cursor:
            raise ValueError(f"overlapping fix at {fix.range!r}, previous fix ended at {cursor}")
        parts.append(text[cursor:start])
        parts.append(fix.text)
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)
