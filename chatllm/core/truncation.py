"""Context truncation: fit conversation history into a character budget.

The budget counts characters of turn content, not model tokens. Moving to
a tokenizer-aware budget would change which turns survive.
"""

from __future__ import annotations

from typing import Sequence

from chatllm.core.types import Turn


def truncate_turns(history: Sequence[Turn], max_length: int) -> list[Turn]:
    """Return the newest suffix of ``history`` that fits ``max_length``.

    Turns are scanned from newest to oldest. Scanning stops at the first
    turn that would overflow the budget, so an older short turn is never
    kept in place of a newer long one. A newest turn longer than the
    budget on its own gives an empty result.

    Args:
        history: Turns in chronological order (oldest first).
        max_length: Maximum total content length in characters.

    Returns:
        The kept turns, still in chronological order.
    """
    if max_length <= 0:
        return []

    total = 0
    start = len(history)
    for i in range(len(history) - 1, -1, -1):
        length = history[i].length
        if total + length > max_length:
            break
        total += length
        start = i

    return list(history[start:])
