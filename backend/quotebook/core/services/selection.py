from __future__ import annotations

import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from quotebook.core.models.quote import Quote


def pick_random_quote(
    quotes: Sequence[Quote],
    exclude_id: str | None = None,
    *,
    rng: random.Random | None = None,
) -> Quote | None:
    """Pick a quote uniformly at random, avoiding ``exclude_id`` when possible.

    A single quote is always returned, even if it is the excluded one. If the
    exclusion would leave nothing to choose from, the full list is used.
    """
    if not quotes:
        return None
    if len(quotes) == 1:
        return quotes[0]

    candidates = [q for q in quotes if q.id != exclude_id] if exclude_id else list(quotes)
    if not candidates:
        candidates = list(quotes)
    return (rng or random).choice(candidates)
