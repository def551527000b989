from __future__ import annotations

import random

from quotebook.core.models.quote import Quote
from quotebook.core.services.selection import pick_random_quote


def _quotes(count: int) -> list[Quote]:
    return [Quote(id=f"q{i}", text=f"Quote {i}", created_at=i) for i in range(count)]


def test_empty_list_returns_none():
    assert pick_random_quote([]) is None
    assert pick_random_quote([], "q0") is None


def test_single_quote_returned_even_when_excluded():
    quotes = _quotes(1)

    for _ in range(10):
        assert pick_random_quote(quotes, "q0") is quotes[0]


def test_excluded_quote_never_selected_when_alternatives_exist():
    quotes = _quotes(2)
    rng = random.Random(1234)

    picks = {pick_random_quote(quotes, "q0", rng=rng).id for _ in range(200)}

    assert picks == {"q1"}


def test_selection_covers_all_candidates():
    quotes = _quotes(4)
    rng = random.Random(42)

    picks = {pick_random_quote(quotes, "q2", rng=rng).id for _ in range(500)}

    assert picks == {"q0", "q1", "q3"}


def test_unknown_exclude_id_uses_full_list():
    quotes = _quotes(3)
    rng = random.Random(7)

    picks = {pick_random_quote(quotes, "missing", rng=rng).id for _ in range(300)}

    assert picks == {"q0", "q1", "q2"}
