from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quotebook.core.models.quote import Quote, QuoteInput, QuoteStore


class RemoteQuoteRepository(ABC):
    """Abstract repository interface for a user's quotes in a hosted database.

    Implementations perform network I/O and therefore expose async methods.
    They fail soft: when the backend is not configured, no user is signed in,
    or a request fails, they return an empty store, None or False instead of
    raising.
    """

    @abstractmethod
    async def load(self) -> QuoteStore:  # pragma: no cover - interface only
        """Return all of the user's quotes, newest first, with the derived tag list."""

    @abstractmethod
    async def add(self, quote_input: QuoteInput) -> Quote | None:  # pragma: no cover
        """Persist a new quote and return it, or None on failure."""

    @abstractmethod
    async def update(self, quote_id: str, quote_input: QuoteInput) -> Quote | None:  # pragma: no cover
        """Overwrite text, author and tags of a quote; return it, or None on failure."""

    @abstractmethod
    async def delete(self, quote_id: str) -> bool:  # pragma: no cover
        """Delete a quote by id. Return True if the removal succeeded."""

    @abstractmethod
    async def random_quote(self, exclude_id: str | None = None) -> Quote | None:  # pragma: no cover
        """Re-fetch the user's quotes and pick one at random, avoiding ``exclude_id``."""
