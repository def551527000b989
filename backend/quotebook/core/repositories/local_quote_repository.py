from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import ValidationError

from quotebook.core.models.base import now_ms
from quotebook.core.models.quote import Quote, QuoteStore, union_tags
from quotebook.core.services.selection import pick_random_quote
from quotebook.utils.logging import get_logger

if TYPE_CHECKING:
    from quotebook.core.models.quote import QuoteInput
    from quotebook.db.device_storage import FileDeviceStorage

logger = get_logger(__name__)

STORAGE_KEY = "quote-note-data"


class LocalQuoteRepository:
    """Quote persistence on device storage.

    The whole store is kept as one serialized blob under ``STORAGE_KEY`` and
    rewritten on every mutation. When ``storage`` is None (no device context)
    loads return an empty store and saves are skipped.
    """

    def __init__(self, storage: FileDeviceStorage | None) -> None:
        self._storage = storage

    @property
    def available(self) -> bool:
        return self._storage is not None

    def load(self) -> QuoteStore:
        if self._storage is None:
            return QuoteStore.empty()
        try:
            raw = self._storage.get_item(STORAGE_KEY)
        except (OSError, ValueError) as err:
            logger.warning("Error reading device storage: %s", err)
            return QuoteStore.empty()
        if not raw:
            return QuoteStore.empty()
        try:
            return QuoteStore.model_validate_json(raw)
        except ValidationError as err:
            logger.error(
                "Error loading quotes from device storage",
                extra={"device_id": self._storage.device_id, "error_count": err.error_count()},
            )
            return QuoteStore.empty()

    def save(self, store: QuoteStore) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set_item(STORAGE_KEY, store.to_json())
        except OSError as err:
            logger.error("Error saving to device storage: %s", err)

    def clear(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.clear()
        except OSError as err:
            logger.error("Error clearing device storage: %s", err)

    def has_quotes(self) -> bool:
        return len(self.load().quotes) > 0

    def add(self, store: QuoteStore, quote_input: QuoteInput) -> QuoteStore:
        new_quote = Quote(
            id=str(uuid4()),
            text=quote_input.text,
            author=quote_input.author,
            tags=list(quote_input.tags),
            created_at=now_ms(),
        )
        quotes = [*store.quotes, new_quote]
        updated = store.model_copy(update={"quotes": quotes, "tags": union_tags(quotes, store.tags)})
        self.save(updated)
        return updated

    def update(self, store: QuoteStore, quote_id: str, quote_input: QuoteInput) -> QuoteStore:
        existing = store.find(quote_id)
        if existing is None:
            return store

        edited = existing.with_input(quote_input, updated_at=now_ms())
        quotes = [edited if q.id == quote_id else q for q in store.quotes]
        updated = store.model_copy(update={"quotes": quotes, "tags": union_tags(quotes, store.tags)})
        self.save(updated)
        return updated

    def delete(self, store: QuoteStore, quote_id: str) -> QuoteStore:
        if store.find(quote_id) is None:
            return store

        quotes = [q for q in store.quotes if q.id != quote_id]
        updated = store.model_copy(update={"quotes": quotes, "tags": union_tags(quotes, store.tags)})
        self.save(updated)
        return updated

    def set_force_quotes_interface(self, store: QuoteStore, value: bool) -> QuoteStore:
        updated = store.model_copy(update={"force_quotes_interface": value})
        self.save(updated)
        return updated

    def random_quote(self, store: QuoteStore, exclude_id: str | None = None) -> Quote | None:
        return pick_random_quote(store.quotes, exclude_id)
