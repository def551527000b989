from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from quotebook.core.models.base import now_ms
from quotebook.core.models.quote import Quote, QuoteStore
from quotebook.core.repositories.quote_repository import RemoteQuoteRepository
from quotebook.core.services.selection import pick_random_quote
from quotebook.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    from supabase import Client

    from quotebook.core.models.quote import QuoteInput


class SupabaseQuoteRepository(RemoteQuoteRepository):
    """Supabase implementation of the RemoteQuoteRepository.

    Assumes a `quotes` table with columns `id`, `text`, `author`, `tags`,
    `user_id` and a `created_at` timestamptz defaulting to `now()`. A ``client``
    of None means the backend is not configured; a ``user_id`` of None means
    nobody is signed in. Both make every operation a logged no-op.
    """

    TABLE_NAME = "quotes"

    def __init__(self, client: Client | None, user_id: str | None, *, table_name: str | None = None) -> None:
        self._client = client
        self._user_id = user_id
        self._table = table_name or self.TABLE_NAME

    def _ready(self, operation: str) -> bool:
        if self._client is None:
            logger.warning("Supabase not configured, cannot %s", operation)
            return False
        if not self._user_id:
            logger.warning("No authenticated user, cannot %s", operation)
            return False
        return True

    async def load(self) -> QuoteStore:
        if not self._ready("load quotes"):
            return QuoteStore.empty()

        def _query():
            return (
                self._client.table(self._table)
                .select("*")
                .eq("user_id", self._user_id)
                .order("created_at", desc=True)
                .execute()
            )

        try:
            resp = await self._run(_query)
        except Exception as err:
            logger.error("Error loading quotes from Supabase: %s", err, extra={"user_id": self._user_id})
            return QuoteStore.empty()

        rows: list[dict[str, Any]] = resp.data or []
        return QuoteStore.from_quotes([self._row_to_quote(r) for r in rows])

    async def add(self, quote_input: QuoteInput) -> Quote | None:
        if not self._ready("add quote"):
            return None

        row = {
            "text": quote_input.text,
            "author": quote_input.author,
            "tags": list(quote_input.tags),
            "user_id": self._user_id,
        }
        try:
            resp = await self._run(lambda: self._client.table(self._table).insert(row).execute())
        except Exception as err:
            logger.error("Error adding quote to Supabase: %s", err, extra={"user_id": self._user_id})
            return None

        data = self._first(resp.data)
        if not data.get("id"):
            logger.error("Supabase insert returned no row", extra={"user_id": self._user_id})
            return None
        return self._row_to_quote({**row, **data})

    async def update(self, quote_id: str, quote_input: QuoteInput) -> Quote | None:
        if not self._ready("update quote"):
            return None

        changes = {
            "text": quote_input.text,
            "author": quote_input.author,
            "tags": list(quote_input.tags),
        }
        try:
            resp = await self._run(
                lambda: self._client.table(self._table)
                .update(changes)
                .eq("id", quote_id)
                .eq("user_id", self._user_id)
                .execute()
            )
        except Exception as err:
            logger.error("Error updating quote in Supabase: %s", err, extra={"quote_id": quote_id})
            return None

        if not resp.data:
            logger.warning("Quote not found for update", extra={"quote_id": quote_id})
            return None
        # The stored creation time is not re-read; callers get a display stand-in
        return Quote(
            id=quote_id,
            text=quote_input.text,
            author=quote_input.author,
            tags=list(quote_input.tags),
            created_at=now_ms(),
            user_id=self._user_id,
        )

    async def delete(self, quote_id: str) -> bool:
        if not self._ready("delete quote"):
            return False

        try:
            resp = await self._run(
                lambda: self._client.table(self._table)
                .delete()
                .eq("id", quote_id)
                .eq("user_id", self._user_id)
                .execute()
            )
        except Exception as err:
            logger.error("Error deleting quote from Supabase: %s", err, extra={"quote_id": quote_id})
            return False

        items = resp.data or []
        return len(items) > 0

    async def random_quote(self, exclude_id: str | None = None) -> Quote | None:
        store = await self.load()
        return pick_random_quote(store.quotes, exclude_id)

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        import asyncio
        return await asyncio.to_thread(func)

    @staticmethod
    def _first(data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        return {}

    @staticmethod
    def _parse_created_at(value: Any) -> int:
        """Convert a timestamptz column value to epoch milliseconds, defaulting to now."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return int(value)
        if isinstance(value, str) and value:
            try:
                return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp() * 1000)
            except ValueError:
                logger.warning(f"Failed to parse created_at '{value}'")
        return now_ms()

    @staticmethod
    def _row_to_quote(row: dict[str, Any]) -> Quote:
        return Quote(
            id=str(row["id"]),
            text=row.get("text") or "",
            author=row.get("author") or None,
            tags=row.get("tags") or [],
            created_at=SupabaseQuoteRepository._parse_created_at(row.get("created_at")),
            user_id=str(row["user_id"]) if row.get("user_id") else None,
        )
