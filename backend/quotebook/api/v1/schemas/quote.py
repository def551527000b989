from __future__ import annotations

from pydantic import Field

from quotebook.core.models.base import CamelModel
from quotebook.core.models.quote import Quote, QuoteStore
from quotebook.core.services.storage_router import StorageMode


class QuoteRead(CamelModel):
    id: str
    text: str
    author: str | None = None
    tags: list[str]
    created_at: int
    updated_at: int | None = None
    user_id: str | None = None

    @classmethod
    def from_quote(cls, quote: Quote) -> QuoteRead:
        return cls.model_validate(quote.model_dump())


class QuoteStoreRead(CamelModel):
    """Store as returned to clients: quotes newest first."""

    quotes: list[QuoteRead]
    tags: list[str]
    force_quotes_interface: bool
    storage_mode: StorageMode

    @classmethod
    def from_store(cls, store: QuoteStore, mode: StorageMode) -> QuoteStoreRead:
        return cls(
            quotes=[QuoteRead.from_quote(q) for q in store.sorted_quotes()],
            tags=list(store.tags),
            force_quotes_interface=store.force_quotes_interface,
            storage_mode=mode,
        )


class InterfaceFlagUpdate(CamelModel):
    force_quotes_interface: bool = Field(..., description="Show the quotes interface instead of the landing page")


class LocalStatusRead(CamelModel):
    has_local_quotes: bool


class MigrationResult(CamelModel):
    transferred: bool
