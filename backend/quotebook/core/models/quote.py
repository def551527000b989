from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field, field_validator

from .base import CamelModel


def union_tags(quotes: Iterable[Quote], existing: Iterable[str] = ()) -> list[str]:
    """Return the ordered union of tags used by ``quotes``.

    Tags from ``existing`` that are still in use keep their position; tags not
    seen before are appended in the order they first appear.
    """
    used: list[str] = []
    for quote in quotes:
        for tag in quote.tags:
            if tag not in used:
                used.append(tag)
    kept = [tag for tag in dict.fromkeys(existing) if tag in used]
    return kept + [tag for tag in used if tag not in kept]


class QuoteInput(CamelModel):
    """User-editable quote fields."""

    text: str = Field(..., max_length=5000, description="Quote text")
    author: str | None = Field(default=None, max_length=255, description="Quote author")
    tags: list[str] = Field(default_factory=list, description="Tags in the order entered")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Quote text must be provided and non-empty")
        return stripped

    @field_validator("author")
    @classmethod
    def normalize_author(cls, v: str | None) -> str | None:
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        # Duplicates are kept; only blank entries are dropped
        return [tag.strip() for tag in v if tag and tag.strip()]


class Quote(CamelModel):
    """Quote domain model."""

    id: str = Field(..., description="Opaque unique identifier")
    text: str
    author: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: int = Field(..., description="Epoch milliseconds, immutable")
    updated_at: int | None = None
    user_id: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v):
        return [] if v is None else v

    def with_input(self, quote_input: QuoteInput, *, updated_at: int | None = None) -> Quote:
        """Return a copy carrying the edited fields; id and created_at are preserved."""
        return self.model_copy(
            update={
                "text": quote_input.text,
                "author": quote_input.author,
                "tags": list(quote_input.tags),
                "updated_at": updated_at if updated_at is not None else self.updated_at,
            }
        )


class QuoteStore(CamelModel):
    """Aggregate of a user's quotes, the derived tag list and the interface flag."""

    quotes: list[Quote] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    force_quotes_interface: bool = False

    @field_validator("quotes", "tags", mode="before")
    @classmethod
    def default_lists(cls, v):
        return [] if v is None else v

    @classmethod
    def empty(cls) -> QuoteStore:
        return cls()

    @classmethod
    def from_quotes(cls, quotes: list[Quote], *, force_quotes_interface: bool = False) -> QuoteStore:
        return cls(
            quotes=quotes,
            tags=union_tags(quotes),
            force_quotes_interface=force_quotes_interface,
        )

    def find(self, quote_id: str) -> Quote | None:
        return next((q for q in self.quotes if q.id == quote_id), None)

    def sorted_quotes(self) -> list[Quote]:
        """Quotes in display order, newest first."""
        return sorted(self.quotes, key=lambda q: q.created_at, reverse=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
