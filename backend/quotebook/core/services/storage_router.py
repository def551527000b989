from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from quotebook.core.models.quote import QuoteInput
from quotebook.utils.logging import get_logger

if TYPE_CHECKING:
    from quotebook.core.models.quote import Quote, QuoteStore
    from quotebook.core.repositories.local_quote_repository import LocalQuoteRepository
    from quotebook.core.repositories.quote_repository import RemoteQuoteRepository
    from quotebook.core.schemas.auth import AuthUser


logger = get_logger(__name__)


class StorageMode(str, Enum):
    """Where quotes are persisted for the current caller."""

    LOCAL = "local"
    REMOTE = "remote"


def normalize_quote_text(text: str) -> str:
    """Duplicate-detection key used when copying quotes to the cloud."""
    return text.strip().casefold()


class StorageRouter:
    """Dispatch quote operations to device or cloud storage.

    Signed-in users go to the remote repository; any exception raised there
    falls back once to the local repository. Anonymous callers always use the
    local repository. After a remote mutation the store is re-read from the
    remote side so tags always match the backend.

    A fallback mutation applies to the device store as it is on disk, never
    to the cloud store the caller passed in, so cloud quotes are not copied
    onto the device.
    """

    def __init__(
        self,
        *,
        current_user: AuthUser | None,
        local: LocalQuoteRepository,
        remote: RemoteQuoteRepository,
    ) -> None:
        self._user = current_user
        self._local = local
        self._remote = remote

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def storage_mode(self) -> StorageMode:
        return StorageMode.REMOTE if self.is_authenticated else StorageMode.LOCAL

    async def _refetch(self, store: QuoteStore) -> QuoteStore:
        fresh = await self._remote.load()
        return fresh.model_copy(update={"force_quotes_interface": store.force_quotes_interface})

    async def load(self) -> QuoteStore:
        if not self.is_authenticated:
            return self._local.load()
        # The interface flag lives on the device in both modes
        flag = self._local.load().force_quotes_interface
        try:
            store = await self._remote.load()
        except Exception as err:
            logger.error("Error getting store from remote storage: %s", err)
            return self._local.load()
        return store.model_copy(update={"force_quotes_interface": flag})

    async def add_quote(self, store: QuoteStore, quote_input: QuoteInput) -> QuoteStore:
        if not self.is_authenticated:
            return self._local.add(store, quote_input)
        try:
            new_quote = await self._remote.add(quote_input)
            if new_quote is None:
                return store
            return await self._refetch(store)
        except Exception as err:
            logger.error("Error adding quote to remote storage: %s", err)
            return self._local.add(self._local.load(), quote_input)

    async def update_quote(self, store: QuoteStore, quote_id: str, quote_input: QuoteInput) -> QuoteStore:
        if not self.is_authenticated:
            return self._local.update(store, quote_id, quote_input)
        try:
            updated = await self._remote.update(quote_id, quote_input)
            if updated is None:
                return store
            return await self._refetch(store)
        except Exception as err:
            logger.error("Error updating quote in remote storage: %s", err)
            return self._local.update(self._local.load(), quote_id, quote_input)

    async def delete_quote(self, store: QuoteStore, quote_id: str) -> QuoteStore:
        if not self.is_authenticated:
            return self._local.delete(store, quote_id)
        try:
            deleted = await self._remote.delete(quote_id)
            if not deleted:
                return store
            return await self._refetch(store)
        except Exception as err:
            logger.error("Error deleting quote from remote storage: %s", err)
            return self._local.delete(self._local.load(), quote_id)

    async def random_quote(self, store: QuoteStore, exclude_id: str | None = None) -> Quote | None:
        if not self.is_authenticated:
            return self._local.random_quote(store, exclude_id)
        try:
            return await self._remote.random_quote(exclude_id)
        except Exception as err:
            logger.error("Error getting random quote from remote storage: %s", err)
            return self._local.random_quote(store, exclude_id)

    def set_force_quotes_interface(self, store: QuoteStore, value: bool) -> QuoteStore:
        """Persist the interface flag on the device; it carries no quote data."""
        self._local.set_force_quotes_interface(self._local.load(), value)
        return store.model_copy(update={"force_quotes_interface": value})

    def local_store(self) -> QuoteStore:
        """The device store, used as the fallback source for remote reads."""
        return self._local.load()

    def has_local_quotes(self) -> bool:
        return self._local.has_quotes()

    async def transfer_local_quotes_to_cloud(self) -> bool:
        """Copy device quotes missing from the cloud into the user's remote store.

        Quotes match by trimmed, case-folded text, so two quotes with the same
        text but different authors count as one. Local copies are kept and a
        failed add does not stop the remaining ones.
        """
        if not self.is_authenticated:
            logger.error("User not authenticated, cannot transfer quotes")
            return False

        try:
            local_store = self._local.load()
            if not local_store.quotes:
                return False

            remote_store = await self._remote.load()
            existing = {normalize_quote_text(q.text) for q in remote_store.quotes}

            to_transfer: list[Quote] = []
            for quote in local_store.quotes:
                key = normalize_quote_text(quote.text)
                if key in existing:
                    continue
                existing.add(key)
                to_transfer.append(quote)

            if not to_transfer:
                return False

            failed = 0
            for quote in to_transfer:
                try:
                    added = await self._remote.add(
                        QuoteInput(text=quote.text, author=quote.author, tags=quote.tags)
                    )
                except Exception as err:
                    logger.error("Error transferring quote %s: %s", quote.id, err)
                    added = None
                if added is None:
                    failed += 1

            logger.info(
                "Transferred local quotes to cloud",
                extra={
                    "user_id": str(self._user.id),
                    "attempted": len(to_transfer),
                    "failed": failed,
                },
            )
            return True
        except Exception as err:
            logger.error("Error transferring quotes to cloud: %s", err)
            return False
