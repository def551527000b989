from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from quotebook.api.v1.schemas.quote import (
    InterfaceFlagUpdate,
    LocalStatusRead,
    MigrationResult,
    QuoteRead,
    QuoteStoreRead,
)
from quotebook.core.models.quote import QuoteInput
from quotebook.core.services.storage_router import StorageRouter
from quotebook.dependencies import get_storage_router

router = APIRouter()


def _store_response(service: StorageRouter, store) -> QuoteStoreRead:
    return QuoteStoreRead.from_store(store, service.storage_mode)


@router.get("/", response_model=QuoteStoreRead)
async def get_store(service: StorageRouter = Depends(get_storage_router)):
    store = await service.load()
    return _store_response(service, store)


@router.post("/", response_model=QuoteStoreRead, status_code=status.HTTP_201_CREATED)
async def add_quote(
    payload: QuoteInput,
    service: StorageRouter = Depends(get_storage_router),
):
    store = await service.load()
    updated = await service.add_quote(store, payload)
    return _store_response(service, updated)


@router.get("/random", response_model=QuoteRead | None)
async def random_quote(
    exclude_id: str | None = Query(default=None, alias="excludeId"),
    service: StorageRouter = Depends(get_storage_router),
):
    """Return a random quote, avoiding ``excludeId`` when another one exists."""
    quote = await service.random_quote(service.local_store(), exclude_id)
    return QuoteRead.from_quote(quote) if quote else None


@router.put("/interface", response_model=QuoteStoreRead)
async def set_interface_flag(
    payload: InterfaceFlagUpdate,
    service: StorageRouter = Depends(get_storage_router),
):
    store = await service.load()
    updated = service.set_force_quotes_interface(store, payload.force_quotes_interface)
    return _store_response(service, updated)


@router.get("/local/status", response_model=LocalStatusRead)
async def local_status(service: StorageRouter = Depends(get_storage_router)):
    return LocalStatusRead(has_local_quotes=service.has_local_quotes())


@router.post("/migrate", response_model=MigrationResult)
async def migrate_local_quotes(service: StorageRouter = Depends(get_storage_router)):
    """Copy this device's quotes into the signed-in user's cloud collection."""
    if not service.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    transferred = await service.transfer_local_quotes_to_cloud()
    return MigrationResult(transferred=transferred)


@router.put("/{quote_id}", response_model=QuoteStoreRead)
async def update_quote(
    quote_id: str,
    payload: QuoteInput,
    service: StorageRouter = Depends(get_storage_router),
):
    store = await service.load()
    updated = await service.update_quote(store, quote_id, payload)
    return _store_response(service, updated)


@router.delete("/{quote_id}", response_model=QuoteStoreRead)
async def delete_quote(
    quote_id: str,
    service: StorageRouter = Depends(get_storage_router),
):
    store = await service.load()
    updated = await service.delete_quote(store, quote_id)
    return _store_response(service, updated)
