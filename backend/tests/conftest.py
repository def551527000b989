"""Shared fixtures: temporary device storage and a fake Supabase backend."""

from __future__ import annotations

import pytest

from quotebook.core.models.quote import QuoteInput
from quotebook.core.repositories.implementations.supabase.quote_repository import (
    SupabaseQuoteRepository,
)
from quotebook.core.repositories.local_quote_repository import LocalQuoteRepository
from quotebook.db.device_storage import FileDeviceStorage
from tests.support.fake_supabase import FakeSupabaseClient


@pytest.fixture
def device_storage(tmp_path) -> FileDeviceStorage:
    return FileDeviceStorage(tmp_path / "devices", "device-1")


@pytest.fixture
def local_repo(device_storage) -> LocalQuoteRepository:
    return LocalQuoteRepository(device_storage)


@pytest.fixture
def fake_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def user_id() -> str:
    return "5d1f7a4e-2f44-4b8e-9a41-1c2f0b7d9e10"


@pytest.fixture
def remote_repo(fake_client, user_id) -> SupabaseQuoteRepository:
    return SupabaseQuoteRepository(fake_client, user_id)


@pytest.fixture
def wisdom_input() -> QuoteInput:
    return QuoteInput(
        text="Simplicity is the ultimate sophistication.",
        author="Leonardo da Vinci",
        tags=["wisdom"],
    )
