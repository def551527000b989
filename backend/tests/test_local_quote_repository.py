from __future__ import annotations

import time

from quotebook.core.models.quote import Quote, QuoteInput, QuoteStore
from quotebook.core.repositories.local_quote_repository import STORAGE_KEY, LocalQuoteRepository


def _store_with(local_repo: LocalQuoteRepository, *inputs: QuoteInput) -> QuoteStore:
    store = QuoteStore.empty()
    for quote_input in inputs:
        store = local_repo.add(store, quote_input)
    return store


def test_add_then_delete_round_trip(local_repo, wisdom_input):
    before = int(time.time() * 1000)
    store = local_repo.add(QuoteStore.empty(), wisdom_input)
    after = int(time.time() * 1000)

    assert len(store.quotes) == 1
    assert store.tags == ["wisdom"]
    quote = store.quotes[0]
    assert quote.text == "Simplicity is the ultimate sophistication."
    assert quote.author == "Leonardo da Vinci"
    assert before <= quote.created_at <= after

    store = local_repo.delete(store, quote.id)

    assert store.quotes == []
    assert store.tags == []
    assert local_repo.load() == store


def test_add_grows_store_by_one_with_unique_ids(local_repo):
    store = QuoteStore.empty()
    for i in range(5):
        previous_ids = {q.id for q in store.quotes}
        store = local_repo.add(store, QuoteInput(text=f"Quote {i}"))
        assert len(store.quotes) == i + 1
        assert store.quotes[-1].id not in previous_ids


def test_add_merges_tags_in_first_seen_order(local_repo):
    store = _store_with(
        local_repo,
        QuoteInput(text="one", tags=["b", "a"]),
        QuoteInput(text="two", tags=["a", "c", "b"]),
    )

    assert store.tags == ["b", "a", "c"]


def test_add_persists_whole_store(local_repo, device_storage, wisdom_input):
    store = local_repo.add(QuoteStore.empty(), wisdom_input)

    assert device_storage.get_item(STORAGE_KEY) == store.to_json()


def test_update_unknown_id_returns_store_unchanged(local_repo, device_storage, wisdom_input):
    store = local_repo.add(QuoteStore.empty(), wisdom_input)
    saved = device_storage.get_item(STORAGE_KEY)

    result = local_repo.update(store, "missing", QuoteInput(text="Other"))

    assert result == store
    assert device_storage.get_item(STORAGE_KEY) == saved


def test_update_preserves_id_and_created_at(local_repo, wisdom_input):
    store = local_repo.add(QuoteStore.empty(), wisdom_input)
    original = store.quotes[0]

    store = local_repo.update(
        store, original.id, QuoteInput(text="Less is more.", author="Mies", tags=["design"])
    )

    edited = store.find(original.id)
    assert edited.text == "Less is more."
    assert edited.author == "Mies"
    assert edited.created_at == original.created_at
    assert edited.updated_at is not None
    assert store.tags == ["design"]
    assert local_repo.load() == store


def test_update_keeps_tags_shared_with_other_quotes(local_repo):
    store = _store_with(
        local_repo,
        QuoteInput(text="one", tags=["shared", "only-one"]),
        QuoteInput(text="two", tags=["shared"]),
    )
    first = store.quotes[0]

    store = local_repo.update(store, first.id, QuoteInput(text="one", tags=["fresh"]))

    assert store.tags == ["shared", "fresh"]


def test_delete_prunes_only_orphaned_tags(local_repo):
    store = _store_with(
        local_repo,
        QuoteInput(text="one", tags=["shared", "unique"]),
        QuoteInput(text="two", tags=["shared", "other"]),
    )

    store = local_repo.delete(store, store.quotes[0].id)

    assert [q.text for q in store.quotes] == ["two"]
    assert store.tags == ["shared", "other"]


def test_delete_unknown_id_is_noop(local_repo, wisdom_input):
    store = local_repo.add(QuoteStore.empty(), wisdom_input)

    assert local_repo.delete(store, "missing") == store


def test_save_load_round_trip(local_repo):
    store = QuoteStore(
        quotes=[
            Quote(id="q1", text="One", author="A", tags=["x", "x"], created_at=1, updated_at=2),
            Quote(id="q2", text="Two", created_at=3, user_id="u1"),
        ],
        tags=["x"],
        force_quotes_interface=True,
    )

    local_repo.save(store)

    assert local_repo.load() == store


def test_load_degrades_to_empty_on_malformed_blob(local_repo, device_storage):
    device_storage.set_item(STORAGE_KEY, "{broken")

    assert local_repo.load() == QuoteStore.empty()


def test_load_degrades_to_empty_on_invalid_shape(local_repo, device_storage):
    device_storage.set_item(STORAGE_KEY, '{"quotes": [{"id": "q1"}]}')

    assert local_repo.load() == QuoteStore.empty()


def test_load_never_invents_ids_for_stored_quotes(local_repo, device_storage):
    device_storage.set_item(STORAGE_KEY, '{"quotes": [{"text": "legacy", "tags": []}], "tags": []}')

    first = local_repo.load()
    second = local_repo.load()

    assert first == second == QuoteStore.empty()


def test_unavailable_storage_reads_empty_and_skips_writes(wisdom_input):
    repo = LocalQuoteRepository(None)

    assert repo.available is False
    assert repo.load() == QuoteStore.empty()
    store = repo.add(QuoteStore.empty(), wisdom_input)
    assert len(store.quotes) == 1
    assert repo.load() == QuoteStore.empty()
    assert repo.has_quotes() is False
    repo.clear()


def test_force_quotes_interface_flag_persists(local_repo):
    store = local_repo.set_force_quotes_interface(QuoteStore.empty(), True)

    assert store.force_quotes_interface is True
    assert local_repo.load().force_quotes_interface is True


def test_clear_and_has_quotes(local_repo, wisdom_input):
    assert local_repo.has_quotes() is False
    local_repo.add(QuoteStore.empty(), wisdom_input)
    assert local_repo.has_quotes() is True

    local_repo.clear()

    assert local_repo.has_quotes() is False


def test_random_quote_uses_store(local_repo):
    store = _store_with(local_repo, QuoteInput(text="one"), QuoteInput(text="two"))
    first_id = store.quotes[0].id

    for _ in range(50):
        assert local_repo.random_quote(store, first_id).id != first_id
    assert local_repo.random_quote(QuoteStore.empty()) is None
