"""Tests for the palette personalization store and its storage backends."""

import json
from unittest.mock import MagicMock

import pytest

from hrcmd.exceptions import PersistenceError
from hrcmd.services.types import ResultKind
from hrcmd.ui.command_palette.palette_store import (
    JsonFileStorage,
    MemoryStorage,
    PersonalizationStore,
)

from factories import ORG, make_action, make_result


class TestRecents:
    """Tests for recording selections."""

    def test_most_recent_first(self, store) -> None:
        people = make_result("People")
        hiring = make_result("Hiring")

        store.record_selection(people)
        store.record_selection(hiring)

        assert [r.title for r in store.recents] == ["Hiring", "People"]

    def test_reselect_moves_to_front_without_duplicates(self, store) -> None:
        items = [make_result(name) for name in ("People", "Hiring", "Billing")]
        for item in items:
            store.record_selection(item)

        store.record_selection(items[0])

        assert [r.title for r in store.recents] == ["People", "Billing", "Hiring"]

    def test_capped_at_eight(self, store) -> None:
        for i in range(12):
            store.record_selection(make_result(f"Page {i}"))

        titles = [r.title for r in store.recents]
        assert len(titles) == 8
        assert titles[0] == "Page 11"
        assert titles[-1] == "Page 4"

    def test_bounded_and_unique_under_any_sequence(self, store) -> None:
        """However selections interleave, recents stay short and unique."""
        pool = [make_result(f"Page {i}") for i in range(10)]
        for step in range(100):
            store.record_selection(pool[(step * 7) % len(pool)])
            keys = [r.key for r in store.recents]
            assert len(keys) <= 8
            assert len(keys) == len(set(keys))

    def test_dedupes_by_href_and_title(self, store) -> None:
        """Same href with a different title is a different entry."""
        store.record_selection(make_result("People", href="/org/acme/people"))
        store.record_selection(make_result("Directory", href="/org/acme/people"))

        assert len(store.recents) == 2

    def test_recents_is_a_copy(self, store) -> None:
        store.record_selection(make_result("People"))
        store.recents.clear()
        assert len(store.recents) == 1


class TestPins:
    """Tests for pin toggling."""

    def test_toggle_pins_then_unpins(self, store) -> None:
        item = make_result("Billing")

        assert store.toggle_pin(item) is True
        assert store.is_pinned(item)
        assert store.toggle_pin(item) is False
        assert not store.is_pinned(item)
        assert store.pinned == []

    def test_pins_match_by_href(self, store) -> None:
        store.toggle_pin(make_result("Billing", href="/org/acme/settings/billing"))
        renamed = make_result("Invoices", href="/org/acme/settings/billing")

        assert store.is_pinned(renamed)
        assert store.toggle_pin(renamed) is False
        assert store.pinned == []

    def test_newest_pin_first_and_capped(self, store) -> None:
        for i in range(10):
            store.toggle_pin(make_result(f"Page {i}"))

        titles = [p.title for p in store.pinned]
        assert len(titles) == 8
        assert titles[0] == "Page 9"

    def test_clear_forgets_everything(self, store, storage) -> None:
        store.record_selection(make_result("People"))
        store.toggle_pin(make_result("Hiring"))

        store.clear()

        assert store.recents == []
        assert store.pinned == []
        assert json.loads(storage.data[store.recents_key]) == []
        assert json.loads(storage.data[store.pins_key]) == []


class TestPersistence:
    """Tests for loading and saving through a storage backend."""

    def test_keys_are_scoped_by_org(self) -> None:
        store = PersonalizationStore("globex", MemoryStorage())
        assert store.recents_key == "recents_globex"
        assert store.pins_key == "pins_globex"

    def test_writes_items_with_timestamps(self, store, storage) -> None:
        store.record_selection(make_result("People", kind=ResultKind.PAGE))

        entries = json.loads(storage.data["recents_acme"])

        assert len(entries) == 1
        assert entries[0]["item"]["title"] == "People"
        assert entries[0]["item"]["kind"] == "page"
        assert isinstance(entries[0]["timestamp"], float)

    def test_reload_round_trip(self, store, storage) -> None:
        action = make_action(
            "Generate shortlist", "generate-shortlist", params={"job_id": "42"}
        )
        store.record_selection(make_result("People"))
        store.record_selection(action)
        store.toggle_pin(make_result("Hiring"))

        reloaded = PersonalizationStore(ORG, storage)
        reloaded.load()

        assert [r.title for r in reloaded.recents] == ["Generate shortlist", "People"]
        assert reloaded.recents[0].params == {"job_id": "42"}
        assert reloaded.recents[0].action == "generate-shortlist"
        assert [p.title for p in reloaded.pinned] == ["Hiring"]

    def test_orgs_do_not_share_state(self, storage) -> None:
        PersonalizationStore("acme", storage).record_selection(make_result("People"))

        other = PersonalizationStore("globex", storage)
        other.load()

        assert other.recents == []

    def test_load_accepts_bare_items(self, storage) -> None:
        storage.write(
            "recents_acme",
            json.dumps([{"id": "p", "title": "People", "href": "/org/acme/people", "kind": "page"}]),
        )
        store = PersonalizationStore(ORG, storage)
        store.load()

        assert [r.title for r in store.recents] == ["People"]

    def test_load_dedupes_and_caps(self, storage) -> None:
        entries = [
            {"item": {"title": f"Page {i % 10}", "href": f"/p/{i % 10}", "kind": "page"}}
            for i in range(20)
        ]
        storage.write("recents_acme", json.dumps(entries))
        store = PersonalizationStore(ORG, storage)
        store.load()

        keys = [r.key for r in store.recents]
        assert len(keys) == 8
        assert len(set(keys)) == 8

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            '{"item": "not a list"}',
            '[{"item": {"title": "No kind"}}]',
            '[{"item": {"title": "Bad kind", "kind": "team"}}]',
            "[42]",
        ],
    )
    def test_unreadable_state_loads_empty(self, storage, raw) -> None:
        storage.write("recents_acme", raw)
        storage.write("pins_acme", raw)
        store = PersonalizationStore(ORG, storage)

        store.load()

        assert store.recents == []
        assert store.pinned == []

    def test_failing_read_loads_empty(self) -> None:
        storage = MagicMock()
        storage.read.side_effect = PersistenceError("disk gone", key="recents_acme")
        store = PersonalizationStore(ORG, storage)

        store.load()

        assert store.recents == []

    def test_timestamps_follow_the_capped_lists(self, store) -> None:
        for i in range(12):
            store.record_selection(make_result(f"Page {i}"))
        store.toggle_pin(make_result("Billing"))
        store.toggle_pin(make_result("Billing"))

        assert set(store._timestamps) == {r.key for r in store.recents}

    def test_mutating_before_load_keeps_stored_entries(self, storage) -> None:
        seeded = PersonalizationStore(ORG, storage)
        seeded.record_selection(make_result("People"))
        seeded.toggle_pin(make_result("Billing"))

        fresh = PersonalizationStore(ORG, storage)
        fresh.record_selection(make_result("Hiring"))
        fresh.toggle_pin(make_result("Reports"))

        reloaded = PersonalizationStore(ORG, storage)
        reloaded.load()
        assert [r.title for r in reloaded.recents] == ["Hiring", "People"]
        assert [p.title for p in reloaded.pinned] == ["Reports", "Billing"]

    def test_failing_write_keeps_memory_state(self) -> None:
        storage = MagicMock()
        storage.write.side_effect = PersistenceError("quota exceeded")
        storage.read.return_value = None
        store = PersonalizationStore(ORG, storage)

        store.record_selection(make_result("People"))
        assert store.toggle_pin(make_result("Hiring")) is True

        assert [r.title for r in store.recents] == ["People"]
        assert [p.title for p in store.pinned] == ["Hiring"]


class TestJsonFileStorage:
    """Tests for the on-disk backend."""

    def test_missing_key_reads_none(self, tmp_path) -> None:
        assert JsonFileStorage(tmp_path).read("recents_acme") is None

    def test_write_then_read(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path / "state")
        storage.write("recents_acme", "[]")

        assert storage.read("recents_acme") == "[]"
        assert (tmp_path / "state" / "recents_acme.json").exists()
        assert not list((tmp_path / "state").glob("*.tmp"))

    def test_unsafe_key_characters_are_replaced(self, tmp_path) -> None:
        path = JsonFileStorage(tmp_path).path_for("recents_../../etc")
        assert path.parent == tmp_path
        assert "/" not in path.name

    def test_read_error_raises_persistence_error(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)
        storage.path_for("recents_acme").mkdir()

        with pytest.raises(PersistenceError):
            storage.read("recents_acme")

    def test_store_over_files(self, tmp_path) -> None:
        store = PersonalizationStore(ORG, JsonFileStorage(tmp_path))
        store.record_selection(make_result("People"))

        reloaded = PersonalizationStore(ORG, JsonFileStorage(tmp_path))
        reloaded.load()

        assert [r.title for r in reloaded.recents] == ["People"]
