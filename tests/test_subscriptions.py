"""Unit tests for SubscriptionRegistry and its JSON store."""

import json
from pathlib import Path
from typing import Sequence

import pytest

from homewatch.core import JsonSubscriptionStore, SubscriptionRegistry


class _RecordingPersist:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[int, ...]] = []

    def __call__(self, chat_ids: Sequence[int]) -> None:
        self.calls.append(tuple(chat_ids))
        if self.fail:
            raise OSError("disk full")


class TestSubscriptionRegistry:
    def test_subscribe_twice_keeps_one_entry_and_persists_once(self) -> None:
        persist = _RecordingPersist()
        registry = SubscriptionRegistry([], persist=persist)

        assert registry.subscribe(42) is True
        assert registry.subscribe(42) is False

        assert registry.subscribers() == (42,)
        assert persist.calls == [(42,)]

    def test_unsubscribe_absent_chat_is_noop(self) -> None:
        persist = _RecordingPersist()
        registry = SubscriptionRegistry([42], persist=persist)

        assert registry.unsubscribe(7) is False

        assert registry.subscribers() == (42,)
        assert persist.calls == []

    def test_unsubscribe_present_chat_persists_remaining(self) -> None:
        persist = _RecordingPersist()
        registry = SubscriptionRegistry([1, 2, 3], persist=persist)

        assert registry.unsubscribe(2) is True

        assert registry.subscribers() == (1, 3)
        assert persist.calls == [(1, 3)]

    def test_subscribers_keep_subscription_order(self) -> None:
        registry = SubscriptionRegistry()
        for chat_id in (5, -100123, 9):
            registry.subscribe(chat_id)

        assert registry.subscribers() == (5, -100123, 9)
        assert len(registry) == 3
        assert -100123 in registry

    def test_initial_duplicates_are_collapsed(self) -> None:
        registry = SubscriptionRegistry([3, 1, 3, 2, 1])

        assert registry.subscribers() == (3, 1, 2)

    def test_persist_failure_keeps_in_memory_change(self) -> None:
        # Best-effort persistence: the write failing does not undo the change.
        persist = _RecordingPersist(fail=True)
        registry = SubscriptionRegistry([], persist=persist)

        assert registry.subscribe(42) is True
        assert registry.subscribers() == (42,)

        assert registry.unsubscribe(42) is True
        assert registry.subscribers() == ()
        assert persist.calls == [(42,), ()]

    def test_snapshot_is_not_affected_by_later_changes(self) -> None:
        registry = SubscriptionRegistry([1])
        snapshot = registry.subscribers()

        registry.subscribe(2)

        assert snapshot == (1,)


class TestJsonSubscriptionStore:
    def test_missing_file_loads_empty(self, tmp_path: Path) -> None:
        store = JsonSubscriptionStore(tmp_path / "storage.json")

        assert store.load() == []

    def test_round_trip_preserves_ids_and_order(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "storage.json"
        store = JsonSubscriptionStore(path)

        store.save([42, -1001, 7])

        assert JsonSubscriptionStore(path).load() == [42, -1001, 7]
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "subscribedChats": [42, -1001, 7]
        }

    def test_save_overwrites_previous_state(self, tmp_path: Path) -> None:
        path = tmp_path / "storage.json"
        store = JsonSubscriptionStore(path)

        store.save([1, 2, 3])
        store.save([2])

        assert store.load() == [2]
        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[1, 2]",
            '{"subscribedChats": "42"}',
            '{"subscribedChats": [1, "2"]}',
            '{"subscribedChats": [true]}',
            '{"other": []}',
        ],
    )
    def test_malformed_file_loads_empty(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "storage.json"
        path.write_text(content, encoding="utf-8")

        assert JsonSubscriptionStore(path).load() == []

    def test_registry_writes_through_store(self, tmp_path: Path) -> None:
        path = tmp_path / "storage.json"
        store = JsonSubscriptionStore(path)
        registry = SubscriptionRegistry(store.load(), persist=store.save)

        registry.subscribe(42)
        registry.subscribe(42)
        registry.subscribe(7)
        registry.unsubscribe(8)

        reloaded = SubscriptionRegistry(JsonSubscriptionStore(path).load())
        assert reloaded.subscribers() == (42, 7)

    def test_unwritable_location_does_not_abort_subscribe(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = JsonSubscriptionStore(blocker / "storage.json")
        registry = SubscriptionRegistry([], persist=store.save)

        assert registry.subscribe(42) is True
        assert registry.subscribers() == (42,)
