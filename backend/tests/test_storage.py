"""
Tests for the file-backed key-value store.
"""

import asyncio

import pytest

from fittrack.storage import LocalStorage


class TestLocalStorage:
    """Tests for LocalStorage."""

    @pytest.mark.asyncio
    async def test_get_missing_key(self, store):
        assert await store.get("user:1:profile") is None
        assert await store.exists("user:1:profile") is False

    @pytest.mark.asyncio
    async def test_set_and_get(self, store):
        await store.set("user:1:profile", {"name": "Alex", "height": 170})
        assert await store.get("user:1:profile") == {"name": "Alex", "height": 170}
        assert await store.exists("user:1:profile") is True

    @pytest.mark.asyncio
    async def test_set_replaces_value(self, store):
        await store.set("workouts:library", [1])
        await store.set("workouts:library", [1, 2])
        assert await store.get("workouts:library") == [1, 2]

    @pytest.mark.asyncio
    async def test_key_maps_to_nested_json_file(self, store):
        await store.set("user:42:food:42:1700000000000", {"calories": 100})
        assert (store.base_dir / "user" / "42" / "food" / "42" / "1700000000000.json").is_file()

    @pytest.mark.asyncio
    async def test_add_only_when_absent(self, store):
        assert await store.add("user:1:weight:1:5", {"weight": 70}) is True
        assert await store.add("user:1:weight:1:5", {"weight": 99}) is False
        assert await store.get("user:1:weight:1:5") == {"weight": 70}

    @pytest.mark.asyncio
    async def test_concurrent_adds_have_one_winner(self, store):
        results = await asyncio.gather(
            *(store.add("auth:email:alex@example.com", {"userId": f"u{i}"}) for i in range(5))
        )

        assert results.count(True) == 1
        winner = results.index(True)
        assert await store.get("auth:email:alex@example.com") == {"userId": f"u{winner}"}
        assert list(store.base_dir.rglob("*.tmp")) == []

    @pytest.mark.asyncio
    async def test_concurrent_sets_on_one_key(self, store):
        values = [{"n": i} for i in range(5)]
        await asyncio.gather(*(store.set("workouts:library", value) for value in values))

        assert await store.get("workouts:library") in values
        assert list(store.base_dir.rglob("*.tmp")) == []

    @pytest.mark.asyncio
    async def test_scan_prefix_sorted_by_key(self, store):
        await store.set("user:1:food:1:300", {"n": 3})
        await store.set("user:1:food:1:100", {"n": 1})
        await store.set("user:1:food:1:200", {"n": 2})
        await store.set("user:1:weight:1:150", {"n": 99})
        await store.set("user:2:food:2:100", {"n": 42})

        results = await store.scan_prefix("user:1:food:")

        assert [key for key, _ in results] == [
            "user:1:food:1:100",
            "user:1:food:1:200",
            "user:1:food:1:300",
        ]
        assert await store.get_by_prefix("user:1:food:") == [{"n": 1}, {"n": 2}, {"n": 3}]

    @pytest.mark.asyncio
    async def test_scan_prefix_partial_segment(self, store):
        await store.set("user:1:food:1:100", {"n": 1})
        await store.set("user:10:food:10:100", {"n": 10})

        # Plain string prefix: "user:1" also matches "user:10"
        keys = [key for key, _ in await store.scan_prefix("user:1")]
        assert keys == ["user:10:food:10:100", "user:1:food:1:100"]

    @pytest.mark.asyncio
    async def test_scan_missing_prefix(self, store):
        assert await store.scan_prefix("user:nobody:food:") == []

    @pytest.mark.asyncio
    async def test_email_segments_round_trip(self, store):
        await store.set("auth:email:Alex.Smith+fit@example.com", {"userId": "u1"})
        results = await store.scan_prefix("auth:email:")
        assert results == [("auth:email:Alex.Smith+fit@example.com", {"userId": "u1"})]

    @pytest.mark.asyncio
    async def test_dot_segments_stay_inside_base_dir(self, store):
        await store.set("user:..:profile", {"ok": True})
        assert await store.get("user:..:profile") == {"ok": True}
        for path in store.base_dir.rglob("*.json"):
            assert store.base_dir in path.parents

    @pytest.mark.parametrize("key", ["", "user:", "user::profile", ":profile"])
    def test_rejects_malformed_keys(self, store, key):
        with pytest.raises(ValueError):
            store._get_full_path(key)

    @pytest.mark.asyncio
    async def test_values_persist_across_instances(self, tmp_path):
        first = LocalStorage(str(tmp_path / "kv"))
        await first.set("user:1:profile", {"name": "Alex"})

        second = LocalStorage(str(tmp_path / "kv"))
        assert await second.get("user:1:profile") == {"name": "Alex"}
