"""Tests for the identity-keyed ResourceCache."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

from kubestalk.cache import ResourceCache, identity_key


def _obj(name: str = "my-app", namespace: str = "default", replicas: int = 1, rv: str = "1") -> dict:
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": name, "namespace": namespace, "resourceVersion": rv},
        "spec": {"replicas": replicas},
    }


# ---------------------------------------------------------------------------
# Identity keys
# ---------------------------------------------------------------------------


class TestIdentityKey:
    def test_key_ignores_resource_version(self) -> None:
        assert identity_key(_obj(rv="1")) == identity_key(_obj(rv="2", replicas=3))

    def test_key_format(self) -> None:
        assert identity_key(_obj()) == "apps/v1, Kind=Deployment/default/my-app"

    def test_namespace_distinguishes(self) -> None:
        assert identity_key(_obj(namespace="a")) != identity_key(_obj(namespace="b"))

    def test_kind_distinguishes(self) -> None:
        svc = {"apiVersion": "v1", "kind": "Service", "metadata": {"name": "my-app", "namespace": "default"}}
        assert identity_key(svc) != identity_key(_obj())


# ---------------------------------------------------------------------------
# get / set / delete
# ---------------------------------------------------------------------------


class TestGetSetDelete:
    def test_unseen_key_is_absent(self) -> None:
        cache = ResourceCache()
        assert cache.get("nope") == (None, None)

    def test_set_then_get_returns_equal_copy(self) -> None:
        cache = ResourceCache()
        obj = _obj()
        cache.set(obj)

        stored, last_seen = cache.get(obj)
        assert stored == obj
        assert stored is not obj
        assert last_seen is not None

    def test_mutating_returned_copy_does_not_affect_cache(self) -> None:
        cache = ResourceCache()
        cache.set(_obj())

        stored, _ = cache.get(_obj())
        assert stored is not None
        stored["spec"]["replicas"] = 99

        again, _ = cache.get(_obj())
        assert again is not None
        assert again["spec"]["replicas"] == 1

    def test_mutating_original_after_set_does_not_affect_cache(self) -> None:
        cache = ResourceCache()
        obj = _obj()
        cache.set(obj)
        obj["spec"]["replicas"] = 5

        stored, _ = cache.get(obj)
        assert stored is not None
        assert stored["spec"]["replicas"] == 1

    def test_set_records_current_time(self) -> None:
        cache = ResourceCache()
        before = datetime.now(tz=UTC)
        cache.set(_obj())
        _, last_seen = cache.get(_obj())
        assert last_seen is not None
        assert before <= last_seen <= datetime.now(tz=UTC) + timedelta(seconds=1)

    def test_set_replaces(self) -> None:
        cache = ResourceCache()
        cache.set(_obj(replicas=1))
        cache.set(_obj(replicas=3))
        stored, _ = cache.get(_obj())
        assert stored is not None
        assert stored["spec"]["replicas"] == 3
        assert len(cache) == 1

    def test_explicit_key(self) -> None:
        cache = ResourceCache()
        cache.set("custom", _obj())
        assert "custom" in cache
        assert cache.get("custom")[0] == _obj()

    def test_delete_then_get_is_absent(self) -> None:
        cache = ResourceCache()
        cache.set(_obj())
        cache.delete(_obj())
        assert cache.get(_obj()) == (None, None)

    def test_delete_missing_is_noop(self) -> None:
        cache = ResourceCache()
        cache.delete(_obj())
        assert len(cache) == 0


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrentAccess:
    def test_parallel_writers_on_different_keys(self) -> None:
        cache = ResourceCache()

        def _work(i: int) -> None:
            for replicas in range(20):
                cache.set(_obj(name=f"app-{i}", replicas=replicas))
                stored, _ = cache.get(_obj(name=f"app-{i}"))
                assert stored is not None
                assert stored["spec"]["replicas"] == replicas

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(_work, range(16)))

        assert len(cache) == 16

    def test_parallel_readers_and_writer_on_same_key_see_whole_entries(self) -> None:
        cache = ResourceCache()
        cache.set(_obj(replicas=0, rv="0"))

        def _write() -> None:
            for i in range(200):
                cache.set(_obj(replicas=i, rv=str(i)))

        def _read() -> None:
            for _ in range(200):
                stored, _ = cache.get(_obj())
                assert stored is not None
                # replicas and resourceVersion were written together
                assert str(stored["spec"]["replicas"]) == stored["metadata"]["resourceVersion"]

        with ThreadPoolExecutor(max_workers=4) as pool:
            futures = [pool.submit(_write), pool.submit(_read), pool.submit(_read)]
            for future in futures:
                future.result()
