"""Tests for snapshot loading on construction and persisting on close."""

import time
from datetime import datetime, timezone

import pytest

from cachescribe import (
    ConfigValidationError,
    SnapshotLoadError,
    SnapshotWriteError,
    UnsupportedAlgorithmError,
    cachescribe,
)


class _BrokenTransformer:
    def serialize(self, value):
        raise RuntimeError("disk full")

    def deserialize(self, text):
        raise RuntimeError("unreadable")


class TestPersistence:
    def test_close_then_reload(self, make_cache):
        cache = make_cache(namespace="app")
        cache.set("str", "value")
        cache.set("nested", {"items": [1, 2, {"deep": True}]})
        cache.set("when", datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))
        cache.close()

        reloaded = make_cache(namespace="app")
        assert reloaded.get("str") == "value"
        assert reloaded.get("nested") == {"items": [1, 2, {"deep": True}]}
        assert reloaded.get("when") == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert list(reloaded.keys()) == ["str", "nested", "when"]

    def test_expired_entries_not_reloaded(self, make_cache):
        cache = make_cache(namespace="app")
        cache.set("short", 1, 0.05)
        cache.set("long", 2)
        cache.close()
        time.sleep(0.1)

        reloaded = make_cache(namespace="app")
        assert reloaded.has("short") is False
        assert len(reloaded) == 1

    def test_namespaces_are_isolated(self, make_cache):
        first = make_cache(namespace="one")
        first.set("k", "from one")
        first.close()

        second = make_cache(namespace="two")
        assert second.get("k") is None
        assert first.path != second.path

    def test_same_namespace_last_close_wins(self, make_cache):
        a = make_cache(namespace="shared")
        b = make_cache(namespace="shared")
        a.set("k", "a")
        b.set("k", "b")
        a.close()
        b.close()
        assert make_cache(namespace="shared").get("k") == "b"

    def test_context_manager_persists(self, snapshot_dir):
        with cachescribe(directory=snapshot_dir, namespace="ctx") as cache:
            cache.set("k", "v")
        assert cache.closed
        assert cache.path.exists()

        with cachescribe(directory=snapshot_dir, namespace="ctx") as cache:
            assert cache.get("k") == "v"

    def test_close_is_idempotent(self, make_cache):
        cache = make_cache(namespace="app")
        cache.set("k", "v")
        cache.close()
        cache.path.unlink()
        cache.close()
        assert not cache.path.exists()

    def test_changes_after_close_not_persisted(self, make_cache):
        cache = make_cache(namespace="app")
        cache.close()
        cache.set("late", 1)
        assert cache.get("late") == 1
        assert make_cache(namespace="app").has("late") is False

    def test_memory_mode_never_writes(self, snapshot_dir):
        cache = cachescribe(snapshot=False, directory=snapshot_dir)
        cache.set("k", "v")
        cache.close()
        assert not cache.path.exists()
        assert not snapshot_dir.exists()

    def test_memory_mode_ignores_existing_snapshot(self, make_cache, snapshot_dir):
        cache = make_cache(namespace="app")
        cache.set("k", "v")
        cache.close()
        memory = cachescribe(snapshot=False, directory=snapshot_dir, namespace="app")
        assert memory.get("k") is None


class TestExitHook:
    def test_registered_when_snapshotting(self, make_cache, monkeypatch):
        registered = []
        monkeypatch.setattr("atexit.register", registered.append)
        cache = make_cache(namespace="app")
        assert registered == [cache._close_at_exit]

    def test_not_registered_in_memory_mode(self, monkeypatch):
        registered = []
        monkeypatch.setattr("atexit.register", registered.append)
        cachescribe(snapshot=False)
        assert registered == []

    def test_unregistered_on_close(self, make_cache, monkeypatch):
        unregistered = []
        monkeypatch.setattr("atexit.unregister", unregistered.append)
        cache = make_cache(namespace="app")
        cache.close()
        assert unregistered == [cache._close_at_exit]

    def test_exit_hook_persists(self, make_cache):
        cache = make_cache(namespace="app")
        cache.set("k", "v")
        cache._close_at_exit()
        assert cache.closed
        assert make_cache(namespace="app").get("k") == "v"

    def test_exit_hook_logs_write_failure(self, make_cache, caplog):
        cache = make_cache(namespace="app", transformer=_BrokenTransformer())
        cache._close_at_exit()
        assert cache.closed
        assert "Failed to write cache snapshot" in caplog.text


class TestFailures:
    def test_explicit_close_raises_write_error(self, make_cache):
        cache = make_cache(namespace="app", transformer=_BrokenTransformer())
        with pytest.raises(SnapshotWriteError) as exc_info:
            cache.close()
        assert exc_info.value.namespace == "app"
        assert exc_info.value.path == cache.path
        # Not retried
        cache.close()

    def test_corrupt_snapshot_fails_construction(self, make_cache):
        cache = make_cache(namespace="app")
        cache.close()
        cache.path.write_text("garbage")
        with pytest.raises(SnapshotLoadError):
            make_cache(namespace="app")

    def test_transformer_error_fails_construction(self, make_cache):
        cache = make_cache(namespace="app")
        cache.close()
        with pytest.raises(SnapshotLoadError):
            make_cache(namespace="app", transformer=_BrokenTransformer())

    def test_unsupported_algorithm_fails_construction(self, snapshot_dir):
        with pytest.raises(UnsupportedAlgorithmError):
            cachescribe(directory=snapshot_dir, algorithm="unknown")

    def test_digest_fn_must_return_string(self, snapshot_dir):
        with pytest.raises(ConfigValidationError):
            cachescribe(snapshot=False, digest_fn=lambda algorithm, values: None)
