import pytest

from cachescribe import Cache, cachescribe


@pytest.fixture
def memory_cache():
    """Cache with snapshotting disabled."""
    return cachescribe(snapshot=False)


@pytest.fixture
def snapshot_dir(tmp_path):
    return tmp_path / "snapshots"


@pytest.fixture
def make_cache(snapshot_dir):
    """Factory for snapshot-backed caches in a temp directory, closed on teardown."""
    created: list[Cache] = []

    def _make(**options) -> Cache:
        options.setdefault("directory", snapshot_dir)
        cache = cachescribe(**options)
        created.append(cache)
        return cache

    yield _make

    for cache in created:
        if not cache.closed:
            cache.close()
