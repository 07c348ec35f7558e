from icn_api.cache import TTLCache


def test_set_then_get_returns_value(clock):
    cache = TTLCache(default_ttl=30, clock=clock)
    cache.set("parking:T1", {"floors": 3})
    assert cache.get("parking:T1") == {"floors": 3}
    assert cache.has("parking:T1")


def test_get_expires_and_evicts(clock):
    cache = TTLCache(default_ttl=30, clock=clock)
    cache.set("parking:T1", "v")

    clock.advance(30)
    assert cache.get("parking:T1") == "v"

    clock.advance(1)
    assert cache.get("parking:T1") is None
    assert len(cache) == 0


def test_get_with_meta_ignores_expiry(clock):
    cache = TTLCache(default_ttl=30, clock=clock)
    cache.set("congestion:T2", "old", ttl=10)
    clock.advance(11)

    assert not cache.has("congestion:T2")
    entry = cache.get_with_meta("congestion:T2")
    assert entry is not None
    assert entry.data == "old"
    assert entry.timestamp == 1_000.0


def test_invalidate_by_prefix(clock):
    cache = TTLCache(clock=clock)
    cache.set("forecast:T1:20260125", 1)
    cache.set("forecast:T2:20260125", 2)
    cache.set("parking:T1", 3)

    assert cache.invalidate_by_prefix("forecast:") == 2
    assert cache.get("parking:T1") == 3
    assert cache.get("forecast:T1:20260125") is None


def test_invalidate_and_clear(clock):
    cache = TTLCache(clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.invalidate("a")
    assert cache.get_with_meta("a") is None
    cache.clear()
    assert len(cache) == 0
