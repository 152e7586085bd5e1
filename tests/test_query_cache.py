from query_cache import QueryCache, QueryCacheRegistry


def test_fetch_loads_once():
    cache = QueryCache()
    calls = []

    def loader():
        calls.append(1)
        return ["m1"]

    assert cache.fetch("members", loader) == ["m1"]
    assert cache.fetch("members", loader) == ["m1"]
    assert len(calls) == 1


def test_cached_none_is_a_hit():
    cache = QueryCache()
    cache.set("memberProfile", None)
    assert "memberProfile" in cache
    assert cache.fetch("memberProfile", lambda: "loaded") is None


def test_invalidate_drops_prefix_matches_only():
    cache = QueryCache()
    cache.set("members", [1])
    cache.set(("memberProfileById", "1"), "a")
    cache.set(("memberProfileById", "2"), "b")
    cache.set("memberPayments", [])

    assert cache.invalidate("memberProfileById") == 2
    assert cache.invalidate("members") == 1
    assert cache.keys() == [("memberPayments",)]


def test_registry_keeps_one_cache_per_id():
    registry = QueryCacheRegistry()
    cache_id = registry.new_id()
    cache = registry.for_id(cache_id)
    cache.set("members", [1])

    assert registry.for_id(cache_id) is cache
    assert len(registry) == 1

    registry.drop(cache_id)
    assert len(registry) == 0
    assert "members" not in registry.for_id(cache_id)


def test_registry_evicts_least_recently_used():
    registry = QueryCacheRegistry(max_sessions=2)
    first = registry.for_id("s1")
    first.set("members", [1])
    registry.for_id("s2")
    registry.for_id("s1")
    registry.for_id("s3")

    assert registry.ids() == ["s1", "s3"]
    assert registry.get("s2") is None
    assert registry.get("s1") is first
