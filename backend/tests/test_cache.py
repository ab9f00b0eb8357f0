from diskcopy import cache


def test_entries_expire(monkeypatch):
    clock = [1000.0]
    monkeypatch.setattr(cache, "_now", lambda: clock[0])
    calls = []

    @cache.ttl_cache(ttl_seconds=60)
    def lookup(key):
        calls.append(key)
        return key.upper()

    assert lookup("a") == "A"
    assert lookup("a") == "A"
    assert calls == ["a"]

    clock[0] += 61
    assert lookup("a") == "A"
    assert calls == ["a", "a"]


def test_ttl_from_environment(monkeypatch):
    monkeypatch.setenv("CACHE_TTL_SECONDS", "5")
    clock = [0.0]
    monkeypatch.setattr(cache, "_now", lambda: clock[0])
    calls = []

    @cache.ttl_cache()
    def lookup():
        calls.append(1)
        return len(calls)

    assert lookup() == 1
    clock[0] = 4
    assert lookup() == 1
    clock[0] = 6
    assert lookup() == 2


def test_clear_all_cache():
    calls = []

    @cache.ttl_cache(ttl_seconds=600)
    def lookup():
        calls.append(1)

    lookup()
    cache.clear_all_cache()
    lookup()
    assert len(calls) == 2


def test_ttl_env_is_read_at_call_time(monkeypatch):
    calls = []

    @cache.ttl_cache()
    def lookup():
        calls.append(1)

    monkeypatch.setenv("CACHE_TTL_SECONDS", "0")
    lookup()
    lookup()
    assert len(calls) == 2

    monkeypatch.setenv("CACHE_TTL_SECONDS", "60")
    lookup()
    lookup()
    assert len(calls) == 3
