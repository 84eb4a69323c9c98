from wecare.infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter


def test_memory_rate_limiter_allows_then_blocks():
    rl = InMemoryRateLimiter()
    key = "login:127.0.0.1:a@b.com"
    assert rl.allow(key, max_requests=2, window_seconds=60) is True
    assert rl.allow(key, max_requests=2, window_seconds=60) is True
    assert rl.allow(key, max_requests=2, window_seconds=60) is False


def test_memory_rate_limiter_keys_are_independent():
    rl = InMemoryRateLimiter()
    assert rl.allow("k1", max_requests=1, window_seconds=60) is True
    assert rl.allow("k1", max_requests=1, window_seconds=60) is False
    assert rl.allow("k2", max_requests=1, window_seconds=60) is True


def test_memory_rate_limiter_window_expires(monkeypatch):
    from wecare.infrastructure.rate_limit import memory_rate_limiter as mod

    now = [1000.0]
    monkeypatch.setattr(mod.time, "time", lambda: now[0])
    rl = InMemoryRateLimiter()
    assert rl.allow("k", max_requests=1, window_seconds=60) is True
    assert rl.allow("k", max_requests=1, window_seconds=60) is False
    now[0] += 61
    assert rl.allow("k", max_requests=1, window_seconds=60) is True
