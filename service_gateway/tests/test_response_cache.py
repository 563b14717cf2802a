"""
Unit tests for the provider response cache.
"""

from service_gateway.app.caching.response_cache import ResponseCache


class TestResponseCache:
    """Test cases for ResponseCache."""

    def test_hit_within_window(self, fake_clock):
        cache = ResponseCache(60, clock=fake_clock)
        cache.set("https://api.example.test/a", {"value": 1})

        fake_clock.advance(59.9)

        assert cache.lookup("https://api.example.test/a").payload == {"value": 1}

    def test_miss_after_window(self, fake_clock):
        cache = ResponseCache(60, clock=fake_clock)
        cache.set("key", {"value": 1})

        fake_clock.advance(60)

        assert cache.lookup("key") is None

    def test_expired_entry_is_kept_until_overwritten(self, fake_clock):
        cache = ResponseCache(60, clock=fake_clock)
        cache.set("key", {"value": 1})
        fake_clock.advance(120)

        assert cache.lookup("key") is None
        assert len(cache) == 1

        cache.set("key", {"value": 2})

        assert len(cache) == 1
        entry = cache.lookup("key")
        assert entry.payload == {"value": 2}
        assert entry.stored_at == fake_clock.now

    def test_falsy_payloads_are_cached(self, fake_clock):
        cache = ResponseCache(60, clock=fake_clock)
        cache.set("empty", [])

        entry = cache.lookup("empty")

        assert entry is not None
        assert entry.payload == []

    def test_zero_duration_disables_cache(self, fake_clock):
        cache = ResponseCache(0, clock=fake_clock)
        cache.set("key", {"value": 1})

        assert cache.enabled is False
        assert cache.lookup("key") is None
