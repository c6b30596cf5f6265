from unittest.mock import MagicMock

from hotcaseai.inference.cache import DEFAULT_MAX_AGE, ModelCache
from hotcaseai.schemas import ClassifierConfig, ClassifierState


def _state():
    return ClassifierState(network=MagicMock(), vocabulary={"a": 1}, config=ClassifierConfig(model_trained=True))


class TestModelCache:
    def test_put_and_get(self, cache, clock):
        state = _state()
        entry = cache.put("m1", state)
        assert cache.get("m1") is entry
        assert entry.state is state
        assert entry.last_used == clock.now
        assert cache.get("other") is None

    def test_touch_updates_last_used(self, cache, clock):
        cache.put("m1", _state())
        clock.advance(30.0)
        cache.touch("m1")
        assert cache.get("m1").last_used == clock.now
        cache.touch("missing")

    def test_put_replaces_and_releases_previous(self, cache):
        first = _state()
        cache.put("m1", first)
        cache.put("m1", _state())
        assert first.network is None
        assert len(cache) == 1

    def test_evict_expired_boundary(self, cache, clock):
        max_age = 60.0
        cache.put("stale", _state())
        clock.advance(max_age + 0.001)
        cache.put("fresh", _state())
        evicted = cache.evict_expired(max_age)
        assert evicted == ["stale"]
        assert "stale" not in cache
        assert "fresh" in cache

    def test_exactly_max_age_is_retained(self, cache, clock):
        cache.put("m1", _state())
        clock.advance(60.0)
        assert cache.evict_expired(60.0) == []

    def test_eviction_releases_model(self, cache, clock):
        state = _state()
        cache.put("m1", state)
        clock.advance(DEFAULT_MAX_AGE + 1.0)
        cache.evict_expired()
        assert state.network is None
        assert not state.usable

    def test_default_max_age_from_env(self, cache, clock, monkeypatch):
        monkeypatch.setenv("HOTCASE_CACHE_MAX_AGE", "10")
        cache.put("m1", _state())
        clock.advance(11.0)
        assert cache.evict_expired() == ["m1"]

    def test_remove_and_clear(self, cache):
        state = _state()
        cache.put("m1", state)
        cache.put("m2", _state())
        assert cache.remove("m1") is True
        assert cache.remove("m1") is False
        assert state.network is None
        cache.clear()
        assert len(cache) == 0

    def test_isolated_instances(self):
        first, second = ModelCache(), ModelCache()
        first.put("m1", _state())
        assert "m1" not in second
