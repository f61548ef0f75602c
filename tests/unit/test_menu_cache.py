"""Unit tests for MenuCache."""

import pytest

from site_menu_service.models.menu_models import DisplayMenuItem, MenuItem
from site_menu_service.services.menu_cache import DEFAULT_TTL_SECONDS, MenuCache
from site_menu_service.services.menu_tree import build_tree


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.mark.unit
class TestMenuCache:
    """Test suite for MenuCache."""

    @pytest.fixture
    def clock(self) -> FakeClock:
        """Create a controllable clock."""
        return FakeClock()

    @pytest.fixture
    def cache(self, clock: FakeClock) -> MenuCache:
        """Create a cache driven by the fake clock."""
        return MenuCache(ttl_seconds=DEFAULT_TTL_SECONDS, clock=clock)

    @pytest.fixture
    def forest(self, footer_items: list[MenuItem]) -> list[DisplayMenuItem]:
        """Create the assembled footer menu."""
        return build_tree(footer_items)

    def test_default_ttl_is_five_minutes(self) -> None:
        """Test the default time-to-live."""
        assert MenuCache().ttl_seconds == 300

    def test_get_unknown_location_is_miss(self, cache: MenuCache) -> None:
        """Test that an empty cache reports a miss."""
        assert cache.get("header") is None

    def test_put_then_get_returns_equal_forest(
        self, cache: MenuCache, forest: list[DisplayMenuItem]
    ) -> None:
        """Test that a stored forest is served back."""
        cache.put("footer", forest)

        assert cache.get("footer") == forest

    def test_empty_forest_is_a_hit(self, cache: MenuCache) -> None:
        """Test that a cached empty menu is distinguishable from a miss."""
        cache.put("header", [])

        assert cache.get("header") == []

    def test_mutating_returned_forest_does_not_change_cache(
        self, cache: MenuCache, forest: list[DisplayMenuItem]
    ) -> None:
        """Test that callers receive independent copies."""
        cache.put("footer", forest)

        first = cache.get("footer")
        assert first is not None
        first[0].label = "Changed"
        first[0].children.clear()
        first.pop()

        second = cache.get("footer")
        assert second is not None
        assert [node.label for node in second] == ["Home", "Contact"]
        assert [child.label for child in second[0].children] == ["About"]

    def test_mutating_stored_forest_does_not_change_cache(
        self, cache: MenuCache, forest: list[DisplayMenuItem]
    ) -> None:
        """Test that put stores its own copy."""
        cache.put("footer", forest)

        forest[0].children.clear()

        cached = cache.get("footer")
        assert cached is not None
        assert [child.label for child in cached[0].children] == ["About"]

    def test_entry_expires_after_ttl(
        self, cache: MenuCache, clock: FakeClock, forest: list[DisplayMenuItem]
    ) -> None:
        """Test that an entry older than the TTL is a miss."""
        cache.put("footer", forest)

        clock.advance(DEFAULT_TTL_SECONDS - 1)
        assert cache.get("footer") is not None

        clock.advance(1)
        assert cache.get("footer") is None

    def test_put_after_expiry_overwrites_entry(
        self, cache: MenuCache, clock: FakeClock, forest: list[DisplayMenuItem]
    ) -> None:
        """Test that an expired entry is replaced by the next put."""
        cache.put("footer", forest)
        clock.advance(DEFAULT_TTL_SECONDS + 10)

        cache.put("footer", forest[:1])

        cached = cache.get("footer")
        assert cached is not None
        assert [node.label for node in cached] == ["Home"]

    def test_invalidate_removes_location(
        self, cache: MenuCache, forest: list[DisplayMenuItem]
    ) -> None:
        """Test that invalidate drops only the given location."""
        cache.put("footer", forest)
        cache.put("header", forest)

        cache.invalidate("footer")

        assert cache.get("footer") is None
        assert cache.get("header") is not None

    def test_invalidate_missing_location_is_noop(self, cache: MenuCache) -> None:
        """Test that invalidating an absent entry does not raise."""
        cache.invalidate("sidebar")

        assert cache.locations() == []

    def test_invalidate_all_clears_every_location(
        self, cache: MenuCache, forest: list[DisplayMenuItem]
    ) -> None:
        """Test that invalidate_all empties the cache."""
        cache.put("footer", forest)
        cache.put("header", forest)

        cache.invalidate_all()

        assert cache.locations() == []
        assert cache.get("footer") is None

    def test_invalidate_all_on_empty_cache(self, cache: MenuCache) -> None:
        """Test that clearing an empty cache does not raise."""
        cache.invalidate_all()

        assert cache.locations() == []

    def test_locations_lists_cached_keys(
        self, cache: MenuCache, forest: list[DisplayMenuItem]
    ) -> None:
        """Test that locations are reported sorted."""
        cache.put("header", forest)
        cache.put("footer", [])

        assert cache.locations() == ["footer", "header"]
