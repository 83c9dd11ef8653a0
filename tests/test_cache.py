import logging

import pytest
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from portfolio.cache import ContentCache, cached


class Item(BaseModel):
    name: str


class Source:
    """Minimal repository-like object for exercising the decorator."""

    def __init__(self, cache: ContentCache):
        self.cache = cache
        self.calls = 0
        self.fail = False

    @cached("items", tags=["things"], ttl=60, model=list[Item], fallback=list)
    async def items(self, kind: str = "all") -> list[Item]:
        self.calls += 1
        if self.fail:
            raise PyMongoError("store down")
        return [Item(name=f"{kind}-{self.calls}")]


async def test_set_get_and_tag_index(cache, redis):
    await cache.set("test:cache:a:{}", "1", 60, ["t1", "t2"])
    assert await cache.get("test:cache:a:{}") == "1"
    assert await redis.smembers("test:tag:t1") == {"test:cache:a:{}"}
    assert await redis.ttl("test:cache:a:{}") <= 60


async def test_invalidate_tag_removes_only_tagged_entries(cache):
    await cache.set("test:cache:a:{}", "a", 60, ["t1"])
    await cache.set("test:cache:b:{}", "b", 60, ["t1", "t2"])
    await cache.set("test:cache:c:{}", "c", 60, ["t2"])

    assert await cache.invalidate_tag("t1") == 2
    assert await cache.get("test:cache:a:{}") is None
    assert await cache.get("test:cache:b:{}") is None
    assert await cache.get("test:cache:c:{}") == "c"


async def test_invalidate_unknown_tag_is_a_noop(cache):
    assert await cache.invalidate_tag("nothing") == 0


async def test_cache_key_depends_on_arguments(cache):
    assert cache.cache_key("f", {"a": 1}) != cache.cache_key("f", {"a": 2})
    assert cache.cache_key("f", {"a": 1, "b": 2}) == cache.cache_key("f", {"b": 2, "a": 1})


async def test_cached_serves_hits_until_invalidated(cache):
    source = Source(cache)
    first = await source.items()
    assert await source.items() == first
    assert source.calls == 1

    await cache.invalidate_tag("things")
    assert await source.items() != first
    assert source.calls == 2


async def test_cached_keys_on_bound_arguments(cache):
    source = Source(cache)
    await source.items()
    await source.items("all")
    await source.items(kind="all")
    assert source.calls == 1
    await source.items("other")
    assert source.calls == 2


async def test_store_error_returns_fallback_and_is_not_cached(cache, caplog):
    source = Source(cache)
    source.fail = True
    with caplog.at_level(logging.ERROR, logger="portfolio.cache"):
        assert await source.items() == []
    assert "Error fetching items" in caplog.text

    source.fail = False
    assert len(await source.items()) == 1


async def test_stats_counts_entries_and_tags(cache):
    source = Source(cache)
    await source.items()
    await source.items("other")
    stats = await cache.stats()
    assert stats["entries"] == 2
    assert stats["tags"] == {"things": 2}


def test_cached_exposes_name_and_tags():
    assert Source.items.cache_name == "items"
    assert Source.items.cache_tags == ("things",)


@pytest.mark.parametrize("limit", [1, 5])
async def test_default_and_explicit_arguments_share_entries(cache, limit):
    class Limited:
        def __init__(self, c):
            self.cache = c
            self.calls = 0

        @cached("limited", tags=["x"], ttl=60, model=list[int], fallback=list)
        async def get(self, limit: int = 1) -> list[int]:
            self.calls += 1
            return list(range(limit))

    src = Limited(cache)
    await src.get(limit)
    await src.get(limit=limit)
    assert src.calls == 1


async def test_unreadable_cache_entry_is_treated_as_miss(cache, caplog):
    source = Source(cache)
    key = cache.cache_key("items", {"kind": "all"})
    await cache.set(key, '[{"title": "old shape"}]', 60, ["things"])

    with caplog.at_level(logging.WARNING, logger="portfolio.cache"):
        items = await source.items()
    assert items == [Item(name="all-1")]
    assert "Discarding unreadable cache entry for items" in caplog.text

    # the rebuilt entry replaced the stale one
    assert await source.items() == items
    assert source.calls == 1
