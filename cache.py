"""Redis cache for reviews.

Keys:
    review:{id}             one serialized review
    order:{id}:reviews      reviews of one order
    reviews:list:v{n}       every review, versioned by ``cache:version:reviews:list``

Every write bumps the list version. Readers note the version before going to
the database and only fill the cache if it is unchanged afterwards, so a fill
that raced a write never lands.
"""

import json
import os
from typing import Any, Iterable

from dotenv import load_dotenv
from fastapi import Request
from redis import asyncio as aioredis

Redis = aioredis.Redis

load_dotenv()

_redis: Redis | None = None
VERSION_KEY_PREFIX = "cache:version:"
REVIEWS_LIST = "reviews:list"


def cache_ttl() -> int:
    return int(os.getenv("CACHE_TTL", "300"))


def redis_url() -> str:
    """``REDIS_URL`` if set, otherwise built from ``REDIS_HOST``/``REDIS_PORT``/``REDIS_DB``."""
    if raw := os.getenv("REDIS_URL"):
        return raw
    return "redis://{}:{}/{}".format(
        os.getenv("REDIS_HOST", "localhost"),
        os.getenv("REDIS_PORT", "6379"),
        os.getenv("REDIS_DB", "0"),
    )


async def init_redis(url: str | None = None) -> Redis:
    """Create the process-wide client on first use."""
    global _redis
    if _redis is None:
        _redis = aioredis.from_url(url or redis_url(), decode_responses=True)
    return _redis


async def close_redis():
    global _redis
    if _redis is not None:
        await _redis.close()
        _redis = None


async def get_redis(request: Request) -> Redis:
    """FastAPI dependency: the client stored on app state by the lifespan."""
    if getattr(request.app.state, "redis", None) is None:
        request.app.state.redis = await init_redis()
    return request.app.state.redis


async def get_cache_version(name: str, r: Redis) -> int:
    raw = await r.get(f"{VERSION_KEY_PREFIX}{name}")
    return int(raw) if raw is not None else 1


async def bump_cache_version(name: str, r: Redis) -> int:
    return int(await r.incr(f"{VERSION_KEY_PREFIX}{name}"))


def make_review_key(review_id: int) -> str:
    return f"review:{review_id}"


def make_order_reviews_key(order_id: int) -> str:
    return f"order:{order_id}:reviews"


def make_reviews_list_key(version: int) -> str:
    return f"{REVIEWS_LIST}:v{version}"


async def get_cached(key: str, r: Redis) -> Any | None:
    raw = await r.get(key)
    return json.loads(raw) if raw else None


async def cache_if_current(key: str, data: Any, version: int, r: Redis) -> bool:
    """Store ``data`` unless a write bumped the version since ``version`` was read."""
    if await get_cache_version(REVIEWS_LIST, r) != version:
        return False
    await r.set(key, json.dumps(data), ex=cache_ttl())
    return True


async def invalidate_review(review_id: int, order_ids: Iterable[int | None], r: Redis):
    # bump first: a reader that checked before the bump filled before the deletes
    await bump_cache_version(REVIEWS_LIST, r)
    keys = [make_review_key(review_id)]
    keys += [make_order_reviews_key(oid) for oid in set(order_ids) if oid is not None]
    # In cluster mode, delete keys individually to avoid CROSSSLOT on multi-key DEL.
    for key in keys:
        await r.delete(key)
