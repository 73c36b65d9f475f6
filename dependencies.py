from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cache import Redis, get_redis
from database import get_async_db
from services.review import ReviewService


async def get_review_service(
    db: AsyncSession = Depends(get_async_db),
    r: Redis = Depends(get_redis),
) -> ReviewService:
    """Build a request-scoped service over the request's session and Redis client."""
    return ReviewService(db, r)
