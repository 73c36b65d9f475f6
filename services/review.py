"""Review persistence behind a read-through Redis cache.

Every public coroutine returns a :class:`ServiceResult` instead of raising for
expected failures (missing review, duplicate review for an order). Callers
decide how a :class:`ServiceError` is presented.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Generic, List, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cache import (
    REVIEWS_LIST,
    Redis,
    cache_if_current,
    get_cache_version,
    get_cached,
    invalidate_review,
    make_order_reviews_key,
    make_review_key,
    make_reviews_list_key,
)
from models import Review
from schemas.review import MAX_ID, ReviewRequest, ReviewResponse, ReviewUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorCode(str, Enum):
    not_found = "not_found"
    conflict = "conflict"


@dataclass(frozen=True)
class ServiceError:
    code: ErrorCode
    message: str


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    value: T | None = None
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, code: ErrorCode, message: str) -> "ServiceResult[T]":
        return cls(error=ServiceError(code=code, message=message))


def _serialize(review: Review) -> dict:
    return ReviewResponse.model_validate(review, from_attributes=True).model_dump(
        mode="json"
    )


def _in_range(value: int) -> bool:
    return 0 <= value <= MAX_ID


def _not_found(review_id: int) -> ServiceResult:
    return ServiceResult.failure(ErrorCode.not_found, f"Review {review_id} not found")


class ReviewService:
    def __init__(self, db: AsyncSession, r: Redis):
        self.db = db
        self.r = r

    async def _load(self, review_id: int) -> Review | None:
        if not _in_range(review_id):
            return None
        stmt = select(Review).where(Review.id == review_id)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def _commit(self, review: Review) -> ServiceError | None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.info("review write rejected: %s", exc.orig)
            return ServiceError(
                ErrorCode.conflict,
                "A review for this order by this user already exists",
            )
        await self.db.refresh(review)
        return None

    async def create_review(self, dto: ReviewRequest) -> ServiceResult[ReviewResponse]:
        review = Review(**dto.model_dump())
        self.db.add(review)
        error = await self._commit(review)
        if error:
            return ServiceResult(error=error)

        await invalidate_review(review.id, [review.order_id], self.r)
        logger.info("created review %s for order %s", review.id, review.order_id)
        return ServiceResult.success(ReviewResponse.model_validate(_serialize(review)))

    async def get_all_reviews(self) -> ServiceResult[List[ReviewResponse]]:
        version = await get_cache_version(REVIEWS_LIST, self.r)
        key = make_reviews_list_key(version)
        cached = await get_cached(key, self.r)
        if cached is None:
            stmt = select(Review).order_by(Review.id.asc())
            reviews = (await self.db.execute(stmt)).scalars().all()
            cached = [_serialize(review) for review in reviews]
            await cache_if_current(key, cached, version, self.r)
        else:
            logger.debug("cache hit for %s", key)
        return ServiceResult.success([ReviewResponse.model_validate(c) for c in cached])

    async def get_review_by_id(self, review_id: int) -> ServiceResult[ReviewResponse]:
        key = make_review_key(review_id)
        cached = await get_cached(key, self.r)
        if cached is not None:
            logger.debug("cache hit for %s", key)
            return ServiceResult.success(ReviewResponse.model_validate(cached))

        version = await get_cache_version(REVIEWS_LIST, self.r)
        review = await self._load(review_id)
        if review is None:
            return _not_found(review_id)
        serialized = _serialize(review)
        await cache_if_current(key, serialized, version, self.r)
        return ServiceResult.success(ReviewResponse.model_validate(serialized))

    async def get_reviews_by_order_id(
        self, order_id: int
    ) -> ServiceResult[List[ReviewResponse]]:
        if not _in_range(order_id):
            return ServiceResult.success([])
        key = make_order_reviews_key(order_id)
        cached = await get_cached(key, self.r)
        if cached is None:
            version = await get_cache_version(REVIEWS_LIST, self.r)
            stmt = (
                select(Review).where(Review.order_id == order_id).order_by(Review.id.asc())
            )
            reviews = (await self.db.execute(stmt)).scalars().all()
            cached = [_serialize(review) for review in reviews]
            await cache_if_current(key, cached, version, self.r)
        return ServiceResult.success([ReviewResponse.model_validate(c) for c in cached])

    async def update_review(
        self, review_id: int, dto: ReviewRequest
    ) -> ServiceResult[ReviewResponse]:
        """Replace every writable field, so omitted optional fields become null."""
        return await self._apply(review_id, dto.model_dump())

    async def patch_review(
        self, review_id: int, dto: ReviewUpdate
    ) -> ServiceResult[ReviewResponse]:
        return await self._apply(review_id, dto.model_dump(exclude_unset=True))

    async def _apply(self, review_id: int, changes: dict) -> ServiceResult[ReviewResponse]:
        review = await self._load(review_id)
        if review is None:
            return _not_found(review_id)

        previous_order_id = review.order_id
        for key, val in changes.items():
            setattr(review, key, val)

        error = await self._commit(review)
        if error:
            return ServiceResult(error=error)

        await invalidate_review(review_id, [previous_order_id, review.order_id], self.r)
        logger.info("updated review %s", review_id)
        return ServiceResult.success(ReviewResponse.model_validate(_serialize(review)))

    async def delete_review(self, review_id: int) -> ServiceResult[None]:
        review = await self._load(review_id)
        if review is None:
            return _not_found(review_id)

        order_id = review.order_id
        await self.db.delete(review)
        await self.db.commit()
        await invalidate_review(review_id, [order_id], self.r)
        logger.info("deleted review %s", review_id)
        return ServiceResult.success(None)
