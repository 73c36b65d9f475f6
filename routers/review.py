import os
from typing import Any, Callable, List

from fastapi import APIRouter, Depends, HTTPException, Path, status
from fastapi.responses import PlainTextResponse

from schemas.review import MAX_ID, ReviewRequest, ReviewResponse, ReviewUpdate
from services.review import ErrorCode, ReviewService, ServiceResult

REVIEWS_PREFIX = os.getenv("REVIEWS_PREFIX", "/api/userreview/reviews")

ERROR_STATUS = {
    ErrorCode.not_found: status.HTTP_404_NOT_FOUND,
    ErrorCode.conflict: status.HTTP_409_CONFLICT,
}


def unwrap(result: ServiceResult) -> Any:
    """Return the service value or raise the matching HTTP error."""
    if result.error is not None:
        raise HTTPException(
            status_code=ERROR_STATUS[result.error.code], detail=result.error.message
        )
    return result.value


def create_router(
    get_service: Callable[..., ReviewService], prefix: str = REVIEWS_PREFIX
) -> APIRouter:
    """Build the reviews router around ``get_service``, a FastAPI dependency
    yielding the service each request talks to."""

    async def create_review(
        review: ReviewRequest,
        service: ReviewService = Depends(get_service),
    ):
        return unwrap(await service.create_review(review))

    async def get_all_reviews(service: ReviewService = Depends(get_service)):
        return unwrap(await service.get_all_reviews())

    async def get_review_by_id(
        review_id: int = Path(..., ge=0, le=MAX_ID),
        service: ReviewService = Depends(get_service),
    ):
        return unwrap(await service.get_review_by_id(review_id))

    async def get_reviews_by_order_id(
        order_id: int = Path(..., ge=0, le=MAX_ID),
        service: ReviewService = Depends(get_service),
    ):
        return unwrap(await service.get_reviews_by_order_id(order_id))

    async def update_review(
        review: ReviewRequest,
        review_id: int = Path(..., ge=0, le=MAX_ID),
        service: ReviewService = Depends(get_service),
    ):
        return unwrap(await service.update_review(review_id, review))

    async def patch_review(
        review: ReviewUpdate,
        review_id: int = Path(..., ge=0, le=MAX_ID),
        service: ReviewService = Depends(get_service),
    ):
        return unwrap(await service.patch_review(review_id, review))

    async def delete_review(
        review_id: int = Path(..., ge=0, le=MAX_ID),
        service: ReviewService = Depends(get_service),
    ):
        unwrap(await service.delete_review(review_id))
        return PlainTextResponse("deleted")

    # (method, path, endpoint, extra add_api_route options)
    routes = [
        ("POST", "/", create_review, {"response_model": ReviewResponse}),
        ("GET", "/", get_all_reviews, {"response_model": List[ReviewResponse]}),
        ("GET", "/{review_id}", get_review_by_id, {"response_model": ReviewResponse}),
        (
            "GET",
            "/order/{order_id}",
            get_reviews_by_order_id,
            {"response_model": List[ReviewResponse]},
        ),
        ("PUT", "/{review_id}", update_review, {"response_model": ReviewResponse}),
        ("PATCH", "/{review_id}", patch_review, {"response_model": ReviewResponse}),
        ("DELETE", "/{review_id}", delete_review, {"response_class": PlainTextResponse}),
    ]

    router = APIRouter(prefix=prefix, tags=["reviews"])
    for method, path, endpoint, options in routes:
        router.add_api_route(path, endpoint, methods=[method], **options)
    return router
