from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio

from main import create_app
from schemas.review import ReviewResponse
from services.review import ServiceResult


class RecordingReviewService:
    """Stands in for ReviewService: records every call and replays a canned result."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.result: ServiceResult = ServiceResult.success(None)

    def _record(self, name, *args):
        self.calls.append((name, *args))
        return self.result

    async def create_review(self, dto):
        return self._record("create_review", dto)

    async def get_all_reviews(self):
        return self._record("get_all_reviews")

    async def get_review_by_id(self, review_id):
        return self._record("get_review_by_id", review_id)

    async def get_reviews_by_order_id(self, order_id):
        return self._record("get_reviews_by_order_id", order_id)

    async def update_review(self, review_id, dto):
        return self._record("update_review", review_id, dto)

    async def patch_review(self, review_id, dto):
        return self._record("patch_review", review_id, dto)

    async def delete_review(self, review_id):
        return self._record("delete_review", review_id)


def make_review(**overrides) -> ReviewResponse:
    data = {
        "id": 1,
        "user_id": "alice@example.com",
        "order_id": 42,
        "rating": 5,
        "comment": "great",
        "created_at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return ReviewResponse(**data)


@pytest.fixture
def service():
    return RecordingReviewService()


@pytest.fixture
def app(service):
    return create_app(get_service=lambda: service)


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver/api/userreview/reviews",
    ) as c:
        yield c
