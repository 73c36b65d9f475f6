"""
Async seeding script to populate the running API with order reviews.

Usage:
    python scripts/seed_async.py --orders 20 --reviews-per-order 3 --base-url http://localhost:8000

The API must be running and reachable at the provided base URL.
"""

import argparse
import asyncio
import os
import random
import uuid

import httpx

DEFAULT_BASE_URL = os.getenv("SEED_BASE_URL", "http://localhost:8000")
DEFAULT_PREFIX = os.getenv("REVIEWS_PREFIX", "/api/userreview/reviews")

COMMENTS = [
    "Very bad",
    "Not good",
    "Average",
    "Good",
    "Excellent!",
]


async def create_review(
    client: httpx.AsyncClient, order_id: int, user_id: str, rating: int
) -> int:
    resp = await client.post(
        "/",
        json={
            "userId": user_id,
            "orderId": order_id,
            "rating": rating,
            "comment": COMMENTS[rating - 1],
        },
    )
    resp.raise_for_status()
    return resp.json()["id"]


async def seed(base_url: str, prefix: str, orders: int, reviews_per_order: int):
    async with httpx.AsyncClient(
        base_url=f"{base_url}{prefix}", timeout=30.0, follow_redirects=True
    ) as client:
        first_order = random.randint(1, 10**6)
        created: list[int] = []
        for order_id in range(first_order, first_order + orders):
            for _ in range(reviews_per_order):
                user_id = f"seed-{uuid.uuid4().hex[:6]}@example.com"
                review_id = await create_review(
                    client, order_id, user_id, rating=random.randint(1, 5)
                )
                created.append(review_id)

        print(
            f"Created {len(created)} reviews for orders "
            f"{first_order}..{first_order + orders - 1}."
        )


def parse_args():
    parser = argparse.ArgumentParser(description="Seed the reviews API.")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument("--prefix", default=DEFAULT_PREFIX)
    parser.add_argument("--orders", type=int, default=10)
    parser.add_argument("--reviews-per-order", type=int, default=2)
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    asyncio.run(seed(args.base_url, args.prefix, args.orders, args.reviews_per_order))
