import logging
import os
import uuid
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from cache import close_redis, init_redis
from database import async_engine, init_models
from dependencies import get_review_service
from routers.review import create_router

load_dotenv()

logger = logging.getLogger("order_reviews")
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.redis = await init_redis()
    if os.getenv("CREATE_TABLES", "").lower() in ("1", "true", "yes"):
        await init_models()  # for prototyping
    yield
    await close_redis()
    await async_engine.dispose()


async def log_requests(request: Request, call_next):
    rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    request.state.request_id = rid
    logger.info("[%s] %s %s", rid, request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("[%s] %s %s failed", rid, request.method, request.url.path)
        raise
    response.headers["X-Request-Id"] = rid
    logger.info(
        "[%s] %s %s -> %s", rid, request.method, request.url.path, response.status_code
    )
    return response


def create_app(get_service=get_review_service, lifespan=lifespan) -> FastAPI:
    app = FastAPI(title="Order Reviews API", lifespan=lifespan)

    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    app.include_router(create_router(get_service))
    return app


app = create_app()
