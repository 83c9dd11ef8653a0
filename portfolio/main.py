import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .cache import ContentCache
from .config import settings
from .db import create_mongo_client, ensure_indexes
from .middleware import SecurityHeadersMiddleware
from .redis_client import create_redis_client
from .routers import admin, auth, blog, cache, contact, health, projects
from .schemas import ActionResult

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def warn_on_open_endpoints() -> None:
    if not settings.REVALIDATION_SECRET:
        logger.warning("REVALIDATION_SECRET not configured; /api/revalidate is open to anyone")


@asynccontextmanager
async def lifespan(app: FastAPI):
    warn_on_open_endpoints()
    client = create_mongo_client()
    redis = create_redis_client()
    app.state.db = client[settings.MONGO_DB_NAME]
    app.state.cache = ContentCache(redis, prefix=settings.CACHE_PREFIX)
    await ensure_indexes(app.state.db)
    logger.info("Connected to %s", settings.MONGO_DB_NAME)
    try:
        yield
    finally:
        await redis.aclose()
        await client.close()


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        # drop the "body"/"query" location prefix
        loc = [str(part) for part in err["loc"][1:]] or [str(err["loc"][0])]
        errors.setdefault(".".join(loc), []).append(err["msg"])
    result = ActionResult(
        success=False,
        message="Please check your form data and try again.",
        errors=errors,
    )
    return JSONResponse(status_code=422, content=result.model_dump(exclude_none=True))


def create_app() -> FastAPI:
    app = FastAPI(title="Portfolio API", lifespan=lifespan)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # routers
    app.include_router(health.router)     # GET /, /health
    app.include_router(auth.router)       # /auth/*
    app.include_router(projects.router)
    app.include_router(blog.router)
    app.include_router(contact.router)
    app.include_router(admin.router)
    app.include_router(cache.router)      # /api/revalidate, /api/cache/stats
    return app


app = create_app()
