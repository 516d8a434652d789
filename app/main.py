from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy import text
import time
from typing import Callable, Optional
from redis.asyncio import Redis

from app.core.config.settings import get_settings
from app.core.config.logging_config import setup_logging
from app.core.errors import EvaluationError
from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.db.init_db import init_db
from app.routers import admin, auth, evaluation

RATE_LIMIT_WINDOW_SECONDS = 60

settings = get_settings()
logger = setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
)

# Set on startup when REDIS_URL is configured and reachable
redis: Optional[Redis] = None


async def _connect_redis(url: str) -> Optional[Redis]:
    client = Redis.from_url(url, encoding="utf-8", decode_responses=True)
    try:
        await client.ping()
    except Exception as e:
        logger.error(f"Redis unavailable, rate limiting disabled: {e}")
        await client.close()
        return None
    logger.info("Redis connected, rate limiting enabled")
    return client

@app.on_event("startup")
async def startup_event():
    global redis
    if settings.REDIS_URL:
        redis = await _connect_redis(settings.REDIS_URL)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        init_db(db)
    except Exception as e:
        logger.error(f"Seeding the default admin failed: {e}")
    finally:
        db.close()

@app.on_event("shutdown")
async def shutdown_event():
    if redis:
        await redis.close()


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"in {(time.perf_counter() - started) * 1000:.0f}ms"
    )
    return response

@app.middleware("http")
async def rate_limit(request: Request, call_next: Callable):
    if redis is None:
        return await call_next(request)

    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{client_ip}"
    hits = await redis.incr(key)
    if hits == 1:
        await redis.expire(key, RATE_LIMIT_WINDOW_SECONDS)
    if hits > settings.RATE_LIMIT_PER_MINUTE:
        logger.warning(f"Rate limit hit by {client_ip}")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"kind": "rate_limited", "message": "Too many requests"}
        )
    return await call_next(request)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(admin.router, prefix=settings.API_PREFIX)
app.include_router(evaluation.router, prefix=settings.API_PREFIX)


@app.exception_handler(EvaluationError)
async def evaluation_error_handler(request: Request, exc: EvaluationError):
    log = logger.warning if exc.status_code < 500 else logger.error
    log(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "kind": "validation_error",
            "message": "Request body or parameters are invalid",
            "errors": jsonable_encoder(exc.errors()),
        },
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    # Auth dependencies raise these; keep FastAPI's shape and the WWW-Authenticate header
    logger.warning(f"{exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"kind": "internal_error", "message": "Internal server error"},
    )


def _database_ok() -> bool:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database check failed: {e}")
        return False
    finally:
        db.close()

@app.get("/health")
async def health_check():
    database = "connected" if _database_ok() else "disconnected"
    cache = "not configured"
    if redis:
        try:
            await redis.ping()
            cache = "connected"
        except Exception as e:
            logger.error(f"Redis check failed: {e}")
            cache = "disconnected"

    return {
        "status": "healthy" if "disconnected" not in (database, cache) else "unhealthy",
        "timestamp": time.time(),
        "database": database,
        "redis": cache,
    }
