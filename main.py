# Import necessary FastAPI components
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from elasticsearch import ApiError, TransportError
import logging
from datetime import datetime
from redis.asyncio import Redis
from starlette.exceptions import HTTPException

# Import application routes and custom error handlers
from article_search.routers import article_routes
from article_search.utils.exception_handlers import (
    http_exception_handler,
    validation_exception_handler,
    search_api_error_handler,
    search_transport_error_handler,
    unhandled_exception_handler
)

# Import middleware
from article_search.middleware.logging_middleware import RequestLoggingMiddleware

# Import configuration
from article_search.core.config import settings
from article_search.services.service_factory import create_search_client
from article_search.utils.cache import CacheManager

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def connect_redis():
    """Open the result cache connection, or return None when caching is unavailable"""
    if not settings.cache_enabled:
        logger.info("Result caching disabled")
        return None
    try:
        logger.info(f"Connecting to Redis at: {settings.redis_url}")
        redis = Redis.from_url(
            url=settings.redis_url,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5
        )
        await redis.ping()
        logger.info("Redis connection established successfully")
        return redis
    except Exception as e:
        logger.warning(f"Redis connection failed: {str(e)}. Result caching disabled.")
        return None


# Lifespan context manager for startup and shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings

    logger.info(f"Opening Elasticsearch client for {settings.elasticsearch_url}")
    app.state.es = create_search_client()
    app.state.redis = await connect_redis()

    yield

    logger.info("Closing Elasticsearch client...")
    await app.state.es.close()

    if app.state.redis:
        try:
            await app.state.redis.close()
            logger.info("Redis connection closed successfully")
        except Exception as e:
            logger.warning(f"Error closing Redis connection: {str(e)}")


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="REST API over the Elasticsearch articles index",
    version=settings.app_version,
    debug=settings.debug,
    default_response_class=ORJSONResponse,
    lifespan=lifespan
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=settings.cors_methods,
    allow_headers=settings.cors_headers,
)
app.add_middleware(RequestLoggingMiddleware)

# Register custom exception handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ApiError, search_api_error_handler)
app.add_exception_handler(TransportError, search_transport_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Health check endpoint reporting the status of the engine and the cache"""
    health_status = {
        "status": "healthy",
        "timestamp": str(datetime.now()),
        "version": settings.app_version,
        "dependencies": {
            "elasticsearch": "unknown",
            "redis": "unknown"
        }
    }

    # Check Elasticsearch health
    try:
        es = getattr(request.app.state, "es", None)
        if es is not None:
            es_ping = await es.ping()
            health_status["dependencies"]["elasticsearch"] = "healthy" if es_ping else "unhealthy"
        else:
            health_status["dependencies"]["elasticsearch"] = "not_configured"
    except Exception as e:
        logger.error(f"Elasticsearch health check error: {str(e)}")
        health_status["dependencies"]["elasticsearch"] = "unhealthy"

    # Check Redis health
    try:
        redis = getattr(request.app.state, "redis", None)
        if redis is not None:
            redis_ok = await CacheManager(redis).health_check()
            health_status["dependencies"]["redis"] = "healthy" if redis_ok else "unhealthy"
        else:
            health_status["dependencies"]["redis"] = "not_configured"
    except Exception as e:
        logger.error(f"Redis health check error: {str(e)}")
        health_status["dependencies"]["redis"] = "unhealthy"

    if any(state == "unhealthy" for state in health_status["dependencies"].values()):
        health_status["status"] = "unhealthy"

    return JSONResponse(content=health_status)


# Article routes
app.include_router(
    article_routes.router,
    prefix=settings.api_prefix,
    tags=["Articles"]
)
