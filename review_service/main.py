"""
FastAPI Application - Review Service
"""

# Load environment variables from .env file before the config is built
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError

from review_service.api import health, home, reviews
from review_service.core.config import config
from review_service.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from review_service.core.logger import logger
from review_service.core.telemetry import instrument_app
from review_service.db.indexes import create_indexes
from review_service.db.mongodb import close_mongo_connection, connect_to_mongo, get_database
from review_service.middleware import TraceContextMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Review Service...")
    await connect_to_mongo()
    await create_indexes(await get_database())

    logger.info(
        "Review Service started successfully",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    yield

    logger.info("Shutting down Review Service...")
    await close_mongo_connection()


app = FastAPI(
    title="Review Service",
    description="Book reviews with verified purchases and rating aggregates",
    version=config.service_version,
    lifespan=lifespan
)

instrument_app(app)

app.add_exception_handler(ErrorResponse, error_response_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(TraceContextMiddleware)

app.include_router(home.router, tags=["home"])
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(reviews.router, prefix="/api", tags=["reviews"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "review_service.main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development"
    )
