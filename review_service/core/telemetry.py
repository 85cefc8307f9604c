"""
OpenTelemetry instrumentation for FastAPI and PyMongo
"""

from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.pymongo import PymongoInstrumentor

from review_service.core.config import config
from review_service.core.logger import logger


def instrument_app(app):
    """
    Instrument the FastAPI application and the PyMongo driver used by Motor.
    Export is configured through the standard OTEL_* environment variables.
    """
    if not config.enable_tracing:
        logger.info("Tracing disabled, skipping OpenTelemetry instrumentation")
        return

    try:
        FastAPIInstrumentor.instrument_app(app)
        PymongoInstrumentor().instrument()
        logger.info("OpenTelemetry instrumentation complete")
    except Exception as e:
        logger.error("Failed to instrument application", error=e)
