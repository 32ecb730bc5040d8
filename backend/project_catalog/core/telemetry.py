"""
OpenTelemetry Setup

Instruments FastAPI routes and SQLAlchemy queries when TELEMETRY_ENABLED is
set. Spans go to the console exporter; the trace id also shows up in log
lines through the TelemetryFormatter.
"""
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from ..config import settings
import logging

logger = logging.getLogger(__name__)


def setup_telemetry(app, engine=None):
    """
    Setup OpenTelemetry instrumentation for the FastAPI app

    Args:
        app: FastAPI application instance
        engine: Optional SQLAlchemy engine to instrument; all engines if None

    Returns:
        The configured TracerProvider
    """
    resource = Resource.create({
        "service.name": "project-catalog-api",
        "service.version": "1.0.0",
        "service.namespace": "project-catalog",
    })

    tracer_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(tracer_provider)

    exporter_type = getattr(settings, 'telemetry_exporter', 'console').lower()
    if exporter_type == 'console':
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("Console span exporter enabled")
    else:
        logger.warning(f"Unknown telemetry exporter '{exporter_type}', spans will not be exported")

    FastAPIInstrumentor.instrument_app(app)
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine)
    else:
        SQLAlchemyInstrumentor().instrument()

    logger.info("OpenTelemetry instrumentation enabled for requests and database queries")
    return tracer_provider


def get_tracer(name: str):
    """Get a tracer for custom spans"""
    return trace.get_tracer(name)
