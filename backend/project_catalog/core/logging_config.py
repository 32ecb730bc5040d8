import logging
import sys
from opentelemetry import trace
from ..config import settings


class TelemetryFormatter(logging.Formatter):
    """
    Formatter that appends the active OpenTelemetry trace ID to each record

    Lets request logs be matched with traces when telemetry is enabled.
    Without an active span the record is formatted unchanged.
    """

    def __init__(self, fmt: str = None, datefmt: str = None):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._traced = logging.Formatter(fmt=f"{fmt} [trace_id=%(trace_id)s]", datefmt=datefmt)

    def format(self, record):
        span = trace.get_current_span()
        span_context = span.get_span_context()
        if span.is_recording() and span_context.trace_id:
            # First 16 hex chars of the 128-bit trace id, for readability
            record.trace_id = format(span_context.trace_id, '032x')[:16]
            return self._traced.format(record)
        return super().format(record)


def setup_logging():
    """Configure logging for the application"""
    log_level = getattr(settings, "log_level", "INFO").upper()

    handler = logging.StreamHandler(sys.stdout)
    formatter = TelemetryFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        handlers=[handler]
    )

    # Set specific log levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {log_level}")
