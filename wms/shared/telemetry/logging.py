"""Logging configuration for the WMS API"""
import logging
import sys

from wms.infrastructure.config.settings import get_settings
from wms.shared.context import get_correlation_id, get_request_context

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[trace=%(correlation_id)s tenant=%(tenant_id)s] %(message)s"
)


class RequestContextFilter(logging.Filter):
    """Stamp the correlation id and tenant of the current request on each record"""

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_request_context()
        record.correlation_id = get_correlation_id() or "-"
        record.tenant_id = context.tenant_id or "-"
        return True


def setup_logging():
    """Configure application-wide logging"""
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    # SQL statements are echoed by the engine itself when DATABASE_ECHO is set
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get logger for module"""
    return logging.getLogger(name)
