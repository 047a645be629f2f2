"""
Logging configuration
"""

import json
import logging
import sys
from typing import Optional
from core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class ErrorContextFormatter(logging.Formatter):
    """
    Renders the structured context attached to failure records.

    Stage failures are logged with ``extra={"error_context": error.to_dict()}``;
    the context is appended to the message as JSON so one line carries the
    failing stage, elapsed time and cause.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        error_context = getattr(record, "error_context", None)
        if error_context:
            message += f" | error_context={json.dumps(error_context, default=str, sort_keys=True)}"
        return message


def setup_logging(level: Optional[str] = None):
    """Configure application logging; ``level`` overrides settings.LOG_LEVEL"""

    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ErrorContextFormatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    # SQLAlchemy echoes every INSERT batch at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {level_name} level ({settings.ENVIRONMENT})")
