"""
Logging configuration.

All application and third-party logging is funnelled through loguru.
"""

import json
import logging
import sys
from typing import Any, Dict, cast

from loguru import logger

from app.core.config import settings

# Standard library loggers that are re-routed to loguru
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi", "sqlalchemy.engine")


class InterceptHandler(logging.Handler):
    """
    Forward standard logging records to loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def serialize_record(record: Dict[str, Any]) -> str:
    """
    Render a loguru record as a single JSON line.
    """
    try:
        subset = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name,
            "message": record["message"],
            "service": settings.PROJECT_NAME,
            "environment": settings.ENVIRONMENT,
        }

        if "name" in record:
            subset["module"] = record["name"]
        if "function" in record:
            subset["function"] = record["function"]
        if "line" in record:
            subset["line"] = record["line"]

        # Bound context, e.g. request_id or resource_id
        if isinstance(record.get("extra"), dict):
            for key, value in record["extra"].items():
                if not key.startswith("_"):
                    subset[key] = value

        if record.get("exception"):
            subset["exception"] = str(record["exception"])

        return json.dumps(subset)
    except Exception as e:
        time_value = record.get("time", "")
        return json.dumps(
            {
                "timestamp": time_value.isoformat() if hasattr(time_value, "isoformat") else str(time_value),
                "level": "ERROR",
                "message": f"Error serializing log: {str(e)}",
                "original_message": str(record.get("message", "")),
                "service": settings.PROJECT_NAME,
                "environment": settings.ENVIRONMENT,
            }
        )


def configure_logging() -> None:
    """
    Configure loguru logger.
    """
    logger.remove()

    if settings.JSON_LOGS:
        logger.add(
            lambda msg: print(serialize_record(cast(Dict[str, Any], msg.record)), file=sys.stderr),
            level=settings.LOG_LEVEL,
            backtrace=True,
            diagnose=not settings.is_production,
        )
    else:
        logger.add(
            sys.stderr,
            level=settings.LOG_LEVEL,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message} | {extra}",
            backtrace=True,
            diagnose=not settings.is_production,
        )

    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(settings.LOG_LEVEL)

    for logger_name in INTERCEPTED_LOGGERS:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

    logger.info("Logging configured successfully.")
