"""Structured JSON logging with run context."""
import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from hookflow.config import get_settings

RUN_FIELDS = ("workflow_id", "execution_id", "node_name")


class RunContextFilter(logging.Filter):
    """Add run context fields to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name in RUN_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, None)
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with standardized field names."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if "timestamp" not in log_record:
            log_record["timestamp"] = self.formatTime(record, self.datefmt)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        for name in RUN_FIELDS:
            value = getattr(record, name, None)
            if value:
                log_record[name] = value
            else:
                log_record.pop(name, None)


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure root logging for the application."""
    settings = get_settings()

    handler = logging.StreamHandler(sys.stdout)
    if (fmt or settings.log_format) == "json":
        formatter: logging.Formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    handler.addFilter(RunContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel((level or settings.log_level).upper())

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def run_log_extra(
    workflow_id: str | None = None,
    execution_id: str | None = None,
    node_name: str | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """Build the extra dict carrying run context for a log call."""
    extra = kwargs.copy()
    if workflow_id:
        extra["workflow_id"] = workflow_id
    if execution_id:
        extra["execution_id"] = execution_id
    if node_name:
        extra["node_name"] = node_name
    return extra
