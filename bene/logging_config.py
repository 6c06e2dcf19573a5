"""
Logging configuration for Bene.

Structured JSON logging for validation audit trails and debugging. Shared by
the CLI and the HTTP service.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import List, Optional

# Context variable for request ID tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    One JSON object per line; ``extra={"extra_fields": {...}}`` is merged into
    the top level.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class ValidationAuditLogger:
    """
    Logger for validation audit events.

    Every decision is logged with the contract version, the constants hash and
    the actions that matched, so a rejected transaction can be traced to the
    failing sub-check.
    """

    def __init__(self, name: str = "bene.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        extra = {
            "event_type": event_type,
            "request_id": request_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def validation_request(self, version: str, constants_hash: str, height: int) -> None:
        self._log(
            logging.INFO,
            "VALIDATION_REQUEST",
            version=version,
            constants_hash=constants_hash,
            height=height,
            message=f"Validation requested against {version}"
        )

    def validation_decision(
        self,
        version: str,
        decision: str,
        matched_actions: List[str],
        failed_structure: Optional[dict] = None
    ) -> None:
        """Accepted transactions log at INFO, rejections at WARNING."""
        level = logging.INFO if decision == "ACCEPT" else logging.WARNING
        self._log(
            level,
            "VALIDATION_DECISION",
            version=version,
            decision=decision,
            matched_actions=matched_actions,
            failed_structure=failed_structure,
            message=f"Validation decision: {decision}"
        )

    def mint_decision(self, committed_hash: str, decision: str) -> None:
        level = logging.INFO if decision == "ACCEPT" else logging.WARNING
        self._log(
            level,
            "MINT_DECISION",
            committed_hash=committed_hash,
            decision=decision,
            message=f"Mint decision: {decision}"
        )

    def configuration_error(self, reason: str, **details) -> None:
        self._log(
            logging.ERROR,
            "CONFIGURATION_ERROR",
            reason=reason,
            **details,
            message=f"Configuration error: {reason}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None,
    stream=None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting (recommended for production)
        log_file: Optional file path for log output
        stream: Console stream, stdout by default
    """
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set the request ID for the current context, generating one if None."""
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def get_request_id() -> str:
    return request_id_var.get()


# Global audit logger instance
audit_log = ValidationAuditLogger()
