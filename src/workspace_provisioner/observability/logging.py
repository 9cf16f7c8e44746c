"""
Structured logging utilities for the workspace provisioner.

This module provides correlation ID tracking and structured log formatting so
that every log line of one provisioning workflow can be found together.
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

# Context variable for tracking correlation IDs across async operations
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Record attributes copied into the JSON document when present
STRUCTURED_FIELDS = [
    "realm_name",
    "client_id",
    "stage",
    "operation",
    "duration",
    "error_type",
    "retryable",
    "http_status",
    "response_body",
    "completed_stages",
    "compensated_stages",
]


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add correlation ID to the log record.

        Args:
            record: The log record to process

        Returns:
            True to allow the record to be processed
        """
        # Get correlation ID from context, or generate a new one
        current_correlation_id = correlation_id.get()
        if not current_correlation_id:
            current_correlation_id = generate_correlation_id()
            correlation_id.set(current_correlation_id)

        record.correlation_id = current_correlation_id
        return True


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for logs with correlation ID support.

    Formats log records as structured JSON for better parsing and analysis
    in log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a single JSON document."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def generate_correlation_id() -> str:
    """Generate a short unique correlation ID."""
    return str(uuid.uuid4())[:8]


def set_correlation_id(corr_id: str) -> str:
    """
    Set the correlation ID for the current context.

    Args:
        corr_id: Correlation ID to set

    Returns:
        The correlation ID that was set
    """
    correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str:
    """Get the current correlation ID, or empty string if none set."""
    return correlation_id.get("")


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = True,
    correlation_id_enabled: bool = True,
) -> None:
    """
    Set up structured logging for the provisioner.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json_formatting: Whether to use JSON formatting
        correlation_id_enabled: Whether to enable correlation ID tracking
    """
    root_logger = logging.getLogger()

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()

    if enable_json_formatting:
        formatter = StructuredFormatter()
    elif correlation_id_enabled:
        formatter = logging.Formatter(
            "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)

    if correlation_id_enabled:
        handler.addFilter(CorrelationIDFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class ProvisioningLogger:
    """
    Logger for provisioning workflows with structured logging support.

    Provides convenient methods for logging workflow and stage events
    with correlation ID tracking and structured data.
    """

    def __init__(self, name: str):
        """
        Initialize provisioning logger.

        Args:
            name: Logger name (usually the module name)
        """
        self.logger = logging.getLogger(name)

    def log_workflow_start(
        self,
        operation: str,
        realm_name: str,
        correlation_id: str | None = None,
    ) -> str:
        """
        Log the start of a workflow and bind a correlation ID to it.

        Returns:
            The correlation ID used for this workflow
        """
        if correlation_id is None:
            correlation_id = generate_correlation_id()

        set_correlation_id(correlation_id)

        self.logger.info(
            f"Starting {operation} for realm {realm_name}",
            extra={
                "realm_name": realm_name,
                "operation": operation,
            },
        )

        return correlation_id

    def log_workflow_success(
        self,
        operation: str,
        realm_name: str,
        duration: float,
        completed_stages: list[str] | None = None,
    ) -> None:
        self.logger.info(
            f"{operation} completed successfully for realm {realm_name}",
            extra={
                "realm_name": realm_name,
                "operation": operation,
                "duration": duration,
                "completed_stages": completed_stages or [],
            },
        )

    def log_stage_start(self, stage: str, realm_name: str) -> None:
        self.logger.debug(
            f"Stage {stage} started for realm {realm_name}",
            extra={"realm_name": realm_name, "stage": stage, "operation": "stage_start"},
        )

    def log_stage_success(self, stage: str, realm_name: str, duration: float) -> None:
        self.logger.info(
            f"Stage {stage} completed for realm {realm_name}",
            extra={
                "realm_name": realm_name,
                "stage": stage,
                "operation": "stage_success",
                "duration": duration,
            },
        )

    def log_stage_error(
        self,
        stage: str,
        realm_name: str,
        error: Exception,
        duration: float,
    ) -> None:
        """
        Log a failed stage with the upstream status and body when available.

        Args:
            stage: Stage that failed
            realm_name: Realm the workflow was provisioning
            error: The error that occurred
            duration: Stage duration in seconds
        """
        extra = {
            "realm_name": realm_name,
            "stage": stage,
            "operation": "stage_error",
            "error_type": type(error).__name__,
            "retryable": getattr(error, "retryable", False),
            "duration": duration,
        }

        status_code = getattr(error, "status_code", None)
        if status_code is not None:
            extra["http_status"] = status_code

        body_preview = getattr(error, "body_preview", None)
        if callable(body_preview):
            extra["response_body"] = body_preview()

        self.logger.error(
            f"Stage {stage} failed for realm {realm_name}: {getattr(error, 'message', error)}",
            extra=extra,
        )

    def log_compensation(
        self,
        realm_name: str,
        compensated_stages: list[str],
        errors: list[Exception],
    ) -> None:
        level = logging.WARNING if errors else logging.INFO
        message = (
            f"Rolled back stages {compensated_stages} for realm {realm_name}"
            if not errors
            else f"Rollback for realm {realm_name} incomplete: {len(errors)} error(s)"
        )
        self.logger.log(
            level,
            message,
            extra={
                "realm_name": realm_name,
                "operation": "compensate",
                "compensated_stages": compensated_stages,
            },
        )

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with extra data."""
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with extra data."""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with extra data."""
        self.logger.warning(message, extra=kwargs)
