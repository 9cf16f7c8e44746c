"""
Prometheus metrics for the workspace provisioner.

This module provides metrics collection for monitoring provisioning
workflows, per-stage latency and failures, and rollbacks.
"""

import logging
import time
from contextlib import asynccontextmanager

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# Global metrics registry
_metrics_registry: CollectorRegistry | None = None

# Metrics definitions
WORKFLOW_TOTAL = Counter(
    "workspace_provisioner_workflow_total",
    "Total number of provisioning workflows",
    ["operation", "result"],
    registry=None,  # Will be set during initialization
)

WORKFLOW_DURATION = Histogram(
    "workspace_provisioner_workflow_duration_seconds",
    "Time spent on complete provisioning workflows",
    ["operation"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
    registry=None,
)

STAGE_DURATION = Histogram(
    "workspace_provisioner_stage_duration_seconds",
    "Time spent in a single provisioning stage",
    ["stage"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
    registry=None,
)

STAGE_ERRORS = Counter(
    "workspace_provisioner_stage_errors_total",
    "Total number of failed provisioning stages",
    ["stage", "error_type", "retryable"],
    registry=None,
)

COMPENSATION_TOTAL = Counter(
    "workspace_provisioner_compensation_total",
    "Total number of compensating actions after a failed workflow",
    ["stage", "result"],
    registry=None,
)


def get_metrics_registry() -> CollectorRegistry:
    """Get or create the global metrics registry."""
    global _metrics_registry

    if _metrics_registry is None:
        _metrics_registry = CollectorRegistry()

        # Register all metrics with the registry
        for metric in [
            WORKFLOW_TOTAL,
            WORKFLOW_DURATION,
            STAGE_DURATION,
            STAGE_ERRORS,
            COMPENSATION_TOTAL,
        ]:
            _metrics_registry.register(metric)

    return _metrics_registry


def render_metrics() -> bytes:
    """Return the current metrics in Prometheus exposition format."""
    return generate_latest(get_metrics_registry())


class MetricsCollector:
    """Collects and manages metrics for the workspace provisioner."""

    def __init__(self):
        """Initialize metrics collector."""
        self.registry = get_metrics_registry()

    @asynccontextmanager
    async def track_workflow(self, operation: str):
        """
        Context manager to track a whole provisioning workflow.

        Args:
            operation: Workflow name (create_workspace, create_user, ...)
        """
        start_time = time.time()
        result = "unknown"

        try:
            yield
            result = "success"
        except Exception:
            result = "error"
            raise
        finally:
            WORKFLOW_TOTAL.labels(operation=operation, result=result).inc()
            WORKFLOW_DURATION.labels(operation=operation).observe(
                time.time() - start_time
            )

    @asynccontextmanager
    async def track_stage(self, stage: str):
        """
        Context manager to track one provisioning stage.

        Args:
            stage: Stage name (realm, client, roles, ...)
        """
        start_time = time.time()

        try:
            yield
        except Exception as e:
            # Determine error type and retryability
            error_type = type(e).__name__
            retryable = "true" if getattr(e, "retryable", False) else "false"

            STAGE_ERRORS.labels(
                stage=stage,
                error_type=error_type,
                retryable=retryable,
            ).inc()

            raise
        finally:
            STAGE_DURATION.labels(stage=stage).observe(time.time() - start_time)

    def record_compensation(self, stage: str, success: bool) -> None:
        """Record one compensating action."""
        COMPENSATION_TOTAL.labels(
            stage=stage, result="success" if success else "error"
        ).inc()


# Global metrics collector instance
metrics_collector = MetricsCollector()
