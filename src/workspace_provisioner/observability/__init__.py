"""
Observability utilities for the workspace provisioner.

This module provides metrics, tracing and structured logging
capabilities for production monitoring and troubleshooting.
"""

from .logging import ProvisioningLogger, setup_structured_logging
from .metrics import MetricsCollector, get_metrics_registry, render_metrics
from .tracing import setup_tracing, shutdown_tracing

__all__ = [
    "MetricsCollector",
    "get_metrics_registry",
    "render_metrics",
    "ProvisioningLogger",
    "setup_structured_logging",
    "setup_tracing",
    "shutdown_tracing",
]
