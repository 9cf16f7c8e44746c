"""Shared logging utilities for command handlers.

This module provides common logging functions used across all handler modules
to ensure consistent logging format and behavior.
"""

import logging
from typing import Any

from ..constants import HANDLER_ENTRY_LOG_LEVEL

logger = logging.getLogger(__name__)


def log_handler_entry(
    handler_type: str,
    realm_name: str,
    extra: dict[str, Any] | None = None,
) -> None:
    """Log handler invocation.

    Args:
        handler_type: Command being handled (create_workspace, create_user, login_user)
        realm_name: Realm the command targets
        extra: Additional context to include in structured log
    """
    log_extra = {
        "operation": handler_type,
        "realm_name": realm_name,
    }
    if extra:
        log_extra.update(extra)

    logger.log(
        HANDLER_ENTRY_LOG_LEVEL,
        f"Handler invoked: {handler_type} for realm {realm_name}",
        extra=log_extra,
    )
