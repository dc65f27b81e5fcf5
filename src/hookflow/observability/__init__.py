"""Observability package."""
from hookflow.observability.logging import (
    RunContextFilter,
    run_log_extra,
    setup_logging,
)

__all__ = ["RunContextFilter", "run_log_extra", "setup_logging"]
