# src/logging/context.py — v1
"""Contextual logging support: attach company_number, request_id, stage to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per dossier compilation.
_company_number: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "company_number", default=None
)
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    company_number: str | None = None
    request_id: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        company_number=_company_number.get(),
        request_id=_request_id.get(),
        stage=_stage.get(),
    )


def set_request_context(company_number: str, request_id: str) -> None:
    """Set request-level context (called once per dossier compilation)."""
    _company_number.set(company_number)
    _request_id.set(request_id)


def set_stage(stage: str | None) -> None:
    """Set the pipeline stage currently executing."""
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _company_number.set(None)
    _request_id.set(None)
    _stage.set(None)
