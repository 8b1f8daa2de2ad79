# src/connectors/models.py — v1
"""Connector response and error types."""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel

from suppliercheck.core.models import Evidence

T = TypeVar("T")


class ConnectorErrorCode(str, Enum):
    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


class ConnectorError(Exception):
    """A connector call that did not yield usable data."""

    def __init__(
        self,
        code: ConnectorErrorCode,
        message: str,
        status: int | None = None,
        api_url: str | None = None,
    ) -> None:
        self.code = code
        self.status = status
        self.api_url = api_url
        super().__init__(f"[{code.value}] {message}")


class ConnectorResponse(BaseModel, Generic[T]):
    """Parsed upstream payload plus the evidence of where it came from."""

    data: T
    evidence: Evidence


def error_code_for_status(status: int) -> ConnectorErrorCode:
    if status == 400:
        return ConnectorErrorCode.INVALID_REQUEST
    if status == 401 or status == 403:
        return ConnectorErrorCode.UNAUTHORIZED
    if status == 404:
        return ConnectorErrorCode.NOT_FOUND
    if status == 429:
        return ConnectorErrorCode.RATE_LIMITED
    return ConnectorErrorCode.UPSTREAM_ERROR
