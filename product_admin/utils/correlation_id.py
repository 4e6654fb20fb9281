"""
Operation-scoped correlation IDs.

An admin action (saving a product, one import run) owns a single ID; every
log line and every API call made while it runs carries that ID.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Dict, Iterator, Optional

CORRELATION_ID_HEADER = "X-Correlation-ID"

_current_operation: ContextVar[str] = ContextVar("admin_operation_id", default="")


def create_correlation_id() -> str:
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str) -> None:
    _current_operation.set(correlation_id)


def get_correlation_id() -> str:
    """Return the active operation ID, starting a new operation when none is active."""
    current = _current_operation.get()
    if current:
        return current
    fresh = create_correlation_id()
    _current_operation.set(fresh)
    return fresh


@contextmanager
def operation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Run the enclosed block under its own correlation ID and restore the previous one afterwards."""
    token = _current_operation.set(correlation_id or create_correlation_id())
    try:
        yield _current_operation.get()
    finally:
        _current_operation.reset(token)


def create_headers_with_correlation_id(
    additional_headers: Optional[Dict[str, str]] = None,
    header_name: str = CORRELATION_ID_HEADER,
) -> Dict[str, str]:
    """Outgoing request headers: the operation ID first, then any extras."""
    return {header_name: get_correlation_id(), **(additional_headers or {})}
