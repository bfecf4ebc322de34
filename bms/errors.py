"""Error types shared across the gateway and services."""

from __future__ import annotations

from typing import Optional


class BmsError(Exception):
    """Base error for the project."""
    pass


class GatewayUnavailable(BmsError):
    """Network, auth or database failure during a gateway call."""

    def __init__(self, operation: str, collection: str, cause: Optional[Exception] = None):
        self.operation = operation
        self.collection = collection
        self.cause = cause
        message = f"{operation} on {collection} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ValidationError(BmsError):
    """Submitted record is missing a required field."""
    pass
