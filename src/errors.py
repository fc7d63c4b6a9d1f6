"""
Error taxonomy for the reconciler.

Transport failures, remote (non-2xx) failures and decode failures are kept
apart so callers can react to each one differently. The reconciler only
treats NotFoundError specially (drift correction on read); everything else
is surfaced to the host unchanged.
"""

import json
from typing import Optional


class ReconcilerError(Exception):
    """Base class for all reconciler errors."""

    def __init__(self, message: str):
        self.message = message
        self.operation: Optional[str] = None
        self.kind: Optional[str] = None
        self.identifier: Optional[str] = None
        super().__init__(message)

    def with_context(
        self,
        operation: str,
        kind: Optional[str] = None,
        identifier: Optional[str] = None,
    ) -> "ReconcilerError":
        """
        Attach call context to the error and return it for re-raising.

        Context already attached by an inner call is kept.
        """
        if self.operation is None:
            self.operation = operation
        if self.kind is None:
            self.kind = kind
        if self.identifier is None:
            self.identifier = identifier
        return self

    def __str__(self) -> str:
        if self.operation is None:
            return self.message
        target = self.kind or ""
        if self.identifier:
            target = f"{target} {self.identifier}".strip()
        if target:
            return f"{self.operation} {target}: {self.message}"
        return f"{self.operation}: {self.message}"


class TransportError(ReconcilerError):
    """The request could not be built, sent, or its response read."""


class RequestError(TransportError):
    """The request was malformed before anything was sent."""


class ConnectionFailedError(TransportError):
    """The connection to the API failed."""


class TransportTimeoutError(TransportError):
    """The request/response cycle exceeded the configured timeout."""


class BodyReadError(TransportError):
    """The response body could not be read."""


class RemoteError(ReconcilerError):
    """The API answered with a status outside 200-299."""

    def __init__(self, status: int, body: bytes = b""):
        self.status = status
        self.body = body
        super().__init__(f"API request failed with status {status}: {self.detail}")

    @property
    def detail(self) -> str:
        """Human-readable error detail from the response body."""
        text = self.body.decode("utf-8", errors="replace")
        try:
            payload = json.loads(text)
        except ValueError:
            return text
        if isinstance(payload, dict):
            for key in ("error", "message"):
                value = payload.get(key)
                if isinstance(value, str) and value:
                    return value
        return text


class NotFoundError(RemoteError):
    """The API reported that the requested entity does not exist."""


class DecodeError(ReconcilerError):
    """A response body did not match the expected shape."""


class NotConfiguredError(ReconcilerError):
    """A plugin was used before the host handed it a transport."""


def remote_error_for_status(status: int, body: bytes) -> RemoteError:
    """Build the RemoteError subclass matching a status code."""
    if status == 404:
        return NotFoundError(status, body)
    return RemoteError(status, body)
