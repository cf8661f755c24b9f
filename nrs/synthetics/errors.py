"""
Synthetics Client Errors

Every error raised by the API client derives from NRSError and records the
operation and identifier it was raised for.
"""

from __future__ import annotations


class NRSError(Exception):
    """Base exception for synthetics client errors."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        identifier: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.identifier = identifier

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.identifier:
            parts.append(f"id={self.identifier}")
        return " ".join(parts)


class InvalidArgumentError(NRSError):
    """Caller-supplied input rejected before any request was made."""

    pass


class MissingCredentialError(NRSError):
    """No API key was configured for the client."""

    pass


class TransportError(NRSError):
    """The request could not be performed (connection, timeout, protocol)."""

    pass


class UnexpectedStatusError(NRSError):
    """The service answered with a status the operation does not expect."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        operation: str | None = None,
        identifier: str | None = None,
    ) -> None:
        super().__init__(message, operation=operation, identifier=identifier)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        return f"{super().__str__()} status={self.status_code} body={self.body[:200]!r}"


class NotFoundError(NRSError):
    """The requested remote entity does not exist."""

    pass


class MonitorNotFoundError(NotFoundError):
    """No monitor with the given id."""

    pass


class ScriptNotFoundError(NotFoundError):
    """The monitor has no script attached."""

    pass


class AlertConditionNotFoundError(NotFoundError):
    """No alert condition with the given id under the given policy."""

    pass


class DecodeError(NRSError):
    """The response body was not the JSON document the operation expects."""

    pass


class IDExtractionError(NRSError):
    """The Location header of a create response did not name a monitor."""

    pass


class TimestampParseError(NRSError):
    """A monitor timestamp did not match the service's timestamp format."""

    def __init__(
        self,
        message: str,
        monitor_id: str,
        value: str,
        operation: str | None = None,
    ) -> None:
        super().__init__(message, operation=operation, identifier=monitor_id)
        self.monitor_id = monitor_id
        self.value = value
