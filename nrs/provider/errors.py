"""Errors raised by the resource reconcilers and the provider."""

from __future__ import annotations

from nrs.synthetics.errors import NRSError


class ResourceError(NRSError):
    """
    A lifecycle operation on a resource failed.

    The client error that caused it is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        resource: str,
        operation: str,
        resource_id: str = "",
    ) -> None:
        super().__init__(message, operation=operation, identifier=resource_id or None)
        self.resource = resource
        self.resource_id = resource_id

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class ScriptAttachError(ResourceError):
    """
    The monitor was created but its script could not be attached.

    The monitor exists remotely and its id has already been recorded.
    """

    def __init__(self, message: str, resource: str, monitor_id: str) -> None:
        super().__init__(message, resource=resource, operation="create", resource_id=monitor_id)
        self.monitor_id = monitor_id


class InvalidImportIDError(NRSError):
    """An import id did not have the expected ``policy_id:condition_id`` shape."""

    pass


class UnknownResourceError(NRSError):
    """The provider has no resource with the requested name."""

    pass


class ProviderNotConfiguredError(NRSError):
    """A resource was requested before the provider was configured."""

    pass
