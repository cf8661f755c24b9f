"""
Synthetics API Client

Async client for the synthetics monitor API and the synthetics alert
condition API. Every request is authenticated with the account API key and
routed through RetryingTransport.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from nrs.synthetics.config import ClientConfig
from nrs.synthetics.constants import API_KEY_HEADER
from nrs.synthetics.errors import (
    AlertConditionNotFoundError,
    DecodeError,
    IDExtractionError,
    InvalidArgumentError,
    MissingCredentialError,
    MonitorNotFoundError,
    ScriptNotFoundError,
    TransportError,
    UnexpectedStatusError,
)
from nrs.synthetics.models import (
    AlertCondition,
    AlertConditionEnvelope,
    AlertConditionList,
    CreateAlertConditionArgs,
    CreateMonitorArgs,
    Monitor,
    MonitorList,
    MonitorScript,
    UpdateAlertConditionArgs,
    UpdateMonitorArgs,
    UpdateMonitorScriptArgs,
)
from nrs.synthetics.transport import RetryingTransport

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SyntheticsClient:
    """
    Client for New Relic Synthetics monitors and alert conditions.

    The client keeps no per-call state, so one instance can serve many
    concurrent tasks.

    Usage:
        config = ClientConfig(api_key="...")
        async with SyntheticsClient(config) as client:
            monitor = await client.get_monitor("a1b2c3")
            script = await client.get_monitor_script(monitor.id)
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration; api_key must be set
            transport: Transport performing single requests (default: httpx.AsyncHTTPTransport)

        Raises:
            MissingCredentialError: If no API key is configured
        """
        if not config.api_key:
            raise MissingCredentialError("synthetics api key not provided")

        self._config = config
        self._monitors_url = f"{config.synthetics_url.rstrip('/')}/monitors"
        self._conditions_url = f"{config.alerts_url.rstrip('/')}/alerts_synthetics_conditions"
        self._location_pattern = re.compile(rf"^{re.escape(self._monitors_url)}/(.+)$")

        self._http = httpx.AsyncClient(
            transport=RetryingTransport(
                transport or httpx.AsyncHTTPTransport(),
                retries=config.retries,
                backoff_seconds=config.backoff_seconds,
            ),
            timeout=config.timeout_seconds,
            headers={
                API_KEY_HEADER: config.api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> SyntheticsClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    async def _send(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        identifier: str | None = None,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(method, url, json=json, params=params)
        except httpx.RequestError as e:
            raise TransportError(
                f"could not perform {operation} request: {e}",
                operation=operation,
                identifier=identifier,
            ) from e

        logger.debug(
            "Synthetics request",
            operation=operation,
            id=identifier,
            method=method,
            status=response.status_code,
        )
        return response

    @staticmethod
    def _unexpected(
        response: httpx.Response,
        operation: str,
        identifier: str | None = None,
    ) -> UnexpectedStatusError:
        return UnexpectedStatusError(
            f"invalid response from {operation}",
            status_code=response.status_code,
            body=response.text,
            operation=operation,
            identifier=identifier,
        )

    @staticmethod
    def _decode(
        response: httpx.Response,
        model: type[ModelT],
        operation: str,
        identifier: str | None = None,
    ) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise DecodeError(
                f"could not parse {operation} JSON response: {e}",
                operation=operation,
                identifier=identifier,
            ) from e

    def _monitor_url(self, monitor_id: str) -> str:
        return f"{self._monitors_url}/{monitor_id}"

    @staticmethod
    def _require_id(monitor_id: str, operation: str) -> None:
        if not monitor_id:
            raise InvalidArgumentError(
                f"invalid id provided: {monitor_id!r}",
                operation=operation,
                identifier=monitor_id,
            )

    # ------------------------------------------------------------------
    # Monitors
    # ------------------------------------------------------------------

    async def get_all_monitors(self, offset: int = 0, limit: int = 0) -> MonitorList:
        """
        List monitors in the account (a single page).

        Args:
            offset: Records to skip (omitted when 0)
            limit: Page size (omitted when 0)

        Raises:
            TimestampParseError: If a record's createdAt/modifiedAt is malformed
        """
        operation = "get_all_monitors"
        params: dict[str, Any] = {}
        if offset > 0:
            params["offset"] = offset
        if limit > 0:
            params["limit"] = limit

        response = await self._send(operation, "GET", self._monitors_url, params=params or None)
        if response.status_code != httpx.codes.OK:
            raise self._unexpected(response, operation)

        monitors = self._decode(response, MonitorList, operation)
        for monitor in monitors.monitors:
            monitor.parse_timestamps()
        return monitors

    async def get_monitor(self, monitor_id: str) -> Monitor:
        """
        Get a monitor.

        Raises:
            InvalidArgumentError: If monitor_id is empty (no request is made)
            MonitorNotFoundError: If the service answers 404
        """
        operation = "get_monitor"
        self._require_id(monitor_id, operation)

        response = await self._send(
            operation, "GET", self._monitor_url(monitor_id), identifier=monitor_id
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise MonitorNotFoundError(
                "could not find monitor", operation=operation, identifier=monitor_id
            )
        if response.status_code != httpx.codes.OK:
            raise self._unexpected(response, operation, monitor_id)

        return self._decode(response, Monitor, operation, monitor_id)

    async def create_monitor(self, args: CreateMonitorArgs) -> Monitor:
        """
        Create a monitor and return the service's record of it.

        The create response has no body; the new id is read from the
        Location header and the monitor is fetched again.

        Raises:
            IDExtractionError: If the Location header does not name a monitor
        """
        operation = "create_monitor"
        response = await self._send(
            operation, "POST", self._monitors_url, identifier=args.name, json=args.to_payload()
        )
        if response.status_code != httpx.codes.CREATED:
            raise self._unexpected(response, operation, args.name)

        location = response.headers.get("Location", "")
        match = self._location_pattern.match(location)
        if match is None:
            raise IDExtractionError(
                f"could not find an ID for monitor in location header: {location!r}",
                operation=operation,
                identifier=args.name,
            )
        monitor_id = match.group(1)

        logger.info("Created monitor", id=monitor_id, name=args.name, type=args.type.value)
        return await self.get_monitor(monitor_id)

    async def update_monitor(self, monitor_id: str, args: UpdateMonitorArgs) -> Monitor:
        """
        Patch a monitor with the populated fields of ``args``.

        Returns the monitor as re-read after the update, including any
        value the service filled in (such as the SLA threshold).
        """
        operation = "update_monitor"
        self._require_id(monitor_id, operation)

        response = await self._send(
            operation,
            "PATCH",
            self._monitor_url(monitor_id),
            identifier=monitor_id,
            json=args.to_payload(),
        )
        if response.status_code != httpx.codes.NO_CONTENT:
            raise self._unexpected(response, operation, monitor_id)

        return await self.get_monitor(monitor_id)

    async def delete_monitor(self, monitor_id: str) -> None:
        """Delete a monitor. Any status other than 204 is an error."""
        operation = "delete_monitor"
        self._require_id(monitor_id, operation)

        response = await self._send(
            operation, "DELETE", self._monitor_url(monitor_id), identifier=monitor_id
        )
        if response.status_code != httpx.codes.NO_CONTENT:
            raise self._unexpected(response, operation, monitor_id)

        logger.info("Deleted monitor", id=monitor_id)

    # ------------------------------------------------------------------
    # Monitor scripts
    # ------------------------------------------------------------------

    async def update_monitor_script(self, monitor_id: str, args: UpdateMonitorScriptArgs) -> None:
        """Replace the script (and private locations) backing a monitor."""
        operation = "update_monitor_script"
        self._require_id(monitor_id, operation)
        if not args.script_text:
            raise InvalidArgumentError(
                "script text not provided", operation=operation, identifier=monitor_id
            )

        response = await self._send(
            operation,
            "PUT",
            f"{self._monitor_url(monitor_id)}/script",
            identifier=monitor_id,
            json=args.to_payload(),
        )
        if response.status_code != httpx.codes.NO_CONTENT:
            raise self._unexpected(response, operation, monitor_id)

    async def get_monitor_script(self, monitor_id: str) -> str:
        """
        Get the decoded script text of a monitor.

        Raises:
            ScriptNotFoundError: If no script is attached (404)
        """
        operation = "get_monitor_script"
        self._require_id(monitor_id, operation)

        response = await self._send(
            operation, "GET", f"{self._monitor_url(monitor_id)}/script", identifier=monitor_id
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise ScriptNotFoundError(
                "could not find monitor script", operation=operation, identifier=monitor_id
            )
        if response.status_code != httpx.codes.OK:
            raise self._unexpected(response, operation, monitor_id)

        script = self._decode(response, MonitorScript, operation, monitor_id)
        try:
            return base64.b64decode(script.script_text, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise DecodeError(
                f"could not base64 decode monitor script: {e}",
                operation=operation,
                identifier=monitor_id,
            ) from e

    # ------------------------------------------------------------------
    # Alert conditions
    # ------------------------------------------------------------------

    async def create_alert_condition(
        self,
        policy_id: int,
        args: CreateAlertConditionArgs,
    ) -> AlertCondition:
        """Create an alert condition under a policy."""
        operation = "create_alert_condition"
        response = await self._send(
            operation,
            "POST",
            f"{self._conditions_url}/policies/{policy_id}.json",
            identifier=str(policy_id),
            json=args.to_payload(),
        )
        if response.status_code not in (httpx.codes.CREATED, httpx.codes.OK):
            raise self._unexpected(response, operation, str(policy_id))

        envelope = self._decode(response, AlertConditionEnvelope, operation, str(policy_id))
        condition = envelope.synthetics_condition
        logger.info(
            "Created alert condition",
            policy_id=policy_id,
            id=condition.id,
            monitor_id=condition.monitor_id,
        )
        return condition

    async def get_alert_condition(self, policy_id: int, condition_id: int) -> AlertCondition:
        """
        Get an alert condition. Lookups are scoped by policy.

        Raises:
            AlertConditionNotFoundError: If the policy is unknown or holds no such condition
        """
        operation = "get_alert_condition"
        identifier = f"{policy_id}:{condition_id}"

        response = await self._send(
            operation,
            "GET",
            f"{self._conditions_url}.json",
            identifier=identifier,
            params={"policy_id": policy_id},
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise AlertConditionNotFoundError(
                "could not find alert condition", operation=operation, identifier=identifier
            )
        if response.status_code != httpx.codes.OK:
            raise self._unexpected(response, operation, identifier)

        conditions = self._decode(response, AlertConditionList, operation, identifier)
        for condition in conditions.synthetics_conditions:
            if condition.id == condition_id:
                return condition

        raise AlertConditionNotFoundError(
            "could not find alert condition", operation=operation, identifier=identifier
        )

    async def update_alert_condition(
        self,
        policy_id: int,
        args: UpdateAlertConditionArgs,
    ) -> AlertCondition:
        """Update an alert condition and return its current record."""
        operation = "update_alert_condition"
        identifier = f"{policy_id}:{args.id}"

        response = await self._send(
            operation,
            "PUT",
            f"{self._conditions_url}/{args.id}.json",
            identifier=identifier,
            json=args.to_payload(),
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise AlertConditionNotFoundError(
                "could not find alert condition", operation=operation, identifier=identifier
            )
        if response.status_code == httpx.codes.NO_CONTENT:
            return await self.get_alert_condition(policy_id, args.id)
        if response.status_code != httpx.codes.OK:
            raise self._unexpected(response, operation, identifier)

        return self._decode(response, AlertConditionEnvelope, operation, identifier).synthetics_condition

    async def delete_alert_condition(self, condition_id: int) -> None:
        """Delete an alert condition."""
        operation = "delete_alert_condition"
        identifier = str(condition_id)

        response = await self._send(
            operation, "DELETE", f"{self._conditions_url}/{condition_id}.json", identifier=identifier
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise AlertConditionNotFoundError(
                "could not find alert condition", operation=operation, identifier=identifier
            )
        if response.status_code not in (httpx.codes.OK, httpx.codes.NO_CONTENT):
            raise self._unexpected(response, operation, identifier)

        logger.info("Deleted alert condition", id=condition_id)
