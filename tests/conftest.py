"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import base64
import json
import re
from typing import Any

import httpx
import pytest

from nrs.provider.provider import Provider
from nrs.synthetics.client import SyntheticsClient
from nrs.synthetics.config import ClientConfig

SYNTHETICS_URL = "https://synthetics.test/synthetics/api/v3"
ALERTS_URL = "https://alerts.test/v2"

TIMESTAMP = "2016-06-13T20:13:31.000+0000"
DEFAULT_SLA_THRESHOLD = 7.0

_MONITOR_PATH = re.compile(r"^/synthetics/api/v3/monitors(?:/(?P<id>[^/]+))?(?P<script>/script)?$")
_CONDITIONS_PATH = re.compile(r"^/v2/alerts_synthetics_conditions\.json$")
_POLICY_PATH = re.compile(r"^/v2/alerts_synthetics_conditions/policies/(?P<policy>\d+)\.json$")
_CONDITION_PATH = re.compile(r"^/v2/alerts_synthetics_conditions/(?P<id>\d+)\.json$")


class FakeSyntheticsService:
    """
    In-memory stand-in for the synthetics and alerts APIs.

    Pass ``handler`` to httpx.MockTransport. Every request is recorded in
    ``requests``; ``rate_limited`` answers that many requests with 429
    before serving normally.
    """

    def __init__(self) -> None:
        self.monitors: dict[str, dict[str, Any]] = {}
        self.scripts: dict[str, dict[str, Any]] = {}
        self.conditions: dict[int, dict[int, dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []
        self.rate_limited = 0
        self._next_monitor = 1
        self._next_condition = 100

    # Helpers for tests

    def add_monitor(self, **fields: Any) -> str:
        monitor_id = fields.pop("id", None) or self._new_monitor_id()
        record = {
            "id": monitor_id,
            "name": "existing",
            "type": "SIMPLE",
            "frequency": 5,
            "uri": "https://example.com",
            "locations": ["AWS_US_WEST_1"],
            "status": "ENABLED",
            "slaThreshold": DEFAULT_SLA_THRESHOLD,
            "options": {},
            "createdAt": TIMESTAMP,
            "modifiedAt": TIMESTAMP,
        }
        record.update(fields)
        self.monitors[monitor_id] = record
        return monitor_id

    def set_script(self, monitor_id: str, script: str) -> None:
        self.scripts[monitor_id] = {
            "scriptText": base64.b64encode(script.encode("utf-8")).decode("ascii")
        }

    def script_text(self, monitor_id: str) -> str:
        return base64.b64decode(self.scripts[monitor_id]["scriptText"]).decode("utf-8")

    def add_policy(self, policy_id: int) -> None:
        self.conditions.setdefault(policy_id, {})

    def add_condition(self, policy_id: int, **fields: Any) -> int:
        condition_id = fields.pop("id", None) or self._new_condition_id()
        record = {
            "id": condition_id,
            "name": "existing condition",
            "monitor_id": "mon-1",
            "enabled": True,
        }
        record.update(fields)
        self.conditions.setdefault(policy_id, {})[condition_id] = record
        return condition_id

    def bodies(self, method: str) -> list[bytes]:
        return [r.content for r in self.requests if r.method == method]

    def _new_monitor_id(self) -> str:
        monitor_id = f"mon-{self._next_monitor}"
        self._next_monitor += 1
        return monitor_id

    def _new_condition_id(self) -> int:
        condition_id = self._next_condition
        self._next_condition += 1
        return condition_id

    # Transport handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.rate_limited > 0:
            self.rate_limited -= 1
            return httpx.Response(429, text="Too Many Requests")

        path = request.url.path
        if request.url.host == "synthetics.test":
            match = _MONITOR_PATH.match(path)
            if match:
                return self._monitors(request, match.group("id"), bool(match.group("script")))
        else:
            if _CONDITIONS_PATH.match(path):
                return self._list_conditions(request)
            match = _POLICY_PATH.match(path)
            if match and request.method == "POST":
                return self._create_condition(request, int(match.group("policy")))
            match = _CONDITION_PATH.match(path)
            if match:
                return self._condition(request, int(match.group("id")))

        return httpx.Response(404, json={"error": "no route"})

    def _monitors(self, request: httpx.Request, monitor_id: str | None, script: bool) -> httpx.Response:
        if monitor_id is None:
            if request.method == "GET":
                return self._list_monitors(request)
            if request.method == "POST":
                return self._create_monitor(request)
            return httpx.Response(405)

        if monitor_id not in self.monitors:
            return httpx.Response(404, json={"error": "monitor not found"})

        if script:
            if request.method == "GET":
                if monitor_id not in self.scripts:
                    return httpx.Response(404, json={"error": "script not found"})
                return httpx.Response(200, json=self.scripts[monitor_id])
            if request.method == "PUT":
                self.scripts[monitor_id] = json.loads(request.content)
                return httpx.Response(204)
            return httpx.Response(405)

        if request.method == "GET":
            return httpx.Response(200, json=self.monitors[monitor_id])
        if request.method == "PATCH":
            patch = json.loads(request.content)
            record = self.monitors[monitor_id]
            options = {**record.get("options", {}), **patch.pop("options", {})}
            record.update(patch)
            record["options"] = options
            return httpx.Response(204)
        if request.method == "DELETE":
            del self.monitors[monitor_id]
            self.scripts.pop(monitor_id, None)
            return httpx.Response(204)
        return httpx.Response(405)

    def _list_monitors(self, request: httpx.Request) -> httpx.Response:
        records = list(self.monitors.values())
        offset = int(request.url.params.get("offset", 0))
        limit = int(request.url.params.get("limit", 0)) or len(records)
        page = records[offset : offset + limit]
        return httpx.Response(200, json={"monitors": page, "count": len(records)})

    def _create_monitor(self, request: httpx.Request) -> httpx.Response:
        monitor_id = self._new_monitor_id()
        self.monitors[monitor_id] = {
            "id": monitor_id,
            "slaThreshold": DEFAULT_SLA_THRESHOLD,
            "options": {},
            "createdAt": TIMESTAMP,
            "modifiedAt": TIMESTAMP,
            **json.loads(request.content),
        }
        return httpx.Response(
            201, headers={"Location": f"{SYNTHETICS_URL}/monitors/{monitor_id}"}
        )

    def _list_conditions(self, request: httpx.Request) -> httpx.Response:
        policy_id = int(request.url.params.get("policy_id", 0))
        if policy_id not in self.conditions:
            return httpx.Response(404, json={"error": "policy not found"})
        return httpx.Response(
            200, json={"synthetics_conditions": list(self.conditions[policy_id].values())}
        )

    def _create_condition(self, request: httpx.Request, policy_id: int) -> httpx.Response:
        fields = json.loads(request.content)["synthetics_condition"]
        condition_id = self.add_condition(policy_id, **fields)
        return httpx.Response(
            201, json={"synthetics_condition": self.conditions[policy_id][condition_id]}
        )

    def _condition(self, request: httpx.Request, condition_id: int) -> httpx.Response:
        for conditions in self.conditions.values():
            if condition_id not in conditions:
                continue
            if request.method == "PUT":
                fields = json.loads(request.content)["synthetics_condition"]
                conditions[condition_id].update(fields)
                return httpx.Response(200, json={"synthetics_condition": conditions[condition_id]})
            if request.method == "DELETE":
                record = conditions.pop(condition_id)
                return httpx.Response(200, json={"synthetics_condition": record})
            return httpx.Response(405)
        return httpx.Response(404, json={"error": "condition not found"})


@pytest.fixture
def service() -> FakeSyntheticsService:
    """Fresh fake service for each test."""
    return FakeSyntheticsService()


@pytest.fixture
def client_config() -> ClientConfig:
    """Client configuration pointing at the fake service, without backoff waits."""
    return ClientConfig(
        api_key="test-key",
        synthetics_url=SYNTHETICS_URL,
        alerts_url=ALERTS_URL,
        retries=3,
        backoff_seconds=0.0,
    )


@pytest.fixture
def client(service: FakeSyntheticsService, client_config: ClientConfig) -> SyntheticsClient:
    """Client wired to the fake service."""
    return SyntheticsClient(client_config, transport=httpx.MockTransport(service.handler))


@pytest.fixture
def provider(service: FakeSyntheticsService, client_config: ClientConfig) -> Provider:
    """Provider configured against the fake service."""
    provider = Provider(base_config=client_config, transport=httpx.MockTransport(service.handler))
    provider.configure({"new_relic_api_key": "test-key"})
    return provider
