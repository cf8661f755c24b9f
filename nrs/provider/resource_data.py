"""
Resource Data

The per-resource record a declarative engine hands to a reconciler: the
desired values from configuration, the values persisted by the previous
run, and whatever the reconciler writes back.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nrs.provider.schema import Attribute, Schema


class ResourceData:
    """
    Desired and persisted values of one resource, with change detection.

    A record built with ``desired`` is a planned change (create, update):
    ``get`` then returns the configured value of every attribute, falling
    back to the persisted value only for computed attributes. A record built
    without ``desired`` (read, delete, exists, import) serves persisted
    values. Values written back with ``set`` always win. ``None`` means
    "unset".

    Usage:
        data = ResourceData(schema, "abc", desired={"name": "new"}, prior=state)
        if data.has_change("name"):
            ...
        data.set("sla_threshold", 7.0)
        persisted = data.state()
    """

    def __init__(
        self,
        schema: Schema,
        resource_id: str = "",
        desired: Mapping[str, Any] | None = None,
        prior: Mapping[str, Any] | None = None,
    ) -> None:
        self._schema = schema
        self._id = resource_id
        self._planned = desired is not None
        self._desired = dict(desired or {})
        self._prior = {k: v for k, v in (prior or {}).items() if k != "id"}
        self._written: dict[str, Any] = {}

        for key in (*self._desired, *self._prior):
            self._attribute(key)

    def _attribute(self, key: str) -> Attribute:
        try:
            return self._schema[key]
        except KeyError:
            raise KeyError(f"unknown attribute: {key}") from None

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value

    def get(self, key: str) -> Any:
        """Current value of an attribute, or None when unset."""
        attr = self._attribute(key)
        if key in self._written:
            return self._written[key]
        if key in self._desired:
            return self._desired[key]
        if self._planned and not attr.computed:
            return None
        return self._prior.get(key)

    def is_set(self, key: str) -> bool:
        return self.get(key) is not None

    def has_change(self, key: str) -> bool:
        """
        Whether the desired value differs from the persisted one.

        Desired values go through the attribute's state function first, so
        a fingerprinted attribute compares fingerprint to fingerprint. A
        computed attribute left out of the configuration keeps its value.
        """
        attr = self._attribute(key)
        if not self._planned:
            return False
        if key not in self._desired and attr.computed:
            return False
        return attr.to_state(self._desired.get(key)) != attr.canonical(self._prior.get(key))

    def changed_keys(self) -> list[str]:
        return [key for key in self._schema if self.has_change(key)]

    def set(self, key: str, value: Any) -> None:
        """Write back a value observed or assigned remotely."""
        self._attribute(key)
        self._written[key] = value

    def state(self) -> dict[str, Any]:
        """Values to persist for the next run, including the id."""
        state = dict(self._prior)
        if self._planned:
            for key, attr in self._schema.items():
                if key in self._desired:
                    state[key] = attr.persisted(self._desired[key])
                elif not attr.computed:
                    state.pop(key, None)
        state.update(self._written)
        state["id"] = self._id
        return state

    def __repr__(self) -> str:
        return f"<ResourceData(id={self._id!r}, planned={self._planned})>"
