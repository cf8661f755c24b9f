"""
Resource Schemas

Attribute definitions for declarative resources, plus validation of the
schemas themselves and of desired values against them.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class AttributeType(str, Enum):
    """Value types of resource attributes."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    SET = "set"  # Unordered collection of scalars
    LIST = "list"  # Ordered collection


COLLECTION_TYPES = frozenset({AttributeType.SET, AttributeType.LIST})


@dataclass(frozen=True)
class Attribute:
    """A single attribute of a resource schema."""

    type: AttributeType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False  # Changing it requires replacing the resource
    sensitive: bool = False
    description: str = ""
    allowed: tuple[Any, ...] | None = None
    # Applied to desired values before they are stored or diffed
    state_func: Callable[[Any], Any] | None = None

    def canonical(self, value: Any) -> Any:
        """Comparable form of a stored value."""
        if self.type == AttributeType.SET:
            return frozenset(value or ())
        if self.type == AttributeType.LIST:
            return list(value or [])
        return value

    def persisted(self, value: Any) -> Any:
        """Form a desired value is stored in."""
        if value is None:
            return None
        if self.type == AttributeType.SET:
            return sorted(value)
        if self.type == AttributeType.LIST:
            return list(value)
        if self.state_func is not None:
            return self.state_func(value)
        return value

    def to_state(self, value: Any) -> Any:
        """Comparable form of a desired value once stored."""
        return self.canonical(self.persisted(value))


Schema = Mapping[str, Attribute]


def validate_schema(schema: Schema) -> list[str]:
    """
    Check a schema for internally inconsistent attribute definitions.

    Returns:
        List of problems, empty when the schema is valid
    """
    problems: list[str] = []

    for name, attr in schema.items():
        if attr.required and (attr.optional or attr.computed):
            problems.append(f"{name}: required attributes cannot be optional or computed")
        if not (attr.required or attr.optional or attr.computed):
            problems.append(f"{name}: one of required, optional or computed must be set")
        if attr.force_new and attr.computed and not attr.optional:
            problems.append(f"{name}: computed-only attributes cannot force a new resource")
        if attr.allowed is not None and attr.type in COLLECTION_TYPES:
            problems.append(f"{name}: allowed values only apply to scalar attributes")
        if attr.state_func is not None and attr.type in COLLECTION_TYPES:
            problems.append(f"{name}: state functions only apply to scalar attributes")

    return problems


_PYTHON_TYPES: dict[AttributeType, tuple[type, ...]] = {
    AttributeType.STRING: (str,),
    AttributeType.INT: (int,),
    AttributeType.FLOAT: (int, float),
    AttributeType.BOOL: (bool,),
    AttributeType.SET: (list, tuple, set, frozenset),
    AttributeType.LIST: (list, tuple),
}


def validate_values(schema: Schema, values: Mapping[str, Any]) -> list[str]:
    """
    Check desired values against a schema.

    Returns:
        List of problems, empty when the values are acceptable
    """
    problems: list[str] = []

    for name in values:
        if name not in schema:
            problems.append(f"{name}: unknown attribute")

    for name, attr in schema.items():
        value = values.get(name)
        if value is None:
            if attr.required:
                problems.append(f"{name}: required attribute is missing")
            continue

        expected = _PYTHON_TYPES[attr.type]
        # bool is an int subclass; only BOOL attributes accept it
        if not isinstance(value, expected) or (
            isinstance(value, bool) and attr.type != AttributeType.BOOL
        ):
            problems.append(f"{name}: expected {attr.type.value}, got {type(value).__name__}")
            continue

        if attr.allowed is not None and value not in attr.allowed:
            allowed = ", ".join(str(a) for a in attr.allowed)
            problems.append(f"{name}: {value!r} is not one of {allowed}")

    return problems
