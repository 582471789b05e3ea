"""JSON value classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Union

# Decoded form produced by json.loads.
JsonValue = Union[None, bool, int, float, str, list[Any], dict[str, Any]]

ChildKey = Union[str, int]


class ValueKind(Enum):
    NULL = auto()
    BOOL = auto()
    NUMBER = auto()
    STRING = auto()
    ARRAY = auto()
    OBJECT = auto()


class NodeKind(Enum):
    OBJECT = auto()
    ARRAY = auto()
    PRIMITIVE = auto()


@dataclass
class Classification:
    """Kind of a value plus its ordered children (empty for primitives)."""

    kind: ValueKind
    children: list[tuple[ChildKey, JsonValue]] = field(default_factory=list)

    @property
    def node_kind(self) -> NodeKind:
        return node_kind_of(self.kind)


def node_kind_of(kind: ValueKind) -> NodeKind:
    if kind is ValueKind.OBJECT:
        return NodeKind.OBJECT
    if kind is ValueKind.ARRAY:
        return NodeKind.ARRAY
    return NodeKind.PRIMITIVE


def classify(value: JsonValue) -> Classification:
    """Return the kind of *value* and its children in document order.

    Object children are ``(key, value)`` pairs in insertion order, array
    children are ``(index, value)`` pairs. Raises ``TypeError`` for anything
    json.loads cannot produce.
    """
    # bool before int: isinstance(True, int) is True
    if value is None:
        return Classification(ValueKind.NULL)
    if isinstance(value, bool):
        return Classification(ValueKind.BOOL)
    if isinstance(value, (int, float)):
        return Classification(ValueKind.NUMBER)
    if isinstance(value, str):
        return Classification(ValueKind.STRING)
    if isinstance(value, list):
        return Classification(ValueKind.ARRAY, list(enumerate(value)))
    if isinstance(value, dict):
        return Classification(ValueKind.OBJECT, list(value.items()))
    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")
