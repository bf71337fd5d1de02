"""Tagged intermediate form produced by the encoder and consumed by the decoder.

A serialized graph is either a primitive (passed through unchanged) or one of
the node classes below. Compound nodes carry an optional ``id`` that is only
assigned when the node is revisited during encoding, so single-use nodes stay
id-free and every ``ReferenceNode`` points back at a node that was emitted
earlier in traversal order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Literal, TypeAlias, final


@final
class _Undefined:
	"""Absent value, distinct from ``None`` (null)."""

	__slots__: tuple[str, ...] = ()
	_instance: "_Undefined | None" = None

	def __new__(cls) -> "_Undefined":
		if cls._instance is None:
			cls._instance = super().__new__(cls)
		return cls._instance

	def __repr__(self) -> str:
		return "UNDEFINED"

	def __bool__(self) -> bool:
		return False

	def __reduce__(self) -> str:
		return "UNDEFINED"


UNDEFINED: Final = _Undefined()

Primitive: TypeAlias = str | int | float | bool | None | _Undefined

BuiltInClass: TypeAlias = Literal["Date", "Map", "Set", "RegExp", "Tuple", "FrozenSet"]
BUILTIN_CLASSES: Final[frozenset[str]] = frozenset(
	("Date", "Map", "Set", "RegExp", "Tuple", "FrozenSet")
)


class Node:
	"""Base class for all non-primitive intermediate nodes."""

	__slots__: tuple[str, ...] = ()


@dataclass(slots=True)
class SymbolNode(Node):
	value: str


@dataclass(slots=True)
class FunctionNode(Node):
	value: str


@dataclass(slots=True)
class BuiltInNode(Node):
	"""A recognized built-in value.

	Payload shapes by class:
	- Date: ISO-8601 string
	- Map: list of ``[key_node, value_node]`` pairs
	- Set, FrozenSet, Tuple: list of nodes
	- RegExp: pattern text, with non-default ``re`` flags in ``flags``
	"""

	cls: BuiltInClass
	value: Any
	id: int | None = None
	flags: int | None = None


@dataclass(slots=True)
class ArrayNode(Node):
	items: list[Serialized] = field(default_factory=list)
	id: int | None = None


@dataclass(slots=True)
class RecordNode(Node):
	fields: dict[str, Serialized] = field(default_factory=dict)
	id: int | None = None


@dataclass(slots=True)
class InstanceNode(Node):
	class_name: str
	fields: dict[str, Serialized] = field(default_factory=dict)
	id: int | None = None


@dataclass(slots=True)
class CustomNode(Node):
	"""A value encoded by its registered serializer.

	``payload`` is owner-defined: a node, a primitive, or lists and
	string-keyed dicts nesting them.
	"""

	class_name: str
	payload: Any = None
	id: int | None = None


@dataclass(slots=True)
class ReferenceNode(Node):
	id: int


CompoundNode: TypeAlias = BuiltInNode | ArrayNode | RecordNode | InstanceNode | CustomNode
Serialized: TypeAlias = Primitive | Node

_PRIMITIVE_TYPES: Final = (str, int, float, bool, type(None), _Undefined)


def is_primitive(value: Any) -> bool:
	"""Exact-type primitive check; subclasses such as ``IntEnum`` are not primitives."""
	return type(value) in _PRIMITIVE_TYPES


def is_serialized(value: Any) -> bool:
	return isinstance(value, Node) or is_primitive(value)


def is_payload(value: Any) -> bool:
	"""Whether ``value`` is a valid custom payload."""
	if is_serialized(value):
		return True
	if type(value) is list:
		return all(is_payload(item) for item in value)
	if type(value) is dict:
		return all(type(key) is str and is_payload(item) for key, item in value.items())
	return False


__all__ = [
	"UNDEFINED",
	"BUILTIN_CLASSES",
	"ArrayNode",
	"BuiltInClass",
	"BuiltInNode",
	"CompoundNode",
	"CustomNode",
	"FunctionNode",
	"InstanceNode",
	"Node",
	"Primitive",
	"RecordNode",
	"ReferenceNode",
	"Serialized",
	"SymbolNode",
	"is_payload",
	"is_primitive",
	"is_serialized",
]
