"""Encoder: Python value graph -> tagged intermediate nodes.

The traversal is depth-first and emits nodes in pre-order. Every compound
value is registered in the ``VisitedTable`` before its children are encoded,
so a child pointing back at an ancestor becomes a ``ReferenceNode`` instead of
recursing forever. Ids are handed out lazily on the first revisit, which keeps
them off nodes that occur only once.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from refgraph.classify import ValueKind, builtin_class, classify
from refgraph.errors import (
	MalformedNodeError,
	UnregisteredTypeError,
	UnsupportedValueError,
)
from refgraph.nodes import (
	ArrayNode,
	BuiltInNode,
	CompoundNode,
	CustomNode,
	FunctionNode,
	InstanceNode,
	RecordNode,
	ReferenceNode,
	Serialized,
	SymbolNode,
	is_payload,
)
from refgraph.options import DEFAULT_OPTIONS, SerializationOptions
from refgraph.registry import ConstructorAlias, Registry, as_registry

logger = logging.getLogger(__name__)

# Built-in bases whose state lives outside __dict__ and __slots__.
_BUILTIN_STATE_TYPES = (
	str,
	int,
	float,
	complex,
	bytes,
	bytearray,
	list,
	dict,
	set,
	frozenset,
	tuple,
)


class VisitedTable:
	"""Identity -> node table for one top-level encode call.

	Holds a strong reference to each visited value so that ``id()`` keys stay
	unique for the lifetime of the traversal.
	"""

	__slots__: tuple[str, ...] = ("_entries", "_counter")
	_entries: dict[int, tuple[Any, CompoundNode]]
	_counter: int

	def __init__(self) -> None:
		self._entries = {}
		self._counter = 0

	def __len__(self) -> int:
		return len(self._entries)

	def __contains__(self, value: Any) -> bool:
		return id(value) in self._entries

	def push(self, value: Any, node: CompoundNode) -> None:
		self._entries[id(value)] = (value, node)

	def get(self, value: Any) -> CompoundNode | None:
		entry = self._entries.get(id(value))
		return entry[1] if entry is not None else None

	def reference(self, value: Any) -> ReferenceNode | None:
		"""Return a reference to ``value``'s node, assigning it an id if needed."""
		node = self.get(value)
		if node is None:
			return None
		if node.id is None:
			node.id = self._counter
			self._counter += 1
			logger.debug("Assigned reference id %d to %s", node.id, type(node).__name__)
		return ReferenceNode(id=node.id)


def instance_fields(value: Any) -> list[str]:
	"""Own field names of ``value``: ``__dict__`` order, then populated slots."""
	names: list[str] = list(getattr(value, "__dict__", {}))
	seen = set(names)
	for klass in type(value).__mro__:
		slots = klass.__dict__.get("__slots__", ())
		if isinstance(slots, str):
			slots = (slots,)
		for slot in slots:
			if slot in ("__dict__", "__weakref__") or slot in seen:
				continue
			if slot.startswith("__") and not slot.endswith("__"):
				slot = f"_{klass.__name__.lstrip('_')}{slot}"
			seen.add(slot)
			if hasattr(value, slot):
				names.append(slot)
	return names


def _function_name(value: Callable[..., Any]) -> str:
	return getattr(value, "__qualname__", None) or getattr(value, "__name__", "")


class Encoder:
	registry: Registry
	options: SerializationOptions

	def __init__(
		self,
		constructors: Registry | Sequence[ConstructorAlias[Any]] | None = None,
		options: SerializationOptions | None = None,
	) -> None:
		self.registry = as_registry(constructors)
		self.options = options or DEFAULT_OPTIONS

	def __call__(self, value: Any) -> Serialized:
		return self.encode(value, VisitedTable())

	def encode(self, value: Any, table: VisitedTable) -> Serialized:
		kind = classify(value)
		if kind is ValueKind.PRIMITIVE:
			return value
		if kind is ValueKind.SYMBOL:
			if self.options.serialize_symbol is not None:
				return self.options.serialize_symbol(value)
			return SymbolNode(value=value.description)
		if kind is ValueKind.FUNCTION:
			if self.options.serialize_function is not None:
				return self.options.serialize_function(value)
			return FunctionNode(value=_function_name(value))

		existing = table.reference(value)
		if existing is not None:
			return existing

		if kind is ValueKind.BUILTIN:
			return self._encode_builtin(value, table)
		if kind is ValueKind.ARRAY:
			return self._encode_array(value, table)
		if kind is ValueKind.RECORD:
			return self._encode_record(value, table)

		entry = self.registry.for_value(value)
		if entry is None:
			if kind is ValueKind.UNSUPPORTED:
				raise UnsupportedValueError(type(value))
			raise UnregisteredTypeError(type(value))
		return self._encode_instance(value, entry, table)

	def _encode_array(self, value: list[Any], table: VisitedTable) -> ArrayNode:
		result = ArrayNode()
		table.push(value, result)
		for item in value:
			result.items.append(self.encode(item, table))
		return result

	def _encode_record(self, value: dict[str, Any], table: VisitedTable) -> RecordNode:
		result = RecordNode()
		table.push(value, result)
		for key, entry in value.items():
			result.fields[key] = self.encode(entry, table)
		return result

	def _encode_builtin(self, value: Any, table: VisitedTable) -> BuiltInNode:
		cls = builtin_class(value)
		if cls == "Date":
			result = BuiltInNode(cls="Date", value=value.isoformat())
			table.push(value, result)
			return result
		if cls == "RegExp":
			if not isinstance(value.pattern, str):
				raise UnsupportedValueError(type(value))
			flags = value.flags & ~int(re.UNICODE)
			result = BuiltInNode(cls="RegExp", value=value.pattern, flags=flags or None)
			table.push(value, result)
			return result
		if cls == "Map":
			result = BuiltInNode(cls="Map", value=[])
			table.push(value, result)
			for key, entry in value.items():
				result.value.append([self.encode(key, table), self.encode(entry, table)])
			return result
		if cls in ("Set", "FrozenSet", "Tuple"):
			result = BuiltInNode(cls=cls, value=[])
			table.push(value, result)
			for item in value:
				result.value.append(self.encode(item, table))
			return result
		raise UnsupportedValueError(type(value))

	def _encode_instance(
		self, value: Any, entry: ConstructorAlias[Any], table: VisitedTable
	) -> InstanceNode | CustomNode:
		if entry.serializer is not None:
			custom = CustomNode(class_name=entry.class_name)
			table.push(value, custom)
			logger.debug("Using custom serializer for %s", entry.class_name)
			payload = entry.serializer(value, table, lambda v: self.encode(v, table))
			if not is_payload(payload):
				raise MalformedNodeError(
					f"Serializer for {entry.class_name!r} returned {type(payload).__name__}; "
					+ "expected nodes, primitives, or lists and str-keyed dicts of them"
				)
			custom.payload = payload
			return custom

		if isinstance(value, _BUILTIN_STATE_TYPES):
			base = next(b for b in type(value).__mro__ if b in _BUILTIN_STATE_TYPES)
			raise UnsupportedValueError(
				type(value),
				f"Its {base.__name__} contents are not instance fields; "
				+ f"give the {entry.class_name!r} entry a serializer and deserializer",
			)
		result = InstanceNode(class_name=entry.class_name)
		table.push(value, result)
		for name in instance_fields(value):
			result.fields[name] = self.encode(getattr(value, name), table)
		return result


def serialize(
	value: Any,
	constructors: Registry | Sequence[ConstructorAlias[Any]] | None = None,
	options: SerializationOptions | None = None,
) -> Serialized:
	"""Encode ``value`` into the tagged intermediate form."""
	return Encoder(constructors, options)(value)


__all__ = ["Encoder", "VisitedTable", "instance_fields", "serialize"]
