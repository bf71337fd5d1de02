"""Decoder: tagged intermediate nodes -> Python value graph.

Mirrors the encoder. Each compound value is created empty and registered
under its node id before its children are decoded, so a ``ReferenceNode``
inside a child resolves to the ancestor that is still being filled in.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from collections.abc import Sequence
from typing import Any

from refgraph.errors import (
	DanglingReferenceError,
	MalformedNodeError,
	MissingDeserializerError,
	UnknownTypeError,
)
from refgraph.nodes import (
	BUILTIN_CLASSES,
	ArrayNode,
	BuiltInNode,
	CustomNode,
	FunctionNode,
	InstanceNode,
	Node,
	RecordNode,
	ReferenceNode,
	Serialized,
	SymbolNode,
	is_primitive,
)
from refgraph.options import DEFAULT_OPTIONS, SerializationOptions
from refgraph.registry import ConstructorAlias, Registry, as_registry
from refgraph.symbols import Symbol

logger = logging.getLogger(__name__)


class InstanceTable:
	"""Node id -> reconstructed value table for one top-level decode call."""

	__slots__: tuple[str, ...] = ("_values",)
	_values: dict[int, Any]

	def __init__(self) -> None:
		self._values = {}

	def __len__(self) -> int:
		return len(self._values)

	def __contains__(self, ref_id: int) -> bool:
		return ref_id in self._values

	def register(self, node: Node, value: Any) -> None:
		"""Record ``value`` as the result of ``node``. Nodes without an id are never referenced."""
		node_id = getattr(node, "id", None)
		if node_id is not None:
			self._values[node_id] = value

	def get(self, ref_id: int) -> Any:
		try:
			return self._values[ref_id]
		except KeyError:
			raise DanglingReferenceError(ref_id) from None


class Decoder:
	registry: Registry
	options: SerializationOptions

	def __init__(
		self,
		constructors: Registry | Sequence[ConstructorAlias[Any]] | None = None,
		options: SerializationOptions | None = None,
	) -> None:
		self.registry = as_registry(constructors)
		self.options = options or DEFAULT_OPTIONS

	def __call__(self, node: Serialized) -> Any:
		return self.decode(node, InstanceTable())

	def decode(self, node: Serialized, table: InstanceTable) -> Any:
		if is_primitive(node):
			return node
		if isinstance(node, ReferenceNode):
			return table.get(node.id)
		if isinstance(node, SymbolNode):
			if self.options.deserialize_symbol is not None:
				return self.options.deserialize_symbol(node.value)
			return Symbol(node.value)
		if isinstance(node, FunctionNode):
			if self.options.deserialize_function is not None:
				return self.options.deserialize_function(node.value)
			return node.value
		if isinstance(node, ArrayNode):
			items: list[Any] = []
			table.register(node, items)
			for item in node.items:
				items.append(self.decode(item, table))
			return items
		if isinstance(node, RecordNode):
			record: dict[str, Any] = {}
			table.register(node, record)
			for key, entry in node.fields.items():
				record[key] = self.decode(entry, table)
			return record
		if isinstance(node, BuiltInNode):
			return self._decode_builtin(node, table)
		if isinstance(node, CustomNode):
			return self._decode_custom(node, table)
		if isinstance(node, InstanceNode):
			return self._decode_instance(node, table)
		raise MalformedNodeError(f"Unable to deserialize {type(node).__name__} value {node!r}")

	def _decode_builtin(self, node: BuiltInNode, table: InstanceTable) -> Any:
		if node.cls not in BUILTIN_CLASSES:
			raise MalformedNodeError(f"Unknown built-in class {node.cls!r}")
		if node.cls == "Date":
			try:
				date = dt.datetime.fromisoformat(node.value)
			except (TypeError, ValueError) as exc:
				raise MalformedNodeError(f"Invalid Date payload {node.value!r}") from exc
			table.register(node, date)
			return date
		if node.cls == "RegExp":
			try:
				pattern = re.compile(node.value, node.flags or 0)
			except (TypeError, ValueError, re.error) as exc:
				raise MalformedNodeError(f"Invalid RegExp payload {node.value!r}") from exc
			table.register(node, pattern)
			return pattern
		if node.cls == "Map":
			mapping: dict[Any, Any] = {}
			table.register(node, mapping)
			for pair in node.value:
				if not isinstance(pair, (list, tuple)) or len(pair) != 2:
					raise MalformedNodeError(f"Map entries must be [key, value] pairs, got {pair!r}")
				# Keys come first in traversal order; a reference in the value may target the key.
				key = self.decode(pair[0], table)
				mapping[key] = self.decode(pair[1], table)
			return mapping
		if node.cls == "Set":
			members: set[Any] = set()
			table.register(node, members)
			for item in node.value:
				members.add(self.decode(item, table))
			return members
		# Tuple and FrozenSet are immutable: members first, then registration.
		decoded = [self.decode(item, table) for item in node.value]
		result = tuple(decoded) if node.cls == "Tuple" else frozenset(decoded)
		table.register(node, result)
		return result

	def _decode_instance(self, node: InstanceNode, table: InstanceTable) -> Any:
		entry = self.registry.resolve(node.class_name)
		if entry is None:
			raise UnknownTypeError(node.class_name)
		instance = entry.ctor.__new__(entry.ctor)
		table.register(node, instance)
		for name, value in node.fields.items():
			setattr(instance, name, self.decode(value, table))
		return instance

	def _decode_custom(self, node: CustomNode, table: InstanceTable) -> Any:
		entry = self.registry.resolve(node.class_name)
		if entry is None:
			raise UnknownTypeError(node.class_name)
		if entry.deserializer is None:
			raise MissingDeserializerError(node.class_name)
		logger.debug("Using custom deserializer for %s", node.class_name)
		result = entry.deserializer(
			node.payload, node, table, lambda child: self.decode(child, table)
		)
		# Later siblings may still refer to it even if the hook skipped registering.
		if node.id is not None and node.id not in table:
			table.register(node, result)
		return result


def deserialize(
	node: Serialized,
	constructors: Registry | Sequence[ConstructorAlias[Any]] | None = None,
	options: SerializationOptions | None = None,
) -> Any:
	"""Rebuild a value graph from its tagged intermediate form."""
	return Decoder(constructors, options)(node)


__all__ = ["Decoder", "InstanceTable", "deserialize"]
