"""JSON-compatible wire shape for intermediate nodes.

Nodes map to tagged objects::

    {"type": "object", "value": {...}, "id": 0}
    {"type": "array", "items": [...]}
    {"type": "builtin", "class": "Map", "value": [[k, v], ...]}
    {"type": "instance", "class": "Point", "props": {...}}
    {"type": "custom", "class": "Point", "value": <payload>}
    {"type": "payload", "value": {...}}
    {"type": "reference", "id": 0}
    {"type": "symbol", "value": "name"}
    {"type": "function", "value": "name"}
    {"type": "undefined"}

``id`` is only present on nodes that are referenced elsewhere, and ``flags``
only on RegExp nodes with non-default flags. Plain JSON primitives stand for
themselves.

Custom payloads may nest nodes inside plain lists and dicts. Lists are never
node shapes on the wire, and a plain dict is written as-is unless it has a
``"type"`` key, in which case it is wrapped in a ``"payload"`` object so it
cannot be mistaken for a node.
"""

from __future__ import annotations

import json
from typing import Any, cast

from refgraph.errors import MalformedNodeError
from refgraph.nodes import (
	BUILTIN_CLASSES,
	UNDEFINED,
	BuiltInClass,
	ArrayNode,
	BuiltInNode,
	CustomNode,
	FunctionNode,
	InstanceNode,
	RecordNode,
	ReferenceNode,
	Serialized,
	SymbolNode,
	_Undefined,
)

JSONValue = str | int | float | bool | None | list["JSONValue"] | dict[str, "JSONValue"]


def _with_id(data: dict[str, Any], node_id: int | None) -> dict[str, Any]:
	if node_id is not None:
		data["id"] = node_id
	return data


def to_wire(node: Serialized) -> JSONValue:
	"""Convert a node tree into JSON-compatible data."""
	if isinstance(node, _Undefined):
		return {"type": "undefined"}
	if node is None or isinstance(node, (bool, int, float, str)):
		return node
	if isinstance(node, ReferenceNode):
		return {"type": "reference", "id": node.id}
	if isinstance(node, SymbolNode):
		return {"type": "symbol", "value": node.value}
	if isinstance(node, FunctionNode):
		return {"type": "function", "value": node.value}
	if isinstance(node, ArrayNode):
		return _with_id({"type": "array", "items": [to_wire(i) for i in node.items]}, node.id)
	if isinstance(node, RecordNode):
		value = {key: to_wire(entry) for key, entry in node.fields.items()}
		return _with_id({"type": "object", "value": value}, node.id)
	if isinstance(node, InstanceNode):
		props = {key: to_wire(entry) for key, entry in node.fields.items()}
		return _with_id(
			{"type": "instance", "class": node.class_name, "props": props}, node.id
		)
	if isinstance(node, CustomNode):
		payload_data = _payload_to_wire(node.payload)
		return _with_id(
			{"type": "custom", "class": node.class_name, "value": payload_data}, node.id
		)
	if isinstance(node, BuiltInNode):
		if node.cls == "Map":
			payload: Any = [[to_wire(k), to_wire(v)] for k, v in node.value]
		elif node.cls in ("Set", "FrozenSet", "Tuple"):
			payload = [to_wire(item) for item in node.value]
		else:
			payload = node.value
		data = _with_id({"type": "builtin", "class": node.cls, "value": payload}, node.id)
		if node.flags:
			data["flags"] = node.flags
		return data
	raise MalformedNodeError(f"Cannot convert {type(node).__name__} to wire format")


def _payload_to_wire(payload: Any) -> JSONValue:
	if type(payload) is list:
		return [_payload_to_wire(item) for item in payload]
	if type(payload) is dict:
		value = {key: _payload_to_wire(item) for key, item in payload.items()}
		if "type" in value:
			return {"type": "payload", "value": value}
		return value
	return to_wire(payload)


def _payload_from_wire(data: JSONValue) -> Any:
	if isinstance(data, list):
		return [_payload_from_wire(item) for item in data]
	if isinstance(data, dict):
		if "type" not in data:
			return {key: _payload_from_wire(item) for key, item in data.items()}
		if data["type"] == "payload":
			return {k: _payload_from_wire(v) for k, v in _field(data, "value", dict).items()}
	return from_wire(data)


def _field(data: dict[str, Any], key: str, expected: type | tuple[type, ...]) -> Any:
	try:
		value = data[key]
	except KeyError:
		raise MalformedNodeError(
			f"Wire node of type {data.get('type')!r} is missing {key!r}"
		) from None
	if not isinstance(value, expected) or isinstance(value, bool) and expected is int:
		raise MalformedNodeError(
			f"Wire node field {key!r} has unexpected type {type(value).__name__}"
		)
	return value


def _optional_id(data: dict[str, Any]) -> int | None:
	if data.get("id") is None:
		return None
	return _field(data, "id", int)


def from_wire(data: JSONValue) -> Serialized:
	"""Convert JSON-compatible data back into a node tree."""
	if data is None or isinstance(data, (bool, int, float, str)):
		return data
	if not isinstance(data, dict):
		raise MalformedNodeError(f"Expected a tagged object, got {type(data).__name__}")

	kind = data.get("type")
	if kind == "undefined":
		return UNDEFINED
	if kind == "reference":
		return ReferenceNode(id=_field(data, "id", int))
	if kind == "symbol":
		return SymbolNode(value=_field(data, "value", str))
	if kind == "function":
		return FunctionNode(value=_field(data, "value", str))
	if kind == "array":
		items = [from_wire(item) for item in _field(data, "items", list)]
		return ArrayNode(items=items, id=_optional_id(data))
	if kind == "object":
		fields = {k: from_wire(v) for k, v in _field(data, "value", dict).items()}
		return RecordNode(fields=fields, id=_optional_id(data))
	if kind == "instance":
		props = {k: from_wire(v) for k, v in _field(data, "props", dict).items()}
		return InstanceNode(
			class_name=_field(data, "class", str), fields=props, id=_optional_id(data)
		)
	if kind == "custom":
		return CustomNode(
			class_name=_field(data, "class", str),
			payload=_payload_from_wire(data.get("value")),
			id=_optional_id(data),
		)
	if kind == "builtin":
		cls = _field(data, "class", str)
		if cls not in BUILTIN_CLASSES:
			raise MalformedNodeError(f"Unknown built-in class {cls!r}")
		if cls == "Map":
			payload: Any = []
			for pair in _field(data, "value", list):
				if not isinstance(pair, list) or len(pair) != 2:
					raise MalformedNodeError("Map entries must be [key, value] pairs")
				payload.append([from_wire(pair[0]), from_wire(pair[1])])
		elif cls in ("Set", "FrozenSet", "Tuple"):
			payload = [from_wire(item) for item in _field(data, "value", list)]
		else:
			payload = _field(data, "value", str)
		flags = data.get("flags")
		return BuiltInNode(
			cls=cast(BuiltInClass, cls),
			value=payload,
			id=_optional_id(data),
			flags=_field(data, "flags", int) if flags is not None else None,
		)
	raise MalformedNodeError(f"Unknown wire node type {kind!r}")


def dumps(node: Serialized, **kwargs: Any) -> str:
	return json.dumps(to_wire(node), **kwargs)


def loads(text: str | bytes) -> Serialized:
	try:
		data = json.loads(text)
	except json.JSONDecodeError as exc:
		raise MalformedNodeError(f"Invalid JSON payload: {exc}") from exc
	return from_wire(data)


__all__ = ["JSONValue", "dumps", "from_wire", "loads", "to_wire"]
