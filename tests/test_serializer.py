import datetime as dt
import re

import pytest
from refgraph import (
	UNDEFINED,
	ArrayNode,
	BuiltInNode,
	ConstructorAlias,
	RecordNode,
	ReferenceNode,
	deserialize,
	serialize,
)


class Marker:
	def __init__(self, name: str = "") -> None:
		self.name = name


def test_primitives_roundtrip():
	data = [1, "a", True, None, 3.5, UNDEFINED]
	payload = serialize(data)
	parsed = deserialize(payload)
	assert parsed == data
	assert parsed[5] is UNDEFINED


def test_primitives_pass_through_unchanged():
	for value in (0, -1.5, "", "text", False, None, UNDEFINED):
		assert serialize(value) is value
		assert deserialize(value) is value


def test_arrays_and_objects():
	data = {"a": 1, "b": [2, 3, {"c": "x"}]}
	payload = serialize(data)
	assert isinstance(payload, RecordNode)
	assert isinstance(payload.fields["b"], ArrayNode)
	assert deserialize(payload) == data


def test_single_use_nodes_have_no_id():
	payload = serialize({"a": [1, 2], "b": {"c": 3}})
	assert isinstance(payload, RecordNode)
	assert payload.id is None
	assert payload.fields["a"].id is None
	assert payload.fields["b"].id is None


def test_handles_sets():
	source = {1, 2, "three"}
	payload = serialize(source)
	assert isinstance(payload, BuiltInNode)
	assert payload.cls == "Set"
	parsed = deserialize(payload)
	assert isinstance(parsed, set)
	assert parsed == source


def test_handles_maps_with_non_string_keys():
	source = {1: "one", (2, 3): "pair", "name": [1]}
	payload = serialize(source)
	assert isinstance(payload, BuiltInNode)
	assert payload.cls == "Map"
	assert payload.value[0] == [1, "one"]
	parsed = deserialize(payload)
	assert parsed == source
	assert list(parsed) == list(source)


def test_dates_roundtrip():
	when = dt.datetime(2024, 1, 1, 12, 30, tzinfo=dt.UTC)
	payload = serialize(when)
	assert payload == BuiltInNode(cls="Date", value="2024-01-01T12:30:00+00:00")
	assert deserialize(payload) == when


def test_naive_dates_roundtrip():
	when = dt.datetime(2020, 5, 17, 8, 0, 0, 1234)
	assert deserialize(serialize(when)) == when


def test_regexp_roundtrip_keeps_flags():
	pattern = re.compile(r"^a+\d$", re.IGNORECASE | re.MULTILINE)
	payload = serialize(pattern)
	assert isinstance(payload, BuiltInNode)
	assert payload.value == r"^a+\d$"
	assert payload.flags == re.IGNORECASE | re.MULTILINE
	parsed = deserialize(payload)
	assert parsed.pattern == pattern.pattern
	assert parsed.flags == pattern.flags


def test_regexp_default_flags_are_omitted():
	payload = serialize(re.compile("abc"))
	assert isinstance(payload, BuiltInNode)
	assert payload.flags is None


def test_tuples_and_frozensets_keep_their_type():
	data = [(1, "a", (2,)), frozenset({1, 2}), {(1, 2), (3, 4)}]
	parsed = deserialize(serialize(data))
	assert parsed == data
	assert type(parsed[0]) is tuple
	assert type(parsed[0][2]) is tuple
	assert type(parsed[1]) is frozenset


def test_nested_special_values_and_shared_refs():
	when = dt.datetime(2024, 2, 2, tzinfo=dt.UTC)
	shared_set = {when}
	data = {"s": shared_set, "also": shared_set, "arr": [shared_set, when]}

	payload = serialize(data)
	parsed = deserialize(payload)

	assert isinstance(parsed["s"], set)
	items = list(parsed["s"])
	assert len(items) == 1
	assert isinstance(items[0], dt.datetime)

	assert parsed["also"] is parsed["s"]
	assert parsed["arr"][0] is parsed["s"]
	assert parsed["arr"][1] is items[0]


def test_shared_identity_emits_one_full_node():
	shared = {"v": 42}
	data = [shared, shared, shared]

	payload = serialize(data)
	assert isinstance(payload, ArrayNode)
	first, second, third = payload.items
	assert isinstance(first, RecordNode)
	assert first.id == 0
	assert second == ReferenceNode(id=0)
	assert third == ReferenceNode(id=0)

	parsed = deserialize(payload)
	assert parsed[0] is parsed[1] is parsed[2]


def test_equal_but_distinct_objects_stay_distinct():
	data = [{"v": 1}, {"v": 1}]
	payload = serialize(data)
	assert isinstance(payload, ArrayNode)
	assert all(isinstance(item, RecordNode) for item in payload.items)
	assert all(item.id is None for item in payload.items)

	parsed = deserialize(payload)
	assert parsed[0] == parsed[1]
	assert parsed[0] is not parsed[1]


def test_self_cycle():
	root: dict[str, object] = {"x": 10, "y": 20}
	root["circular"] = root

	payload = serialize(root)
	assert payload == RecordNode(
		fields={"x": 10, "y": 20, "circular": ReferenceNode(id=0)}, id=0
	)

	parsed = deserialize(payload)
	assert parsed["circular"] is parsed
	assert parsed["x"] == 10


def test_mutual_cycle():
	a: dict[str, object] = {"name": "a"}
	b: dict[str, object] = {"name": "b", "other": a}
	a["other"] = b

	payload = serialize(a)
	assert isinstance(payload, RecordNode)
	assert payload.id == 0
	inner = payload.fields["other"]
	assert isinstance(inner, RecordNode)
	assert inner.fields["other"] == ReferenceNode(id=0)

	parsed = deserialize(payload)
	assert parsed["other"]["other"] is parsed
	assert parsed["other"] is not parsed


def test_ids_increase_in_revisit_order():
	first = {"n": 1}
	second = {"n": 2}
	data = [second, first, first, second]

	payload = serialize(data)
	assert isinstance(payload, ArrayNode)
	assert payload.items[0].id == 1
	assert payload.items[1].id == 0
	assert payload.items[2] == ReferenceNode(id=0)
	assert payload.items[3] == ReferenceNode(id=1)


def test_ids_reset_between_calls():
	shared = [1]
	first = serialize([shared, shared])
	second = serialize([shared, shared])
	assert first == second
	assert first.items[1] == ReferenceNode(id=0)


def test_cycles_with_special_types():
	when = dt.datetime(2024, 3, 3, tzinfo=dt.UTC)
	root: dict[str, object] = {"when": when}
	root["self"] = root

	payload = serialize(root)
	parsed = deserialize(payload)

	assert parsed["self"] is parsed
	assert isinstance(parsed["when"], dt.datetime)
	assert parsed["when"].timestamp() == pytest.approx(when.timestamp(), rel=1e-9)


def test_cycle_through_list():
	items: list[object] = [1]
	items.append(items)
	parsed = deserialize(serialize(items))
	assert parsed[0] == 1
	assert parsed[1] is parsed


def test_map_key_shared_with_its_value():
	key = (1, 2)
	payload = serialize({key: key})
	assert isinstance(payload, BuiltInNode)
	assert payload.value[0][1] == ReferenceNode(id=0)

	parsed = deserialize(payload)
	((parsed_key, parsed_value),) = parsed.items()
	assert parsed_key == (1, 2)
	assert parsed_value is parsed_key


def test_instance_map_key_referenced_from_value():
	constructors = [ConstructorAlias(Marker)]
	marker = Marker("m")
	data = {marker: [marker], 0: marker}

	parsed = deserialize(serialize(data, constructors), constructors)
	parsed_marker = next(key for key in parsed if isinstance(key, Marker))
	assert parsed_marker.name == "m"
	assert parsed[parsed_marker][0] is parsed_marker
	assert parsed[0] is parsed_marker


def test_cycle_through_map_value():
	mapping: dict[object, object] = {1: "one"}
	mapping[2] = mapping
	parsed = deserialize(serialize(mapping))
	assert parsed[1] == "one"
	assert parsed[2] is parsed


def test_preserves_cycles_and_shared_refs():
	shared = {"v": 42}
	root: dict[str, object] = {"left": {"shared": shared}, "right": {"shared": shared}}
	root["self"] = root

	payload = serialize(root)
	parsed = deserialize(payload)

	assert parsed["left"]["shared"] is parsed["right"]["shared"]
	assert parsed["self"] is parsed
	assert parsed["left"]["shared"]["v"] == 42


def test_deeply_nested_roundtrip():
	data = {
		"list": [{1, 2}, {"deep": [frozenset({3}), (4, 5)]}],
		"map": {1: {"x": [None, True]}},
		"when": dt.datetime(2030, 1, 1, tzinfo=dt.UTC),
	}
	assert deserialize(serialize(data)) == data
