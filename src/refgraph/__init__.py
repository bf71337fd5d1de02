"""Serialize Python object graphs, shared references and cycles included."""

from refgraph.classify import ValueKind, classify
from refgraph.decoder import Decoder, InstanceTable, deserialize
from refgraph.encoder import Encoder, VisitedTable, serialize
from refgraph.errors import (
	DanglingReferenceError,
	MalformedNodeError,
	MissingDeserializerError,
	SerializationError,
	UnknownTypeError,
	UnregisteredTypeError,
	UnsupportedValueError,
)
from refgraph.nodes import (
	UNDEFINED,
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
)
from refgraph.options import SerializationOptions
from refgraph.registry import ConstructorAlias, Registry
from refgraph.serializer import Serializer, parse, stringify
from refgraph.symbols import Symbol
from refgraph.wire import from_wire, to_wire

__version__ = "0.1.0"

__all__ = [
	"UNDEFINED",
	"ArrayNode",
	"BuiltInNode",
	"ConstructorAlias",
	"CustomNode",
	"DanglingReferenceError",
	"Decoder",
	"Encoder",
	"FunctionNode",
	"InstanceNode",
	"InstanceTable",
	"MalformedNodeError",
	"MissingDeserializerError",
	"Node",
	"RecordNode",
	"ReferenceNode",
	"Registry",
	"SerializationError",
	"SerializationOptions",
	"Serialized",
	"Serializer",
	"Symbol",
	"SymbolNode",
	"UnknownTypeError",
	"UnregisteredTypeError",
	"UnsupportedValueError",
	"ValueKind",
	"VisitedTable",
	"classify",
	"deserialize",
	"from_wire",
	"parse",
	"serialize",
	"stringify",
	"to_wire",
]
