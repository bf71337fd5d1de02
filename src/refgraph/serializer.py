"""Top-level API binding a constructor registry and options once.

Usage::

    from refgraph import ConstructorAlias, Serializer

    codec = Serializer([ConstructorAlias(Point)])
    text = codec.stringify(value)
    copy = codec.parse(text)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from refgraph import wire
from refgraph.decoder import Decoder
from refgraph.encoder import Encoder
from refgraph.nodes import Serialized
from refgraph.options import SerializationOptions
from refgraph.registry import ConstructorAlias, Registry, as_registry


class Serializer:
	"""Reusable codec. Each call gets its own tables, so instances are thread-safe."""

	__slots__: tuple[str, ...] = ("registry", "options", "_encoder", "_decoder")
	registry: Registry
	options: SerializationOptions | None
	_encoder: Encoder
	_decoder: Decoder

	def __init__(
		self,
		constructors: Registry | Sequence[ConstructorAlias[Any]] | None = None,
		options: SerializationOptions | None = None,
	) -> None:
		self.registry = as_registry(constructors)
		self.options = options
		self._encoder = Encoder(self.registry, options)
		self._decoder = Decoder(self.registry, options)

	def serialize(self, value: Any) -> Serialized:
		return self._encoder(value)

	def deserialize(self, node: Serialized) -> Any:
		return self._decoder(node)

	def stringify(self, value: Any, **kwargs: Any) -> str:
		"""Serialize ``value`` to JSON text. Extra keyword arguments go to ``json.dumps``."""
		return wire.dumps(self.serialize(value), **kwargs)

	def parse(self, text: str | bytes) -> Any:
		return self.deserialize(wire.loads(text))


def stringify(
	value: Any,
	constructors: Registry | Sequence[ConstructorAlias[Any]] | None = None,
	options: SerializationOptions | None = None,
	**kwargs: Any,
) -> str:
	return Serializer(constructors, options).stringify(value, **kwargs)


def parse(
	text: str | bytes,
	constructors: Registry | Sequence[ConstructorAlias[Any]] | None = None,
	options: SerializationOptions | None = None,
) -> Any:
	return Serializer(constructors, options).parse(text)


__all__ = ["Serializer", "parse", "stringify"]
