"""Constructor registry: caller-supplied nominal types and their codec hooks.

Entries are consulted in registration order. When two entries resolve to the
same name, the first one wins; callers observe this, so keep names unique.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeAlias, TypeVar

if TYPE_CHECKING:
	from refgraph.decoder import InstanceTable
	from refgraph.encoder import VisitedTable
	from refgraph.nodes import CustomNode, Serialized

T = TypeVar("T")

SerializeHook: TypeAlias = Callable[
	[Any, "VisitedTable", Callable[[Any], "Serialized"]], "Serialized"
]
DeserializeHook: TypeAlias = Callable[
	["Serialized", "CustomNode", "InstanceTable", Callable[["Serialized"], Any]], Any
]


@dataclass(frozen=True, slots=True)
class ConstructorAlias(Generic[T]):
	"""Registers ``ctor`` for encoding and decoding.

	Attributes:
		ctor: The class instances are created from.
		name: Optional alias written as the node's class name instead of
			``ctor.__name__``.
		serializer: ``(value, table, recurse) -> payload``. When present the
			value is encoded as a ``CustomNode`` wrapping the returned payload,
			which must be a node or primitive (use ``recurse`` to build it).
		deserializer: ``(payload, node, table, recurse) -> value``. Required
			to decode ``CustomNode``s. To support cycles through the value it
			must call ``table.register(node, value)`` before recursing.
	"""

	ctor: type[T]
	name: str | None = None
	serializer: SerializeHook | None = None
	deserializer: DeserializeHook | None = None

	@property
	def class_name(self) -> str:
		return self.name if self.name is not None else self.ctor.__name__


class Registry:
	__slots__: tuple[str, ...] = ("_entries",)
	_entries: tuple[ConstructorAlias[Any], ...]

	def __init__(self, entries: Iterable[ConstructorAlias[Any]] | None = None) -> None:
		self._entries = tuple(entries or ())

	def __iter__(self) -> Iterator[ConstructorAlias[Any]]:
		return iter(self._entries)

	def __len__(self) -> int:
		return len(self._entries)

	def for_value(self, value: Any) -> ConstructorAlias[Any] | None:
		"""Find the entry for ``value``'s runtime type.

		An exact type match is preferred; otherwise the first entry whose
		constructor is a base class of the value is used.
		"""
		value_type = type(value)
		for entry in self._entries:
			if entry.ctor is value_type:
				return entry
		for entry in self._entries:
			if isinstance(value, entry.ctor):
				return entry
		return None

	def resolve(self, class_name: str) -> ConstructorAlias[Any] | None:
		"""Find the entry for a node's class name: aliases first, then type names."""
		for entry in self._entries:
			if entry.name == class_name:
				return entry
		for entry in self._entries:
			if entry.ctor.__name__ == class_name:
				return entry
		return None


def as_registry(constructors: Registry | Sequence[ConstructorAlias[Any]] | None) -> Registry:
	if isinstance(constructors, Registry):
		return constructors
	return Registry(constructors)


__all__ = [
	"ConstructorAlias",
	"DeserializeHook",
	"Registry",
	"SerializeHook",
	"as_registry",
]
