from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
	from refgraph.nodes import Serialized
	from refgraph.symbols import Symbol


@dataclass(frozen=True, slots=True)
class SerializationOptions:
	"""Hooks overriding the default handling of symbols and functions.

	Attributes:
		serialize_symbol: Replaces the default ``SymbolNode(description)``.
		deserialize_symbol: Resolves a symbol name. Defaults to a fresh
			``Symbol`` with that name.
		serialize_function: Replaces the default ``FunctionNode(qualname)``.
		deserialize_function: Resolves a function name. Defaults to returning
			the name itself; functions are never rebuilt from source.
	"""

	serialize_symbol: Callable[["Symbol"], "Serialized"] | None = None
	deserialize_symbol: Callable[[str], Any] | None = None
	serialize_function: Callable[[Callable[..., Any]], "Serialized"] | None = None
	deserialize_function: Callable[[str], Any] | None = None


DEFAULT_OPTIONS = SerializationOptions()

__all__ = ["DEFAULT_OPTIONS", "SerializationOptions"]
