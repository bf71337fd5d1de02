"""Errors raised by the refgraph encoder, decoder and wire codec.

Every error aborts the whole traversal; no partially built graph is returned.
"""

from __future__ import annotations

from typing import Any


class SerializationError(Exception):
	"""Base class for all refgraph errors."""


class UnregisteredTypeError(SerializationError):
	"""Raised when encoding an instance whose type has no registry entry."""

	value_type: type[Any]

	def __init__(self, value_type: type[Any]) -> None:
		self.value_type = value_type
		super().__init__(
			f"Cannot serialize object of type {value_type.__qualname__!r}. "
			+ "Register a ConstructorAlias to handle this type."
		)


class UnknownTypeError(SerializationError):
	"""Raised when decoding a node whose class name matches no registry entry."""

	class_name: str

	def __init__(self, class_name: str) -> None:
		self.class_name = class_name
		super().__init__(f"No registered constructor matches class {class_name!r}")


class MissingDeserializerError(SerializationError):
	"""Raised when a custom node's registry entry has no deserializer."""

	class_name: str

	def __init__(self, class_name: str) -> None:
		self.class_name = class_name
		super().__init__(
			f"Missing deserializer for custom serialized object of class {class_name!r}"
		)


class DanglingReferenceError(SerializationError):
	"""Raised when a reference points to an id that was never registered."""

	ref_id: int

	def __init__(self, ref_id: int) -> None:
		self.ref_id = ref_id
		super().__init__(f"Cannot find reference with id {ref_id}")


class UnsupportedValueError(SerializationError):
	"""Raised when a value matches none of the recognized kinds."""

	value_type: type[Any]

	def __init__(self, value_type: type[Any], reason: str | None = None) -> None:
		self.value_type = value_type
		message = f"Unsupported value in serialization: {value_type!r}"
		if reason is not None:
			message = f"{message}. {reason}"
		super().__init__(message)


class MalformedNodeError(SerializationError):
	"""Raised for input that is not a valid node or wire payload."""


__all__ = [
	"DanglingReferenceError",
	"MalformedNodeError",
	"MissingDeserializerError",
	"SerializationError",
	"UnknownTypeError",
	"UnregisteredTypeError",
	"UnsupportedValueError",
]
