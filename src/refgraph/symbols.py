from __future__ import annotations

from typing import final


@final
class Symbol:
	"""A named value whose identity is its only meaning.

	Two symbols with the same description are still distinct, so a symbol
	cannot be reproduced across processes. Decoding creates a fresh symbol
	unless ``SerializationOptions.deserialize_symbol`` resolves the name.
	"""

	__slots__: tuple[str, ...] = ("description",)
	description: str

	def __init__(self, description: str = "") -> None:
		self.description = description

	def __repr__(self) -> str:
		return f"Symbol({self.description})"


__all__ = ["Symbol"]
