"""Value classification shared by the encoder.

The kinds are checked in a fixed priority order because several of them are
indistinguishable without it: classes are callables, and a ``dict`` is either a
plain record or a Map depending on its keys.
"""

from __future__ import annotations

import builtins
import datetime as dt
import inspect
import re
from enum import Enum
from typing import Any, Final

from refgraph.nodes import BuiltInClass, is_primitive
from refgraph.symbols import Symbol


class ValueKind(Enum):
	PRIMITIVE = "primitive"
	SYMBOL = "symbol"
	FUNCTION = "function"
	BUILTIN = "builtin"
	ARRAY = "array"
	RECORD = "record"
	INSTANCE = "instance"
	UNSUPPORTED = "unsupported"


_BUILTIN_TYPES: Final[dict[type[Any], BuiltInClass]] = {
	dt.datetime: "Date",
	set: "Set",
	frozenset: "FrozenSet",
	tuple: "Tuple",
	re.Pattern: "RegExp",
}


def is_record(value: Any) -> bool:
	"""A plain ``dict`` keyed only by strings. Any other key makes it a Map."""
	return type(value) is dict and all(type(key) is str for key in value)


def is_function(value: Any) -> bool:
	return isinstance(value, type) or inspect.isroutine(value)


def builtin_class(value: Any) -> BuiltInClass | None:
	"""Return the built-in class tag for ``value`` or None if it is not one."""
	tag = _BUILTIN_TYPES.get(type(value))
	if tag is not None:
		return tag
	if type(value) is dict and not is_record(value):
		return "Map"
	return None


def classify(value: Any) -> ValueKind:
	if is_primitive(value):
		return ValueKind.PRIMITIVE
	if isinstance(value, Symbol):
		return ValueKind.SYMBOL
	if is_function(value):
		return ValueKind.FUNCTION
	if builtin_class(value) is not None:
		return ValueKind.BUILTIN
	if type(value) is list:
		return ValueKind.ARRAY
	if type(value) is dict:
		return ValueKind.RECORD
	if type(value).__module__ == builtins.__name__:
		# bytes, complex, range, modules and the like
		return ValueKind.UNSUPPORTED
	return ValueKind.INSTANCE


__all__ = ["ValueKind", "builtin_class", "classify", "is_function", "is_record"]
