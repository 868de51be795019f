"""Flag values that collect several items: lists and string-keyed mappings."""

from __future__ import annotations

import json
import time
from typing import Any, Dict, Iterable, List, Optional

from .values import (
    BoolValue,
    DurationValue,
    FloatValue,
    IntValue,
    StringValue,
    TimestampValue,
    UintValue,
)

DEFAULT_SEPARATOR = ","
DEFAULT_KEY_VALUE_SEPARATOR = "="

# Marks a value produced by ``serialize``; it is replayed as a whole rather than split.
SERIALIZED_PREFIX = f"sl:::{time.time_ns()}:::"

_TYPE_NAMES = {
    BoolValue: "bool",
    DurationValue: "time.Duration",
    FloatValue: "float64",
    IntValue: "int64",
    UintValue: "uint64",
    StringValue: "string",
    TimestampValue: "time.Time",
}


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def split_multi_values(
    value: str, separator: str = DEFAULT_SEPARATOR, disabled: bool = False
) -> List[str]:
    """Split a flag argument into items, unless splitting is disabled."""
    if disabled:
        return [value]
    return value.split(separator)


def _type_name(item_kind: type) -> str:
    return _TYPE_NAMES.get(item_kind, item_kind.__name__)


class _MultiValueBase:
    separator = DEFAULT_SEPARATOR
    disable_separator = False

    def __init__(self, item_kind: type, config: Any) -> None:
        self.item_kind = item_kind
        self.config = config
        self._zero = item_kind().get()
        self._item = item_kind.create(self._zero, config)
        self.has_been_set = False

    def _coerce(self, item: Any) -> Any:
        if isinstance(self._zero, (bool, int, float, str)):
            return type(self._zero)(item)
        return item

    def _parse_item(self, text: str) -> Any:
        self._item.set(text)
        return self._item.get()

    def _split(self, text: str) -> List[str]:
        return split_multi_values(text, self.separator, self.disable_separator)

    def is_string_kind(self) -> bool:
        return isinstance(self._zero, str)


class SliceValue(_MultiValueBase):
    """A list of typed values; each use of the flag appends to it.

    The first value set from the command line replaces the defaults.
    """

    def __init__(
        self,
        item_kind: type,
        defaults: Optional[Iterable[Any]] = None,
        config: Any = None,
    ) -> None:
        super().__init__(item_kind, config)
        self.values: List[Any] = list(defaults) if defaults is not None else []

    def _start(self) -> None:
        if not self.has_been_set:
            self.values = []
            self.has_been_set = True

    def set_one(self, value: Any) -> None:
        """Append an already typed value."""
        self._start()
        self.values.append(value)

    def set(self, text: str) -> None:
        """Parse ``text``, split on the separator, and append every item."""
        self._start()
        if text.startswith(SERIALIZED_PREFIX):
            payload = text.replace(SERIALIZED_PREFIX, "", 1)
            try:
                loaded = json.loads(payload)
            except ValueError:
                # A malformed serialized value leaves the list empty.
                return
            if isinstance(loaded, list):
                self.values = [self._coerce(item) for item in loaded]
            return
        for piece in self._split(text):
            self.values.append(self._parse_item(piece.strip()))

    def get(self) -> List[Any]:
        return self.values

    def serialize(self) -> str:
        """Return a form of the list that ``set`` reads back whole."""
        return SERIALIZED_PREFIX + json.dumps(self.values, separators=(",", ":"))

    def to_string(self, values: Iterable[Any]) -> str:
        """Format values for help output, e.g. ``"a", "b"`` or ``1, 2``."""
        return ", ".join(self.item_kind.to_string(item) for item in values)

    def __str__(self) -> str:
        if self.is_string_kind():
            return "[" + " ".join(self.values) + "]"
        return f"[]{_type_name(self.item_kind)}{{{self.to_string(self.values)}}}"


class MapValue(_MultiValueBase):
    """A mapping from string keys to typed values, given as ``key=value`` items."""

    key_value_separator = DEFAULT_KEY_VALUE_SEPARATOR

    def __init__(
        self,
        item_kind: type,
        defaults: Optional[Dict[str, Any]] = None,
        config: Any = None,
    ) -> None:
        super().__init__(item_kind, config)
        self.mapping: Dict[str, Any] = dict(defaults) if defaults is not None else {}

    def set(self, text: str) -> None:
        """Parse ``key=value`` items from ``text`` and store them."""
        if not self.has_been_set:
            self.mapping = {}
            self.has_been_set = True
        if text.startswith(SERIALIZED_PREFIX):
            payload = text.replace(SERIALIZED_PREFIX, "", 1)
            try:
                loaded = json.loads(payload)
            except ValueError:
                # A malformed serialized value leaves the mapping as it is.
                return
            if isinstance(loaded, dict):
                self.mapping.update(
                    {str(key): self._coerce(val) for key, val in loaded.items()}
                )
            return
        for item in self._split(text):
            key, sep, raw = item.partition(self.key_value_separator)
            if not sep:
                raise ValueError(
                    f"item {_quote(item)} is missing separator "
                    f"{_quote(self.key_value_separator)}"
                )
            self.mapping[key] = self._parse_item(raw)

    def get(self) -> Dict[str, Any]:
        return self.mapping

    def serialize(self) -> str:
        """Return a form of the mapping that ``set`` reads back whole."""
        return SERIALIZED_PREFIX + json.dumps(
            self.mapping, separators=(",", ":"), sort_keys=True
        )

    def to_string(self, mapping: Dict[str, Any]) -> str:
        """Format a mapping for help output, keys sorted: ``a="b", c=``."""
        return ", ".join(
            key + self.key_value_separator + self.item_kind.to_string(mapping[key])
            for key in sorted(mapping)
        )

    def __str__(self) -> str:
        if self.is_string_kind():
            items = " ".join(f"{key}:{self.mapping[key]}" for key in sorted(self.mapping))
            return f"map[{items}]"
        return (
            f"map[string]{_type_name(self.item_kind)}"
            f"{{{self.to_string(self.mapping)}}}"
        )


def new_string_slice(*args: str) -> SliceValue:
    """A string list holding ``args`` as defaults."""
    return SliceValue(StringValue, args)


def new_int_slice(*args: int) -> SliceValue:
    """A signed integer list holding ``args`` as defaults."""
    return SliceValue(IntValue, args)


def new_uint_slice(*args: int) -> SliceValue:
    """An unsigned integer list holding ``args`` as defaults."""
    return SliceValue(UintValue, args)


def new_float_slice(*args: float) -> SliceValue:
    """A float list holding ``args`` as defaults."""
    return SliceValue(FloatValue, args)


def new_string_map(defaults: Optional[Dict[str, str]] = None) -> MapValue:
    """A string mapping holding ``defaults``."""
    return MapValue(StringValue, defaults)