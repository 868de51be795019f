"""Typed command-line flags: applying them to a flag set and reading them back."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .flagset import FlagSet
from .formatting import flag_names, stringify_flag
from .multivalue import MapValue, SliceValue
from .values import (
    BoolConfig,
    BoolValue,
    DurationValue,
    FloatValue,
    IntegerConfig,
    IntValue,
    StringConfig,
    StringValue,
    TimestampConfig,
    TimestampValue,
    UintValue,
)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


class EnvVars:
    """An ordered list of environment variables a flag may read its value from."""

    def __init__(self, *args: str) -> None:
        self.keys = list(args)

    def env_keys(self) -> List[str]:
        return list(self.keys)

    def lookup_with_source(self) -> Tuple[str, str, bool]:
        """Return ``(value, description of source, found)`` for the first variable set."""
        for key in self.keys:
            if key in os.environ:
                return os.environ[key], f"environment variable {_quote(key)}", True
        return "", "", False


class _FnValue:
    """The value registered in a flag set; it routes every set through its flag."""

    def __init__(self, flag: "Flag") -> None:
        self.flag = flag

    def set(self, text: str) -> None:
        self.flag._set_from_argument(text)

    def get(self) -> Any:
        return self.flag._value.get()

    def is_bool_flag(self) -> bool:
        return self.flag._is_bool

    def count(self) -> int:
        counter = getattr(self.flag._value, "count", None)
        return counter() if callable(counter) else 0

    def serialize(self) -> str:
        serializer = getattr(self.flag._value, "serialize", None)
        return serializer() if callable(serializer) else str(self.flag._value)

    def __str__(self) -> str:
        return "" if self.flag._value is None else str(self.flag._value)


@dataclass(eq=False)
class Flag:
    """A named flag with a typed default, optional environment sources and an action."""

    name: str = ""
    category: str = ""
    default_text: str = ""
    hide_default: bool = False
    usage: str = ""
    sources: EnvVars = field(default_factory=EnvVars)
    required: bool = False
    hidden: bool = False
    persistent: bool = False
    value: Any = None
    destination: Optional[Callable[[Any], Any]] = None
    aliases: List[str] = field(default_factory=list)
    takes_file: bool = False
    action: Optional[Callable[[FlagSet, Any], Any]] = None
    config: Any = None
    only_once: bool = False
    validator: Optional[Callable[[Any], Any]] = None

    _kind = StringValue
    _type_name = "string"
    _is_bool = False
    _is_multi = False
    _zero = staticmethod(str)
    _new_config = staticmethod(StringConfig)

    def __post_init__(self) -> None:
        if self.value is None:
            self.value = self._zero()
        if self.config is None:
            self.config = self._new_config()
        self._count = 0
        self._has_been_set = False
        self._applied = False
        self._value: Any = None

    def _create(self, value: Any) -> Any:
        return self._kind.create(value, self.config)

    def _format_default(self, value: Any) -> str:
        return self._kind.to_string(value)

    def _store(self) -> None:
        if self.destination is not None:
            self.destination(self._value.get())

    def _validate(self) -> None:
        if self.validator is not None:
            self.validator(self._value.get())

    def _set_from_argument(self, text: str) -> None:
        if self._count == 1 and self.only_once:
            raise ValueError("cant duplicate this flag")
        self._count += 1
        self._value.set(text)
        self._has_been_set = True
        self._store()
        self._validate()

    def apply(self, flag_set: FlagSet) -> None:
        """Register every name of this flag, reading environment sources first."""
        if not self._applied or not self.persistent:
            new_value = self.value
            text, source, found = self.sources.lookup_with_source()
            if found:
                tmp = self._create(self.value)
                if text or self._type_name == "string" or self._is_bool:
                    parsed = text if text else "false"
                    try:
                        tmp.set(parsed)
                    except Exception as err:
                        raise ValueError(
                            f"could not parse {_quote(parsed)} as {self._type_name} value "
                            f"from {source} for flag {self.name}: {err}"
                        ) from err
                new_value = tmp.get()
                self._has_been_set = True
            self._value = self._create(new_value)
            self._store()
            self._validate()
        for name in self.names():
            flag_set.var(_FnValue(self), name, self.usage)
        self._applied = True

    def names(self) -> List[str]:
        return flag_names(self.name, self.aliases)

    def is_set(self) -> bool:
        return self._has_been_set

    def is_required(self) -> bool:
        return self.required

    def is_visible(self) -> bool:
        return not self.hidden

    def is_persistent(self) -> bool:
        return self.persistent

    def get_category(self) -> str:
        return self.category

    def set_category(self, category: str) -> None:
        self.category = category

    def takes_value(self) -> bool:
        return not self._is_bool

    def get_usage(self) -> str:
        return self.usage

    def get_value(self) -> str:
        return "" if self._is_bool else str(self._create(self.value))

    def get_default_text(self) -> str:
        if self.default_text:
            return self.default_text
        return self._format_default(self.value)

    def get_env_vars(self) -> List[str]:
        return self.sources.env_keys()

    def is_default_visible(self) -> bool:
        return not self.hide_default

    def is_multi_value_flag(self) -> bool:
        return self._is_multi

    def count(self) -> int:
        counter = getattr(self._value, "count", None)
        return counter() if callable(counter) else self._count

    def get(self, flag_set: FlagSet) -> Any:
        """The value of this flag in ``flag_set``, or the type's zero value."""
        entry = flag_set.lookup(self.name)
        if entry is None:
            return self._zero()
        return entry.value.get()

    def run_action(self, flag_set: FlagSet) -> Any:
        """Call the flag's action with its current value, if it has one."""
        if self.action is not None:
            return self.action(flag_set, self.get(flag_set))
        return None

    def __str__(self) -> str:
        return stringify_flag(self)


class BoolFlag(Flag):
    _kind = BoolValue
    _type_name = "bool"
    _is_bool = True
    _zero = staticmethod(bool)
    _new_config = staticmethod(BoolConfig)


class IntFlag(Flag):
    _kind = IntValue
    _type_name = "int64"
    _zero = staticmethod(int)
    _new_config = staticmethod(IntegerConfig)


class UintFlag(Flag):
    _kind = UintValue
    _type_name = "uint64"
    _zero = staticmethod(int)
    _new_config = staticmethod(IntegerConfig)


class FloatFlag(Flag):
    _kind = FloatValue
    _type_name = "float64"
    _zero = staticmethod(float)
    _new_config = staticmethod(lambda: None)


class DurationFlag(Flag):
    _kind = DurationValue
    _type_name = "time.Duration"
    _zero = staticmethod(timedelta)
    _new_config = staticmethod(lambda: None)


class StringFlag(Flag):
    pass


class TimestampFlag(Flag):
    _kind = TimestampValue
    _type_name = "time.Time"
    _zero = staticmethod(lambda: None)
    _new_config = staticmethod(TimestampConfig)


class _SliceFlag(Flag):
    _is_multi = True
    _zero = staticmethod(list)
    _item_kind: type = StringValue

    def _create(self, value: Any) -> SliceValue:
        return SliceValue(self._item_kind, value or [], self.config)

    def _format_default(self, value: Any) -> str:
        return SliceValue(self._item_kind, (), self.config).to_string(value or [])


class StringSliceFlag(_SliceFlag):
    _item_kind = StringValue
    _type_name = "[]string"
    _new_config = staticmethod(StringConfig)


class IntSliceFlag(_SliceFlag):
    _item_kind = IntValue
    _type_name = "[]int64"
    _new_config = staticmethod(IntegerConfig)


class UintSliceFlag(_SliceFlag):
    _item_kind = UintValue
    _type_name = "[]uint64"
    _new_config = staticmethod(IntegerConfig)


class FloatSliceFlag(_SliceFlag):
    _item_kind = FloatValue
    _type_name = "[]float64"
    _new_config = staticmethod(lambda: None)


class StringMapFlag(Flag):
    _is_multi = True
    _type_name = "map[string]string"
    _zero = staticmethod(dict)
    _new_config = staticmethod(StringConfig)

    def _create(self, value: Any) -> MapValue:
        return MapValue(StringValue, value or {}, self.config)

    def _format_default(self, value: Any) -> str:
        return MapValue(StringValue, {}, self.config).to_string(value or {})


class ExtFlag:
    """A flag around an existing value object, registered as it is."""

    def __init__(self, name: str, value: Any, usage: str = "", default_text: str = "") -> None:
        self.name = name
        self.value = value
        self.usage = usage
        self.default_text = default_text

    def apply(self, flag_set: FlagSet) -> None:
        flag_set.var(self.value, self.name, self.usage)

    def names(self) -> List[str]:
        return [self.name]

    def is_set(self) -> bool:
        return False

    def is_visible(self) -> bool:
        return True

    def takes_value(self) -> bool:
        return False

    def get_usage(self) -> str:
        return self.usage

    def get_value(self) -> str:
        return str(self.value)

    def get_default_text(self) -> str:
        return self.default_text

    def get_env_vars(self) -> List[str]:
        return []

    def __str__(self) -> str:
        return stringify_flag(self)


def new_flag_set(name: str, flags: Iterable[Any]) -> FlagSet:
    """A flag set with every flag applied to it."""
    flag_set = FlagSet(name)
    for flag in flags:
        flag.apply(flag_set)
    return flag_set


def has_flag(flags: Iterable[Any], flag: Any) -> bool:
    """Whether ``flag`` itself is among ``flags``."""
    return any(existing is flag for existing in flags)