"""A set of named flag values and the parser that fills them from arguments."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


class FlagSetError(ValueError):
    """Arguments could not be parsed against a flag set."""


@dataclass
class _FlagEntry:
    name: str
    usage: str
    value: Any
    default_value: str


def _is_bool(value: Any) -> bool:
    check = getattr(value, "is_bool_flag", None)
    return bool(check()) if callable(check) else False


class FlagSet:
    """Named flag values; ``parse`` sets them from command-line arguments.

    A value is any object with ``set(text)``; a value whose ``is_bool_flag()``
    returns true takes no separate argument.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._formal: Dict[str, _FlagEntry] = {}
        self._actual: Dict[str, _FlagEntry] = {}
        self._args: List[str] = []
        self.parsed = False

    def var(self, value: Any, name: str, usage: str = "") -> None:
        """Register ``value`` under ``name``."""
        if name.startswith("-"):
            raise FlagSetError(f"flag {_quote(name)} begins with -")
        if "=" in name:
            raise FlagSetError(f"flag {_quote(name)} contains =")
        if name in self._formal:
            prefix = f"{self.name} " if self.name else ""
            raise FlagSetError(f"{prefix}flag redefined: {name}")
        self._formal[name] = _FlagEntry(name, usage, value, str(value))

    def lookup(self, name: str) -> Optional[_FlagEntry]:
        """Return the entry registered under ``name``, or None."""
        return self._formal.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._formal

    def set(self, name: str, text: str) -> None:
        """Set the flag ``name`` from ``text`` as if it had been given."""
        entry = self._formal.get(name)
        if entry is None:
            raise FlagSetError(f"no such flag -{name}")
        entry.value.set(text)
        self._actual[name] = entry

    def is_set(self, name: str) -> bool:
        """Whether the flag ``name`` was given or set."""
        return name in self._actual

    def args(self) -> List[str]:
        """The arguments left after the flags."""
        return list(self._args)

    def parse(self, args: Optional[Iterable[str]] = None) -> None:
        """Set flags from ``args`` until the first non-flag argument or ``--``."""
        self.parsed = True
        self._args = list(args or [])
        while self._parse_one():
            pass

    def _parse_one(self) -> bool:
        if not self._args:
            return False
        arg = self._args[0]
        if len(arg) < 2 or arg[0] != "-":
            return False
        dashes = 1
        if arg[1] == "-":
            dashes = 2
            if len(arg) == 2:
                self._args.pop(0)
                return False
        name = arg[dashes:]
        if not name or name[0] in "-=":
            raise FlagSetError(f"bad flag syntax: {arg}")
        self._args.pop(0)

        name, sep, text = name.partition("=")
        has_value = bool(sep)

        entry = self._formal.get(name)
        if entry is None:
            if name in ("help", "h"):
                raise FlagSetError("flag: help requested")
            raise FlagSetError(f"flag provided but not defined: -{name}")

        if _is_bool(entry.value):
            if has_value:
                try:
                    entry.value.set(text)
                except Exception as err:
                    raise FlagSetError(
                        f"invalid boolean value {_quote(text)} for -{name}: {err}"
                    ) from err
            else:
                try:
                    entry.value.set("true")
                except Exception as err:
                    raise FlagSetError(f"invalid boolean flag {name}: {err}") from err
        else:
            if not has_value and self._args:
                text = self._args.pop(0)
                has_value = True
            if not has_value:
                raise FlagSetError(f"flag needs an argument: -{name}")
            try:
                entry.value.set(text)
            except Exception as err:
                raise FlagSetError(
                    f"invalid value {_quote(text)} for flag -{name}: {err}"
                ) from err

        self._actual[name] = entry
        return True