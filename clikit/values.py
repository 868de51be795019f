"""Typed flag values: parsing from text and formatting for help output."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from decimal import Decimal
from fractions import Fraction
from typing import Any, Optional

_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


@dataclass
class BoolConfig:
    """Configuration of bool flags; ``count`` counts how often the flag was set."""

    count: int = 0


@dataclass
class IntegerConfig:
    """Configuration of integer flags; base 0 detects the base from a prefix."""

    base: int = 0


@dataclass
class StringConfig:
    """Configuration of string flags."""

    trim_space: bool = False


@dataclass
class TimestampConfig:
    """Configuration of timestamp flags: a layout and an optional time zone."""

    layout: str = ""
    timezone: Optional[tzinfo] = None


# ---------------------------------------------------------------- bools

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def parse_bool(text: str) -> bool:
    """Parse the spellings of a boolean accepted on the command line."""
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"strconv.ParseBool: parsing {_quote(text)}: invalid syntax")


class BoolValue:
    """A boolean flag value that counts how often it was set."""

    def __init__(self, value: bool = False, config: Optional[BoolConfig] = None) -> None:
        self.value = value
        self.config = config if config is not None else BoolConfig()

    @classmethod
    def create(cls, value: bool, config: Optional[BoolConfig] = None) -> "BoolValue":
        return cls(value, config)

    @staticmethod
    def to_string(value: bool) -> str:
        """Format a boolean as ``true`` or ``false``."""
        return str(bool(value)).lower()

    def set(self, text: str) -> None:
        try:
            self.value = parse_bool(text)
        except ValueError:
            raise ValueError("parse error") from None
        self.config.count += 1

    def get(self) -> bool:
        return self.value

    def count(self) -> int:
        return self.config.count

    def is_bool_flag(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.to_string(self.value)


# ------------------------------------------------------------ durations

_UNITS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_NUMBER = re.compile(r"(\d*)(?:\.(\d*))?")
_UNIT = re.compile(r"[^\d.]+")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"1h30m"``, ``"1.5s"`` or ``"-300ms"``."""
    invalid = ValueError(f"time: invalid duration {_quote(text)}")
    rest = text
    negative = False
    if rest and rest[0] in "+-":
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise invalid
    total = Fraction(0)
    while rest:
        number = _NUMBER.match(rest)
        whole, frac = number.group(1), number.group(2)
        if not whole and not frac:
            raise invalid
        rest = rest[number.end():]
        unit_match = _UNIT.match(rest)
        if unit_match is None:
            raise ValueError(f"time: missing unit in duration {_quote(text)}")
        unit = unit_match.group()
        if unit not in _UNITS:
            raise ValueError(f"time: unknown unit {_quote(unit)} in duration {_quote(text)}")
        amount = Fraction(int(whole or "0"))
        if frac:
            amount += Fraction(int(frac), 10 ** len(frac))
        total += amount * _UNITS[unit]
        rest = rest[unit_match.end():]
    nanos = int(total)
    if nanos > _INT64_MAX + (1 if negative else 0):
        raise invalid
    micros = nanos // 1000
    return timedelta(microseconds=-micros if negative else micros)


def _fraction_text(value: int, unit: int) -> str:
    whole, rem = divmod(value, unit)
    if not rem:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{str(rem).rjust(width, '0').rstrip('0')}"


def format_duration(value: timedelta) -> str:
    """Format a duration the way ``parse_duration`` reads it, e.g. ``"2h3m6s"``."""
    nanos = ((value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds) * 1000
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos < 1_000:
        return f"{sign}{nanos}ns"
    if nanos < 1_000_000:
        return f"{sign}{_fraction_text(nanos, 1_000)}\u00b5s"
    if nanos < 1_000_000_000:
        return f"{sign}{_fraction_text(nanos, 1_000_000)}ms"
    hours, rem = divmod(nanos, 3600 * 1_000_000_000)
    minutes, rem = divmod(rem, 60 * 1_000_000_000)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return out + _fraction_text(rem, 1_000_000_000) + "s"


class DurationValue:
    """A duration flag value."""

    def __init__(self, value: timedelta = timedelta(0)) -> None:
        self.value = value

    @classmethod
    def create(cls, value: timedelta, config: Any = None) -> "DurationValue":
        return cls(value)

    @staticmethod
    def to_string(value: timedelta) -> str:
        return format_duration(value)

    def set(self, text: str) -> None:
        self.value = parse_duration(text)

    def get(self) -> timedelta:
        return self.value

    def __str__(self) -> str:
        return format_duration(self.value)


# --------------------------------------------------------------- floats

def format_float(value: float) -> str:
    """Format a float with the fewest digits that read back to the same value."""
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "+Inf" if value > 0 else "-Inf"
    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    prefix = "-" if sign else ""
    digits = "".join(map(str, digit_tuple)).lstrip("0")
    if not digits:
        return prefix + "0"
    stripped = digits.rstrip("0")
    point = len(digits) + exponent
    digits = stripped
    count = len(digits)
    exp = point - 1
    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if count > 1 else "")
        exp_sign = "-" if exp < 0 else "+"
        return f"{prefix}{mantissa}e{exp_sign}{abs(exp):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= count:
        return prefix + digits + "0" * (point - count)
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"strconv.ParseFloat: parsing {_quote(text)}: invalid syntax")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"strconv.ParseFloat: parsing {_quote(text)}: invalid syntax") from None


class FloatValue:
    """A floating-point flag value."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    @classmethod
    def create(cls, value: float, config: Any = None) -> "FloatValue":
        return cls(value)

    @staticmethod
    def to_string(value: float) -> str:
        return format_float(value)

    def set(self, text: str) -> None:
        self.value = _parse_float(text)

    def get(self) -> float:
        return self.value

    def __str__(self) -> str:
        return format_float(self.value)


# ------------------------------------------------------------- integers

def _parse_unsigned(text: str, body: str, base: int, func: str) -> int:
    def syntax() -> ValueError:
        return ValueError(f"strconv.{func}: parsing {_quote(text)}: invalid syntax")

    if base != 0 and not 2 <= base <= 36:
        raise ValueError(f"strconv.{func}: parsing {_quote(text)}: invalid base {base}")
    if base == 0:
        lowered = body.lower()
        base = 10
        if lowered.startswith("0x"):
            base, body = 16, body[2:]
        elif lowered.startswith("0b"):
            base, body = 2, body[2:]
        elif lowered.startswith("0o"):
            base, body = 8, body[2:]
        elif len(body) > 1 and body[0] == "0":
            base, body = 8, body[1:]
        if "__" in body or body.endswith("_"):
            raise syntax()
        body = body.replace("_", "")
    if not body:
        raise syntax()
    allowed = _DIGITS[:base]
    if any(ch not in allowed for ch in body.lower()):
        raise syntax()
    return int(body, base)


def parse_int(text: str, base: int = 10) -> int:
    """Parse a signed 64-bit integer; base 0 reads a 0x, 0o, 0b or 0 prefix."""
    body = text
    negative = False
    if body and body[0] in "+-":
        negative = body[0] == "-"
        body = body[1:]
    magnitude = _parse_unsigned(text, body, base, "ParseInt")
    value = -magnitude if negative else magnitude
    if not -_INT64_MAX - 1 <= value <= _INT64_MAX:
        raise ValueError(f"strconv.ParseInt: parsing {_quote(text)}: value out of range")
    return value


def parse_uint(text: str, base: int = 10) -> int:
    """Parse an unsigned 64-bit integer; base 0 reads a 0x, 0o, 0b or 0 prefix."""
    value = _parse_unsigned(text, text, base, "ParseUint")
    if value > _UINT64_MAX:
        raise ValueError(f"strconv.ParseUint: parsing {_quote(text)}: value out of range")
    return value


class IntValue:
    """A signed integer flag value."""

    def __init__(self, value: int = 0, config: Optional[IntegerConfig] = None) -> None:
        self.value = value
        self.base = (config or IntegerConfig()).base

    @classmethod
    def create(cls, value: int, config: Optional[IntegerConfig] = None) -> "IntValue":
        return cls(value, config)

    @staticmethod
    def to_string(value: int) -> str:
        return str(value)

    def set(self, text: str) -> None:
        self.value = parse_int(text, self.base)

    def get(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


class UintValue:
    """An unsigned integer flag value."""

    def __init__(self, value: int = 0, config: Optional[IntegerConfig] = None) -> None:
        self.value = value
        self.base = (config or IntegerConfig()).base

    @classmethod
    def create(cls, value: int, config: Optional[IntegerConfig] = None) -> "UintValue":
        return cls(value, config)

    @staticmethod
    def to_string(value: int) -> str:
        return str(value)

    def set(self, text: str) -> None:
        self.value = parse_uint(text, self.base)

    def get(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


# -------------------------------------------------------------- strings

class StringValue:
    """A string flag value, optionally trimmed of surrounding white space."""

    def __init__(self, value: str = "", config: Optional[StringConfig] = None) -> None:
        self.trim_space = (config or StringConfig()).trim_space
        self.value = value

    @classmethod
    def create(cls, value: str, config: Optional[StringConfig] = None) -> "StringValue":
        return cls(value, config)

    @staticmethod
    def to_string(value: str) -> str:
        return _quote(value) if value else ""

    def set(self, text: str) -> None:
        self.value = text.strip() if self.trim_space else text

    def get(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


# ----------------------------------------------------------- timestamps

_MONTHS = ["january", "february", "march", "april", "may", "june", "july",
           "august", "september", "october", "november", "december"]
_DAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]
_ZONE_CHUNKS = ("Z07:00:00", "Z070000", "Z07:00", "Z0700", "Z07",
                "-07:00:00", "-070000", "-07:00", "-0700", "-07")


def _starts_lower(text: str) -> bool:
    return bool(text) and "a" <= text[0] <= "z"


def _next_chunk(layout: str, i: int) -> Optional[str]:
    rest = layout[i:]
    ch = rest[0]
    if ch == "J":
        if rest.startswith("January"):
            return "January"
        if rest.startswith("Jan") and not _starts_lower(rest[3:]):
            return "Jan"
    elif ch == "M":
        if rest.startswith("Monday"):
            return "Monday"
        if rest.startswith("Mon") and not _starts_lower(rest[3:]):
            return "Mon"
        if rest.startswith("MST"):
            return "MST"
    elif ch == "0":
        if len(rest) > 1 and rest[1] in "123456":
            return rest[:2]
    elif ch == "1":
        return "15" if rest.startswith("15") else "1"
    elif ch == "2":
        return "2006" if rest.startswith("2006") else "2"
    elif ch == "_":
        if rest.startswith("_2"):
            return "_2"
    elif ch in "345":
        return ch
    elif ch == "P":
        if rest.startswith("PM"):
            return "PM"
    elif ch == "p":
        if rest.startswith("pm"):
            return "pm"
    elif ch in "-Z":
        for chunk in _ZONE_CHUNKS:
            if rest.startswith(chunk):
                return chunk
    elif ch in ".," and len(rest) > 1 and rest[1] in "09":
        digit = rest[1]
        j = 1
        while j < len(rest) and rest[j] == digit:
            j += 1
        if j >= len(rest) or not rest[j].isdigit():
            return rest[:j]
    return None


def _tokenize(layout: str) -> list:
    tokens = []
    literal = ""
    i = 0
    while i < len(layout):
        chunk = _next_chunk(layout, i)
        if chunk is None:
            literal += layout[i]
            i += 1
            continue
        if literal:
            tokens.append((False, literal))
            literal = ""
        tokens.append((True, chunk))
        i += len(chunk)
    if literal:
        tokens.append((False, literal))
    return tokens


class _ChunkError(Exception):
    pass


def _getnum(value: str, fixed: bool) -> tuple:
    if not value or not value[0].isdigit():
        raise _ChunkError
    if len(value) < 2 or not value[1].isdigit():
        if fixed:
            raise _ChunkError
        return int(value[0]), value[1:]
    return int(value[:2]), value[2:]


def _lookup_name(names: list, value: str) -> tuple:
    lowered = value.lower()
    for index, name in enumerate(names):
        for candidate in (name, name[:3]):
            if lowered.startswith(candidate):
                return index, value[len(candidate):]
    raise _ChunkError


def _parse_offset(chunk: str, value: str) -> tuple:
    if chunk.startswith("Z") and value.startswith("Z"):
        return 0, value[1:]
    if not value or value[0] not in "+-":
        raise _ChunkError
    sign = -1 if value[0] == "-" else 1
    body = value[1:]
    spec = chunk[1:]
    hours = minutes = seconds = 0
    parts = {"07": 2, "07:00": 5, "0700": 4, "07:00:00": 8, "070000": 6}
    width = parts[spec]
    piece = body[:width]
    if len(piece) < width:
        raise _ChunkError
    fields = piece.replace(":", "")
    expected_colons = spec.count(":")
    if piece.count(":") != expected_colons or not fields.isdigit():
        raise _ChunkError
    hours = int(fields[:2])
    if len(fields) >= 4:
        minutes = int(fields[2:4])
    if len(fields) == 6:
        seconds = int(fields[4:6])
    offset = sign * (hours * 3600 + minutes * 60 + seconds)
    return offset, body[width:]


def _offset_name(offset: int) -> str:
    sign = "-" if offset < 0 else "+"
    total = abs(offset) // 60
    return f"{sign}{total // 60:02d}{total % 60:02d}"


def parse_timestamp(layout: str, text: str, tz: Optional[tzinfo] = None) -> datetime:
    """Parse ``text`` with a reference-time layout such as ``"2006-01-02T15:04:05Z07:00"``.

    Times without a zone are placed in ``tz``, or UTC when it is not given.
    """
    def fail(rest: str, element: str) -> ValueError:
        return ValueError(
            f"parsing time {_quote(text)} as {_quote(layout)}: "
            f"cannot parse {_quote(rest)} as {_quote(element)}"
        )

    def range_error(what: str) -> ValueError:
        return ValueError(f"parsing time {_quote(text)}: {what} out of range")

    year, month, day = 1, 1, 1
    hour = minute = second = micro = 0
    pm_set = am_set = False
    offset: Optional[int] = None
    zone_name: Optional[str] = None
    value = text
    tokens = _tokenize(layout)

    for position, (is_chunk, element) in enumerate(tokens):
        if not is_chunk:
            if not value.startswith(element):
                raise fail(value, element)
            value = value[len(element):]
            continue
        before = value
        try:
            if element == "2006":
                if len(value) < 4 or not value[:4].isdigit():
                    raise _ChunkError
                year, value = int(value[:4]), value[4:]
            elif element == "06":
                number, value = _getnum(value, True)
                year = number + (1900 if number >= 69 else 2000)
            elif element in ("January", "Jan"):
                index, value = _lookup_name(_MONTHS, value)
                month = index + 1
            elif element in ("Monday", "Mon"):
                _, value = _lookup_name(_DAYS, value)
            elif element in ("01", "1"):
                month, value = _getnum(value, element == "01")
                if not 1 <= month <= 12:
                    raise range_error("month")
            elif element in ("02", "2", "_2"):
                if element == "_2" and value.startswith(" "):
                    value = value[1:]
                day, value = _getnum(value, element == "02")
            elif element == "15":
                hour, value = _getnum(value, False)
                if hour > 23:
                    raise range_error("hour")
            elif element in ("03", "3"):
                hour, value = _getnum(value, element == "03")
                if hour > 12:
                    raise range_error("hour")
            elif element in ("04", "4"):
                minute, value = _getnum(value, element == "04")
                if minute > 59:
                    raise range_error("minute")
            elif element in ("05", "5"):
                second, value = _getnum(value, element == "05")
                if second > 59:
                    raise range_error("second")
                following = tokens[position + 1][1] if position + 1 < len(tokens) else ""
                if (len(value) > 1 and value[0] in ".," and value[1].isdigit()
                        and not (following[:1] in ".," and following[1:2] in ("0", "9"))):
                    end = 1
                    while end < len(value) and value[end].isdigit():
                        end += 1
                    micro = int(Fraction(int(value[1:end]), 10 ** (end - 1)) * 1_000_000)
                    value = value[end:]
            elif element in ("PM", "pm"):
                word = value[:2]
                word = word.upper() if element == "PM" and word.isupper() else word
                if element == "PM" and word in ("PM", "AM"):
                    pm_set, am_set = word == "PM", word == "AM"
                elif element == "pm" and word in ("pm", "am"):
                    pm_set, am_set = word == "pm", word == "am"
                else:
                    raise _ChunkError
                value = value[2:]
            elif element == "MST":
                match = re.match(r"[A-Z]{3,5}", value)
                if match is None:
                    raise _ChunkError
                zone_name, value = match.group(), value[match.end():]
            elif element[0] in "-Z":
                offset, value = _parse_offset(element, value)
            else:
                digit = element[1]
                width = len(element) - 1
                if not value or value[0] not in ".,":
                    if digit == "0":
                        raise _ChunkError
                    continue
                end = 1
                while end < len(value) and value[end].isdigit():
                    end += 1
                digits = value[1:end]
                if digit == "0" and len(digits) != width:
                    raise _ChunkError
                if digits:
                    micro = int(Fraction(int(digits), 10 ** len(digits)) * 1_000_000)
                value = value[end:]
        except _ChunkError:
            raise fail(before, element) from None

    if value:
        raise ValueError(f"parsing time {_quote(text)}: extra text: {_quote(value)}")
    if pm_set and hour < 12:
        hour += 12
    elif am_set and hour == 12:
        hour = 0

    try:
        naive = datetime(year, month, day, hour, minute, second, micro)
    except ValueError:
        raise range_error("day") from None

    if offset is not None:
        if offset == 0 and tz is None:
            return naive.replace(tzinfo=timezone.utc)
        if tz is not None:
            local = tz.utcoffset(naive)
            if local is not None and local == timedelta(seconds=offset):
                return naive.replace(tzinfo=tz)
        return naive.replace(tzinfo=timezone(timedelta(seconds=offset), _offset_name(offset)))
    if zone_name is not None:
        if zone_name in ("UTC", "GMT") and tz is None:
            return naive.replace(tzinfo=timezone.utc)
        if tz is not None and tz.tzname(naive) == zone_name:
            return naive.replace(tzinfo=tz)
        return naive.replace(tzinfo=timezone(timedelta(0), zone_name))
    return naive.replace(tzinfo=tz if tz is not None else timezone.utc)


def _format_timestamp(value: datetime) -> str:
    text = value.strftime("%Y-%m-%d %H:%M:%S")
    if value.microsecond:
        text += ("." + f"{value.microsecond:06d}").rstrip("0")
    offset = value.utcoffset() or timedelta(0)
    offset_text = _offset_name(int(offset.total_seconds()))
    name = value.tzname() or offset_text
    return f"{text} {offset_text} {name}"


class TimestampValue:
    """A timestamp flag value parsed with a configured layout and zone."""

    def __init__(self, value: Optional[datetime] = None,
                 config: Optional[TimestampConfig] = None) -> None:
        config = config or TimestampConfig()
        self.value = value
        self.layout = config.layout
        self.location = config.timezone
        self.has_been_set = False

    @classmethod
    def create(cls, value: Optional[datetime],
               config: Optional[TimestampConfig] = None) -> "TimestampValue":
        return cls(value, config)

    @staticmethod
    def to_string(value: Optional[datetime]) -> str:
        return "" if value is None else _format_timestamp(value)

    def set(self, text: str) -> None:
        self.value = parse_timestamp(self.layout, text, self.location)
        self.has_been_set = True

    def get(self) -> Optional[datetime]:
        return self.value

    def __str__(self) -> str:
        return self.to_string(self.value)