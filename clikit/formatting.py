"""Help-text formatting of flags: names, placeholders, defaults and hints."""

from __future__ import annotations

import os
import re
import sys
from typing import Any, Iterable, List, Sequence, Tuple

DEFAULT_PLACEHOLDER = "value"

_COMMA_WHITESPACE = re.compile(r"[, ]+.*")


def prefix_for(name: str) -> str:
    """Return ``-`` for one-letter names and ``--`` for longer ones."""
    dashes = 1 if len(name) == 1 else 2
    return "-" * dashes


def unquote_usage(usage: str) -> Tuple[str, str]:
    """Return the back-quoted placeholder in ``usage``, if any, and the unquoted usage."""
    start = usage.find("`")
    if start < 0:
        return "", usage
    end = usage.find("`", start + 1)
    if end < 0:
        return "", usage
    name = usage[start + 1:end]
    return name, usage[:start] + name + usage[end + 1:]


def prefixed_names(names: Sequence[str], placeholder: str) -> str:
    """Join flag names with dashes and an optional placeholder, e.g. ``--config FILE, -c FILE``."""
    prefixed = ""
    last = len(names) - 1
    for index, name in enumerate(names):
        if not name:
            continue
        prefixed += prefix_for(name) + name
        if placeholder:
            prefixed += " " + placeholder
        if index < last:
            prefixed += ", "
    return prefixed


def env_format(env_vars: Sequence[str], prefix: str, sep: str, suffix: str) -> str:
    """Format environment variable names as a bracketed hint, or return ``""``."""
    if env_vars:
        return f" [{prefix}{sep.join(env_vars)}{suffix}]"
    return ""


def _default_env_format(env_vars: Sequence[str]) -> str:
    return env_format(env_vars, "$", ", $", "")


def with_env_hint(env_vars: Sequence[str], text: str) -> str:
    """Append the environment variables a flag reads to ``text``."""
    if sys.platform != "win32" or os.environ.get("PSHOME", ""):
        hint = _default_env_format(env_vars)
    else:
        hint = env_format(env_vars, "%", "%, %", "%")
    return text + hint


def with_file_hint(file_path: str, text: str) -> str:
    """Append the file a flag reads its value from to ``text``."""
    return text + (f" [{file_path}]" if file_path else "")


def flag_names(name: str, aliases: Iterable[str] = ()) -> List[str]:
    """Return the name and aliases, each cut at its first comma or space."""
    return [_COMMA_WHITESPACE.sub("", part) for part in [name, *(aliases or ())]]


def _format_default(text: str) -> str:
    return f" (default: {text})"


def _call(obj: Any, method: str, default: Any) -> Any:
    func = getattr(obj, method, None)
    return func() if callable(func) else default


def stringify_flag(flag: Any) -> str:
    """Render one help line for ``flag``; flags without documentation give ``""``."""
    required_methods = ("get_usage", "takes_value", "get_default_text",
                        "get_env_vars", "is_default_visible", "names")
    if not all(callable(getattr(flag, m, None)) for m in required_methods):
        return ""

    placeholder, usage = unquote_usage(flag.get_usage())
    if flag.takes_value() and not placeholder:
        placeholder = DEFAULT_PLACEHOLDER

    default_text = ""
    if not _call(flag, "is_required", False):
        shown = flag.get_default_text()
        if flag.is_default_visible() and shown:
            default_text = _format_default(shown)

    usage_with_default = (usage + default_text).strip()

    names = prefixed_names(flag.names(), placeholder)
    if _call(flag, "is_multi_value_flag", False):
        names = f"{names} [ {names} ]"

    return with_env_hint(flag.get_env_vars(), f"{names}\t{usage_with_default}")


def visible_flags(flags: Iterable[Any]) -> List[Any]:
    """Return the flags that report themselves visible."""
    return [flag for flag in flags if _call(flag, "is_visible", False)]


def sort_flags_by_name(flags: Iterable[Any]) -> List[Any]:
    """Return the flags sorted by first name; nameless flags come first."""
    def key(flag: Any) -> Tuple[int, str, str]:
        names = flag.names()
        if not names:
            return (0, "", "")
        return (1, names[0].lower(), names[0])

    return sorted(flags, key=key)