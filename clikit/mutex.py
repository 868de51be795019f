"""Groups of flags of which at most one path may be given."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from .errors import MutuallyExclusiveGroupError, MutuallyExclusiveGroupRequiredError
from .flagset import FlagSet


@dataclass
class MutuallyExclusiveFlags:
    """Alternative lists of flags; flags from two alternatives may not be combined."""

    flags: List[List[Any]] = field(default_factory=list)
    required: bool = False
    category: str = ""

    @staticmethod
    def _set_name(flag: Any, flag_set: FlagSet) -> str:
        names = flag.names()
        for name in names:
            if flag_set.is_set(name):
                return name
        if names and flag.is_set():
            return names[0]
        return ""

    def check(self, flag_set: FlagSet) -> None:
        """Raise if two alternatives are set, or none is and the group is required."""
        first = ""
        for group in self.flags:
            for flag in group:
                name = self._set_name(flag, flag_set)
                if name:
                    if first:
                        raise MutuallyExclusiveGroupError(first, name)
                    first = name
                    break
        if not first and self.required:
            raise MutuallyExclusiveGroupRequiredError(self.flags)

    def propagate_category(self) -> None:
        """Give every flag in the group the group's category."""
        for group in self.flags:
            for flag in group:
                setter = getattr(flag, "set_category", None)
                if callable(setter):
                    setter(self.category)