"""A boolean flag paired with a negative form, such as ``--env`` and ``--no-env``."""

from __future__ import annotations

from typing import Any, List, Optional

from .flags import BoolFlag, EnvVars
from .flagset import FlagSet
from .formatting import flag_names

DEFAULT_INVERSE_PREFIX = "no-"


class BoolWithInverseFlag:
    """Wraps a BoolFlag and adds its inverse under a prefix."""

    def __init__(self, bool_flag: BoolFlag, inverse_prefix: str = "") -> None:
        self.bool_flag = bool_flag
        self.inverse_prefix = inverse_prefix
        self.positive_flag: Optional[BoolFlag] = None
        self.negative_flag: Optional[BoolFlag] = None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name == "bool_flag":
            raise AttributeError(name)
        return getattr(self.bool_flag, name)

    def _inverse_name(self) -> str:
        if not self.inverse_prefix:
            self.inverse_prefix = DEFAULT_INVERSE_PREFIX
        return self.inverse_prefix + self.bool_flag.name

    def _inverse_aliases(self) -> List[str]:
        self._inverse_name()
        return [self.inverse_prefix + alias for alias in self.bool_flag.aliases]

    def _initialize(self) -> None:
        child = self.bool_flag
        negative = BoolFlag(
            name=self._inverse_name(),
            aliases=self._inverse_aliases(),
            category=child.category,
            default_text=child.default_text,
            sources=EnvVars(*child.sources.env_keys()),
            usage=child.usage,
            required=child.required,
            hidden=child.hidden,
            persistent=child.persistent,
            value=child.value,
            takes_file=child.takes_file,
            only_once=child.only_once,
        )
        keys = child.get_env_vars()
        if keys:
            negative.sources = EnvVars(*(self.inverse_prefix.upper() + key for key in keys))
        self.positive_flag = child
        self.negative_flag = negative

    def _positive_value(self) -> bool:
        if self.positive_flag is None or self.positive_flag._value is None:
            return bool(self.bool_flag.value)
        return bool(self.positive_flag._value.get())

    def _negative_value(self) -> bool:
        if self.negative_flag is None or self.negative_flag._value is None:
            return False
        return bool(self.negative_flag._value.get())

    def flags(self) -> List[BoolFlag]:
        if self.positive_flag is None:
            self._initialize()
        return [self.positive_flag, self.negative_flag]

    def apply(self, flag_set: FlagSet) -> None:
        if self.positive_flag is None:
            self._initialize()
        self.positive_flag.apply(flag_set)
        self.negative_flag.apply(flag_set)

    def names(self) -> List[str]:
        if self.positive_flag is None:
            return self.bool_flag.names() + flag_names(
                self._inverse_name(), self._inverse_aliases()
            )
        if self._negative_value():
            return self.negative_flag.names()
        if self._positive_value():
            return self.positive_flag.names()
        return self.negative_flag.names() + self.positive_flag.names()

    def is_set(self) -> bool:
        if self.positive_flag is None:
            return False
        return (
            self.positive_flag.config.count > 0
            or self.positive_flag.is_set()
            or self.negative_flag.is_set()
        )

    def value(self) -> bool:
        return self._positive_value()

    def run_action(self, flag_set: FlagSet) -> Any:
        """Resolve the pair into the positive flag's value, then run the action."""
        negative, positive = self._negative_value(), self._positive_value()
        if negative and positive:
            raise ValueError(
                f"cannot set both flags `--{self.positive_flag.name}` "
                f"and `--{self.negative_flag.name}`"
            )
        if negative:
            flag_set.set(self.positive_flag.name, "false")
        if self.bool_flag.action is not None:
            return self.bool_flag.action(flag_set, self.value())
        return None

    def __str__(self) -> str:
        if self.positive_flag is None:
            return f"{self.bool_flag} || --{self._inverse_name()}"
        return f"{self.positive_flag} || {self.negative_flag}"