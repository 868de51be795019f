"""Error types raised by command-line parsing and helpers to turn them into exits."""

from __future__ import annotations

import json
import sys
from typing import Any, Callable, Iterable, Optional, TextIO


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


class MultiError(Exception):
    """An error that wraps several errors."""

    def __init__(self, *args: BaseException) -> None:
        self._errors = list(args)
        super().__init__("\n".join(str(err) for err in self._errors))

    def errors(self) -> list:
        """Return a copy of the wrapped errors."""
        return list(self._errors)

    def __str__(self) -> str:
        return "\n".join(str(err) for err in self._errors)


class RequiredFlagsError(Exception):
    """One or more required flags were not set."""

    def __init__(self, missing_flags: Iterable[str]) -> None:
        self.missing_flags = list(missing_flags)
        if len(self.missing_flags) == 1:
            message = f"Required flag {_quote(self.missing_flags[0])} not set"
        else:
            joined = ", ".join(self.missing_flags)
            message = f"Required flags {_quote(joined)} not set"
        super().__init__(message)


class MutuallyExclusiveGroupError(Exception):
    """Two flags of a mutually exclusive group were both set."""

    def __init__(self, flag1_name: str, flag2_name: str) -> None:
        self.flag1_name = flag1_name
        self.flag2_name = flag2_name
        super().__init__(
            f"option {flag1_name} cannot be set along with option {flag2_name}"
        )


class MutuallyExclusiveGroupRequiredError(Exception):
    """No flag of a required mutually exclusive group was set."""

    def __init__(self, flag_groups: Iterable[Iterable[Any]]) -> None:
        self.flag_groups = [list(group) for group in flag_groups]
        super().__init__(self._message())

    def _message(self) -> str:
        missing = []
        for group in self.flag_groups:
            names = [name for flag in group for name in flag.names()]
            if len(self.flag_groups) == 1:
                return str(RequiredFlagsError(names))
            missing.append(" ".join(names))
        return "one of these flags needs to be provided: " + ", ".join(missing)


class ExitError(Exception):
    """An error carrying the exit code the program should end with."""

    def __init__(self, message: Any, exit_code: int) -> None:
        self.exit_code = exit_code
        if isinstance(message, BaseException):
            self.__cause__ = message
            text = str(message)
        else:
            text = str(message)
        self.message = text
        super().__init__(text)

    def __str__(self) -> str:
        return self.message


class FlagTypeError(Exception):
    """A flag value was not of the type the flag expects."""

    def __init__(self, expected: Any, other: Any) -> None:
        self.expected = expected
        self.other = other
        expected_name = expected.__name__ if isinstance(expected, type) else str(expected)
        super().__init__(
            f"Expected type {expected_name} got instead {type(other).__name__}"
        )


def exit_error(message: Any, exit_code: int) -> ExitError:
    """Wrap a message or error and an exit code into an ExitError."""
    return ExitError(message, exit_code)


def _exit_code_of(err: BaseException) -> Optional[int]:
    code = getattr(err, "exit_code", None)
    return code if isinstance(code, int) and not isinstance(code, bool) else None


def _handle_multi_error(multi: MultiError, err_writer: TextIO) -> int:
    code = 1
    for err in multi.errors():
        if isinstance(err, MultiError):
            code = _handle_multi_error(err, err_writer)
        elif err is not None:
            print(err, file=err_writer)
            found = _exit_code_of(err)
            if found is not None:
                code = found
    return code


def handle_exit_coder(
    err: Optional[BaseException],
    exiter: Optional[Callable[[int], Any]] = None,
    err_writer: Optional[TextIO] = None,
) -> None:
    """Print an error carrying an exit code and exit with that code.

    A MultiError exits with the last exit code found among its errors, or 1.
    Other errors are ignored.
    """
    if err is None:
        return
    exiter = exiter if exiter is not None else sys.exit
    writer = err_writer if err_writer is not None else sys.stderr

    code = _exit_code_of(err)
    if code is not None:
        if str(err):
            print(err, file=writer)
        exiter(code)
        return

    if isinstance(err, MultiError):
        exiter(_handle_multi_error(err, writer))