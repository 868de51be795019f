import io

import pytest

from clikit.errors import (
    ExitError,
    FlagTypeError,
    MultiError,
    MutuallyExclusiveGroupError,
    MutuallyExclusiveGroupRequiredError,
    RequiredFlagsError,
    exit_error,
    handle_exit_coder,
)


class _Exiter:
    def __init__(self):
        self.codes = []

    def __call__(self, code):
        self.codes.append(code)


class _Named:
    def __init__(self, *names):
        self._names = list(names)

    def names(self):
        return self._names


class _Formatted(Exception):
    def __str__(self):
        return f"This the format: {self.args[0]}"


def test_handle_nil():
    exiter = _Exiter()
    handle_exit_coder(None, exiter, io.StringIO())
    assert exiter.codes == []


def test_handle_exit_coder_message():
    exiter = _Exiter()
    out = io.StringIO()
    handle_exit_coder(exit_error("galactic perimeter breach", 9), exiter, out)
    assert exiter.codes == [9]
    assert out.getvalue() == "galactic perimeter breach\n"


def test_handle_exit_coder_wrapping_error():
    exiter = _Exiter()
    handle_exit_coder(exit_error(ValueError("galactic perimeter breach"), 9), exiter, io.StringIO())
    assert exiter.codes == [9]


def test_multi_error_with_exit_coder_uses_last_code():
    exiter = _Exiter()
    err = MultiError(
        ValueError("wowsa"),
        ValueError("egad"),
        exit_error("galactic perimeter breach", 9),
        exit_error("last ExitCoder", 11),
    )
    handle_exit_coder(err, exiter, io.StringIO())
    assert exiter.codes == [11]


def test_multi_error_without_exit_coder():
    exiter = _Exiter()
    handle_exit_coder(MultiError(ValueError("wowsa"), ValueError("egad")), exiter, io.StringIO())
    assert exiter.codes == [1]


def test_formatted_error():
    exiter = _Exiter()
    out = io.StringIO()
    handle_exit_coder(exit_error(_Formatted("I am formatted"), 1), exiter, out)
    assert exiter.codes == [1]
    assert out.getvalue() == "This the format: I am formatted\n"


def test_multi_error_with_format():
    exiter = _Exiter()
    out = io.StringIO()
    handle_exit_coder(MultiError(_Formatted("err1"), _Formatted("err2")), exiter, out)
    assert exiter.codes == [1]
    assert out.getvalue() == "This the format: err1\nThis the format: err2\n"


def test_nested_multi_error():
    exiter = _Exiter()
    inner = MultiError(exit_error("inner", 5))
    handle_exit_coder(MultiError(ValueError("x"), inner), exiter, io.StringIO())
    assert exiter.codes == [5]


def test_multi_error_errors_copy():
    errs = [ValueError("foo"), ValueError("bar"), ValueError("baz")]
    me = MultiError(*errs)
    copy = me.errors()
    assert copy == errs
    copy.pop()
    assert len(me.errors()) == 3
    assert str(me) == "foo\nbar\nbaz"


def test_required_flags_message():
    assert str(RequiredFlagsError(["flag1", "flag2"])) == 'Required flags "flag1, flag2" not set'
    assert str(RequiredFlagsError(["flag1"])) == 'Required flag "flag1" not set'


def test_mutually_exclusive_messages():
    assert str(MutuallyExclusiveGroupError("i", "ai")) == "option i cannot be set along with option ai"
    one = MutuallyExclusiveGroupRequiredError([[_Named("a", "b")]])
    assert str(one) == 'Required flags "a, b" not set'
    many = MutuallyExclusiveGroupRequiredError([[_Named("i"), _Named("s")], [_Named("t", "ai")]])
    assert str(many) == "one of these flags needs to be provided: i s, t ai"


def test_exit_error_attributes():
    err = exit_error("boom", 3)
    assert isinstance(err, ExitError)
    assert (str(err), err.exit_code) == ("boom", 3)


def test_flag_type_error():
    assert str(FlagTypeError(int, "x")) == "Expected type int got instead str"


def test_default_exiter_raises_system_exit():
    with pytest.raises(SystemExit) as info:
        handle_exit_coder(exit_error("", 4), None, io.StringIO())
    assert info.value.code == 4