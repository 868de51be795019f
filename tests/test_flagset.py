from datetime import datetime, timezone

import pytest

from clikit.flagset import FlagSet, FlagSetError
from clikit.multivalue import SliceValue
from clikit.values import (
    BoolConfig,
    BoolValue,
    IntValue,
    StringValue,
    TimestampConfig,
    TimestampValue,
)


def _register(flag_set, value, *names):
    for name in names:
        flag_set.var(value, name, "")


def test_bool_all_names_and_count():
    config = BoolConfig()
    value = BoolValue(False, config)
    fs = FlagSet("test")
    _register(fs, value, "wat", "W", "huh")
    fs.parse(["--wat", "-W", "--huh"])
    assert value.get() is True
    assert config.count == 3


def test_int_last_value_wins():
    value = IntValue(3)
    fs = FlagSet("test")
    _register(fs, value, "banana", "B", "banannanana")
    fs.parse(["--banana", "1", "-B", "2", "--banannanana", "5"])
    assert value.get() == 5


def test_string_last_value_wins():
    value = StringValue("mmm")
    fs = FlagSet("test")
    _register(fs, value, "hay", "H", "hayyy")
    fs.parse(["--hay", "u", "-H", "yuu", "--hayyy", "YUUUU"])
    assert value.get() == "YUUUU"


def test_slice_value_collects():
    value = SliceValue(StringValue)
    fs = FlagSet("test")
    _register(fs, value, "goat", "G")
    fs.parse(["--goat", "aaa", "-G", "bbb"])
    assert value.get() == ["aaa", "bbb"]


def test_parse_stops_at_positional():
    fs = FlagSet()
    fs.var(StringValue(), "name")
    fs.parse(["--name", "x", "positional", "--name", "y"])
    assert fs.args() == ["positional", "--name", "y"]
    assert fs.lookup("name").value.get() == "x"


def test_double_dash_terminates():
    fs = FlagSet()
    fs.var(BoolValue(), "b")
    fs.parse(["--", "-b"])
    assert fs.args() == ["-b"]
    assert not fs.is_set("b")


def test_single_dash_is_positional():
    fs = FlagSet()
    fs.parse(["-", "rest"])
    assert fs.args() == ["-", "rest"]


def test_equals_form():
    value = StringValue()
    fs = FlagSet()
    fs.var(value, "name")
    fs.parse(["--name=a=b"])
    assert value.get() == "a=b"


def test_bool_explicit_false():
    value = BoolValue(True)
    fs = FlagSet()
    fs.var(value, "implode")
    fs.parse(["--implode=false"])
    assert value.get() is False
    assert fs.is_set("implode")


def test_invalid_bool_value():
    fs = FlagSet()
    fs.var(BoolValue(), "b")
    with pytest.raises(FlagSetError, match="maybe"):
        fs.parse(["--b=maybe"])


def test_is_set_only_for_given_flags():
    fs = FlagSet()
    fs.var(IntValue(), "a")
    fs.var(IntValue(), "b")
    fs.parse(["-a", "1"])
    assert fs.is_set("a")
    assert not fs.is_set("b")


def test_unknown_flag():
    fs = FlagSet()
    with pytest.raises(FlagSetError, match="-nope"):
        fs.parse(["--nope"])


def test_help_not_defined():
    fs = FlagSet()
    with pytest.raises(FlagSetError):
        fs.parse(["-h"])


def test_missing_argument():
    fs = FlagSet()
    fs.var(IntValue(), "n")
    with pytest.raises(FlagSetError, match="-n"):
        fs.parse(["--n"])


def test_invalid_value_message_mentions_value():
    fs = FlagSet()
    fs.var(IntValue(), "n")
    with pytest.raises(FlagSetError) as info:
        fs.parse(["--n", "abc"])
    assert '"abc"' in str(info.value)
    assert "-n" in str(info.value)


def test_bad_flag_syntax():
    fs = FlagSet()
    with pytest.raises(FlagSetError, match="---x"):
        fs.parse(["---x"])


def test_timestamp_wrong_layout_message():
    fs = FlagSet("test")
    value = TimestampValue(None, TimestampConfig(layout="randomlayout"))
    _register(fs, value, "time", "t")
    with pytest.raises(FlagSetError) as info:
        fs.parse(["--time", "2006-01-02T15:04:05Z"])
    assert str(info.value) == (
        'invalid value "2006-01-02T15:04:05Z" for flag -time: parsing time '
        '"2006-01-02T15:04:05Z" as "randomlayout": cannot parse '
        '"2006-01-02T15:04:05Z" as "randomlayout"'
    )


def test_timestamp_wrong_time_message():
    fs = FlagSet("test")
    value = TimestampValue(None, TimestampConfig(layout="Jan 2, 2006 at 3:04pm (MST)"))
    _register(fs, value, "time", "t")
    with pytest.raises(FlagSetError) as info:
        fs.parse(["--time", "2006-01-02T15:04:05Z"])
    assert str(info.value) == (
        'invalid value "2006-01-02T15:04:05Z" for flag -time: parsing time '
        '"2006-01-02T15:04:05Z" as "Jan 2, 2006 at 3:04pm (MST)": cannot parse '
        '"2006-01-02T15:04:05Z" as "Jan"'
    )


def test_timestamp_parsed():
    fs = FlagSet("test")
    value = TimestampValue(None, TimestampConfig(layout="2006-01-02T15:04:05Z07:00"))
    _register(fs, value, "time", "t")
    fs.parse(["--time", "2006-01-02T15:04:05Z"])
    assert value.get() == datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


def test_redefinition_rejected():
    fs = FlagSet()
    fs.var(IntValue(), "n")
    with pytest.raises(FlagSetError, match="n"):
        fs.var(IntValue(), "n")


def test_set_known_and_unknown():
    value = IntValue()
    fs = FlagSet()
    fs.var(value, "n")
    fs.set("n", "7")
    assert value.get() == 7
    assert fs.is_set("n")
    with pytest.raises(FlagSetError, match="-missing"):
        fs.set("missing", "1")


def test_set_invalid_value_raises_value_error():
    fs = FlagSet()
    fs.var(IntValue(), "n")
    with pytest.raises(ValueError):
        fs.set("n", "xyz")
    assert not fs.is_set("n")


def test_lookup_records_default_and_usage():
    value = IntValue(42)
    fs = FlagSet()
    fs.var(value, "myflag", "doc")
    entry = fs.lookup("myflag")
    assert entry.default_value == str(value)
    assert entry.usage == "doc"
    assert entry.value is value
    assert fs.lookup("other") is None
    assert "myflag" in fs