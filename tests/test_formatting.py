import sys
from dataclasses import dataclass, field
from typing import List

import pytest

from clikit.formatting import (
    env_format,
    flag_names,
    prefix_for,
    prefixed_names,
    sort_flags_by_name,
    stringify_flag,
    unquote_usage,
    visible_flags,
    with_env_hint,
    with_file_hint,
)


@dataclass
class FakeFlag:
    flag_names: List[str]
    usage: str = ""
    value_taken: bool = True
    default_text: str = ""
    required: bool = False
    default_visible: bool = True
    multi: bool = False
    env_vars: List[str] = field(default_factory=list)
    visible: bool = True

    def names(self):
        return self.flag_names

    def get_usage(self):
        return self.usage

    def takes_value(self):
        return self.value_taken

    def get_default_text(self):
        return self.default_text

    def is_required(self):
        return self.required

    def is_default_visible(self):
        return self.default_visible

    def is_multi_value_flag(self):
        return self.multi

    def get_env_vars(self):
        return self.env_vars

    def is_visible(self):
        return self.visible


class NoDocFlag:
    def names(self):
        return ["scarecrow"]


def test_prefix_for():
    assert prefix_for("h") == "-"
    assert prefix_for("help") == "--"


def test_unquote_usage_with_placeholder():
    assert unquote_usage("Load configuration from `FILE`") == (
        "FILE",
        "Load configuration from FILE",
    )


def test_unquote_usage_without_closing_quote():
    assert unquote_usage("no `closing") == ("", "no `closing")


def test_prefixed_names():
    assert prefixed_names(["config", "c"], "FILE") == "--config FILE, -c FILE"
    assert prefixed_names(["help"], "") == "--help"


def test_env_format_empty():
    assert env_format([], "$", ", $", "") == ""


def test_with_env_hint_posix(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    assert with_env_hint(["A", "B"], "x") == "x [$A, $B]"


def test_with_env_hint_windows(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.delenv("PSHOME", raising=False)
    assert with_env_hint(["A"], "x") == "x [%A%]"


def test_with_file_hint():
    assert with_file_hint("/etc/conf", "x") == "x [/etc/conf]"
    assert with_file_hint("", "x") == "x"


def test_flag_names_strips_after_comma_or_space():
    assert flag_names("foo, f", ["bar baz", "q"]) == ["foo", "bar", "q"]


@pytest.mark.parametrize(
    "flag, expected",
    [
        (FakeFlag(["vividly"], value_taken=False, default_text="false"),
         "--vividly\t(default: false)"),
        (FakeFlag(["h"], value_taken=False, default_text="false"), "-h\t(default: false)"),
        (FakeFlag(["scream-for"], default_text="0s"), "--scream-for value\t(default: 0s)"),
        (FakeFlag(["arf-sound"]), "--arf-sound value\t"),
        (FakeFlag(["pizzas"], multi=True), "--pizzas value [ --pizzas value ]\t"),
        (FakeFlag(["pepperonis"], multi=True, default_text="shaved"),
         "--pepperonis value [ --pepperonis value ]\t(default: shaved)"),
        (FakeFlag(["f"], usage="The total `foo` desired", default_text='"all"'),
         '-f foo\tThe total foo desired (default: "all")'),
        (FakeFlag(["config", "c"], usage="Load configuration from `FILE`"),
         "--config FILE, -c FILE\tLoad configuration from FILE"),
        (FakeFlag(["dee", "d"], multi=True, default_text='"Inka", "Dinka", "dooo"'),
         '--dee value, -d value [ --dee value, -d value ]\t(default: "Inka", "Dinka", "dooo")'),
        (NoDocFlag(), ""),
    ],
)
def test_stringify_flag(flag, expected):
    assert stringify_flag(flag) == expected


def test_stringify_required_flag_hides_default():
    flag = FakeFlag(["env"], value_taken=False, default_text="false", required=True)
    assert stringify_flag(flag) == "--env\t"


def test_stringify_hidden_default():
    flag = FakeFlag(["version", "v"], value_taken=False, default_text="false",
                    default_visible=False, usage="print the version")
    assert stringify_flag(flag) == "--version, -v\tprint the version"


def test_stringify_env_hint_suffix():
    flag = FakeFlag(["foo"], env_vars=["APP_FOO"])
    assert stringify_flag(flag).endswith(with_env_hint(["APP_FOO"], ""))


def test_visible_flags():
    shown = FakeFlag(["a"])
    hidden = FakeFlag(["b"], visible=False)
    assert visible_flags([shown, hidden, NoDocFlag()]) == [shown]


def test_sort_flags_by_name():
    a, b, c, nameless = FakeFlag(["Beta"]), FakeFlag(["alpha"]), FakeFlag(["gamma"]), FakeFlag([])
    assert sort_flags_by_name([c, a, nameless, b]) == [nameless, b, a, c]