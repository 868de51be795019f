# clikit

Typed command-line flags for Python programs. A flag has a name, aliases
and a typed default. It can take its value from the command line or from
environment variables, and it formats its own help line. The package also
has error types that carry exit codes, and a helper that turns them into
process exits.

## Installing

```
pip install clikit
```

## Modules

- `clikit.flags`: the flag classes, `EnvVars`, `new_flag_set` and `has_flag`.
- `clikit.flagset`: `FlagSet`, which parses arguments into registered
  values, and `FlagSetError`.
- `clikit.values`: single values (`BoolValue`, `IntValue`, `UintValue`,
  `FloatValue`, `DurationValue`, `StringValue`, `TimestampValue`), their
  config dataclasses, and the parsers and formatters behind them:
  `parse_bool`, `parse_int`, `parse_uint`, `parse_duration`,
  `format_duration`, `format_float` and `parse_timestamp`.
- `clikit.multivalue`: `SliceValue`, `MapValue`, `split_multi_values` and
  the `new_*_slice` / `new_string_map` helpers.
- `clikit.formatting`: the functions that build help lines.
- `clikit.inverse`: `BoolWithInverseFlag`.
- `clikit.mutex`: `MutuallyExclusiveFlags`.
- `clikit.errors`: the error types, `exit_error` and `handle_exit_coder`.

## Flag types

- `BoolFlag`, `IntFlag`, `UintFlag`, `FloatFlag`, `DurationFlag`
  (a `timedelta`), `StringFlag` and `TimestampFlag` (a `datetime`) hold
  single values.
- `StringSliceFlag`, `IntSliceFlag`, `UintSliceFlag` and `FloatSliceFlag`
  hold lists. A value such as `a,b` is split on commas. The first value
  given replaces the defaults, and later values are appended.
- `StringMapFlag` holds `key=value` items.
- `ExtFlag` registers a value object that you provide. The object must have
  a `set(text)` method.

Useful flag fields:

- `aliases`: other names for the flag.
- `sources=EnvVars(...)`: environment variables to read from. They are tried
  in order and the first one that is set wins.
- `destination`: a callable that receives the value whenever it changes.
- `validator`: a callable that may raise to reject a value.
- `action`: a callable `(flag_set, value)` that `run_action` calls.
- `only_once`: reject a second use of the flag.
- `config`: options for the value type:
  - `IntegerConfig(base=...)`
  - `StringConfig(trim_space=...)`
  - `TimestampConfig(layout=..., timezone=...)`
  - `BoolConfig`, whose `count` records how many times the flag was set.

Timestamp layouts use the reference time `2006-01-02T15:04:05Z07:00`.

## Parsing

```python
from clikit.flags import IntFlag, StringSliceFlag, EnvVars, new_flag_set

count = IntFlag(name="count", aliases=["c"], sources=EnvVars("APP_COUNT"))
tags = StringSliceFlag(name="tag", value=["default"])

flag_set = new_flag_set("app", [count, tags])
flag_set.parse(["-c", "3", "--tag", "a,b", "rest"])

count.get(flag_set)   # 3
tags.get(flag_set)    # ["a", "b"]
flag_set.args()       # ["rest"]
```

Parsing stops at the first argument that is not a flag, or at `--`.

Bad input raises `FlagSetError`. This covers:

- an unknown flag
- a missing argument
- a value that does not parse

A bad environment value raises `ValueError` when the flag is applied.

## Help lines

Converting a flag to a string gives its help line:

```python
from clikit.flags import IntFlag, StringFlag

str(IntFlag(name="hats", value=9))
# '--hats value\t(default: 9)'

str(StringFlag(name="config", aliases=["c"], usage="Load configuration from `FILE`"))
# '--config FILE, -c FILE\tLoad configuration from FILE'
```

A word in backquotes inside `usage` becomes the placeholder. Multi-value
flags repeat their names in brackets. Environment variables are appended as
a hint such as ` [$APP_COUNT]`.

## Inverse booleans

```python
from clikit.flags import BoolFlag, new_flag_set
from clikit.inverse import BoolWithInverseFlag

env = BoolWithInverseFlag(BoolFlag(name="env"))
flag_set = new_flag_set("app", [env])
flag_set.parse(["--no-env"])
env.run_action(flag_set)
env.value()    # False
env.is_set()   # True
```

`run_action` raises `ValueError` if both forms were given. The prefix
defaults to `no-` and can be changed with `inverse_prefix`.

## Mutually exclusive flags

```python
from clikit.flags import IntFlag, new_flag_set
from clikit.mutex import MutuallyExclusiveFlags

i, t = IntFlag(name="i"), IntFlag(name="t")
flag_set = new_flag_set("app", [i, t])
flag_set.parse(["--i", "1", "--t", "2"])

group = MutuallyExclusiveFlags(flags=[[i], [t]], required=True)
group.check(flag_set)  # raises MutuallyExclusiveGroupError
```

If no alternative is set and the group is required, `check` raises
`MutuallyExclusiveGroupRequiredError`.

## Errors and exit codes

`exit_error(message, code)` builds an `ExitError` that carries an exit code.

`handle_exit_coder(err, exiter, err_writer)` handles errors as follows:

- An error with an exit code: its message is printed to `err_writer`
  (standard error by default), then `exiter` (`sys.exit` by default) is
  called with the code.
- A `MultiError`: every wrapped error is printed, then the exit code is that
  of the last error carrying one, or 1 if none does.
- Any other error is ignored.

## What this package does not do

There is no command or application object. Nothing here does any of the
following:

- dispatch subcommands
- run before or after hooks
- call flag actions on its own
- enforce required flags (`RequiredFlagsError` is there for your code to
  raise)
- render a full help page
- generate shell completion scripts

You apply the flags, parse the arguments and call `run_action` or `check`
yourself.