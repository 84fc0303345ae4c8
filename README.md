# cargohack

Building blocks for exercising a cargo package across many feature
combinations. The package builds feature powersets, parses the `cargo hack`
command line, reads the toolchain's minor version and renders the help text.
It is a library. It has no command of its own.

## Installation

Install from a checkout with pip. Add the `test` extra to get pytest for the
test suite.

## Feature combinations (`cargohack.features`)

A `Feature` has a `kind` (`FeatureKind.NORMAL`, `GROUP` or `PATH`), a `name`
and, for groups, its `members`. Build features with these helpers:

- `normal_feature(name)` makes a plain feature.
- `group_feature(names)` makes several features that always travel together. Its name is the members joined with `,`.
- `path_feature(parent, name)` makes a feature of a dependency, named `parent/name`.

`Feature.as_group()` returns the names the feature stands for.
`Feature.matches(s)` tells whether `s` is one of those names. A feature
compares equal to a string holding its name.

`Features` holds the features of one package in three parts: `normal`,
`optional_deps` and `deps_features`. Iterating over it yields all three parts
in that order. `Features.contains(name)` checks for an exact name.
`Features.from_package(...)` builds the list from these inputs:

- the package's feature names
- the manifest feature table
- the optional dependency names
- pairs of a dependency name and that dependency's features

An optional dependency referred to as `dep:name` in the feature table is not
listed as a feature.

```python
from cargohack.features import powerset, feature_powerset, normal_feature

powerset([1, 2, 3, 4], 1)
# [[], [1], [2], [3], [4]]

feature_map = {"a": [], "b": ["a"], "c": ["b"], "d": ["a", "b"]}
features = [normal_feature(name) for name in "abcd"]
feature_powerset(features, None, feature_map)
# [[], [a], [b], [c], [d], [c, d]]
```

`powerset(items, depth)` returns every subset in generation order. When
`depth` is set, it keeps only subsets of at most `depth` elements.

`feature_powerset` works the same way but drops every combination in which
one feature already implies another in the same set.

`feature_deps(feature_map)` returns, for each feature, the set of features it
enables transitively.

## Command-line parsing (`cargohack.cli`)

`parse_args(argv, cargo)` parses the arguments that follow the program name.
The first argument must be `hack`. Arguments after `--` are kept as
`trailing_args`. If `argv` is omitted, `sys.argv[1:]` is used. If `cargo` is
omitted, the parser takes it from `CARGO_HACK_CARGO_SRC`, then from `CARGO`,
and otherwise uses `cargo`.

The result is an `Args` dataclass. It holds:

- the arguments passed on to cargo (`leading_args`)
- the subcommand
- package selection
- feature iteration settings (`each_feature`, `feature_powerset`, `depth`, `group_features`, `include_features`, `exclude_features`, and so on)
- dev-dependency handling
- version range options
- `color`, `target` and `verbose`

Missing, repeated, removed or conflicting options raise `cliError`'s parent
class `cargohack.help.CliError`, with messages such as
`--each-feature may not be used together with --feature-powerset`.

Some options print output and then raise `SystemExit(0)`:

- `-h` prints the short help.
- `--help` prints the long help.
- `-V` and `--version` print the version.
- `--list` runs `<cargo> --list` when no subcommand is given.

`has_z_flag(args, name)` reports whether `-Z name` or `-Zname` (optionally
followed by `=value`) is among the arguments.

## Help text (`cargohack.help`)

`long_help(print_version)` and `short_help(print_version)` return a `Help`.
`Help.render()` (or `str()`) produces the `--help` or `-h` text, wrapped to
100 columns. The option table is `HELP`, a tuple of `HelpEntry`.
`get_help(flag)` finds an entry by its short or long flag.

These functions raise `CliError` with the matching message:

- `removed_flags`
- `mini_usage`
- `multi_arg`
- `similar_arg`
- `requires`
- `conflicts`

## Toolchain version (`cargohack.cargo`)

`minor_version(cargo)` runs `<cargo> --version --verbose` and returns the
minor version of a `1.x.y` release. `parse_minor_version(output, command)`
does the same for output you already have. Missing or unexpected output, or a
failed process, raises `VersionError`.

## File helpers (`cargohack.fsutil`)

`write(path, contents)` writes a whole file. `read_to_string(path)` reads a
whole file as UTF-8. On failure both raise `FileError`, a subclass of
`OSError`, with the path in the message.

## What this package does not do

It does not run cargo over the feature combinations it computes. It does not
read workspace metadata or edit and restore `Cargo.toml`. It does not install
or switch toolchains for a version range. It parses and validates those
options, but acting on them is left to the caller.