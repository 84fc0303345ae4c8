"""Command-line parsing for the ``cargo hack`` subcommand."""

from __future__ import annotations

import os
import re
import subprocess
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .features import Feature, group_feature, normal_feature
from .help import (
    PKG_NAME,
    PKG_VERSION,
    CliError,
    conflicts,
    long_help,
    mini_usage,
    multi_arg,
    removed_flags,
    requires,
    short_help,
    similar_arg,
)

SUBCOMMAND = "hack"

_DEV_TARGET_FLAGS = frozenset(
    {"--example", "--examples", "--test", "--tests", "--bench", "--benches", "--all-targets"}
)
_DEV_TARGET_PREFIXES = ("--example=", "--test=", "--bench=")
_UNSIGNED = re.compile(r"\+?[0-9]+")


@dataclass
class Args:
    """The parsed command line."""

    leading_args: list[str] = field(default_factory=list)
    trailing_args: list[str] = field(default_factory=list)
    subcommand: str | None = None
    manifest_path: str | None = None
    package: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    workspace: bool = False
    each_feature: bool = False
    feature_powerset: bool = False
    no_dev_deps: bool = False
    remove_dev_deps: bool = False
    ignore_private: bool = False
    ignore_unknown_features: bool = False
    clean_per_run: bool = False
    clean_per_version: bool = False
    keep_going: bool = False
    version_range: str | None = None
    version_step: str | None = None
    optional_deps: list[str] | None = None
    include_features: list[Feature] = field(default_factory=list)
    include_deps_features: bool = False
    exclude_features: list[str] = field(default_factory=list)
    exclude_no_default_features: bool = False
    exclude_all_features: bool = False
    depth: int | None = None
    group_features: list[Feature] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    no_default_features: bool = False
    target: str | None = None
    color: str | None = None
    verbose: bool = False


@dataclass(frozen=True)
class _Long:
    name: str


@dataclass(frozen=True)
class _Short:
    flag: str


@dataclass(frozen=True)
class _Value:
    value: str


class _Lexer:
    """Splits arguments into long options, short options and values."""

    def __init__(self, args: Iterable[str]) -> None:
        self._args = iter(args)
        self._attached: str | None = None
        self._shorts = ""
        self._last_option = ""

    def next(self) -> _Long | _Short | _Value | None:
        if self._attached is not None:
            raise CliError(f"unexpected argument for option '{self._last_option}'")
        if self._shorts:
            ch, self._shorts = self._shorts[0], self._shorts[1:]
            if ch == "=":
                self._shorts = ""
                raise CliError(f"unexpected argument for option '{self._last_option}'")
            self._last_option = f"-{ch}"
            return _Short(ch)
        arg = next(self._args, None)
        if arg is None:
            return None
        if arg.startswith("--") and len(arg) > 2:
            name, sep, value = arg[2:].partition("=")
            if sep:
                self._attached = value
            self._last_option = f"--{name}"
            return _Long(name)
        if arg.startswith("-") and len(arg) > 1:
            self._shorts = arg[1:]
            return self.next()
        return _Value(arg)

    def optional_value(self) -> str | None:
        if self._attached is not None:
            value, self._attached = self._attached, None
            return value
        if self._shorts:
            value = self._shorts[1:] if self._shorts.startswith("=") else self._shorts
            self._shorts = ""
            return value
        return None

    def value(self) -> str:
        value = self.optional_value()
        if value is not None:
            return value
        arg = next(self._args, None)
        if arg is None:
            raise CliError(f"missing argument for option '{self._last_option}'")
        return arg


def _format_flag(arg: _Long | _Short) -> str:
    if isinstance(arg, _Long):
        return f"--{arg.name}"
    return f"-{arg.flag}"


def _split_list(value: str) -> list[str]:
    if len(value) >= 2 and (
        (value.startswith("'") and value.endswith("'"))
        or (value.startswith('"') and value.endswith('"'))
    ):
        value = value[1:-1]
    if "," in value:
        return value.split(",")
    return value.split(" ")


def _warn(message: str) -> None:
    print(f"warning: {message}", file=sys.stderr)


def _info(message: str) -> None:
    print(f"info: {message}", file=sys.stderr)


def _default_cargo() -> str:
    return os.environ.get("CARGO_HACK_CARGO_SRC") or os.environ.get("CARGO") or "cargo"


def parse_args(
    argv: Sequence[str] | None = None, cargo: str | os.PathLike | None = None
) -> Args:
    """Parse the arguments that follow the program name; the first must be ``hack``.

    ``-h``, ``--help``, ``--version`` and ``--list`` print their output and
    raise ``SystemExit(0)``.
    """
    if argv is None:
        argv = sys.argv[1:]
    if cargo is None:
        cargo = _default_cargo()
    raw = list(argv)
    if not raw:
        raise CliError(f"expected subcommand '{SUBCOMMAND}'")
    if raw[0] != SUBCOMMAND:
        raise CliError(f"expected subcommand '{SUBCOMMAND}', found argument '{raw[0]}'")
    raw = raw[1:]
    if "--" in raw:
        split = raw.index("--")
        args, rest = raw[:split], raw[split + 1:]
    else:
        args, rest = raw, []

    cargo_args: list[str] = []
    subcommand: str | None = None
    opts: dict[str, str | None] = {
        "color": None,
        "target": None,
        "manifest-path": None,
        "depth": None,
        "version-range": None,
        "version-step": None,
    }
    propagated_opts = {"color", "target"}
    flags = {
        name: False
        for name in (
            "workspace",
            "no-dev-deps",
            "remove-dev-deps",
            "each-feature",
            "feature-powerset",
            "ignore-private",
            "exclude-no-default-features",
            "exclude-all-features",
            "include-deps-features",
            "clean-per-run",
            "clean-per-version",
            "keep-going",
            "ignore-unknown-features",
        )
    }
    package: list[str] = []
    exclude: list[str] = []
    group_raw: list[str] = []
    features: list[str] = []
    exclude_features: list[str] = []
    include_raw: list[str] = []
    optional_deps: list[str] | None = None
    verbose = 0
    no_default_features = False
    all_features = False

    parser = _Lexer(args)
    pending: _Long | _Short | None = None
    while True:
        if pending is not None:
            arg, pending = pending, None
        else:
            arg = parser.next()
            if arg is None:
                break

        match arg:
            case _Long(name) if name in opts:
                if opts[name] is not None:
                    multi_arg(_format_flag(arg), subcommand)
                if name in propagated_opts:
                    cargo_args.append(_format_flag(arg))
                value = parser.value()
                if name in propagated_opts:
                    cargo_args.append(value)
                opts[name] = value
            case _Short("p") | _Long("package"):
                package.append(parser.value())
            case _Long("exclude"):
                exclude.append(parser.value())
            case _Long("group-features"):
                group_raw.append(parser.value())
            case _Short("F") | _Long("features"):
                features.extend(_split_list(parser.value()))
            case _Long("skip") | _Long("exclude-features"):
                exclude_features.extend(_split_list(parser.value()))
            case _Long("include-features"):
                include_raw.extend(_split_list(parser.value()))
            case _Long("optional-deps"):
                if optional_deps is not None:
                    multi_arg(_format_flag(arg), subcommand)
                optional_deps = []
                value = parser.optional_value()
                if value is None:
                    following = parser.next()
                    if following is None:
                        break
                    if isinstance(following, _Value):
                        value = following.value
                    else:
                        pending = following
                        continue
                optional_deps.extend(_split_list(value))
            case _Long("workspace") | _Long("all"):
                if flags["workspace"]:
                    multi_arg(_format_flag(arg), subcommand)
                flags["workspace"] = True
            case _Long(name) if name in flags:
                if flags[name]:
                    multi_arg(_format_flag(arg), subcommand)
                flags[name] = True
            case _Short("v") | _Long("verbose"):
                verbose += 1
            case _Long("each-features"):
                similar_arg(_format_flag(arg), subcommand, "--each-feature", None)
            case _Long("features-powerset"):
                similar_arg(_format_flag(arg), subcommand, "--feature-powerset", None)
            case _Long("no-default-features"):
                no_default_features = True
                cargo_args.append("--no-default-features")
            case _Long("all-features"):
                all_features = True
                cargo_args.append("--all-features")
            case _Short("h") if subcommand is None:
                print(short_help().render())
                raise SystemExit(0)
            case _Long("help") if subcommand is None:
                print(long_help().render())
                raise SystemExit(0)
            case _Short("V") | _Long("version") if subcommand is None:
                print(f"{PKG_NAME} {PKG_VERSION}")
                raise SystemExit(0)
            case _Long(name):
                removed_flags(name)
                value = parser.optional_value()
                cargo_args.append(f"--{name}" if value is None else f"--{name}={value}")
            case _Short(flag):
                value = None if flag in ("q", "r") else parser.optional_value()
                cargo_args.append(f"-{flag}" if value is None else f"-{flag}{value}")
            case _Value(value):
                if subcommand is None:
                    subcommand = value
                cargo_args.append(value)

    workspace = flags["workspace"]
    no_dev_deps = flags["no-dev-deps"]
    remove_dev_deps = flags["remove-dev-deps"]
    each_feature = flags["each-feature"]
    feature_powerset = flags["feature-powerset"]
    ignore_unknown_features = flags["ignore-unknown-features"]
    exclude_no_default_features = flags["exclude-no-default-features"]
    exclude_all_features = flags["exclude-all-features"]
    include_deps_features = flags["include-deps-features"]
    clean_per_version = flags["clean-per-version"]
    depth_raw = opts["depth"]
    version_range = opts["version-range"]
    version_step = opts["version-step"]

    if exclude and not workspace:
        requires("--exclude", ["--workspace"])
    if ignore_unknown_features:
        if not features and not include_raw and not group_raw:
            requires(
                "--ignore-unknown-features",
                ["--features", "--include-features", "--group-features"],
            )
        if include_raw:
            _warn(
                "--ignore-unknown-features for --include-features is not fully implemented "
                "and may not work as intended"
            )
        if group_raw:
            _warn(
                "--ignore-unknown-features for --group-features is not fully implemented "
                "and may not work as intended"
            )
    if not each_feature and not feature_powerset:
        either = ["--each-feature", "--feature-powerset"]
        if optional_deps is not None:
            requires("--optional-deps", either)
        elif exclude_features:
            requires("--exclude-features (--skip)", either)
        elif exclude_no_default_features:
            requires("--exclude-no-default-features", either)
        elif exclude_all_features:
            requires("--exclude-all-features", either)
        elif include_raw:
            requires("--include-features", either)
        elif include_deps_features:
            requires("--include-deps-features", either)
    if not feature_powerset:
        if depth_raw is not None:
            requires("--depth", ["--feature-powerset"])
        elif group_raw:
            requires("--group-features", ["--feature-powerset"])
    if version_range is None:
        if version_step is not None:
            requires("--version-step", ["--version-range"])
        if clean_per_version:
            requires("--clean-per-version", ["--version-range"])

    depth: int | None = None
    if depth_raw is not None:
        if not _UNSIGNED.fullmatch(depth_raw):
            raise CliError(f"invalid value '{depth_raw}' for --depth: expected a non-negative integer")
        depth = int(depth_raw)

    group_features: list[Feature] = []
    for group in group_raw:
        if "," in group:
            names = group.split(",")
        elif " " in group:
            names = group.split(" ")
        else:
            raise CliError(
                "--group-features requires a list of two or more features separated by space "
                "or comma"
            )
        group_features.append(group_feature(names))

    if subcommand in ("test", "bench"):
        if remove_dev_deps:
            raise CliError(f"--remove-dev-deps may not be used together with {subcommand} subcommand")
        if no_dev_deps:
            raise CliError(f"--no-dev-deps may not be used together with {subcommand} subcommand")
    elif subcommand == "install":
        raise CliError(f"cargo-hack may not be used together with {subcommand} subcommand")

    dev_target = next(
        (
            a
            for a in cargo_args
            if a in _DEV_TARGET_FLAGS or a.startswith(_DEV_TARGET_PREFIXES)
        ),
        None,
    )
    if dev_target is not None:
        if remove_dev_deps:
            conflicts("--remove-dev-deps", dev_target)
        elif no_dev_deps:
            conflicts("--no-dev-deps", dev_target)

    if include_raw:
        if optional_deps is not None:
            conflicts("--include-features", "--optional-deps")
        elif include_deps_features:
            conflicts("--include-features", "--include-deps-features")

    if no_dev_deps and remove_dev_deps:
        conflicts("--no-dev-deps", "--remove-dev-deps")
    if each_feature and feature_powerset:
        conflicts("--each-feature", "--feature-powerset")
    if all_features:
        if each_feature:
            conflicts("--all-features", "--each-feature")
        elif feature_powerset:
            conflicts("--all-features", "--feature-powerset")
    if no_default_features:
        if each_feature:
            conflicts("--no-default-features", "--each-feature")
        elif feature_powerset:
            conflicts("--no-default-features", "--feature-powerset")

    for name in exclude_features:
        if name in features:
            raise CliError(f"feature `{name}` specified by both --exclude-features and --features")
        if optional_deps is not None and name in optional_deps:
            raise CliError(
                f"feature `{name}` specified by both --exclude-features and --optional-deps"
            )
        if any(group.matches(name) for group in group_features):
            raise CliError(
                f"feature `{name}` specified by both --exclude-features and --group-features"
            )
        if name in include_raw:
            raise CliError(
                f"feature `{name}` specified by both --exclude-features and --include-features"
            )

    if subcommand is None:
        if "--list" in cargo_args:
            argv_list = [os.fspath(cargo), "--list"]
            try:
                result = subprocess.run(argv_list, check=False)
            except OSError as exc:
                raise CliError(f"could not execute process `{' '.join(argv_list)}`: {exc}") from exc
            if result.returncode != 0:
                raise CliError(
                    f"process didn't exit successfully: `{' '.join(argv_list)}` "
                    f"(exit status: {result.returncode})"
                )
            raise SystemExit(0)
        if not remove_dev_deps:
            mini_usage("no subcommand or valid flag specified")

    if no_dev_deps:
        _info(
            "--no-dev-deps removes dev-dependencies from real `Cargo.toml` while cargo-hack is "
            "running and restores it when finished"
        )

    namespaced_features = has_z_flag(cargo_args, "namespaced-features")
    exclude_no_default_features = exclude_no_default_features or bool(include_raw)
    exclude_all_features = (
        exclude_all_features
        or bool(include_raw)
        or bool(exclude_features)
        or (feature_powerset and not namespaced_features and depth is None)
    )
    exclude_features.extend(features)

    if verbose > 1:
        cargo_args.append("-" + "v" * (verbose - 1))

    return Args(
        leading_args=cargo_args,
        trailing_args=rest,
        subcommand=subcommand,
        manifest_path=opts["manifest-path"],
        package=package,
        exclude=exclude,
        workspace=workspace,
        each_feature=each_feature,
        feature_powerset=feature_powerset,
        no_dev_deps=no_dev_deps,
        remove_dev_deps=remove_dev_deps,
        ignore_private=flags["ignore-private"],
        ignore_unknown_features=ignore_unknown_features,
        clean_per_run=flags["clean-per-run"],
        clean_per_version=clean_per_version,
        keep_going=flags["keep-going"],
        version_range=version_range,
        version_step=version_step,
        optional_deps=optional_deps,
        include_features=[normal_feature(name) for name in include_raw],
        include_deps_features=include_deps_features,
        exclude_features=exclude_features,
        exclude_no_default_features=exclude_no_default_features,
        exclude_all_features=exclude_all_features,
        depth=depth,
        group_features=group_features,
        features=features,
        no_default_features=no_default_features,
        target=opts["target"],
        color=opts["color"],
        verbose=verbose != 0,
    )


def has_z_flag(args: Sequence[str], name: str) -> bool:
    """Return True if ``args`` holds ``-Z name`` or ``-Zname`` (optionally with ``=value``)."""
    it = iter(args)
    for arg in it:
        if arg == "-Z":
            value = next(it, None)
            if value is None:
                return False
        elif arg.startswith("-Z"):
            value = arg[2:]
        else:
            continue
        if value.startswith(name):
            rest = value[len(name):]
            if not rest or rest.startswith("="):
                return True
    return False