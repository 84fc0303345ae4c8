"""Help text and the error messages of the command-line interface."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

PKG_NAME = "cargo-hack"
PKG_VERSION = "0.5.0"
PKG_DESCRIPTION = (
    "Cargo subcommand to provide various options useful"
    " for testing and continuous integration."
)

MAX_TERM_WIDTH = 100
_USAGE_LINE = "cargo hack [OPTIONS] [SUBCOMMAND]"
_MORE_INFO = "For more information try --help"


class CliError(Exception):
    """The command line is invalid."""


@dataclass(frozen=True)
class HelpEntry:
    """One option in the help text."""

    short: str
    long: str
    value_name: str
    description: str
    additional: tuple[str, ...] = field(default=())

    @property
    def usage(self) -> str:
        """The long flag followed by its value name, if it takes one."""
        return f"{self.long} {self.value_name}" if self.value_name else self.long


def _only_with(what: str) -> str:
    return f"This flag can only be used together with {what}."


def _opt(flags: str, value: str, desc: str, *more: str) -> HelpEntry:
    """Build an entry from a flag spec like ``"-p --package"`` or ``"--all"``."""
    names = flags.split()
    short, long = (names[0], names[1]) if len(names) == 2 else ("", names[0])
    return HelpEntry(short, long, value, desc, tuple(more))


_EACH_OR_POWERSET = _only_with("either --each-feature flag or --feature-powerset flag")
_POWERSET_ONLY = _only_with("--feature-powerset flag")
_RANGE_ONLY = _only_with("--version-range flag")
_NO_DEFAULT_RUNS = (
    "This also includes runs with just --no-default-features flag, and default features."
)
_ALL_FEATURES_TAIL = (
    "not used together with --exclude-features (--skip) and --include-features"
    " and there are multiple features, this also includes runs with just"
    " --all-features flag."
)
_SPEC = "<SPEC>..."
_FEATS = "<FEATURES>..."

HELP: tuple[HelpEntry, ...] = (
    _opt("-p --package", _SPEC, "Package(s) to check"),
    _opt("--all", "", "Alias for --workspace"),
    _opt("--workspace", "", "Perform command for all packages in the workspace"),
    _opt(
        "--exclude", _SPEC, "Exclude packages from the check",
        _only_with("--workspace")[:-1],
    ),
    _opt("--manifest-path", "<PATH>", "Path to Cargo.toml"),
    _opt("-F --features", _FEATS, "Space-separated list of features to activate"),
    _opt(
        "--each-feature", "", "Perform for each feature of the package",
        _NO_DEFAULT_RUNS,
        "When this flag is " + _ALL_FEATURES_TAIL,
    ),
    _opt(
        "--feature-powerset", "", "Perform for the feature powerset of the package",
        _NO_DEFAULT_RUNS,
        "When this flag is used together with --depth or namespaced features"
        " (-Z namespaced-features) and " + _ALL_FEATURES_TAIL,
    ),
    _opt(
        "--optional-deps", "[DEPS]...", "Use optional dependencies as features",
        "If DEPS are not specified, all optional dependencies"
        " are considered as features.",
        _EACH_OR_POWERSET,
    ),
    _opt("--skip", _FEATS, "Alias for --exclude-features"),
    _opt(
        "--exclude-features", _FEATS, "Space-separated list of features to exclude",
        "To exclude run of default feature, using value `--exclude-features default`.",
        "To exclude run of just --no-default-features flag,"
        " using --exclude-no-default-features flag.",
        "To exclude run of just --all-features flag,"
        " using --exclude-all-features flag.",
        _EACH_OR_POWERSET,
    ),
    _opt(
        "--exclude-no-default-features", "",
        "Exclude run of just --no-default-features flag",
        _EACH_OR_POWERSET,
    ),
    _opt(
        "--exclude-all-features", "", "Exclude run of just --all-features flag",
        _EACH_OR_POWERSET,
    ),
    _opt(
        "--depth", "<NUM>",
        "Specify a max number of simultaneous feature flags of --feature-powerset",
        "If NUM is set to 1, --feature-powerset is equivalent to --each-feature.",
        _POWERSET_ONLY,
    ),
    _opt(
        "--group-features", _FEATS, "Space-separated list of features to group",
        "To specify multiple groups, use this option multiple times:"
        " `--group-features a,b --group-features c,d`",
        _POWERSET_ONLY,
    ),
    _opt(
        "--include-features", _FEATS,
        "Include only the specified features in the feature combinations"
        " instead of package features",
        _EACH_OR_POWERSET,
    ),
    _opt(
        "--no-dev-deps", "", "Perform without dev-dependencies",
        "Note that this flag removes dev-dependencies from real `Cargo.toml`"
        " while cargo-hack is running and restores it when finished.",
    ),
    _opt(
        "--remove-dev-deps", "",
        "Equivalent to --no-dev-deps flag except for does not restore"
        " the original `Cargo.toml` after performed",
    ),
    _opt("--ignore-private", "", "Skip to perform on `publish = false` packages"),
    _opt(
        "--ignore-unknown-features", "",
        "Skip passing --features flag to `cargo` if that feature"
        " does not exist in the package",
        _only_with("either --features or --include-features"),
    ),
    _opt(
        "--version-range", "<START>..[END]",
        "Perform commands on a specified (inclusive) range of Rust versions",
        "If the given range is unclosed, the latest stable compiler"
        " is treated as the upper bound.",
        "Note that ranges are always inclusive ranges.",
    ),
    _opt(
        "--version-step", "<NUM>",
        "Specify the version interval of --version-range (default to `1`)",
        _RANGE_ONLY,
    ),
    _opt(
        "--clean-per-run", "",
        "Remove artifacts for that package before running the command",
        "If used this flag with --workspace, --each-feature, or --feature-powerset,"
        " artifacts will be removed before each run.",
        "Note that dependencies artifacts will be preserved.",
    ),
    _opt(
        "--clean-per-version", "", "Remove artifacts per Rust version",
        "Note that dependencies artifacts will also be removed.",
        _RANGE_ONLY,
    ),
    _opt("--keep-going", "", "Keep going on failure"),
    _opt("-v --verbose", "", "Use verbose output"),
    _opt(
        "--color", "<WHEN>", "Coloring: auto, always, never",
        "This flag will be propagated to cargo.",
    ),
    _opt("-h --help", "", "Prints help information"),
    _opt("-V --version", "", "Prints version information"),
)

_COMMON_COMMANDS = (
    ("build", "Compile the current package"),
    ("check", "Analyze the current package and report errors, but don't build object files"),
    ("run", "Run a binary or example of the local package"),
    ("test", "Run the tests"),
)


def _wrap(indent: int, first_indent: bool, term_size: int, desc: str) -> str:
    """Lay out ``desc`` word by word, breaking lines before ``term_size``."""
    pad = " " * indent
    width = term_size - indent
    pieces = [pad] if first_indent else []
    column = 0
    for word in desc.split(" "):
        if column + len(word) + 1 >= width:
            pieces.append(f"\n{pad}{word}")
            column = len(word)
        elif column:
            pieces.append(f" {word}")
            column += len(word) + 1
        else:
            pieces.append(word)
            column = len(word)
    return "".join(pieces)


@dataclass
class Help:
    """The help text, in its long or short form."""

    long: bool
    term_size: int = MAX_TERM_WIDTH
    print_version: bool = True

    def _header(self) -> str:
        version = f" {PKG_VERSION}" if self.print_version else ""
        lines = [
            f"{PKG_NAME}{version}",
            PKG_DESCRIPTION,
            "USAGE:",
            f"    {_USAGE_LINE}",
            "",
            "Use -h for short descriptions and --help for more details.",
            "",
            "OPTIONS:",
        ]
        return "\n".join(lines) + "\n"

    def _entry(self, entry: HelpEntry) -> str:
        sep = "," if entry.short else " "
        text = f"    {entry.short:<2}{sep} "
        if not self.long:
            summary = _wrap(41, False, self.term_size, entry.description)
            return f"{text}{entry.usage:<32} {summary}\n"
        blocks = [_wrap(12, True, self.term_size, entry.description) + "."]
        blocks.extend(_wrap(12, True, self.term_size, extra) for extra in entry.additional)
        return text + entry.usage + "\n" + "".join(b + "\n\n" for b in blocks)

    def render(self) -> str:
        """Return the full help text."""
        body = "".join(self._entry(entry) for entry in HELP)
        gap = "" if self.long else "\n"
        footer = "Some common cargo commands are (see all commands with --list):\n"
        footer += "".join(f"    {name:<12}{desc}\n" for name, desc in _COMMON_COMMANDS)
        return self._header() + body + gap + footer

    def __str__(self) -> str:
        return self.render()


def long_help(print_version: bool = True) -> Help:
    """Return the long help (``--help``)."""
    return Help(long=True, print_version=print_version)


def short_help(print_version: bool = True) -> Help:
    """Return the short help (``-h``)."""
    return Help(long=False, print_version=print_version)


def get_help(flag: str) -> HelpEntry | None:
    """Return the help entry whose short or long flag is ``flag``."""
    return next((e for e in HELP if flag in (e.short, e.long)), None)


_REMOVED = {
    "ignore-non-exist-features": "--ignore-unknown-features",
    "skip-no-default-features": "--exclude-no-default-features",
}


def removed_flags(flag: str) -> None:
    """Raise CliError if ``flag`` (without leading dashes) is a removed option."""
    if flag in _REMOVED:
        raise CliError(f"--{flag} was removed, use {_REMOVED[flag]} instead")


def _with_usage(head: Sequence[str], usage: str, trailing_newline: bool) -> str:
    text = "\n".join([*head, "", "USAGE:", f"    {usage}", "", _MORE_INFO])
    return text + "\n" if trailing_newline else text


def mini_usage(msg: str) -> None:
    """Raise CliError with ``msg`` and a short usage note."""
    raise CliError(_with_usage([msg], _USAGE_LINE, trailing_newline=False))


def _subcommand_suffix(subcommand: str | None) -> str:
    return "" if subcommand is None else f" {subcommand}"


def multi_arg(flag: str, subcommand: str | None) -> None:
    """Raise CliError for an option given more than once."""
    entry = get_help(flag)
    arg = flag if entry is None else f"{entry.long} {entry.value_name}"
    head = [
        f"The argument '{flag}' was provided more than once,"
        " but cannot be used multiple times"
    ]
    usage = f"cargo hack{_subcommand_suffix(subcommand)} {arg}"
    raise CliError(_with_usage(head, usage, trailing_newline=True))


def similar_arg(
    flag: str, subcommand: str | None, expected: str, value: str | None = None
) -> None:
    """Raise CliError for an unknown option that resembles ``expected``."""
    head = [
        f"Found argument '{flag}' which wasn't expected, or isn't valid in this context",
        f"        Did you mean {expected}?",
    ]
    usage = f"cargo{_subcommand_suffix(subcommand)} {expected} {value or ''}"
    raise CliError(_with_usage(head, usage, trailing_newline=True))


def requires(flag: str, required: Sequence[str]) -> None:
    """Raise CliError saying ``flag`` needs one of ``required``."""
    if not required:
        raise ValueError("requires() needs at least one required flag")
    *rest, last = required
    if not rest:
        alternatives = last
    elif len(rest) == 1:
        alternatives = f"either {rest[0]} or {last}"
    else:
        alternatives = "".join(f"{r}, " for r in rest) + f"or {last}"
    raise CliError(f"{flag} can only be used together with {alternatives}")


def conflicts(a: str, b: str) -> None:
    """Raise CliError saying ``a`` and ``b`` cannot be combined."""
    raise CliError(f"{a} may not be used together with {b}")