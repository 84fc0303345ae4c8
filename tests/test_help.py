import pytest

from cargohack.help import (
    CliError,
    Help,
    conflicts,
    get_help,
    long_help,
    mini_usage,
    multi_arg,
    removed_flags,
    requires,
    short_help,
    similar_arg,
)


def test_long_help_header_without_version():
    text = long_help(print_version=False).render()
    lines = text.split("\n")
    assert lines[0] == "cargo-hack"
    assert lines[2] == "USAGE:"
    assert "\nOPTIONS:\n" in text


def test_long_help_header_with_version():
    text = long_help().render()
    assert text.startswith("cargo-hack 0.5.0\n")


def test_long_help_entry_layout():
    text = long_help(print_version=False).render()
    assert "    -p, --package <SPEC>...\n            Package(s) to check.\n\n" in text
    assert "        --keep-going\n            Keep going on failure.\n\n" in text


def test_long_help_additional_lines():
    text = long_help(print_version=False).render()
    assert (
        "        --exclude <SPEC>...\n"
        "            Exclude packages from the check.\n\n"
        "            This flag can only be used together with --workspace\n\n"
    ) in text


def test_short_help_entry_layout():
    text = short_help(print_version=False).render()
    assert "    -p, " + "--package <SPEC>...".ljust(32) + " Package(s) to check\n" in text
    assert "Prints version information\n\nSome common cargo commands" in text


def test_short_help_wraps_with_indent():
    text = short_help(print_version=False).render()
    continuation = [
        line for line in text.split("\n") if line.startswith(" " * 41) and line[41:42] != " "
    ]
    assert continuation


@pytest.mark.parametrize("help_", [long_help(False), short_help(False)])
def test_help_lines_fit_terminal(help_):
    text = str(help_)
    assert all(len(line) <= 100 for line in text.split("\n"))
    assert text.endswith("    test        Run the tests\n")


def test_narrow_help_width():
    text = Help(long=False, term_size=60, print_version=False).render()
    assert all(len(line) <= 60 for line in text.split("\n")[4:] if line.startswith("    -"))


def test_get_help():
    assert get_help("-p").long == "--package"
    assert get_help("--depth").value_name == "<NUM>"
    assert get_help("--nonexistent") is None


def test_removed_flags():
    with pytest.raises(CliError, match="--ignore-non-exist-features was removed, use --ignore-unknown-features instead"):
        removed_flags("ignore-non-exist-features")
    with pytest.raises(CliError, match="use --exclude-no-default-features instead"):
        removed_flags("skip-no-default-features")
    assert removed_flags("features") is None


def test_mini_usage():
    with pytest.raises(CliError) as info:
        mini_usage("no subcommand or valid flag specified")
    assert str(info.value) == (
        "no subcommand or valid flag specified\n\nUSAGE:\n"
        "    cargo hack [OPTIONS] [SUBCOMMAND]\n\nFor more information try --help"
    )


def test_multi_arg_known_flag():
    with pytest.raises(CliError) as info:
        multi_arg("--depth", "check")
    assert str(info.value) == (
        "The argument '--depth' was provided more than once, but cannot be used multiple times\n"
        "\nUSAGE:\n    cargo hack check --depth <NUM>\n\nFor more information try --help\n"
    )


def test_multi_arg_unknown_flag_no_subcommand():
    with pytest.raises(CliError) as info:
        multi_arg("--foo", None)
    assert "    cargo hack --foo\n" in str(info.value)


def test_similar_arg():
    with pytest.raises(CliError) as info:
        similar_arg("--each-features", "check", "--each-feature")
    assert str(info.value) == (
        "Found argument '--each-features' which wasn't expected, or isn't valid in this context\n"
        "        Did you mean --each-feature?\n\nUSAGE:\n    cargo check --each-feature \n"
        "\nFor more information try --help\n"
    )


def test_requires_forms():
    with pytest.raises(CliError, match=r"^--depth can only be used together with --feature-powerset$"):
        requires("--depth", ["--feature-powerset"])
    with pytest.raises(CliError) as info:
        requires("--optional-deps", ["--each-feature", "--feature-powerset"])
    assert str(info.value) == (
        "--optional-deps can only be used together with either --each-feature or --feature-powerset"
    )
    with pytest.raises(CliError) as info:
        requires("--ignore-unknown-features", ["--features", "--include-features", "--group-features"])
    assert str(info.value) == (
        "--ignore-unknown-features can only be used together with "
        "--features, --include-features, or --group-features"
    )


def test_requires_empty():
    with pytest.raises(ValueError):
        requires("--depth", [])


def test_conflicts():
    with pytest.raises(CliError) as info:
        conflicts("--each-feature", "--feature-powerset")
    assert str(info.value) == "--each-feature may not be used together with --feature-powerset"