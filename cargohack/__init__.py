"""Feature powersets, command-line parsing, help text and toolchain version detection for cargo feature testing."""

__version__ = "0.1.0"