import pytest

from cargohack.fsutil import FileError, read_to_string, write


def test_round_trip_str(tmp_path):
    path = tmp_path / "a.txt"
    write(path, "hello\nworld")
    assert read_to_string(path) == "hello\nworld"


def test_round_trip_bytes(tmp_path):
    path = tmp_path / "b.txt"
    write(str(path), "ü".encode("utf-8"))
    assert read_to_string(str(path)) == "ü"


def test_write_overwrites(tmp_path):
    path = tmp_path / "c.txt"
    write(path, "first")
    write(path, "")
    assert read_to_string(path) == ""


def test_read_missing_file(tmp_path):
    path = tmp_path / "missing.txt"
    with pytest.raises(FileError, match="failed to read from file"):
        read_to_string(path)


def test_write_into_missing_dir(tmp_path):
    path = tmp_path / "nope" / "x.txt"
    with pytest.raises(OSError, match="failed to write to file"):
        write(path, "x")


def test_read_invalid_utf8(tmp_path):
    path = tmp_path / "bad.bin"
    write(path, b"\xff\xfe\xfa")
    with pytest.raises(FileError):
        read_to_string(path)