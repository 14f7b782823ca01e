import pytest

from sbwt.strict_files import (
    OpenMode,
    StrictFileError,
    check_mode,
    mode_to_string,
    open_input,
    open_output,
)


def test_mode_to_string_joins_names():
    assert mode_to_string(OpenMode.IN | OpenMode.BINARY) == "in|binary"


def test_mode_to_string_all_flags_in_fixed_order():
    every = OpenMode.BINARY | OpenMode.TRUNC | OpenMode.ATE | OpenMode.APP | OpenMode.OUT | OpenMode.IN
    assert mode_to_string(every).split("|") == ["in", "out", "app", "ate", "trunc", "binary"]


def test_mode_to_string_empty():
    assert mode_to_string(OpenMode.NONE) == "none"


@pytest.mark.parametrize(
    "mode, message",
    [
        (OpenMode.TRUNC, "trunc and not out"),
        (OpenMode.APP, "app and not out"),
        (OpenMode.OUT | OpenMode.TRUNC | OpenMode.APP, "trunc and app"),
    ],
)
def test_check_mode_rejects(mode, message):
    with pytest.raises(StrictFileError, match=message):
        check_mode("f.txt", mode)


def test_check_mode_accepts_consistent_mode():
    check_mode("f.txt", OpenMode.OUT | OpenMode.APP)
    with pytest.raises(StrictFileError):
        check_mode("f.txt", OpenMode.IN | OpenMode.APP)


def test_open_input_missing_file(tmp_path):
    path = tmp_path / "missing.txt"
    with pytest.raises(StrictFileError, match="open failed") as info:
        open_input(str(path))
    assert str(path) in str(info.value)


def test_open_input_directory_fails(tmp_path):
    with pytest.raises(StrictFileError):
        open_input(str(tmp_path))


def test_open_input_trunc_is_a_mode_error(tmp_path):
    path = tmp_path / "x.txt"
    path.write_text("data")
    with pytest.raises(StrictFileError, match="mode error"):
        open_input(str(path), OpenMode.TRUNC)


def test_open_input_reads_text_and_binary(tmp_path):
    path = tmp_path / "x.txt"
    path.write_bytes(b"ACGT\nTTTT\n")
    with open_input(str(path)) as f:
        assert f.read() == "ACGT\nTTTT\n"
    with open_input(str(path), OpenMode.BINARY) as f:
        assert f.read() == b"ACGT\nTTTT\n"


def test_open_input_empty_file_is_allowed(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")
    with open_input(str(path), OpenMode.BINARY) as f:
        assert f.read() == b""


def test_open_output_truncates_by_default(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("old contents")
    with open_output(str(path)) as f:
        f.write("new")
    assert path.read_text() == "new"


def test_open_output_append(tmp_path):
    path = tmp_path / "out.bin"
    path.write_bytes(b"abc")
    with open_output(str(path), OpenMode.APP | OpenMode.BINARY) as f:
        f.write(b"def")
    assert path.read_bytes() == b"abcdef"


def test_open_output_rejects_trunc_and_app(tmp_path):
    path = tmp_path / "out.txt"
    with pytest.raises(StrictFileError, match="trunc and app"):
        open_output(str(path), OpenMode.TRUNC | OpenMode.APP)
    assert not path.exists()


def test_open_output_into_missing_directory(tmp_path):
    path = tmp_path / "nope" / "out.txt"
    with pytest.raises(StrictFileError, match="open failed"):
        open_output(str(path))