import io
import pytest

from sbwt.globals import (
    LogLevel,
    check_readable,
    check_true,
    check_writable,
    cur_time_micros,
    cur_time_millis,
    get_log_level,
    get_rc,
    get_time_string,
    load_string,
    readlines,
    seconds_since_program_start,
    serialize_string,
    set_log_level,
    write_log,
)


@pytest.fixture
def restore_log_level():
    old = get_log_level()
    yield
    set_log_level(old)


@pytest.mark.parametrize(
    "c, expected",
    [
        ("A", "T"),
        ("C", "G"),
        ("G", "C"),
        ("T", "A"),
        ("a", "t"),
        ("c", "g"),
        ("g", "c"),
        ("t", "a"),
        ("N", "N"),
    ],
)
def test_rc_char(c, expected):
    assert get_rc(c) == expected


@pytest.mark.parametrize(
    "seq", ["ACAGT", "CGAG", "CGGACG", "AGAT", "GAGA", "AAAAAA"]
)
def test_rc_string_involution(seq):
    rc = get_rc(seq)
    assert len(rc) == len(seq)
    assert get_rc(rc) == seq
    assert rc[0] == get_rc(seq[-1])


def test_readlines(tmp_path):
    path = tmp_path / "lines.txt"
    path.write_bytes(b"first\nsecond\n\nlast")
    assert readlines(str(path)) == ["first", "second", "", "last"]


def test_readlines_trailing_newline_and_empty(tmp_path):
    path = tmp_path / "a.txt"
    path.write_bytes(b"x\ny\n")
    assert readlines(str(path)) == ["x", "y"]
    empty = tmp_path / "empty.txt"
    empty.write_bytes(b"")
    assert readlines(str(empty)) == []


def test_readlines_missing(tmp_path):
    with pytest.raises(OSError):
        readlines(str(tmp_path / "nope.txt"))


def test_check_readable(tmp_path):
    with pytest.raises(OSError):
        check_readable(str(tmp_path / "missing"))
    path = tmp_path / "present"
    path.write_text("data")
    check_readable(str(path))
    assert path.read_text() == "data"


def test_check_writable_creates_and_keeps(tmp_path):
    path = tmp_path / "out.txt"
    check_writable(str(path))
    assert path.exists()
    path.write_text("keep")
    check_writable(str(path))
    assert path.read_text() == "keep"
    with pytest.raises(OSError):
        check_writable(str(tmp_path / "no_dir" / "x.txt"))


@pytest.mark.parametrize("s", ["", "ACGT", "hello world", "x" * 1000])
def test_string_round_trip(s):
    buf = io.BytesIO()
    written = serialize_string(s, buf)
    assert written == 8 + len(s)
    assert len(buf.getvalue()) == written
    buf.seek(0)
    assert load_string(buf) == s


def test_string_wire_format():
    buf = io.BytesIO()
    serialize_string("AC", buf)
    assert buf.getvalue() == (2).to_bytes(8, "little") + b"AC"


def test_load_string_truncated():
    with pytest.raises(EOFError):
        load_string(io.BytesIO(b"\x05\x00"))
    with pytest.raises(EOFError):
        load_string(io.BytesIO((10).to_bytes(8, "little") + b"abc"))


def test_times():
    millis = cur_time_millis()
    micros = cur_time_micros()
    assert micros // 1000 >= millis
    assert seconds_since_program_start() >= 0


def test_time_string_no_newline():
    s = get_time_string()
    assert not s.endswith("\n")
    assert len(s) > 0


def test_log_level_set_get(restore_log_level):
    set_log_level(LogLevel.MINOR)
    assert get_log_level() == LogLevel.MINOR
    set_log_level(LogLevel.SILENT)
    assert get_log_level() == LogLevel.SILENT


def test_write_log_filters(capsys, restore_log_level):
    set_log_level(LogLevel.MAJOR)
    write_log("important message", LogLevel.MAJOR)
    write_log("minor message", LogLevel.MINOR)
    err = capsys.readouterr().err
    assert "important message" in err
    assert "minor message" not in err


def test_check_true():
    check_true(True, "unused")
    with pytest.raises(RuntimeError, match="boom"):
        check_true(False, "boom")