from __future__ import annotations

from dxfbin import BinaryCodeValueReader
from tests._binary_helpers import binary_stream, double_record, int16_record, string_record


def _reader() -> BinaryCodeValueReader:
    return BinaryCodeValueReader(
        binary_stream(
            string_record(0, "LINE"),
            double_record(10, 1.0),
            double_record(20, 2.0),
            int16_record(62, 3),
        ),
        encoding="cp1252",
    )


def test_clone_copies_current_record() -> None:
    reader = _reader()
    reader.advance()

    copy = reader.clone()

    assert copy is not reader
    assert copy.code == 0
    assert copy.read_string() == "LINE"
    assert copy.record == reader.record
    assert copy.encoding == "cp1252"
    assert copy.current_position == reader.current_position


def test_clone_shares_the_cursor() -> None:
    reader = _reader()
    reader.advance()
    copy = reader.clone()

    copy.advance()

    assert copy.read_double() == 1.0
    assert reader.read_string() == "LINE"
    assert reader.current_position == copy.current_position

    reader.advance()
    assert reader.code == 20
    assert reader.read_double() == 2.0
    assert copy.code == 10


def test_clone_before_first_advance() -> None:
    reader = _reader()
    copy = reader.clone()

    assert copy.record is None
    assert copy.current_position == 22
    copy.advance()
    assert reader.current_position == copy.current_position == 22 + 2 + 5
