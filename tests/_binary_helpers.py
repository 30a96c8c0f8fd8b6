from __future__ import annotations

import io
import struct

HEADER = b"AutoCAD Binary DXF\r\n\x1a\x00"


def group_code(code: int) -> bytes:
    return struct.pack("<h", code)


def string_record(code: int, text: str, encoding: str = "utf-8") -> bytes:
    return group_code(code) + text.encode(encoding) + b"\x00"


def double_record(code: int, value: float) -> bytes:
    return group_code(code) + struct.pack("<d", value)


def int16_record(code: int, value: int) -> bytes:
    return group_code(code) + struct.pack("<h", value)


def int32_record(code: int, value: int) -> bytes:
    return group_code(code) + struct.pack("<i", value)


def int64_record(code: int, value: int) -> bytes:
    return group_code(code) + struct.pack("<q", value)


def bool_record(code: int, value: bool | int) -> bytes:
    return group_code(code) + bytes([int(value)])


def binary_record(code: int, data: bytes) -> bytes:
    return group_code(code) + bytes([len(data)]) + data


def binary_dxf(*records: bytes) -> bytes:
    return HEADER + b"".join(records)


def binary_stream(*records: bytes) -> io.BytesIO:
    return io.BytesIO(binary_dxf(*records))


def minimal_drawing() -> bytes:
    """A small but structurally complete binary DXF with one LINE entity."""
    return binary_dxf(
        string_record(0, "SECTION"),
        string_record(2, "HEADER"),
        string_record(9, "$ACADVER"),
        string_record(1, "AC1024"),
        string_record(0, "ENDSEC"),
        string_record(0, "SECTION"),
        string_record(2, "ENTITIES"),
        string_record(0, "LINE"),
        string_record(5, "2F"),
        string_record(8, "0"),
        double_record(10, 0.0),
        double_record(20, 0.0),
        double_record(30, 0.0),
        double_record(11, 10.0),
        double_record(21, 5.5),
        double_record(31, 0.0),
        string_record(0, "CIRCLE"),
        string_record(5, "30"),
        string_record(8, "0"),
        double_record(10, 1.0),
        double_record(20, 2.0),
        double_record(30, 0.0),
        double_record(40, 3.0),
        string_record(0, "ENDSEC"),
        string_record(0, "EOF"),
    )
