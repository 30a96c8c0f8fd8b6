from __future__ import annotations

import re
from bisect import bisect_right
from enum import Enum

from .errors import FormatError

SENTINEL = "AutoCAD Binary DXF"
HEADER_SIZE = 22
COMMENT_CODE = 999
EOF_MARKER = "EOF"

_HANDLE_MAX = 0xFFFFFFFFFFFFFFFF
_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")


class ValueKind(str, Enum):
    STRING = "string"
    DOUBLE = "double"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    BOOL = "bool"
    BINARY = "binary"
    HEX = "hex"


# Inclusive, disjoint, sorted by lower bound.
GROUP_CODE_RANGES: tuple[tuple[int, int, ValueKind], ...] = (
    (0, 9, ValueKind.STRING),
    (10, 59, ValueKind.DOUBLE),
    (60, 79, ValueKind.INT16),
    (90, 99, ValueKind.INT32),
    (100, 102, ValueKind.STRING),
    (105, 105, ValueKind.HEX),
    (110, 149, ValueKind.DOUBLE),
    (160, 169, ValueKind.INT64),
    (170, 179, ValueKind.INT16),
    (210, 239, ValueKind.DOUBLE),
    (270, 289, ValueKind.INT16),
    (290, 299, ValueKind.BOOL),
    (300, 309, ValueKind.STRING),
    (310, 319, ValueKind.BINARY),
    (320, 329, ValueKind.HEX),
    (330, 369, ValueKind.HEX),
    (370, 389, ValueKind.INT16),
    (390, 399, ValueKind.HEX),
    (400, 409, ValueKind.INT16),
    (410, 419, ValueKind.STRING),
    (420, 429, ValueKind.INT32),
    (430, 439, ValueKind.STRING),
    (440, 459, ValueKind.INT32),
    (460, 469, ValueKind.DOUBLE),
    (470, 479, ValueKind.STRING),
    (480, 481, ValueKind.HEX),
    (1000, 1003, ValueKind.STRING),
    (1004, 1004, ValueKind.BINARY),
    (1005, 1009, ValueKind.STRING),
    (1010, 1059, ValueKind.DOUBLE),
    (1060, 1070, ValueKind.INT16),
    (1071, 1071, ValueKind.INT32),
)

_RANGE_STARTS = tuple(low for low, _, _ in GROUP_CODE_RANGES)


def value_kind(code: int) -> ValueKind | None:
    """Return the value kind carried by ``code``, or None if no range covers it.

    The comment code 999 is not in the table and yields None.
    """
    index = bisect_right(_RANGE_STARTS, code) - 1
    if index < 0:
        return None
    _, high, kind = GROUP_CODE_RANGES[index]
    if code > high:
        return None
    return kind


def canonical_handle(text: str, *, position: int | None = None, code: int | None = None) -> str:
    """Normalize hexadecimal handle text: ``"00a3"`` becomes ``"A3"``.

    Surrounding whitespace is ignored. Anything else that is not plain
    base-16 digits, or a value wider than 64 bits, raises FormatError.
    """
    digits = text.strip()
    if not _HEX_DIGITS.fullmatch(digits):
        raise FormatError(f"invalid hexadecimal handle {text!r}", position=position, code=code)
    number = int(digits, 16)
    if number > _HANDLE_MAX:
        raise FormatError(f"hexadecimal handle {text!r} exceeds 64 bits", position=position, code=code)
    return f"{number:X}"
