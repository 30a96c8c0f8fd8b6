from __future__ import annotations

import logging
import struct
from os import PathLike
from typing import Any, BinaryIO, Callable, Iterator, Protocol, cast, runtime_checkable

from .codes import COMMENT_CODE, EOF_MARKER, HEADER_SIZE, SENTINEL, ValueKind, canonical_handle, value_kind
from .errors import EndOfStream, FormatError, TypeMismatchError
from .record import Record, Value

logger = logging.getLogger(__name__)

_GROUP_CODE = struct.Struct("<h")
_FIXED_WIDTH = {
    ValueKind.DOUBLE: struct.Struct("<d"),
    ValueKind.INT16: struct.Struct("<h"),
    ValueKind.INT32: struct.Struct("<i"),
    ValueKind.INT64: struct.Struct("<q"),
}


@runtime_checkable
class CodeValueReader(Protocol):
    """Record-at-a-time reader shared by the binary and ASCII DXF variants."""

    @property
    def code(self) -> int: ...

    @property
    def value(self) -> Any: ...

    @property
    def current_position(self) -> int: ...

    def advance(self) -> tuple[int, int]: ...

    def read_byte(self) -> int: ...

    def read_bytes(self) -> bytes: ...

    def read_short(self) -> int: ...

    def read_int(self) -> int: ...

    def read_long(self) -> int: ...

    def read_bool(self) -> bool: ...

    def read_double(self) -> float: ...

    def read_string(self) -> str: ...

    def read_hex(self) -> str: ...

    def clone(self) -> "CodeValueReader": ...


class _Cursor:
    """Byte source plus the absolute offset of the next unread byte."""

    def __init__(self, source: BinaryIO) -> None:
        self.source = source
        self.position = _initial_offset(source)

    def read_available(self, size: int) -> bytes:
        """Read up to ``size`` bytes, fewer only when the source is exhausted."""
        data = bytearray()
        while len(data) < size:
            chunk = self.source.read(size - len(data))
            if not chunk:
                break
            data += chunk
        self.position += len(data)
        return bytes(data)

    def read(self, size: int, code: int | None = None) -> bytes:
        data = self.read_available(size)
        if len(data) < size:
            raise FormatError(
                f"unexpected end of stream at byte address {self.position} "
                f"({len(data)} of {size} bytes available)",
                position=self.position,
                code=code,
            )
        return data


def _initial_offset(source: BinaryIO) -> int:
    try:
        return int(source.tell())
    except (AttributeError, OSError, ValueError):
        return 0


class BinaryCodeValueReader:
    """Decode binary DXF into (group code, value) records.

    Construction consumes and checks the 22-byte sentinel block. Each call to
    :meth:`advance` decodes one record; the caller then picks the getter that
    matches the group code (``read_double`` for 10-59, ``read_string`` for
    0-9, and so on). A getter that does not match the decoded kind raises
    :class:`~dxfbin.errors.TypeMismatchError`.
    """

    def __init__(self, source: BinaryIO, *, encoding: str = "utf-8", errors: str = "strict") -> None:
        self._cursor = _Cursor(source)
        self._encoding = encoding
        self._errors = errors
        self._record: Record | None = None

        header = self._cursor.read_available(HEADER_SIZE)
        sentinel = header[: len(SENTINEL)].decode("latin-1")
        if len(header) < HEADER_SIZE or sentinel != SENTINEL:
            raise FormatError("not a valid binary DXF", position=self._cursor.position)
        logger.debug("binary DXF sentinel accepted, records start at %d", self._cursor.position)

    @classmethod
    def _sharing(cls, other: "BinaryCodeValueReader") -> "BinaryCodeValueReader":
        reader = cls.__new__(cls)
        reader._cursor = other._cursor
        reader._encoding = other._encoding
        reader._errors = other._errors
        reader._record = other._record
        return reader

    @property
    def code(self) -> int:
        if self._record is None:
            return 0
        return self._record.code

    @property
    def value(self) -> Any:
        if self._record is None:
            return None
        return self._record.value.payload

    @property
    def record(self) -> Record | None:
        return self._record

    @property
    def current_position(self) -> int:
        return self._cursor.position

    @property
    def encoding(self) -> str:
        return self._encoding

    def advance(self) -> tuple[int, int]:
        """Decode the next record and return ``(code, offset after the record)``."""
        cursor = self._cursor
        raw = cursor.read_available(_GROUP_CODE.size)
        if not raw:
            logger.debug("end of binary DXF stream at %d", cursor.position)
            raise EndOfStream(f"end of stream at byte address {cursor.position}", position=cursor.position)
        if len(raw) < _GROUP_CODE.size:
            raise FormatError(
                f"unexpected end of stream inside a group code at byte address {cursor.position}",
                position=cursor.position,
            )
        (code,) = _GROUP_CODE.unpack(raw)

        if code == COMMENT_CODE:
            raise FormatError(
                f"the comment group {COMMENT_CODE} is not used in binary DXF files "
                f"at byte address {cursor.position}",
                position=cursor.position,
                code=code,
            )
        kind = value_kind(code)
        if kind is None:
            raise FormatError(
                f"unrecognized group code {code} at byte address {cursor.position}",
                position=cursor.position,
                code=code,
            )

        payload = self._decoders[kind](self, kind, code)
        self._record = Record(code, Value(kind, payload))
        return code, cursor.position

    def __iter__(self) -> Iterator[Record]:
        return iter_records(self)

    # Payload decoders, keyed by value kind.

    def _decode_fixed(self, kind: ValueKind, code: int) -> Any:
        layout = _FIXED_WIDTH[kind]
        (number,) = layout.unpack(self._cursor.read(layout.size, code))
        return number

    def _decode_bool(self, kind: ValueKind, code: int) -> bool:
        return self._cursor.read(1, code)[0] > 0

    def _decode_string(self, kind: ValueKind, code: int) -> str:
        return self._null_terminated_string(code)

    def _decode_hex(self, kind: ValueKind, code: int) -> str:
        text = self._null_terminated_string(code)
        return canonical_handle(text, position=self._cursor.position, code=code)

    def _decode_binary(self, kind: ValueKind, code: int) -> bytes:
        length = self._cursor.read(1, code)[0]
        if length == 0:
            return b""
        return self._cursor.read(length, code)

    _decoders: dict[ValueKind, Callable[["BinaryCodeValueReader", ValueKind, int], Any]] = {
        ValueKind.STRING: _decode_string,
        ValueKind.DOUBLE: _decode_fixed,
        ValueKind.INT16: _decode_fixed,
        ValueKind.INT32: _decode_fixed,
        ValueKind.INT64: _decode_fixed,
        ValueKind.BOOL: _decode_bool,
        ValueKind.BINARY: _decode_binary,
        ValueKind.HEX: _decode_hex,
    }

    def _null_terminated_string(self, code: int) -> str:
        data = bytearray()
        while True:
            byte = self._cursor.read(1, code)
            if byte == b"\x00":
                break
            data += byte
        try:
            return data.decode(self._encoding, self._errors)
        except UnicodeDecodeError as exc:
            raise FormatError(
                f"cannot decode string for group code {code} as {self._encoding} "
                f"at byte address {self._cursor.position}: {exc.reason}",
                position=self._cursor.position,
                code=code,
            ) from exc

    # Typed accessors.

    def _unwrap(self, kind: ValueKind) -> Any:
        if self._record is None:
            raise TypeMismatchError(kind.value, None)
        return self._record.value.unwrap(kind, self._record.code)

    def read_byte(self) -> int:
        number = self._unwrap(ValueKind.INT16)
        if not 0 <= number <= 0xFF:
            raise TypeMismatchError("byte", f"int16 ({number})", self.code)
        return number

    def read_bytes(self) -> bytes:
        return self._unwrap(ValueKind.BINARY)

    def read_short(self) -> int:
        return self._unwrap(ValueKind.INT16)

    def read_int(self) -> int:
        return self._unwrap(ValueKind.INT32)

    def read_long(self) -> int:
        return self._unwrap(ValueKind.INT64)

    def read_bool(self) -> bool:
        return self._unwrap(ValueKind.BOOL)

    def read_double(self) -> float:
        return self._unwrap(ValueKind.DOUBLE)

    def read_string(self) -> str:
        return self._unwrap(ValueKind.STRING)

    def read_hex(self) -> str:
        # Group code 5 carries handles as plain strings.
        if self._record is not None and self._record.value.kind is ValueKind.STRING:
            return self._record.value.payload
        return self._unwrap(ValueKind.HEX)

    def clone(self) -> "BinaryCodeValueReader":
        """Return a second reader over the same cursor.

        The copy starts with this reader's current record but shares the byte
        source and offset: advancing either one moves both. It is a view for
        holding on to the in-flight record, not an independent reader.
        """
        return self._sharing(self)

    def close(self) -> None:
        self._cursor.source.close()

    def __enter__(self) -> "BinaryCodeValueReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __str__(self) -> str:
        return f"{self.code}:{self.value}"


def iter_records(reader: BinaryCodeValueReader) -> Iterator[Record]:
    """Yield records until the stream ends or after the ``(0, "EOF")`` marker."""
    while True:
        try:
            reader.advance()
        except EndOfStream:
            return
        record = cast(Record, reader.record)
        yield record
        if record.is_marker(EOF_MARKER):
            return


def open_reader(
    path: str | PathLike[str],
    *,
    encoding: str = "utf-8",
    errors: str = "strict",
) -> BinaryCodeValueReader:
    """Open ``path`` and return a reader that closes the file on ``close()``."""
    handle = open(path, "rb")
    try:
        return BinaryCodeValueReader(handle, encoding=encoding, errors=errors)
    except Exception:
        handle.close()
        raise


def is_binary_dxf(path: str | PathLike[str]) -> bool:
    """True if ``path`` starts with the binary DXF sentinel; unreadable paths give False."""
    try:
        with open(path, "rb") as handle:
            header = handle.read(HEADER_SIZE)
    except OSError:
        return False
    return len(header) == HEADER_SIZE and header[: len(SENTINEL)].decode("latin-1") == SENTINEL
