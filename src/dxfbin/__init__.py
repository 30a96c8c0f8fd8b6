from typing import Sequence

from .codes import GROUP_CODE_RANGES, SENTINEL, ValueKind, canonical_handle, value_kind
from .convert import ConvertResult, format_value, to_dxf, to_ezdxf
from .errors import EndOfStream, FormatError, TypeMismatchError
from .reader import BinaryCodeValueReader, CodeValueReader, is_binary_dxf, iter_records, open_reader
from .record import Record, Value

__all__ = [
    "open_reader",
    "is_binary_dxf",
    "iter_records",
    "BinaryCodeValueReader",
    "CodeValueReader",
    "Record",
    "Value",
    "ValueKind",
    "GROUP_CODE_RANGES",
    "SENTINEL",
    "value_kind",
    "canonical_handle",
    "to_dxf",
    "to_ezdxf",
    "format_value",
    "ConvertResult",
    "FormatError",
    "EndOfStream",
    "TypeMismatchError",
]


def main(argv: Sequence[str] | None = None) -> int:
    from dxfbin.cli import main as cli_main

    return cli_main(argv)
