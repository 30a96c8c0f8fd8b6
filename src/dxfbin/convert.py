from __future__ import annotations

import io
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any

from .codes import ValueKind
from .reader import BinaryCodeValueReader, iter_records, open_reader
from .record import Record, Value


@dataclass(frozen=True)
class ConvertResult:
    source_path: str
    output_path: str
    total_records: int
    records_by_kind: dict[str, int]


def to_dxf(
    source: str | PathLike[str] | BinaryCodeValueReader,
    output_path: str | PathLike[str],
    *,
    encoding: str = "utf-8",
    output_encoding: str = "utf-8",
) -> ConvertResult:
    """Rewrite a binary DXF record stream as an ASCII DXF file.

    The whole source is decoded before anything is written, so a malformed
    input never leaves a partial file at ``output_path``.
    """
    _require_ezdxf()
    from ezdxf.lldxf.tagwriter import TagWriter

    source_path, records = _decode(source, encoding)
    records_by_kind: dict[str, int] = {}
    for record in records:
        kind = record.kind.value
        records_by_kind[kind] = records_by_kind.get(kind, 0) + 1

    buffer = io.StringIO()
    writer = TagWriter(buffer)
    for record in records:
        writer.write_tag(_dxf_tag(record))
    data = buffer.getvalue().encode(output_encoding)

    out_path = Path(output_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(data)

    return ConvertResult(
        source_path=source_path,
        output_path=str(out_path),
        total_records=len(records),
        records_by_kind=dict(sorted(records_by_kind.items())),
    )


def to_ezdxf(
    source: str | PathLike[str] | BinaryCodeValueReader,
    *,
    encoding: str = "utf-8",
) -> Any:
    """Build an ezdxf ``Drawing`` from the decoded records of ``source``."""
    _require_ezdxf()
    from ezdxf.document import Drawing

    _, records = _decode(source, encoding)
    return Drawing.load(iter([_dxf_tag(record) for record in records]))


def format_value(value: Value) -> str:
    """Render a decoded value the way ASCII DXF spells it."""
    payload = value.payload
    if value.kind is ValueKind.DOUBLE:
        return repr(float(payload))
    if value.kind is ValueKind.BOOL:
        return "1" if payload else "0"
    if value.kind is ValueKind.BINARY:
        return bytes(payload).hex().upper()
    return str(payload)


def _dxf_tag(record: Record) -> Any:
    from ezdxf.lldxf.types import DXFBinaryTag, DXFTag

    kind = record.kind
    if kind is ValueKind.BINARY:
        return DXFBinaryTag(record.code, bytes(record.payload))
    if kind is ValueKind.BOOL:
        # ezdxf keeps 290-299 flags as ints
        return DXFTag(record.code, int(record.payload))
    return DXFTag(record.code, record.payload)


def _decode(
    source: str | PathLike[str] | BinaryCodeValueReader,
    encoding: str,
) -> tuple[str, list[Record]]:
    if isinstance(source, BinaryCodeValueReader):
        return "<stream>", list(iter_records(source))
    with open_reader(source, encoding=encoding) as reader:
        return str(source), list(iter_records(reader))


def _require_ezdxf():
    try:
        import ezdxf
    except Exception as exc:
        raise ImportError(
            "ezdxf is required to write or build drawings from binary DXF records. "
            'Install it with `pip install "dxfbin[dxf]"`.'
        ) from exc
    return ezdxf
