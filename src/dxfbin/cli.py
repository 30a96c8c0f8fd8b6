from __future__ import annotations

import argparse
import sys
from collections import Counter, OrderedDict
from importlib.metadata import PackageNotFoundError, version
from itertools import islice
from pathlib import Path
from typing import Iterable, Sequence

from .codes import ValueKind
from .convert import format_value, to_dxf
from .errors import FormatError
from .reader import iter_records, open_reader
from .record import Record


def _package_version() -> str:
    try:
        return version("dxfbin")
    except PackageNotFoundError:
        return "0.0.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dxfbin", description="Inspect, dump, and convert binary DXF files.")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    subparsers = parser.add_subparsers(dest="command")

    inspect_parser = subparsers.add_parser("inspect", help="Show record and entity statistics.")
    inspect_parser.add_argument("path", help="Path to binary DXF file.")
    inspect_parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Text encoding of string records (utf-8 for R2007+, e.g. cp1252 before).",
    )
    inspect_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Also list the most frequent group codes.",
    )

    dump_parser = subparsers.add_parser("dump", help="Print one line per decoded record.")
    dump_parser.add_argument("path", help="Path to binary DXF file.")
    dump_parser.add_argument("--encoding", default="utf-8", help="Text encoding of string records.")
    dump_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Stop after this many records.",
    )

    convert_parser = subparsers.add_parser("convert", help="Rewrite a binary DXF file as ASCII DXF.")
    convert_parser.add_argument("input_path", help="Path to binary DXF file.")
    convert_parser.add_argument("output_path", help="Path to output ASCII DXF file.")
    convert_parser.add_argument("--encoding", default="utf-8", help="Text encoding of string records.")
    convert_parser.add_argument(
        "--output-encoding",
        default="utf-8",
        help="Encoding used to write the ASCII DXF file.",
    )
    return parser


def _summarize(records: Iterable[Record]) -> tuple[int, Counter[str], Counter[int], int, OrderedDict[str, int]]:
    total = 0
    kinds: Counter[str] = Counter()
    codes: Counter[int] = Counter()
    sections = 0
    entities: OrderedDict[str, int] = OrderedDict()
    section_name: str | None = None
    expect_section_name = False

    for record in records:
        total += 1
        kinds[record.kind.value] += 1
        codes[record.code] += 1

        if record.is_marker("SECTION"):
            sections += 1
            expect_section_name = True
            continue
        if record.is_marker("ENDSEC"):
            section_name = None
            continue
        if expect_section_name and record.code == 2:
            section_name = str(record.payload)
            expect_section_name = False
            continue
        if section_name == "ENTITIES" and record.code == 0:
            name = str(record.payload)
            entities[name] = entities.get(name, 0) + 1

    return total, kinds, codes, sections, entities


def _run_inspect(path: str, *, encoding: str = "utf-8", verbose: bool = False) -> int:
    file_path = Path(path)
    if not file_path.exists():
        print(f"error: file not found: {file_path}", file=sys.stderr)
        return 2

    try:
        with open_reader(file_path, encoding=encoding) as reader:
            total, kinds, codes, sections, entities = _summarize(iter_records(reader))
            end_position = reader.current_position
    except (FormatError, LookupError) as exc:
        print(f"error: failed to read binary DXF: {exc}", file=sys.stderr)
        return 2

    print(f"file: {file_path}")
    print(f"encoding: {encoding}")
    print(f"bytes_read: {end_position}")
    print(f"total_records: {total}")
    for kind in ValueKind:
        count = kinds.get(kind.value, 0)
        if count > 0:
            print(f"kind[{kind.value}]: {count}")
    print(f"sections: {sections}")
    print(f"total_entities: {sum(entities.values())}")
    for name, count in entities.items():
        print(f"{name}: {count}")
    if verbose:
        top_codes = ", ".join(f"{code}:{count}" for code, count in codes.most_common(10))
        print(f"top_codes: {top_codes}")
    return 0


def _run_dump(path: str, *, encoding: str = "utf-8", limit: int | None = None) -> int:
    file_path = Path(path)
    if not file_path.exists():
        print(f"error: file not found: {file_path}", file=sys.stderr)
        return 2

    try:
        with open_reader(file_path, encoding=encoding) as reader:
            offset = reader.current_position
            for record in islice(iter_records(reader), limit):
                print(f"{offset:>8} {record.code:>4} {record.kind.value:<6} {format_value(record.value)}")
                offset = reader.current_position
    except (FormatError, LookupError) as exc:
        print(f"error: failed to read binary DXF: {exc}", file=sys.stderr)
        return 2
    return 0


def _run_convert(
    input_path: str,
    output_path: str,
    *,
    encoding: str = "utf-8",
    output_encoding: str = "utf-8",
) -> int:
    dxf_path = Path(input_path)
    if not dxf_path.exists():
        print(f"error: file not found: {dxf_path}", file=sys.stderr)
        return 2

    try:
        result = to_dxf(str(dxf_path), output_path, encoding=encoding, output_encoding=output_encoding)
    except (FormatError, ImportError, LookupError, OSError, UnicodeEncodeError) as exc:
        print(f"error: failed to convert binary DXF: {exc}", file=sys.stderr)
        return 2

    print(f"input: {result.source_path}")
    print(f"output: {result.output_path}")
    print(f"total_records: {result.total_records}")
    for kind, count in result.records_by_kind.items():
        print(f"kind[{kind}]: {count}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "inspect":
        return _run_inspect(args.path, encoding=args.encoding, verbose=bool(args.verbose))
    if args.command == "dump":
        return _run_dump(args.path, encoding=args.encoding, limit=args.limit)
    if args.command == "convert":
        return _run_convert(
            args.input_path,
            args.output_path,
            encoding=args.encoding,
            output_encoding=args.output_encoding,
        )

    parser.print_help()
    return 0
