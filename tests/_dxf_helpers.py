from __future__ import annotations

from pathlib import Path


def read_ascii_tags(path: Path) -> list[tuple[int, str]]:
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) % 2 == 0, "ASCII DXF must hold code/value line pairs"
    return [(int(lines[i]), lines[i + 1]) for i in range(0, len(lines), 2)]


def ascii_entities(path: Path) -> list[tuple[str, list[tuple[int, str]]]]:
    entities: list[tuple[str, list[tuple[int, str]]]] = []
    in_entities = False
    expect_name = False
    for code, value in read_ascii_tags(path):
        if code == 0 and value == "SECTION":
            expect_name = True
            continue
        if expect_name and code == 2:
            in_entities = value == "ENTITIES"
            expect_name = False
            continue
        if code == 0:
            if value == "ENDSEC":
                in_entities = False
            elif in_entities:
                entities.append((value, []))
            continue
        if in_entities and entities:
            entities[-1][1].append((code, value))
    return entities


def tag_value(tags: list[tuple[int, str]], code: int) -> str:
    for tag_code, value in tags:
        if tag_code == code:
            return value
    raise KeyError(code)
