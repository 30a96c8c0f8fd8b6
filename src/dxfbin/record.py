from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .codes import ValueKind
from .errors import TypeMismatchError


@dataclass(frozen=True)
class Value:
    kind: ValueKind
    payload: Any

    def unwrap(self, kind: ValueKind, code: int | None = None) -> Any:
        if self.kind is not kind:
            raise TypeMismatchError(kind.value, self.kind.value, code)
        return self.payload


@dataclass(frozen=True)
class Record:
    code: int
    value: Value

    @property
    def kind(self) -> ValueKind:
        return self.value.kind

    @property
    def payload(self) -> Any:
        return self.value.payload

    def is_marker(self, name: str) -> bool:
        """True for structure markers such as ``(0, "SECTION")``."""
        return self.code == 0 and self.value.kind is ValueKind.STRING and self.value.payload == name

    def __str__(self) -> str:
        return f"{self.code}:{self.value.payload}"
