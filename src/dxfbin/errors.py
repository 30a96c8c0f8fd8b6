from __future__ import annotations


class FormatError(ValueError):
    """Raised when the byte stream is not well-formed binary DXF.

    ``position`` is the byte offset at which the problem was detected and
    ``code`` the group code being decoded, when either is known.
    """

    def __init__(self, message: str, *, position: int | None = None, code: int | None = None) -> None:
        super().__init__(message)
        self.position = position
        self.code = code


class EndOfStream(FormatError):
    """Raised by ``advance()`` when the source ends on a record boundary."""


class TypeMismatchError(TypeError):
    def __init__(self, expected: str, actual: str | None, code: int | None = None) -> None:
        if actual is None:
            message = f"no value has been read yet (expected {expected})"
        else:
            message = f"group code {code} holds a {actual} value, not {expected}"
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.code = code
