# data_sampler/core/errors.py
from __future__ import annotations


class FatalParseError(ValueError):
    """A field of one input line could not be read; the whole run is invalid."""

    def __init__(self, field: str, line_number: int | None, detail: str):
        self.field = field
        self.line_number = line_number
        where = f"line {line_number}" if line_number is not None else "input line"
        super().__init__(f"{where}: {detail}")


class MissingFieldError(FatalParseError):
    def __init__(self, field: str, line_number: int | None = None):
        super().__init__(field, line_number, f"field '{field}' not found")


class MalformedValueError(FatalParseError):
    def __init__(self, field: str, raw: str, line_number: int | None = None):
        self.raw = raw
        super().__init__(field, line_number, f"field '{field}' has non-numeric value {raw!r}")


class TruncatedLineError(FatalParseError):
    def __init__(self, field: str, line_number: int | None = None):
        super().__init__(field, line_number, f"field '{field}' has no value (odd token count)")
