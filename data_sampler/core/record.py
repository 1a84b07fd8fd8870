# data_sampler/core/record.py
from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from .errors import MalformedValueError, MissingFieldError, TruncatedLineError

SEPARATOR = ";"


def to_float32(raw: str) -> np.float32:
    """
    Strict float literal -> float32.
    Surrounding whitespace and '_' digit separators are rejected (float() would accept them).
    """
    if not raw or raw != raw.strip() or "_" in raw:
        raise ValueError(raw)
    with np.errstate(over="ignore"):
        return np.float32(float(raw))


@dataclass(frozen=True)
class Record:
    """
    One input line as ordered (name, raw value) pairs.
    A trailing name without a value is kept in ``dangling``.
    """
    pairs: tuple[tuple[str, str], ...]
    dangling: str | None = None
    line_number: int | None = None

    @classmethod
    def from_line(cls, line: str, line_number: int | None = None) -> "Record":
        tokens = line.rstrip("\r\n").split(SEPARATOR)
        n_full = len(tokens) // 2
        pairs = tuple((tokens[2 * k], tokens[2 * k + 1]) for k in range(n_full))
        dangling = tokens[-1] if len(tokens) % 2 else None
        return cls(pairs=pairs, dangling=dangling, line_number=line_number)

    def raw(self, field: str) -> str:
        for name, value in self.pairs:
            if name == field:
                return value
        if self.dangling == field:
            raise TruncatedLineError(field, self.line_number)
        raise MissingFieldError(field, self.line_number)

    def get(self, field: str) -> np.float32:
        raw = self.raw(field)
        try:
            return to_float32(raw)
        except ValueError:
            raise MalformedValueError(field, raw, self.line_number) from None


def parse_field(line: str, field: str, line_number: int | None = None) -> np.float32:
    return Record.from_line(line, line_number).get(field)
