# data_sampler/loaders/text_loader.py
from __future__ import annotations
from pathlib import Path
from typing import Iterator
import io
import logging
import zipfile

TEXT_SUFFIXES: tuple[str, ...] = (".txt", ".csv", ".log", ".dat")
BUFFER = 2 ** 14

_LOG = logging.getLogger(__name__)


def is_text_member(name: str) -> bool:
    return name.lower().endswith(TEXT_SUFFIXES) and not name.endswith("/")


def _first_text_member(zf: zipfile.ZipFile) -> str:
    members = sorted(m for m in zf.namelist() if is_text_member(m))
    if not members:
        raise ValueError(f"{zf.filename}: no text member ({', '.join(TEXT_SUFFIXES)})")
    if len(members) > 1:
        _LOG.info("%s holds %d logs; reading %s", zf.filename, len(members), members[0])
    return members[0]


def iter_lines(path: Path, encoding: str = "utf-8") -> Iterator[str]:
    """
    Yield the lines of a log one at a time (terminators kept).
    Accepts a loose text file or a .zip holding one; never reads the whole file.
    """
    path = Path(path)
    if path.suffix.lower() == ".zip":
        with zipfile.ZipFile(path, "r") as zf:
            member = _first_text_member(zf)
            with zf.open(member, "r") as raw:
                with io.TextIOWrapper(raw, encoding=encoding, newline="") as f:
                    yield from f
        return

    with path.open("r", encoding=encoding, newline="", buffering=BUFFER) as f:
        yield from f


def count_lines(path: Path, encoding: str = "utf-8") -> int:
    """Number of datapoints (lines) in the log; used to pace progress output."""
    return sum(1 for _ in iter_lines(path, encoding=encoding))
