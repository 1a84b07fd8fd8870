# data_sampler/utils/detect.py
from __future__ import annotations
from pathlib import Path
import zipfile
from dataclasses import dataclass
from typing import Callable, Literal

from ..loaders.text_loader import TEXT_SUFFIXES, is_text_member

DetectedKind = Literal["text", "zip", "unknown"]

@dataclass(frozen=True)
class DetectedItem:
    path: Path        # actual path on disk
    kind: DetectedKind

def _is_zip_with_text(p: Path) -> bool:
    if not p.is_file():
        return False
    try:
        if not zipfile.is_zipfile(p):
            return False
        with zipfile.ZipFile(p, "r") as zf:
            return any(is_text_member(name) for name in zf.namelist())
    except (OSError, zipfile.BadZipFile):
        return False

def detect_kind(p: Path) -> DetectedKind:
    """
    Classify a single path.
    - .txt/.csv/.log/.dat -> 'text'
    - .zip (with any text member) -> 'zip'
    else -> 'unknown'
    """
    suffix = p.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        return "text"
    if suffix == ".zip" and _is_zip_with_text(p):
        return "zip"
    return "unknown"

def discover_inputs(root: Path, recurse: bool = False) -> list[DetectedItem]:
    """
    If 'root' is a file -> return that one item (if known).
    If 'root' is a folder -> walk (optionally recursively) and collect logs.
    A missing folder is created and yields nothing.
    """
    items: list[DetectedItem] = []
    if root.is_file():
        kind = detect_kind(root)
        if kind != "unknown":
            items.append(DetectedItem(root.resolve(), kind))
        return items

    root.mkdir(parents=True, exist_ok=True)
    it = root.rglob("*") if recurse else root.glob("*")

    for p in it:
        if not p.is_file():
            continue
        kind = detect_kind(p)
        if kind != "unknown":
            items.append(DetectedItem(p.resolve(), kind))

    # deterministic ordering
    items.sort(key=lambda x: str(x.path))
    return items

def select_input(items: list[DetectedItem],
                 index: int | None = None,
                 ask: Callable[[str], str] = input) -> DetectedItem | None:
    """
    Pick the log to analyze.
    - no items -> None
    - one item -> that one
    - several  -> 'index' if given, else ask for an integer in [0..n-1]
    Invalid or out-of-range choices print a message and return None.
    """
    if not items:
        return None
    if len(items) == 1:
        return items[0]

    last = len(items) - 1
    if index is None:
        print("Please select the file you want to analyze")
        print("---------------")
        for i, item in enumerate(items):
            print(f"> {i}: {item.path}")
        print("---------------")
        answer = ask(f"Enter an integer between [0..{last}]: ")
        try:
            index = int(str(answer).strip())
        except ValueError:
            print("> The input must be a valid integer")
            return None

    if not 0 <= index <= last:
        print(f"> The input must be in range [0..{last}]")
        return None
    return items[index]
