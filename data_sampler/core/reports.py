# data_sampler/core/reports.py
from __future__ import annotations
from datetime import datetime
from pathlib import Path
from typing import Literal
import numpy as np
import pandas as pd
from scipy.io import savemat

from .model import CycleEntry, Dataset

ReportFormat = Literal["trd", "csv", "mat", "both"]

BUFFER = 2 ** 14
COLUMNS = ["cycle", "min", "max", "cycles"]


def format_value(x) -> str:
    """Shortest float32 text, no exponent, no trailing '.0' (3 -> '3', 2.5 -> '2.5')."""
    return np.format_float_positional(np.float32(x), trim="-")


def format_line(position: int, entry: CycleEntry) -> str:
    bounds = entry.extremum.bounds()
    lo, hi = ("", "") if bounds is None else (format_value(bounds[0]), format_value(bounds[1]))
    return f"{position};min;{lo};max;{hi};cycles;{entry.samples};\n"


def dataset_lines(dataset: Dataset) -> list[str]:
    """Serialized lines, sorted by cycle index and renumbered from 1."""
    return [format_line(pos, dataset[k]) for pos, k in enumerate(sorted(dataset), start=1)]


def output_path(out_root: Path, now: datetime | None = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y-%m-%d-%H-%M-%S")
    return out_root / f"output-{stamp}.trd"


def write_trd(dataset: Dataset, out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="", buffering=BUFFER) as f:
        f.writelines(dataset_lines(dataset))
    return out_path


def dataset_frame(dataset: Dataset) -> pd.DataFrame:
    """One row per cycle; empty extrema become NaN."""
    rows = []
    for pos, k in enumerate(sorted(dataset), start=1):
        entry = dataset[k]
        bounds = entry.extremum.bounds()
        lo, hi = (np.nan, np.nan) if bounds is None else (float(bounds[0]), float(bounds[1]))
        rows.append({"cycle": pos, "min": lo, "max": hi, "cycles": int(entry.samples)})
    return pd.DataFrame(rows, columns=COLUMNS)


def _write_csv(df_out: pd.DataFrame, out_csv: Path, title: str) -> None:
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    df_out.to_csv(out_csv, index=False, encoding="utf-8")
    print(f"[OK] wrote report: {title} → {out_csv}")


def _write_mat(df_out: pd.DataFrame, out_mat: Path, varname: str, title: str) -> None:
    """MATLAB struct, one Nx1 double per column."""
    out_mat.parent.mkdir(parents=True, exist_ok=True)
    mat_struct = {c: df_out[c].to_numpy(dtype=float).reshape(-1, 1) for c in COLUMNS}
    savemat(out_mat, {varname: mat_struct})
    print(f"[OK] wrote report: {title} → {out_mat}")


def write_report(dataset: Dataset,
                 out_base: Path,
                 title: str,
                 fmt: ReportFormat = "trd",
                 mat_variable: str = "cycles") -> None:
    """
    Tabular companion of the .trd file.
    - out_base is a *base path without extension* (e.g., .../output-<stamp>)
    - fmt: "trd" (nothing extra) | "csv" | "mat" | "both"
    """
    if fmt not in ("csv", "mat", "both"):
        return
    df_out = dataset_frame(dataset)
    if fmt in ("csv", "both"):
        _write_csv(df_out, out_base.with_suffix(".csv"), title)
    if fmt in ("mat", "both"):
        _write_mat(df_out, out_base.with_suffix(".mat"), mat_variable, title)
