# data_sampler/core/pipeline.py
from __future__ import annotations
from datetime import datetime
from pathlib import Path
import time

from .aggregate import aggregate
from .config import threshold_config_from
from .model import Dataset
from .plotting import save_cycle_plot
from .reports import output_path, write_report, write_trd
from ..loaders.text_loader import count_lines, iter_lines


def _progress_printer(label: str):
    def report(i: int, total: int) -> None:
        pct = 100.0 * i / total if total else 100.0
        print(f"[progress] {label}: {i}/{total} ({pct:.0f}%)")
    return report


def analyze_file(path: Path, cfg: dict) -> Dataset:
    """Count, then stream one log through the cycle aggregator."""
    verbose = bool(cfg.get("logging", {}).get("verbose", True))
    thresholds = threshold_config_from(cfg)

    if verbose:
        print(f"[cfg] displacement field: {thresholds.displacement_field!r}")
        print(f"[cfg] pressure field: {thresholds.pressure_field!r}")
        print(f"[cfg] [min-max] will be calculated for: {thresholds.min_max_field!r}")
        print(f"[cfg] pressure threshold: {thresholds.pressure_threshold}")
        print(f"[INFO] opening {path}")

    total = count_lines(path)
    if verbose:
        print(f"[INFO] found {total} datapoints")

    t_start = time.perf_counter()
    dataset = aggregate(
        iter_lines(path),
        thresholds,
        total_lines=total,
        progress=_progress_printer("analyzing") if verbose else None,
    )
    if verbose:
        elapsed_ms = (time.perf_counter() - t_start) * 1000.0
        print(f"[INFO] analyzed the data in {elapsed_ms:.0f}ms: {len(dataset)} cycle(s)")
    return dataset


def run_pipeline(path: Path, cfg: dict, out_root: Path, now: datetime | None = None) -> Path:
    """
    Analyze ``path`` and write output-<stamp>.trd (+ optional csv/mat report and plot) under out_root.
    A FatalParseError propagates before anything is written.
    """
    dataset = analyze_file(path, cfg)

    out_trd = write_trd(dataset, output_path(out_root, now))
    print(f"[OK] wrote {len(dataset)} cycle(s) → {out_trd}")

    rep = cfg.get("reports", {}) or {}
    fmt = str(rep.get("format", "trd")).lower()
    write_report(dataset, out_trd.with_suffix(""), path.name,
                 fmt=fmt, mat_variable=str(rep.get("mat_variable", "cycles")))

    if bool((cfg.get("plots", {}) or {}).get("enabled", False)):
        field_label = threshold_config_from(cfg).min_max_field
        save_cycle_plot(dataset, out_trd.with_suffix(".png"), field_label, f" ({path.name})")

    return out_trd
