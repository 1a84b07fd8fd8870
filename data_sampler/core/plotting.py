# data_sampler/core/plotting.py
from __future__ import annotations
from pathlib import Path
import matplotlib.pyplot as plt

from .reports import dataset_frame
from .model import Dataset

def save_cycle_plot(dataset: Dataset, out_path: Path, field_label: str, title_suffix: str = "") -> Path | None:
    """
    Two stacked panels: per-cycle min/max band of the tracked field, and cycle length in samples.
    Returns the PNG path, or None when there is nothing to draw.
    """
    df = dataset_frame(dataset).dropna(subset=["min", "max"])
    if df.empty:
        print(f"[INFO] no committed cycles{title_suffix}; skipping cycle plot.")
        return None
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig, (ax_ext, ax_len) = plt.subplots(2, 1, figsize=(11, 6), sharex=True)
    x = df["cycle"].to_numpy()
    ax_ext.fill_between(x, df["min"].to_numpy(), df["max"].to_numpy(), alpha=0.25, step="mid")
    ax_ext.plot(x, df["max"].to_numpy(), label="max")
    ax_ext.plot(x, df["min"].to_numpy(), label="min")
    ax_ext.set_ylabel(field_label)
    ax_ext.set_title(f"Cycle extrema{title_suffix}")
    ax_ext.grid(True, alpha=0.3)
    ax_ext.legend(fontsize=8, loc="upper right")

    ax_len.plot(x, df["cycles"].to_numpy(), marker=".", linestyle="-")
    ax_len.set_xlabel("Cycle")
    ax_len.set_ylabel("Samples per cycle")
    ax_len.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
    plt.close(fig)
    print(f"[OK] {len(df)} cycles → {out_path}")
    return out_path
