# data_sampler/main.py
from __future__ import annotations
from pathlib import Path
import logging
import sys

from data_sampler.core.config import ensure_config, load_config
from data_sampler.core.errors import FatalParseError
from data_sampler.core.pipeline import run_pipeline
from data_sampler.utils.detect import discover_inputs, select_input

VERSION = "0.1.0"

def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    # ---------- config ----------
    cfg_path = Path(argv[0]) if argv else Path.cwd() / "config.yaml"
    if ensure_config(cfg_path):
        print(f"[cfg] wrote default config: {cfg_path}")
    cfg = load_config(cfg_path)

    log_cfg = cfg.get("logging", {}) or {}
    logging.basicConfig(level=str(log_cfg.get("level", "WARNING")).upper(),
                        format="%(levelname)s %(name)s: %(message)s")
    verbose = bool(log_cfg.get("verbose", True))

    in_path = Path(cfg["input"]["path"]).resolve()
    recurse = bool(cfg["input"].get("recurse", False))
    out_root = Path(cfg["output"]["root"]).resolve()
    out_root.mkdir(parents=True, exist_ok=True)

    if verbose:
        print(f"data-sampler v{VERSION}")
        print(f"[cfg] input={in_path} (recurse={recurse})")
        print(f"[cfg] output={out_root}")

    # ---------- discover ----------
    detected = discover_inputs(in_path, recurse=recurse)
    if not detected:
        print(f"[INFO] No log files found under: {in_path}")
        return 0

    index = cfg["input"].get("index")
    chosen = select_input(detected, index=None if index is None else int(index))
    if chosen is None:
        return 0

    # ---------- analyze ----------
    try:
        run_pipeline(chosen.path, cfg, out_root)
    except FatalParseError as e:
        print(f"[ERROR] {chosen.path.name}: {e}; no output written.")
        return 1

    if verbose:
        print("Done!")
    return 0

if __name__ == "__main__":
    sys.exit(main())
