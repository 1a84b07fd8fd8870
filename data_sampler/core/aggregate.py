# data_sampler/core/aggregate.py
from __future__ import annotations
import logging
from typing import Callable, Iterable
import numpy as np

from .model import CycleEntry, Dataset, Extremum, ThresholdConfig
from .record import Record

# ----- cycle rules -----
MIN_CYCLE_SAMPLES: int = 150      # a crossing closes a real cycle only when counter > this
COUNTER_START: int = 1
COUNTER_RESET: int = 3            # counter value right after any crossing
PROGRESS_STEPS: int = 20

SEEKING = "seeking"
ARMED = "armed"

ProgressFn = Callable[[int, int], None]

_LOG = logging.getLogger(__name__)


def is_crossing(last, current) -> bool:
    """Non-negative -> negative by sign bit, so +0.0 counts as positive and -0.0 as negative."""
    return (not np.signbit(last)) and bool(np.signbit(current))


class CycleAggregator:
    """
    Zero-crossing state machine over parsed lines.

    Seeking: wait for the first line with pressure above the threshold, take its
    displacement as the baseline and arm. Armed: every line feeds the tracked field
    into the running extremum; a positive->negative displacement crossing closes the
    cycle, which is committed only when the counter exceeds MIN_CYCLE_SAMPLES.
    A cycle still open at end of stream is never emitted.
    """

    def __init__(self, config: ThresholdConfig):
        self.config = config
        self.last: np.float32 | None = None
        self.counter: int = COUNTER_START
        self.extremum = Extremum()
        self.dataset: Dataset = {}
        self.discarded: int = 0

    @property
    def state(self) -> str:
        return SEEKING if self.last is None else ARMED

    def feed(self, line: str, line_number: int | None = None) -> CycleEntry | None:
        """Process one line; returns the entry committed by this line, if any."""
        record = Record.from_line(line, line_number)
        if self.last is None:
            self._seek(record)
            return None
        return self._accumulate(record)

    def _seek(self, record: Record) -> None:
        cfg = self.config
        pressure = record.get(cfg.pressure_field)
        if pressure > cfg.pressure_threshold:
            self.last = record.get(cfg.displacement_field)
            _LOG.debug("armed at line %s (pressure=%s, displacement=%s)",
                       record.line_number, pressure, self.last)

    def _accumulate(self, record: Record) -> CycleEntry | None:
        cfg = self.config
        current = record.get(cfg.displacement_field)
        value = record.get(cfg.min_max_field)
        self.extremum.observe(value)

        committed = None
        if is_crossing(self.last, current):
            if self.counter > MIN_CYCLE_SAMPLES:
                index = len(self.dataset) + 1
                committed = CycleEntry(index=index, extremum=self.extremum, samples=self.counter)
                self.dataset[index] = committed
                _LOG.debug("cycle %d committed at line %s (%d samples)",
                           index, record.line_number, self.counter)
            else:
                self.discarded += 1
                _LOG.debug("noise cycle discarded at line %s (%d samples)",
                           record.line_number, self.counter)
            # short cycles drop their extremum as well
            self.extremum = Extremum()
            self.counter = COUNTER_RESET
        else:
            self.counter += 1

        self.last = current
        return committed


def aggregate(lines: Iterable[str],
              config: ThresholdConfig | None = None,
              *,
              total_lines: int | None = None,
              progress: ProgressFn | None = None) -> Dataset:
    """
    Single pass over ``lines`` -> Dataset keyed 1..N.

    Any missing/malformed field raises a FatalParseError subclass with the 1-based
    line number; nothing is returned in that case.
    ``progress(i, total)`` is called every ``total_lines // 20`` armed lines and at the end.
    """
    agg = CycleAggregator(config or ThresholdConfig())
    step = max(1, (total_lines or 0) // PROGRESS_STEPS)

    n = 0
    for i, line in enumerate(lines):
        n = i + 1
        was_armed = agg.state == ARMED
        agg.feed(line, line_number=n)
        if progress is not None and total_lines and was_armed and i % step == 0:
            progress(i, total_lines)

    if progress is not None:
        progress(total_lines or n, total_lines or n)

    _LOG.debug("aggregated %d lines: %d cycles committed, %d discarded",
               n, len(agg.dataset), agg.discarded)
    return agg.dataset
