import unittest

import numpy as np

from data_sampler.core.aggregate import (
    ARMED,
    COUNTER_RESET,
    SEEKING,
    CycleAggregator,
    aggregate,
    is_crossing,
)
from data_sampler.core.errors import MalformedValueError, MissingFieldError
from data_sampler.core.model import ThresholdConfig

CFG = ThresholdConfig(
    pressure_field="F_pri_pressure_bar",
    displacement_field="Displacement_A_mm",
    min_max_field="Force_kN",
    pressure_threshold=101.0,
)


def _line(pressure, displacement, force) -> str:
    return (f"F_pri_pressure_bar;{pressure};Displacement_A_mm;{displacement};"
            f"Force_kN;{force}\n")


def _preamble(n_idle: int = 3, start_disp: float = 2.5) -> list[str]:
    """Idle lines below the pressure threshold, then one arming line."""
    lines = [_line(50.0 + i, 1.0, 0.0) for i in range(n_idle)]
    lines.append(_line(105.0, start_disp, 0.0))
    return lines


def _block(n_pos: int, n_neg: int, force=lambda k: 1.0) -> list[str]:
    """n_pos positive displacement samples followed by n_neg negative ones."""
    out = [_line(110.0, 1.0 + 0.001 * k, force(k)) for k in range(n_pos)]
    out += [_line(110.0, -1.0 - 0.001 * k, force(n_pos + k)) for k in range(n_neg)]
    return out


class CrossingRuleTests(unittest.TestCase):
    def test_sign_convention(self):
        self.assertTrue(is_crossing(np.float32(1.0), np.float32(-1.0)))
        self.assertTrue(is_crossing(np.float32(0.0), np.float32(-0.5)))
        self.assertTrue(is_crossing(np.float32(0.5), np.float32(-0.0)))
        self.assertFalse(is_crossing(np.float32(-1.0), np.float32(-2.0)))
        self.assertFalse(is_crossing(np.float32(-1.0), np.float32(1.0)))
        self.assertFalse(is_crossing(np.float32(1.0), np.float32(0.0)))


class StateMachineTests(unittest.TestCase):
    def test_pressure_gate_arms_once(self):
        agg = CycleAggregator(CFG)
        agg.feed(_line(101.0, 1.0, 0.0), 1)   # equal is not above
        self.assertEqual(SEEKING, agg.state)
        agg.feed(_line(105.0, 2.5, 0.0), 2)
        self.assertEqual(ARMED, agg.state)
        self.assertEqual(np.float32(2.5), agg.last)
        # once armed, pressure is no longer consulted
        agg.feed("Displacement_A_mm;2.0;Force_kN;1.0\n", 3)
        self.assertEqual(ARMED, agg.state)

    def test_seeking_ignores_displacement_below_threshold(self):
        agg = CycleAggregator(CFG)
        agg.feed("F_pri_pressure_bar;20;Force_kN;1\n", 1)
        self.assertEqual(SEEKING, agg.state)

    def test_arming_line_is_not_accumulated(self):
        agg = CycleAggregator(CFG)
        agg.feed(_line(105.0, 2.5, 42.0), 1)
        self.assertTrue(agg.extremum.is_empty)
        self.assertEqual(1, agg.counter)

    def test_counter_increments_per_armed_line(self):
        agg = CycleAggregator(CFG)
        for n, line in enumerate(_preamble() + _block(5, 0), start=1):
            agg.feed(line, n)
        self.assertEqual(6, agg.counter)

    def test_commit_resets_counter_and_extremum(self):
        agg = CycleAggregator(CFG)
        lines = _preamble() + _block(160, 1)
        committed = None
        for n, line in enumerate(lines, start=1):
            entry = agg.feed(line, n)
            if entry is not None:
                committed = entry
        self.assertIsNotNone(committed)
        self.assertEqual(161, committed.samples)
        self.assertEqual(COUNTER_RESET, agg.counter)
        self.assertEqual(3, agg.counter)
        self.assertTrue(agg.extremum.is_empty)
        self.assertIsNot(committed.extremum, agg.extremum)

        agg.feed(_line(110.0, -3.0, 7.0), len(lines) + 1)
        self.assertEqual(4, agg.counter)
        self.assertEqual((np.float32(7.0), np.float32(7.0)), agg.extremum.bounds())
        # committed cycle is untouched by later samples
        self.assertEqual((np.float32(1.0), np.float32(1.0)), committed.extremum.bounds())

    def test_boundary_150_is_noise_151_commits(self):
        # first cycle: samples = n_pos + 1
        for n_pos, expected in ((149, 0), (150, 1)):
            with self.subTest(n_pos=n_pos):
                ds = aggregate(_preamble() + _block(n_pos, 2), CFG)
                self.assertEqual(expected, len(ds))
                if ds:
                    self.assertEqual(151, ds[1].samples)


class ScenarioTests(unittest.TestCase):
    def test_long_ramp_commits_one_cycle(self):
        lines = _preamble(n_idle=5, start_disp=2.5)
        n_armed = 200
        n_positive = 160
        for k in range(1, n_armed + 1):
            if k <= n_positive:
                disp = 2.4 * (n_positive - k) / (n_positive - 1)    # 2.4 ... 0.0
            else:
                disp = -2.0 * (k - n_positive) / (n_armed - n_positive)  # -0.05 ... -2.0
            force = -1.0 if k % 2 else 3.0
            lines.append(_line(110.0, disp, force))

        ds = aggregate(lines, CFG)

        self.assertEqual([1], list(ds))
        entry = ds[1]
        self.assertEqual(1, entry.index)
        # armed lines processed up to and including the first negative sample
        self.assertEqual(n_positive + 1, entry.samples)
        self.assertEqual((np.float32(-1.0), np.float32(3.0)), entry.extremum.bounds())

    def test_short_crossing_is_discarded(self):
        agg = CycleAggregator(CFG)
        lines = _preamble() + _block(10, 1, force=lambda k: 5.0 + k)
        for n, line in enumerate(lines, start=1):
            self.assertIsNone(agg.feed(line, n))
        self.assertEqual({}, agg.dataset)
        self.assertEqual(1, agg.discarded)
        self.assertTrue(agg.extremum.is_empty)
        self.assertEqual(3, agg.counter)

        agg.feed(_line(110.0, -1.5, -8.0), len(lines) + 1)
        self.assertEqual((np.float32(-8.0), np.float32(-8.0)), agg.extremum.bounds())

    def test_missing_pressure_while_seeking(self):
        lines = [
            _line(20.0, 1.0, 0.0),
            "Displacement_A_mm;1.0;Force_kN;0.0\n",
            _line(105.0, 2.5, 0.0),
        ]
        with self.assertRaises(MissingFieldError) as ctx:
            aggregate(lines, CFG)
        self.assertEqual(2, ctx.exception.line_number)
        self.assertEqual("F_pri_pressure_bar", ctx.exception.field)

    def test_bad_tracked_value_aborts_run(self):
        lines = _preamble() + _block(200, 2)
        lines.append(_line(110.0, 1.0, "oops"))
        lines += _block(200, 2)
        with self.assertRaises(MalformedValueError) as ctx:
            aggregate(lines, CFG)
        self.assertEqual(len(_preamble()) + 203, ctx.exception.line_number)

    def test_indices_are_contiguous_and_noise_never_leaks(self):
        lines = _preamble()
        lines += _block(200, 5)
        lines += _block(20, 5, force=lambda k: 99.0 if k <= 20 else 1.0)  # outlier up to the noise crossing
        lines += _block(160, 5)
        lines += _block(10, 5)
        lines += _block(170, 5)

        ds = aggregate(lines, CFG)

        self.assertEqual([1, 2, 3], sorted(ds))
        self.assertEqual([201, 167, 177], [ds[k].samples for k in sorted(ds)])
        for entry in ds.values():
            self.assertGreater(entry.samples, 150)
            self.assertEqual(np.float32(1.0), entry.extremum.max)

    def test_open_cycle_at_end_is_dropped(self):
        ds = aggregate(_preamble() + _block(160, 1) + _block(400, 0), CFG)
        self.assertEqual(1, len(ds))

    def test_never_armed_gives_empty_dataset(self):
        self.assertEqual({}, aggregate([_line(10.0, 1.0, 0.0)] * 30, CFG))
        self.assertEqual({}, aggregate([], CFG))


class ProgressTests(unittest.TestCase):
    def test_progress_cadence_and_final_call(self):
        lines = _preamble(n_idle=0) + _block(99, 0)
        calls = []
        aggregate(lines, CFG, total_lines=len(lines), progress=lambda i, t: calls.append((i, t)))
        self.assertEqual((100, 100), calls[-1])
        self.assertTrue(all(i % 5 == 0 for i, _ in calls[:-1]))
        self.assertGreater(len(calls), 1)

    def test_tiny_input_does_not_divide_by_zero(self):
        lines = _preamble(n_idle=0) + _block(3, 0)
        calls = []
        aggregate(lines, CFG, total_lines=len(lines), progress=lambda i, t: calls.append(i))
        self.assertEqual([1, 2, 3, 4], calls)


if __name__ == "__main__":
    unittest.main()
