import pathlib
import sys
import unittest

import numpy as np

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from cartlab.analysis.signals import compute_phases, generate_trial_signals  # noqa: E402
from cartlab.core.models import Interval  # noqa: E402
from cartlab.physics.model import compute_physics  # noqa: E402


class TrialSignalsTest(unittest.TestCase):
    def setUp(self):
        self.moved = compute_physics("cart_only", "low", 0.1)
        self.stuck = compute_physics("cart_plus_pad", "high", 0.1)

    def test_sample_grid(self):
        signals = generate_trial_signals(self.moved, noise_enabled=False, seed=1)

        self.assertEqual(len(signals), 271)
        self.assertEqual(signals.force_n.shape, signals.times_s.shape)
        self.assertEqual(signals.velocity_mps.shape, signals.times_s.shape)
        self.assertTrue(np.all(np.diff(signals.times_s) > 0))
        self.assertAlmostEqual(signals.duration_s, 4.5)

    def test_same_seed_is_repeatable(self):
        a = generate_trial_signals(self.moved, noise_enabled=True, seed=4105)
        b = generate_trial_signals(self.moved, noise_enabled=True, seed=4105)

        np.testing.assert_array_equal(a.force_n, b.force_n)
        np.testing.assert_array_equal(a.velocity_mps, b.velocity_mps)

    def test_noise_depends_on_seed(self):
        a = generate_trial_signals(self.moved, noise_enabled=True, seed=1)
        b = generate_trial_signals(self.moved, noise_enabled=True, seed=2)

        self.assertFalse(np.array_equal(a.force_n, b.force_n))

    def test_noise_free_output_ignores_seed(self):
        a = generate_trial_signals(self.moved, noise_enabled=False, seed=1)
        b = generate_trial_signals(self.moved, noise_enabled=False, seed=999)

        np.testing.assert_array_equal(a.force_n, b.force_n)
        np.testing.assert_array_equal(a.velocity_mps, b.velocity_mps)

    def test_phase_ordering(self):
        for physics in (self.moved, self.stuck):
            p = compute_phases(physics)
            self.assertLessEqual(p.initial_start_s, p.accel_start_s)
            self.assertLessEqual(p.accel_start_s, p.accel_end_s)
            self.assertLessEqual(p.accel_end_s, p.stop_end_s)

    def test_moved_phases_are_strictly_increasing(self):
        self.assertTrue(self.moved.moved)
        for preset in ("low", "medium", "high"):
            for mass in (0.1, 0.3, 0.6):
                physics = compute_physics("cart_only", preset, mass)
                if not physics.moved:
                    continue
                p = compute_phases(physics)
                self.assertLess(p.initial_start_s, p.accel_start_s)
                self.assertLess(p.accel_start_s, p.accel_end_s)
                self.assertLess(p.accel_end_s, p.stop_end_s)

    def test_motion_window_matches_acceleration_phase(self):
        signals = generate_trial_signals(self.moved, noise_enabled=False, seed=1)

        self.assertEqual(
            signals.motion_window,
            Interval(signals.phases.accel_start_s, signals.phases.accel_end_s),
        )
        self.assertAlmostEqual(signals.phases.accel_start_s, 0.7)
        self.assertAlmostEqual(signals.phases.accel_end_s, 1.8)

    def test_no_motion_has_no_window(self):
        signals = generate_trial_signals(self.stuck, noise_enabled=True, seed=3)

        self.assertIsNone(signals.motion_window)
        self.assertEqual(signals.phases.accel_start_s, signals.phases.accel_end_s)

    def test_constant_acceleration_in_linear_segment(self):
        signals = generate_trial_signals(self.moved, noise_enabled=False, seed=1)
        mask = (signals.times_s >= 0.9) & (signals.times_s <= 1.6)

        slope = np.polyfit(signals.times_s[mask], signals.velocity_mps[mask], 1)[0]
        self.assertAlmostEqual(slope, self.moved.acceleration_mps2, places=6)

    def test_arrays_are_read_only(self):
        signals = generate_trial_signals(self.moved, noise_enabled=False, seed=1)

        with self.assertRaises(ValueError):
            signals.force_n[0] = 1.0

    def test_rejects_non_positive_rate(self):
        with self.assertRaises(ValueError):
            generate_trial_signals(self.moved, noise_enabled=False, seed=1, sample_rate_hz=0)


if __name__ == "__main__":
    unittest.main()
