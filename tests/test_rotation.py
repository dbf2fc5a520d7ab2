import random
import unittest

from prizewheel.angles import angular_distance, forward_delta, normalize_angle
from prizewheel.constants import DEFAULT_MIN_FULL_TURNS
from prizewheel.errors import AlignmentValidationFailed
from prizewheel.rotation import RotationSolver, extra_turns, landing_angle, solve, verify_alignment
from prizewheel.segments import center_angle, sector_bounds, sector_width


class TestAngles(unittest.TestCase):
    def test_normalize(self):
        self.assertEqual(normalize_angle(0), 0)
        self.assertEqual(normalize_angle(360), 0)
        self.assertEqual(normalize_angle(-90), 270)
        self.assertEqual(normalize_angle(725), 5)
        self.assertEqual(normalize_angle(-1e-20), 0)

    def test_angular_distance_wraps(self):
        self.assertAlmostEqual(angular_distance(359.9995, 0), 0.0005, places=6)
        self.assertEqual(angular_distance(90, 270), 180)

    def test_forward_delta(self):
        self.assertEqual(forward_delta(350, 10), 20)
        self.assertEqual(forward_delta(10, 350), 340)
        self.assertEqual(forward_delta(45, 45), 0)


class TestGeometry(unittest.TestCase):
    def test_sector_layout(self):
        self.assertEqual(sector_width(12), 30)
        self.assertEqual(sector_bounds(2, 12), (60, 90))
        self.assertEqual(center_angle(0, 12), 15)
        self.assertEqual(center_angle(11, 12), 345)
        self.assertEqual(center_angle(0, 1), 180)

    def test_center_angle_range(self):
        with self.assertRaises(ValueError):
            center_angle(12, 12)
        with self.assertRaises(ValueError):
            center_angle(-1, 12)


class TestSolve(unittest.TestCase):
    def assertAligned(self, target, index, count, pointer):
        landed = landing_angle(target, index, count)
        self.assertLessEqual(angular_distance(landed, pointer), 1e-3)

    def test_round_trip_over_segments_and_rotations(self):
        rng = random.Random(11)
        for count in (1, 3, 8, 12, 37):
            for index in range(count):
                for current in (0.0, 12.5, -45.0, 359.999, 123456.789, rng.uniform(0, 1e5)):
                    for pointer in (0.0, 90.0, 270.0, -30.0, 255.0):
                        target = solve(index, count, current, pointer, min_full_turns=1)
                        self.assertGreater(target, current)
                        self.assertAligned(target, index, count, pointer)

    def test_spin_ten_scenario(self):
        # segment 9 of 12: center 285, pointer at 90
        c = center_angle(9, 12)
        target = solve(9, 12, 0.0, 90.0, min_full_turns=8)
        self.assertAlmostEqual(normalize_angle(target), normalize_angle(90 - c), places=6)
        self.assertGreaterEqual(target, 8 * 360)
        self.assertAlmostEqual(target, 8 * 360 + 165)

    def test_already_aligned_still_turns(self):
        current = solve(4, 12, 0.0, 270.0, min_full_turns=1)
        target = solve(4, 12, current, 270.0, min_full_turns=1)
        self.assertAlmostEqual(target - current, 360.0)

    def test_jitter_adds_whole_turns(self):
        rng = random.Random(5)
        spans = set()
        for _ in range(100):
            turns = extra_turns(8, 8, rng)
            self.assertTrue(8 <= turns <= 16)
            spans.add(turns)
            target = solve(3, 12, 100.0, 270.0, 8, 8.7, rng)
            self.assertAligned(target, 3, 12, 270.0)
        self.assertGreater(len(spans), 1)

    def test_no_jitter_is_fixed(self):
        self.assertEqual(extra_turns(8, 0), 8)
        self.assertEqual(extra_turns(8, 0.9), 8)

    def test_bad_inputs(self):
        with self.assertRaises(ValueError):
            solve(0, 12, 0.0, 90.0, min_full_turns=0)
        with self.assertRaises(ValueError):
            solve(0, 12, 0.0, 90.0, turn_jitter_range=-1)
        with self.assertRaises(ValueError):
            solve(12, 12, 0.0, 90.0)
        with self.assertRaises(ValueError):
            solve(0, 12, float("nan"), 90.0)
        with self.assertRaises(ValueError):
            solve(0, 12, 0.0, float("inf"))


class TestVerifyAlignment(unittest.TestCase):
    def test_accepts_within_tolerance(self):
        target = solve(2, 12, 0.0, 270.0)
        self.assertLessEqual(verify_alignment(target + 0.0005, 2, 12, 270.0), 1e-3)

    def test_rejects_misaligned(self):
        target = solve(2, 12, 0.0, 270.0)
        with self.assertRaises(AlignmentValidationFailed) as ctx:
            verify_alignment(target + 15.0, 2, 12, 270.0)
        self.assertEqual(ctx.exception.segment_index, 2)
        self.assertEqual(ctx.exception.pointer_angle, 270.0)

    def test_rejects_mirrored_convention(self):
        # measuring the landing as (target - C) instead of (target + C) misses the pointer
        target = solve(1, 12, 0.0, 90.0)
        mirrored = normalize_angle(target - center_angle(1, 12))
        self.assertGreater(angular_distance(mirrored, 90.0), 1e-3)


class TestRotationSolver(unittest.TestCase):
    def test_binds_geometry(self):
        solver = RotationSolver(12, 270.0, min_full_turns=2)
        current = 0.0
        for index in (0, 5, 11, 5):
            target = solver.solve(index, current)
            solver.verify(target, index)
            self.assertGreaterEqual(target - current, 2 * 360)
            current = target

    def test_default_turns_follow_settings(self):
        solver = RotationSolver(12, 270.0)
        self.assertEqual(solver.min_full_turns, DEFAULT_MIN_FULL_TURNS)
        self.assertGreaterEqual(solver.solve(3, 0.0), DEFAULT_MIN_FULL_TURNS * 360)


if __name__ == "__main__":
    unittest.main()
