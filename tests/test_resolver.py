"""
Unit tests for the spin resolver
"""
import random
import unittest
from collections import Counter

from src.models.wheel_item import WheelItem
from src.wheel.geometry import landed_index, sector_angle
from src.wheel.resolver import forward_delta, resolve_spin, target_resting_angle


class FixedRandom:
    """rng returning preset values"""

    def __init__(self, index=0, fraction=0.5):
        self.index = index
        self.fraction = fraction

    def randint(self, low, high):
        return low

    def randrange(self, stop):
        return self.index

    def random(self):
        return self.fraction


def make_items(count):
    return [WheelItem(id=f"i{i}", name=f"Item {i}") for i in range(count)]


class TestAngles(unittest.TestCase):

    def test_target_resting_angle(self):
        self.assertEqual(target_resting_angle(0, 4), 315.0)
        self.assertEqual(target_resting_angle(1, 4), 225.0)
        self.assertEqual(target_resting_angle(0, 1), 180.0)

    def test_forward_delta(self):
        self.assertAlmostEqual(forward_delta(350, 10), 20)
        self.assertAlmostEqual(forward_delta(10, 350), 340)
        self.assertEqual(forward_delta(720, 0), 0)

    def test_forward_delta_range(self):
        rng = random.Random(5)
        for _ in range(500):
            delta = forward_delta(rng.uniform(0, 10000), rng.uniform(0, 360))
            self.assertGreaterEqual(delta, 0)
            self.assertLess(delta, 360)


class TestResolveSpin(unittest.TestCase):

    def test_empty_items(self):
        with self.assertRaises(ValueError):
            resolve_spin(0, [])

    def test_invalid_parameters(self):
        items = make_items(3)
        with self.assertRaises(ValueError):
            resolve_spin(0, items, jitter_fraction=1.0)
        with self.assertRaises(ValueError):
            resolve_spin(0, items, full_turns_range=(5, 3))

    def test_single_item(self):
        """One item is always selected"""
        items = make_items(1)
        rng = random.Random(1)
        for _ in range(50):
            resolution = resolve_spin(rng.uniform(0, 3600), items, rng=rng)
            self.assertEqual(resolution.index, 0)
            self.assertIs(resolution.item, items[0])

    def test_fixed_draws(self):
        items = make_items(4)
        resolution = resolve_spin(0, items, rng=FixedRandom(index=1))
        self.assertEqual(resolution.item.id, "i1")
        self.assertEqual(resolution.full_turns, 3)
        self.assertEqual(resolution.jitter, 0)
        self.assertEqual(resolution.angular_delta, 225.0)
        self.assertEqual(resolution.total_delta, 3 * 360 + 225.0)

    def test_jitter_bounds(self):
        items = make_items(5)
        s = sector_angle(5)
        low = resolve_spin(0, items, rng=FixedRandom(fraction=0.0)).jitter
        high = resolve_spin(0, items, rng=FixedRandom(fraction=0.999999)).jitter
        self.assertAlmostEqual(low, -0.2 * s)
        self.assertLess(high, 0.2 * s)

    def test_uniform_selection(self):
        """Every sector wins about equally often"""
        items = make_items(4)
        rng = random.Random(123)
        counts = Counter(resolve_spin(0, items, rng=rng).index for _ in range(4000))
        self.assertEqual(set(counts), {0, 1, 2, 3})
        for index in range(4):
            self.assertGreater(counts[index], 850)
            self.assertLess(counts[index], 1150)

    def test_forward_and_landing(self):
        """Rotation only moves forward and lands on the resolved item"""
        rng = random.Random(99)
        for count in (1, 2, 5, 9):
            items = make_items(count)
            rotation = 0.0
            for _ in range(30):
                resolution = resolve_spin(rotation, items, rng=rng)
                self.assertGreater(resolution.total_delta, 0)
                self.assertGreaterEqual(resolution.full_turns, 3)
                self.assertLessEqual(resolution.full_turns, 5)
                rotation += resolution.total_delta
                self.assertEqual(landed_index(rotation, count), resolution.index)


if __name__ == '__main__':
    unittest.main()
