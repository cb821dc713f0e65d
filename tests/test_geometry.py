"""
Unit tests for the sector geometry
"""
import unittest

from src.models.wheel_item import WheelItem
from src.wheel.geometry import (
    label_font_size,
    label_placement,
    landed_index,
    midpoint_angle,
    sector_angle,
    sector_bounds,
    sector_color,
    sector_path,
    wheel_layout,
)
from src.wheel.resolver import target_resting_angle


class TestSectors(unittest.TestCase):
    """Angles of the sectors"""

    def test_sector_angle(self):
        self.assertEqual(sector_angle(4), 90.0)
        self.assertEqual(sector_angle(1), 360.0)

    def test_sector_angle_zero_items(self):
        """Zero items is the caller's problem"""
        with self.assertRaises(ValueError):
            sector_angle(0)

    def test_first_sector_starts_at_pointer(self):
        self.assertEqual(sector_bounds(0, 4), (-90.0, 0.0))
        self.assertEqual(sector_bounds(3, 4), (180.0, 270.0))

    def test_midpoint(self):
        self.assertEqual(midpoint_angle(0, 4), -45.0)
        self.assertEqual(midpoint_angle(1, 4), 45.0)


class TestLabels(unittest.TestCase):
    """Label placement and sizing"""

    def test_label_upper_half_not_flipped(self):
        x, y, rotation = label_placement(0, 4, radius=100)
        self.assertEqual(rotation, -45.0)
        self.assertGreater(x, 0)
        self.assertLess(y, 0)

    def test_label_lower_half_flipped(self):
        x, y, rotation = label_placement(1, 4, radius=100)
        self.assertEqual(rotation, 225.0)
        self.assertGreater(y, 0)

    def test_font_size_thresholds(self):
        self.assertEqual(label_font_size(6), 10)
        self.assertEqual(label_font_size(7), 8)
        self.assertEqual(label_font_size(10), 8)
        self.assertEqual(label_font_size(11), 7)

    def test_short_label(self):
        item = WheelItem(id="x", name="Hammer of the Ancients")
        self.assertEqual(item.short_label(), "Hammer of ...")
        self.assertEqual(WheelItem(id="y", name="Frozen Orb").short_label(), "Frozen Orb")


class TestColorsAndPaths(unittest.TestCase):

    def test_explicit_color_wins(self):
        item = WheelItem(id="a", name="A", color="#123456")
        self.assertEqual(sector_color(2, 4, item), "#123456")

    def test_generated_hue(self):
        self.assertEqual(sector_color(1, 4), "hsl(90, 60%, 40%)")
        self.assertEqual(sector_color(0, 3, WheelItem(id="a", name="A")), "hsl(0, 60%, 40%)")

    def test_large_arc_flag(self):
        self.assertIn(" 0 1 1 ", sector_path(0, 1))
        self.assertIn(" 0 0 1 ", sector_path(0, 2))
        self.assertTrue(sector_path(0, 3).startswith("M 0 0 L "))

    def test_layout(self):
        items = [WheelItem(id=str(i), name=f"Item {i}") for i in range(3)]
        layout = wheel_layout(items)
        self.assertEqual([sector['id'] for sector in layout], ["0", "1", "2"])
        self.assertEqual(layout[0]['start_angle'], -90.0)
        self.assertEqual(layout[2]['end_angle'], 270.0)
        self.assertTrue(all(sector['path'] for sector in layout))

    def test_layout_single_and_empty(self):
        """A single item is a full disc, an empty wheel has no sectors"""
        layout = wheel_layout([WheelItem(id="a", name="A")])
        self.assertEqual(len(layout), 1)
        self.assertIsNone(layout[0]['path'])
        self.assertEqual(wheel_layout([]), [])


class TestLandedIndex(unittest.TestCase):

    def test_resting_angle_lands_on_sector(self):
        for count in (1, 2, 3, 7, 12):
            for index in range(count):
                rotation = target_resting_angle(index, count)
                self.assertEqual(landed_index(rotation, count), index)
                # Extra full turns change nothing
                self.assertEqual(landed_index(rotation + 5 * 360, count), index)

    def test_no_rotation(self):
        self.assertEqual(landed_index(0, 4), 0)
        self.assertEqual(landed_index(1, 4), 3)


if __name__ == '__main__':
    unittest.main()
