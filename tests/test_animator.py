"""
Unit tests for the spin animator
"""
import random
import unittest

from src.models.wheel_item import WheelItem
from src.wheel.animator import WheelAnimator
from src.wheel.errors import SpinInProgressError
from src.wheel.geometry import landed_index
from tests.support import ManualLoop


def make_items(count):
    return [WheelItem(id=f"i{i}", name=f"Item {i}") for i in range(count)]


class TestWheelAnimator(unittest.TestCase):

    def setUp(self):
        self.loop = ManualLoop()
        self.completed = []
        self.ticks = []
        self.wheel = WheelAnimator(
            "test",
            make_items(5),
            on_complete=self.completed.append,
            on_tick=lambda index, count: self.ticks.append((index, count)),
            duration=4.0,
            rng=random.Random(7),
            loop=self.loop,
        )

    def test_zero_items_rejected(self):
        """A spin on an empty wheel does nothing"""
        wheel = WheelAnimator("empty", [], on_complete=self.completed.append, loop=self.loop)
        self.assertIsNone(wheel.spin())
        self.assertFalse(wheel.is_spinning)
        self.assertEqual(wheel.rotation, 0)
        self.assertEqual(self.loop.pending(), 0)

    def test_spin_lifecycle(self):
        resolution = self.wheel.spin()
        self.assertIsNotNone(resolution)
        self.assertTrue(self.wheel.is_spinning)
        self.assertIsNone(self.wheel.selected_item)
        self.assertEqual(self.wheel.rotation, resolution.total_delta)

        self.loop.advance(3.9)
        self.assertTrue(self.wheel.is_spinning)
        self.assertEqual(self.completed, [])

        self.loop.advance(0.2)
        self.assertFalse(self.wheel.is_spinning)
        self.assertEqual(self.completed, [resolution.item])
        self.assertEqual(self.wheel.selected_item, resolution.item)

    def test_ticks_before_completion(self):
        """Every tick fires, and all of them fire before the result"""
        events = []
        self.wheel.on_tick = lambda index, count: events.append(("tick", index, count))
        self.wheel.on_complete = lambda item: events.append(("done", item.id))
        self.wheel.spin()
        self.loop.run_all()

        self.assertEqual(events[-1][0], "done")
        ticks = events[:-1]
        self.assertTrue(20 <= len(ticks) <= 30)
        self.assertEqual([tick[1] for tick in ticks], list(range(len(ticks))))
        self.assertTrue(all(tick[2] == len(ticks) for tick in ticks))
        self.assertEqual(self.wheel.state.ticks_emitted, len(ticks))

    def test_no_concurrent_spins(self):
        first = self.wheel.spin()
        rotation = self.wheel.rotation
        self.assertIsNone(self.wheel.spin())
        self.assertEqual(self.wheel.rotation, rotation)

        self.loop.run_all()
        self.assertEqual(self.completed, [first.item])

    def test_landing_consistency(self):
        """The pointer ends up over the reported item, spin after spin"""
        items = self.wheel.items
        previous = 0.0
        for _ in range(10):
            self.wheel.spin()
            self.loop.run_all()
            self.assertGreater(self.wheel.rotation, previous)
            previous = self.wheel.rotation
            index = landed_index(self.wheel.rotation, len(items))
            self.assertEqual(items[index], self.wheel.selected_item)
        self.assertEqual(len(self.completed), 10)

    def test_reset_idempotent(self):
        self.wheel.reset()
        self.wheel.reset()
        self.assertEqual(self.wheel.rotation, 0)
        self.assertFalse(self.wheel.is_spinning)

        self.wheel.spin()
        self.loop.advance(1.0)
        self.wheel.reset()
        self.wheel.reset()
        self.loop.run_all()

        self.assertEqual(self.completed, [])
        self.assertEqual(self.wheel.rotation, 0)
        self.assertIsNone(self.wheel.selected_item)
        self.assertEqual(self.wheel.state.ticks_emitted, 0)

    def test_reset_cancels_ticks(self):
        """No tick is emitted once the spin is reset"""
        self.wheel.spin()
        self.loop.advance(0.1)
        fired = len(self.ticks)
        self.assertGreater(fired, 0)

        self.wheel.reset()
        self.assertEqual(self.loop.pending(), 0)
        self.loop.run_all()
        self.assertEqual(len(self.ticks), fired)
        self.assertEqual(self.completed, [])

    def test_spin_after_reset(self):
        self.wheel.spin()
        self.loop.advance(2.0)
        self.wheel.reset()

        resolution = self.wheel.spin()
        self.loop.run_all()
        self.assertEqual(self.completed, [resolution.item])

    def test_failing_tick_listener(self):
        """A broken tick listener does not stop the spin"""
        def broken(index, count):
            raise RuntimeError("speaker unplugged")

        self.wheel.on_tick = broken
        with self.assertLogs('src.wheel.animator', level='ERROR'):
            self.wheel.spin()
            self.loop.run_all()
        self.assertEqual(len(self.completed), 1)

    def test_set_items_while_spinning(self):
        self.wheel.spin()
        with self.assertRaises(SpinInProgressError):
            self.wheel.set_items(make_items(2))
        self.loop.run_all()
        self.wheel.set_items(make_items(2))
        self.assertEqual(len(self.wheel.items), 2)

    def test_single_item(self):
        wheel = WheelAnimator("one", make_items(1), on_complete=self.completed.append,
                              rng=random.Random(3), loop=self.loop)
        for _ in range(3):
            wheel.spin()
            self.loop.run_all()
        self.assertEqual([item.id for item in self.completed], ["i0", "i0", "i0"])

    def test_invalid_duration(self):
        with self.assertRaises(ValueError):
            WheelAnimator("bad", duration=0)

    def test_to_dict(self):
        data = self.wheel.to_dict()
        self.assertEqual(data['name'], "test")
        self.assertEqual(data['item_count'], 5)
        self.assertEqual(len(data['sectors']), 5)
        self.assertFalse(data['is_spinning'])


if __name__ == '__main__':
    unittest.main()
