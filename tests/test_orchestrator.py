"""
Unit tests for the dual-wheel randomizer
"""
import json
import random
import unittest

from src.wheel.errors import InvalidSpinRequest, SpinInProgressError
from src.wheel.orchestrator import BuildRandomizer
from tests.support import ManualLoop, sample_catalog


class RandomizerTestCase(unittest.TestCase):

    def setUp(self):
        self.loop = ManualLoop()
        self.results = []
        self.randomizer = self.make_randomizer()

    def make_randomizer(self, **kwargs):
        options = dict(
            game_id="g1",
            rng=random.Random(11),
            loop=self.loop,
            spin_duration=4.0,
            inter_wheel_delay=0.1,
            on_result=self.results.append,
        )
        options.update(kwargs)
        return BuildRandomizer(sample_catalog(), **options)


class TestItemSets(RandomizerTestCase):

    def test_initial_wheels(self):
        r = self.randomizer
        self.assertEqual([item.id for item in r.class_items()], ["warrior", "mage", "rogue"])
        self.assertEqual(len(r.class_wheel.items), 3)
        # Idle build wheel shows every eligible build
        self.assertEqual(len(r.build_wheel.items), 5)

    def test_builds_scoped_to_class(self):
        items = self.randomizer.skills_for("warrior")
        self.assertEqual([item.id for item in items], ["w1", "w2"])
        self.assertTrue(all(item.group_id == "warrior" for item in items))
        self.assertTrue(all(item.color == "#aa0000" for item in items))
        self.assertEqual(self.randomizer.skills_for("nope"), [])

    def test_class_without_eligible_builds_hidden(self):
        r = self.randomizer
        r.toggle_skill("r1")
        self.assertNotIn("rogue", [item.id for item in r.class_items()])

    def test_difficulty_filter(self):
        r = self.randomizer
        self.assertEqual(r.set_difficulty("easy"), "Easy")
        self.assertEqual([item.id for item in r.class_items()], ["warrior", "mage"])
        self.assertEqual([item.id for item in r.build_wheel.items], ["w1", "m1"])

        self.assertIsNone(r.set_difficulty("all"))
        self.assertEqual(len(r.class_items()), 3)

    def test_invalid_filter_value(self):
        with self.assertRaises(ValueError):
            self.randomizer.set_playstyle("Dancer")

    def test_unknown_ids(self):
        r = self.randomizer
        with self.assertRaises(ValueError):
            r.toggle_class("paladin")
        with self.assertRaises(ValueError):
            r.lock_skill("zz")
        with self.assertRaises(ValueError):
            r.set_game("g9")


class TestDualWheelSpin(RandomizerTestCase):

    def test_class_then_build(self):
        """The build wheel only spins after the class wheel stopped"""
        r = self.randomizer
        finished = []
        r.request_spin(on_finished=finished.append)

        self.assertTrue(r.is_spinning)
        self.assertTrue(r.class_wheel.is_spinning)
        self.assertFalse(r.build_wheel.is_spinning)

        self.loop.advance(4.0)
        selected = r.session.selected_class
        self.assertIsNotNone(selected)
        self.assertFalse(r.class_wheel.is_spinning)
        self.assertFalse(r.build_wheel.is_spinning)
        self.assertTrue(all(item.group_id == selected.id for item in r.build_wheel.items))

        self.loop.advance(0.05)
        self.assertFalse(r.build_wheel.is_spinning)
        self.loop.advance(0.1)
        self.assertTrue(r.build_wheel.is_spinning)

        self.loop.run_all()
        self.assertFalse(r.is_spinning)
        self.assertEqual(len(finished), 1)
        self.assertEqual(self.results, finished)

        record = finished[0]
        self.assertEqual(record['game_id'], "g1")
        self.assertEqual(record['class']['id'], selected.id)
        self.assertEqual(record['skill']['group_id'], selected.id)
        self.assertFalse(record['locked_class'])
        self.assertEqual(r.session.history[0], record)

    def test_many_spins_consistent(self):
        r = self.randomizer
        for _ in range(20):
            r.request_spin()
            self.loop.run_all()
        self.assertEqual(len(self.results), 20)
        for record in self.results:
            self.assertEqual(record['skill']['group_id'], record['class']['id'])

    def test_already_spinning(self):
        r = self.randomizer
        r.request_spin()
        with self.assertRaises(InvalidSpinRequest) as ctx:
            r.request_spin()
        self.assertEqual(ctx.exception.reason, InvalidSpinRequest.ALREADY_SPINNING)
        self.loop.run_all()
        self.assertEqual(len(self.results), 1)

    def test_history_cap(self):
        r = self.make_randomizer(history_limit=2)
        for _ in range(3):
            r.request_spin()
            self.loop.run_all()
        self.assertEqual(len(r.session.history), 2)
        self.assertEqual(r.session.history[0], self.results[-1])
        self.assertEqual(r.session.history[1], self.results[-2])


class TestLocks(RandomizerTestCase):

    def test_locked_class_skips_class_wheel(self):
        r = self.randomizer
        r.lock_class("mage")
        r.request_spin()

        self.assertFalse(r.class_wheel.is_spinning)
        self.assertTrue(r.build_wheel.is_spinning)
        self.assertEqual(r.session.selected_class.id, "mage")

        self.loop.run_all()
        record = self.results[0]
        self.assertEqual(record['class']['id'], "mage")
        self.assertIn(record['skill']['id'], ("m1", "m2"))
        self.assertTrue(record['locked_class'])
        self.assertEqual(r.class_wheel.rotation, 0)

    def test_locked_build_skips_build_wheel(self):
        r = self.randomizer
        r.lock_skill("w2")
        r.request_spin()
        self.assertTrue(r.class_wheel.is_spinning)

        self.loop.run_all()
        record = self.results[0]
        self.assertEqual(record['skill']['id'], "w2")
        self.assertTrue(record['locked_skill'])
        self.assertEqual(r.build_wheel.rotation, 0)
        if record['class']['id'] == "warrior":
            self.assertIsNone(record['skill_class'])
        else:
            self.assertEqual(record['skill_class']['id'], "warrior")

    def test_locked_build_records_its_own_class(self):
        r = self.randomizer
        r.lock_skill("w1")
        r.toggle_class("warrior")
        r.toggle_class("rogue")
        r.request_spin()
        self.loop.run_all()

        record = self.results[0]
        self.assertEqual(record['class']['id'], "mage")
        self.assertEqual(record['skill']['id'], "w1")
        self.assertEqual(record['skill_class'], {
            'id': "warrior", 'name': "Warrior", 'color': "#aa0000", 'group_id': None, 'payload': {},
        })

    def test_all_locked(self):
        r = self.randomizer
        r.lock_class("warrior")
        r.lock_skill("w1")
        with self.assertRaises(InvalidSpinRequest) as ctx:
            r.request_spin()
        self.assertEqual(ctx.exception.reason, InvalidSpinRequest.ALL_LOCKED)
        self.assertFalse(r.is_spinning)
        self.assertEqual(self.loop.pending(), 0)

    def test_nothing_to_spin(self):
        r = self.randomizer
        for class_id in ("warrior", "mage", "rogue"):
            r.toggle_class(class_id)
        with self.assertRaises(InvalidSpinRequest) as ctx:
            r.request_spin()
        self.assertEqual(ctx.exception.reason, InvalidSpinRequest.NOTHING_TO_SPIN)
        self.assertFalse(r.is_spinning)

    def test_locked_class_without_builds(self):
        r = self.randomizer
        r.lock_class("rogue")
        r.toggle_skill("r1")
        with self.assertRaises(InvalidSpinRequest) as ctx:
            r.request_spin()
        self.assertEqual(ctx.exception.reason, InvalidSpinRequest.NOTHING_TO_SPIN)

    def test_excluding_locked_class_unlocks_it(self):
        r = self.randomizer
        r.lock_class("warrior")
        self.assertTrue(r.toggle_class("warrior"))
        self.assertIsNone(r.session.locked_class)

    def test_cannot_lock_excluded(self):
        r = self.randomizer
        r.toggle_skill("m1")
        with self.assertRaises(ValueError):
            r.lock_skill("m1")

    def test_filters_drop_locked_build_they_exclude(self):
        r = self.randomizer
        r.lock_skill("w2")
        r.set_difficulty("Easy")
        self.assertIsNone(r.session.locked_skill)
        with self.assertRaises(ValueError):
            r.lock_skill("w2")

        r.lock_skill("w1")
        r.set_playstyle("Melee")
        self.assertEqual(r.session.locked_skill.id, "w1")
        r.set_playstyle("Caster")
        self.assertIsNone(r.session.locked_skill)

    def test_unlock(self):
        r = self.randomizer
        r.lock_class("warrior")
        r.lock_skill("w1")
        r.unlock_class()
        r.unlock_skill()
        self.assertIsNone(r.session.locked_class)
        self.assertIsNone(r.session.locked_skill)


class TestChangesDuringSpin(RandomizerTestCase):

    def test_filters_frozen_while_spinning(self):
        r = self.randomizer
        r.request_spin()
        items = r.class_wheel.items
        changes = [
            lambda: r.toggle_class("warrior"),
            lambda: r.toggle_skill("w1"),
            lambda: r.set_difficulty("Easy"),
            lambda: r.set_playstyle("Melee"),
            lambda: r.lock_class("mage"),
            lambda: r.lock_skill("m1"),
            lambda: r.unlock_class(),
            lambda: r.unlock_skill(),
            lambda: r.set_game("g2"),
        ]
        for change in changes:
            with self.assertRaises(SpinInProgressError):
                change()
        self.assertEqual(r.class_wheel.items, items)
        self.assertEqual(r.filters.excluded_classes, set())

        self.loop.run_all()
        r.toggle_class("warrior")

    def test_reset_during_inter_wheel_delay(self):
        """Reset between the two wheels: no build spin, no result"""
        r = self.randomizer
        finished = []
        r.request_spin(on_finished=finished.append)
        self.loop.advance(4.0)
        self.assertIsNotNone(r.session.selected_class)

        r.reset()
        self.loop.run_all()
        self.assertEqual(finished, [])
        self.assertEqual(self.results, [])
        self.assertFalse(r.is_spinning)
        self.assertIsNone(r.session.selected_class)
        self.assertEqual(r.build_wheel.rotation, 0)
        self.assertEqual(r.class_wheel.rotation, 0)

    def test_reset_then_spin_again(self):
        r = self.randomizer
        r.request_spin()
        self.loop.advance(1.0)
        r.reset()
        r.reset()

        r.request_spin()
        self.loop.run_all()
        self.assertEqual(len(self.results), 1)

    def test_filter_change_clears_selection(self):
        r = self.randomizer
        r.request_spin()
        self.loop.run_all()
        self.assertIsNotNone(r.session.selected_skill)
        r.set_playstyle("Melee")
        self.assertIsNone(r.session.selected_skill)
        self.assertEqual(len(r.session.history), 1)


class TestGameAndSnapshot(RandomizerTestCase):

    def test_set_game_resets(self):
        r = self.randomizer
        r.toggle_class("warrior")
        r.lock_skill("m1")
        r.set_game("g2")

        self.assertEqual(r.game_id, "g2")
        self.assertEqual(r.filters.excluded_classes, set())
        self.assertIsNone(r.session.locked_skill)
        self.assertEqual([item.id for item in r.class_wheel.items], ["solo"])

        r.request_spin()
        self.loop.run_all()
        self.assertEqual(self.results[-1]['skill']['id'], "s1")
        self.assertEqual(self.results[-1]['game_id'], "g2")

    def test_snapshot_serializable(self):
        r = self.randomizer
        r.lock_class("warrior")
        r.request_spin()
        self.loop.advance(1.0)
        snapshot = r.snapshot()
        json.dumps(snapshot)

        self.assertTrue(snapshot['is_spinning'])
        self.assertEqual(snapshot['locked_class']['id'], "warrior")
        self.assertEqual(snapshot['game']['id'], "g1")
        self.assertEqual(snapshot['difficulties'], ["Easy", "Hard", "Medium"])
        self.assertEqual(snapshot['wheels']['build']['item_count'], 2)


if __name__ == '__main__':
    unittest.main()
