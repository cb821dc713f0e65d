"""
Shared helpers for the tests: a manually driven event loop and a small catalog
"""
import copy
import heapq
import itertools


class ManualHandle:
    """Timer handle returned by ManualLoop.call_later"""

    def __init__(self, when, callback, args):
        self.when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self):
        return self._cancelled

    def _run(self):
        self._callback(*self._args)


class ManualLoop:
    """
    Just enough of an asyncio loop for call_later based code.
    Time only moves when advance() or run_all() is called.
    """

    def __init__(self):
        self._now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def time(self):
        return self._now

    def call_later(self, delay, callback, *args):
        handle = ManualHandle(self._now + delay, callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def advance(self, seconds):
        """Run every timer due within the next ``seconds``"""
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if not handle.cancelled():
                handle._run()
        self._now = target

    def run_all(self, max_steps=10000):
        """Run timers until none is left"""
        steps = 0
        while self._queue:
            when, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if not handle.cancelled():
                handle._run()
            steps += 1
            if steps > max_steps:
                raise RuntimeError("timers keep rescheduling themselves")

    def pending(self):
        return sum(1 for _, _, handle in self._queue if not handle.cancelled())


_SAMPLE_CATALOG = {
    "games": [
        {
            "id": "g1",
            "name": "Game One",
            "classes": [
                {
                    "id": "warrior",
                    "name": "Warrior",
                    "color": "#aa0000",
                    "skills": [
                        {"id": "w1", "name": "Cleave", "difficulty": "Easy", "playstyle": "Melee", "tier": "S"},
                        {"id": "w2", "name": "Shield Bash", "difficulty": "Hard", "playstyle": "Melee"},
                    ],
                },
                {
                    "id": "mage",
                    "name": "Mage",
                    "skills": [
                        {"id": "m1", "name": "Fireball", "difficulty": "Easy", "playstyle": "Caster"},
                        {"id": "m2", "name": "Blizzard", "difficulty": "Medium", "playstyle": "Caster"},
                    ],
                },
                {
                    "id": "rogue",
                    "name": "Rogue",
                    "color": "#00aa00",
                    "skills": [
                        {"id": "r1", "name": "Volley", "difficulty": "Hard", "playstyle": "Ranged"},
                    ],
                },
            ],
        },
        {
            "id": "g2",
            "name": "Game Two",
            "classes": [
                {
                    "id": "solo",
                    "name": "Solo",
                    "skills": [{"id": "s1", "name": "Only Build"}],
                },
            ],
        },
    ]
}


def sample_catalog_data():
    """Fresh copy of the test catalog (callers may mutate it)"""
    return copy.deepcopy(_SAMPLE_CATALOG)


def sample_catalog():
    from src.catalog.loader import Catalog
    return Catalog(sample_catalog_data())
