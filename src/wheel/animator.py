"""
Spin animator: drives one wheel through Idle -> Spinning -> Idle on an
asyncio event loop.

The renderer animates ``rotation`` with an easing transition lasting
``duration``; the animator only owns the state and the timers.
"""
import asyncio
import logging
from typing import Callable, Iterable, Optional

from config.config import (
    SPIN_DURATION_SECONDS,
    TICK_COUNT_MIN,
    TICK_COUNT_MAX,
    TICK_LEAD_IN_SECONDS,
)
from src.models.spin_state import SpinState
from src.models.wheel_item import WheelItem
from src.wheel.errors import SpinInProgressError
from src.wheel.geometry import wheel_layout
from src.wheel.resolver import SpinResolution, resolve_spin
from src.wheel.ticks import build_tick_schedule

logger = logging.getLogger(__name__)

CompleteCallback = Callable[[WheelItem], None]
TickCallback = Callable[[int, int], None]


class WheelAnimator:
    """One wheel: its items, its SpinState and the timers of the current spin"""

    def __init__(
        self,
        name: str,
        items: Optional[Iterable[WheelItem]] = None,
        on_complete: Optional[CompleteCallback] = None,
        on_tick: Optional[TickCallback] = None,
        duration: float = SPIN_DURATION_SECONDS,
        rng=None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        tick_count_range: tuple[int, int] = (TICK_COUNT_MIN, TICK_COUNT_MAX),
        tick_lead_in: float = TICK_LEAD_IN_SECONDS,
    ):
        if duration <= 0:
            raise ValueError("duration must be > 0")

        self.name = name
        self.on_complete = on_complete
        self.on_tick = on_tick
        self.duration = duration
        self.tick_count_range = tick_count_range
        self.tick_lead_in = tick_lead_in
        self._rng = rng
        self._loop = loop
        self._items: list[WheelItem] = list(items or [])
        self.state = SpinState()

        # Timers of the running spin; _spin_id tags every callback
        self._spin_id = 0
        self._pending: Optional[SpinResolution] = None
        self._complete_handle: Optional[asyncio.TimerHandle] = None
        self._tick_handles: list[asyncio.TimerHandle] = []

    # ---------- State ----------
    @property
    def items(self) -> list[WheelItem]:
        return list(self._items)

    def set_items(self, items: Iterable[WheelItem]) -> None:
        """Replace the sectors; not allowed while the wheel is spinning."""
        if self.state.is_spinning:
            raise SpinInProgressError(f"Wheel '{self.name}' is spinning")
        self._items = list(items)

    @property
    def rotation(self) -> float:
        return self.state.cumulative_rotation

    @property
    def is_spinning(self) -> bool:
        return self.state.is_spinning

    @property
    def selected_item(self) -> Optional[WheelItem]:
        return self.state.last_selected_item

    def layout(self) -> list[dict]:
        return wheel_layout(self._items)

    # ---------- Commands ----------
    def spin(self) -> Optional[SpinResolution]:
        """
        Start a spin

        Returns:
            The resolution of the accepted spin, or None when the wheel is
            already spinning or has no items
        """
        if self.state.is_spinning or not self._items:
            logger.debug("Wheel %s: spin ignored (spinning=%s, items=%d)",
                         self.name, self.state.is_spinning, len(self._items))
            return None

        loop = self._loop or asyncio.get_running_loop()
        resolution = resolve_spin(self.state.cumulative_rotation, self._items, rng=self._rng)

        self._spin_id += 1
        spin_id = self._spin_id
        self._pending = resolution
        self.state.is_spinning = True
        self.state.last_selected_item = None
        self.state.ticks_emitted = 0
        self.state.cumulative_rotation += resolution.total_delta

        schedule = build_tick_schedule(
            self.duration,
            rng=self._rng,
            count_range=self.tick_count_range,
            lead_in=self.tick_lead_in,
        )
        self._tick_handles = [
            loop.call_later(offset, self._fire_tick, spin_id, index, len(schedule))
            for index, offset in enumerate(schedule)
        ]
        self._complete_handle = loop.call_later(self.duration, self._finish, spin_id)

        logger.info("Wheel %s: spinning to %s (%d items, +%.1f deg, %d ticks)",
                    self.name, resolution.item.id, len(self._items),
                    resolution.total_delta, len(schedule))
        return resolution

    def reset(self) -> None:
        """Abort any running spin and return to the zero state; never calls on_complete."""
        self._cancel_timers()
        self._spin_id += 1
        self._pending = None
        self.state.reset()

    # ---------- Timer callbacks ----------
    def _fire_tick(self, spin_id: int, index: int, count: int) -> None:
        if spin_id != self._spin_id or not self.state.is_spinning:
            logger.debug("Wheel %s: stale tick %d discarded", self.name, index)
            return

        self.state.ticks_emitted += 1
        if self.on_tick is None:
            return
        try:
            self.on_tick(index, count)
        except Exception as e:
            logger.error("Wheel %s: tick listener failed: %s", self.name, e)

    def _finish(self, spin_id: int) -> None:
        if spin_id != self._spin_id or self._pending is None:
            logger.debug("Wheel %s: stale completion discarded", self.name)
            return

        item = self._pending.item
        self._pending = None
        self._complete_handle = None
        for handle in self._tick_handles:
            handle.cancel()
        self._tick_handles = []

        self.state.is_spinning = False
        self.state.last_selected_item = item
        logger.info("Wheel %s: landed on %s", self.name, item.id)

        if self.on_complete is not None:
            self.on_complete(item)

    def _cancel_timers(self) -> None:
        if self._complete_handle is not None:
            self._complete_handle.cancel()
            self._complete_handle = None
        for handle in self._tick_handles:
            handle.cancel()
        self._tick_handles = []

    def to_dict(self) -> dict:
        data = self.state.to_dict()
        data.update({
            'name': self.name,
            'duration': self.duration,
            'item_count': len(self._items),
            'sectors': self.layout(),
        })
        return data

    def __repr__(self) -> str:
        return (
            f"WheelAnimator(name={self.name}, items={len(self._items)}, "
            f"rotation={self.rotation:.1f}, spinning={self.is_spinning})"
        )
