"""
Tick schedule: discrete pulses that slow down over the course of a spin.
"""
import random
from itertools import accumulate

from config.config import (
    TICK_COUNT_MIN,
    TICK_COUNT_MAX,
    TICK_LEAD_IN_SECONDS,
    TICK_SLOWDOWN,
    TICK_TAIL_FRACTION,
)


def build_tick_schedule(
    duration: float,
    rng=None,
    count_range: tuple[int, int] = (TICK_COUNT_MIN, TICK_COUNT_MAX),
    lead_in: float = TICK_LEAD_IN_SECONDS,
    slowdown: float = TICK_SLOWDOWN,
    tail_fraction: float = TICK_TAIL_FRACTION,
) -> list[float]:
    """
    Compute tick times for one spin

    Gap ``i`` is proportional to ``1 + slowdown * p**2`` where ``p`` is the
    progress through the sequence, so ticks start fast and slow down. The last
    tick lands at ``duration * (1 - tail_fraction)``.

    Args:
        duration: Spin duration in seconds
        rng: ``random.Random`` compatible source for the tick count
        count_range: Inclusive range of the number of ticks
        lead_in: Delay before the first tick
        slowdown: How much longer the last gap is than the first (> 0)
        tail_fraction: Share of the duration kept free of ticks at the end

    Returns:
        Strictly increasing offsets from spin start, all < duration. Empty when
        the duration is too short to hold any tick.
    """
    if slowdown <= 0:
        raise ValueError("slowdown must be > 0")
    if not 0 < tail_fraction < 1:
        raise ValueError("tail_fraction must be in (0, 1)")

    rng = rng or random
    low, high = count_range
    count = rng.randint(low, high)
    span = duration * (1 - tail_fraction) - lead_in
    if count <= 0 or span <= 0:
        return []
    if count == 1:
        return [lead_in]

    gaps = count - 1
    weights = [1 + slowdown * (i / max(gaps - 1, 1)) ** 2 for i in range(gaps)]
    scale = span / sum(weights)
    return [lead_in] + [lead_in + offset for offset in accumulate(w * scale for w in weights)]
