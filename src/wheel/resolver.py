"""
Spin resolver: picks the winning sector and how far the wheel must turn to
stop on it.
"""
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from config.config import FULL_TURNS_MIN, FULL_TURNS_MAX, JITTER_FRACTION
from src.models.wheel_item import WheelItem
from src.wheel.geometry import sector_angle


@dataclass(frozen=True)
class SpinResolution:
    """Outcome of a spin, fixed before any animation starts."""

    index: int
    item: Optional[WheelItem]
    full_turns: int
    angular_delta: float
    jitter: float

    @property
    def total_delta(self) -> float:
        return self.full_turns * 360.0 + self.angular_delta + self.jitter


def target_resting_angle(index: int, item_count: int) -> float:
    """Rotation (mod 360) that puts the middle of sector ``index`` under the pointer."""
    s = sector_angle(item_count)
    return (360.0 - (index * s + s / 2)) % 360.0


def forward_delta(current_rotation: float, target_angle: float) -> float:
    """Smallest forward turn in [0, 360) from ``current_rotation`` to ``target_angle``."""
    delta = (target_angle - current_rotation % 360.0) % 360.0
    # float modulo can round up to the modulus itself
    if delta >= 360.0:
        delta -= 360.0
    return delta


def resolve_spin(
    current_rotation: float,
    items: Sequence[WheelItem],
    rng=None,
    full_turns_range: tuple[int, int] = (FULL_TURNS_MIN, FULL_TURNS_MAX),
    jitter_fraction: float = JITTER_FRACTION,
) -> SpinResolution:
    """
    Resolve one spin

    Args:
        current_rotation: Cumulative rotation of the wheel before the spin
        items: Sectors of the wheel, in drawing order
        rng: ``random.Random`` compatible source (module ``random`` if None)
        full_turns_range: Inclusive range of decorative full turns
        jitter_fraction: Total jitter span as a fraction of one sector, < 1

    Returns:
        SpinResolution with the winning item and the rotation to add

    Raises:
        ValueError: If items is empty or the ranges are invalid
    """
    if not items:
        raise ValueError("Cannot spin a wheel without items")
    if not 0 <= jitter_fraction < 1:
        raise ValueError("jitter_fraction must be in [0, 1)")
    low, high = full_turns_range
    if low < 1 or high < low:
        raise ValueError(f"Invalid full_turns_range: {full_turns_range}")

    rng = rng or random
    count = len(items)
    s = sector_angle(count)

    full_turns = rng.randint(low, high)
    index = rng.randrange(count)
    # Offset around the sector middle, kept strictly inside the sector
    jitter = (rng.random() - 0.5) * s * jitter_fraction

    target = target_resting_angle(index, count)
    angular_delta = forward_delta(current_rotation, target)

    return SpinResolution(
        index=index,
        item=items[index],
        full_turns=full_turns,
        angular_delta=angular_delta,
        jitter=jitter,
    )
