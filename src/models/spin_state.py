"""
Spin state of a single wheel
"""
from dataclasses import dataclass
from typing import Optional

from src.models.wheel_item import WheelItem


@dataclass
class SpinState:
    """State owned by one wheel for its whole lifetime."""

    cumulative_rotation: float = 0.0
    is_spinning: bool = False
    last_selected_item: Optional[WheelItem] = None
    ticks_emitted: int = 0

    def reset(self) -> None:
        self.cumulative_rotation = 0.0
        self.is_spinning = False
        self.last_selected_item = None
        self.ticks_emitted = 0

    def to_dict(self) -> dict:
        return {
            'rotation': self.cumulative_rotation,
            'is_spinning': self.is_spinning,
            'selected_item': self.last_selected_item.to_dict() if self.last_selected_item else None,
            'ticks': self.ticks_emitted,
        }
