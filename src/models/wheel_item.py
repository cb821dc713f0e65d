"""
Model for one sector of a wheel
"""
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class WheelItem:
    """One sector of a wheel.

    Items are rebuilt from the catalog whenever filters change, never mutated.
    ``payload`` carries display-only metadata (tier, difficulty, tags, guide
    links...) and has no effect on the wheel mechanics.
    """

    id: str
    name: str
    color: Optional[str] = None
    group_id: Optional[str] = None
    payload: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def short_label(self, max_len: int = 12) -> str:
        """Label cut to fit inside a sector."""
        if len(self.name) > max_len:
            return self.name[:max_len - 2] + '...'
        return self.name

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'group_id': self.group_id,
            'payload': dict(self.payload),
        }
