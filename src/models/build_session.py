"""
Model for one randomizer session (class wheel + build wheel)
"""
from datetime import datetime
from typing import Optional

from src.models.wheel_item import WheelItem


class BuildSession:
    """Selection, lock and history state of a dual-wheel randomizer"""

    def __init__(self, history_limit: int = 10):
        """
        Create an idle session

        Args:
            history_limit: Maximum number of results kept in ``history``

        Raises:
            ValueError: If history_limit is not positive
        """
        if history_limit <= 0:
            raise ValueError("history_limit must be > 0")

        self.history_limit = history_limit
        # Locks force a wheel's result and skip its animation
        self.locked_class: Optional[WheelItem] = None
        self.locked_skill: Optional[WheelItem] = None
        # Result of the latest (or running) session
        self.selected_class: Optional[WheelItem] = None
        self.selected_skill: Optional[WheelItem] = None
        # Class whose builds are on the build wheel while a session runs
        self.spinning_class: Optional[WheelItem] = None
        self.is_spinning: bool = False
        self.spin_count = 0
        self.updated_at = datetime.now()
        # Most recent first: [{'game_id', 'class', 'skill', 'skill_class', 'locked_class', 'locked_skill', 'time'}, ...]
        self.history: list[dict] = []

    def start(self) -> None:
        """Mark a new session as running and clear the previous result."""
        self.is_spinning = True
        self.selected_class = None
        self.selected_skill = None
        self.spinning_class = None
        self.updated_at = datetime.now()

    def clear_selection(self) -> None:
        """Drop the displayed result (used when filters change)."""
        self.selected_class = None
        self.selected_skill = None
        self.spinning_class = None
        self.updated_at = datetime.now()

    def abort(self) -> None:
        self.is_spinning = False
        self.clear_selection()

    def finish(
        self,
        game_id: Optional[str],
        skill: Optional[WheelItem],
        skill_class: Optional[WheelItem] = None,
    ) -> dict:
        """
        Close the running session and record its result

        Args:
            game_id: Game the session was spun for
            skill: Selected build (None if the build wheel had nothing to spin)
            skill_class: Class the build belongs to, when it is not the selected class
                (a locked build paired with a spun class)

        Returns:
            The history record that was added
        """
        self.selected_skill = skill
        self.spinning_class = None
        self.is_spinning = False
        self.spin_count += 1
        self.updated_at = datetime.now()

        record = {
            'game_id': game_id,
            'class': self.selected_class.to_dict() if self.selected_class else None,
            'skill': skill.to_dict() if skill else None,
            'skill_class': skill_class.to_dict() if skill_class else None,
            'locked_class': self.locked_class is not None,
            'locked_skill': self.locked_skill is not None,
            'time': self.updated_at.isoformat(timespec="seconds"),
        }
        self.history.insert(0, record)
        # Keep only the newest entries
        del self.history[self.history_limit:]
        return record

    def get_recent_history(self, limit: int = 10) -> list[dict]:
        """Return up to ``limit`` most recent results, newest first"""
        if limit <= 0:
            return []
        return self.history[:limit]

    def __repr__(self) -> str:
        return (
            f"BuildSession(spinning={self.is_spinning}, "
            f"class={self.selected_class.id if self.selected_class else None}, "
            f"skill={self.selected_skill.id if self.selected_skill else None}, "
            f"history={len(self.history)}/{self.history_limit})"
        )
