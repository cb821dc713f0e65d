"""
User preferences: favorite builds and the tick sound flag
"""
from datetime import datetime
from typing import Optional


class Preferences:
    """Favorites and sound setting of one owner (chat or browser)"""

    def __init__(self, sound_enabled: bool = True):
        self.sound_enabled = sound_enabled
        # [{'game_id', 'class_id', 'class_name', 'skill_id', 'skill_name', 'added_at'}, ...]
        self.favorites: list[dict] = []

    def is_favorite(self, game_id: str, class_id: str, skill_id: str) -> bool:
        return self._find(game_id, class_id, skill_id) is not None

    def toggle_favorite(
        self,
        game_id: str,
        class_id: str,
        skill_id: str,
        class_name: Optional[str] = None,
        skill_name: Optional[str] = None,
    ) -> bool:
        """
        Add the class+build pair to favorites, or remove it if already there

        Returns:
            True if the pair is a favorite after the call
        """
        index = self._find(game_id, class_id, skill_id)
        if index is not None:
            self.favorites.pop(index)
            return False

        self.favorites.append({
            'game_id': game_id,
            'class_id': class_id,
            'class_name': class_name or class_id,
            'skill_id': skill_id,
            'skill_name': skill_name or skill_id,
            'added_at': datetime.now().isoformat(timespec="seconds"),
        })
        return True

    def toggle_sound(self) -> bool:
        self.sound_enabled = not self.sound_enabled
        return self.sound_enabled

    def favorites_for_game(self, game_id: str) -> list[dict]:
        return [f for f in self.favorites if f.get('game_id') == game_id]

    def _find(self, game_id: str, class_id: str, skill_id: str) -> Optional[int]:
        for idx, fav in enumerate(self.favorites):
            if (fav.get('game_id'), fav.get('class_id'), fav.get('skill_id')) == (game_id, class_id, skill_id):
                return idx
        return None

    def to_dict(self) -> dict:
        return {'sound_enabled': self.sound_enabled, 'favorites': list(self.favorites)}

    @classmethod
    def from_dict(cls, data: dict) -> 'Preferences':
        prefs = cls(sound_enabled=bool(data.get('sound_enabled', True)))
        prefs.favorites = list(data.get('favorites', []))
        return prefs
