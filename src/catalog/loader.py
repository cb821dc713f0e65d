"""
Build catalog: games -> classes -> skills/builds, stored as JSON.

The catalog is produced by the offline data-preparation scripts and is
read-only for the wheels.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from src.utils.validators import validate_catalog_entry

logger = logging.getLogger(__name__)


class Catalog:
    """In-memory catalog, kept in the same shape as the JSON file"""

    def __init__(self, data: Dict[str, Any]):
        games = data.get('games')
        if not isinstance(games, list):
            raise ValueError("Catalog must contain a 'games' list")

        for game in games:
            _validate_game(game)

        self.data = data
        self._games: Dict[str, dict] = {}
        self.refresh()

    @property
    def games(self) -> List[dict]:
        return self.data['games']

    def game_list(self) -> List[dict]:
        """Short description of every game: id, name, class/build counts"""
        return [
            {
                'id': game['id'],
                'name': game['name'],
                'classes': len(game['classes']),
                'builds': sum(len(cls['skills']) for cls in game['classes']),
            }
            for game in self.games
        ]

    def has_game(self, game_id: str) -> bool:
        return game_id in self._games

    def get_game(self, game_id: str) -> dict:
        game = self._games.get(game_id)
        if game is None:
            raise ValueError(f"Unknown game: {game_id}")
        return game

    def find_class(self, game_id: str, class_id: str) -> Optional[dict]:
        for cls in self.get_game(game_id)['classes']:
            if cls['id'] == class_id:
                return cls
        return None

    def find_skill(self, game_id: str, skill_id: str) -> Optional[tuple[dict, dict]]:
        """Return (class, skill) for a build id, or None"""
        for cls in self.get_game(game_id)['classes']:
            for skill in cls['skills']:
                if skill['id'] == skill_id:
                    return cls, skill
        return None

    def default_game_id(self, preferred: Optional[str] = None) -> str:
        if preferred and preferred in self._games:
            return preferred
        if not self.games:
            raise ValueError("Catalog has no games")
        return self.games[0]['id']

    def refresh(self) -> None:
        """Re-index after the underlying data was edited in place."""
        self._games = {game['id']: game for game in self.data['games']}


def _validate_game(game: dict) -> None:
    is_valid, error = validate_catalog_entry(game, 'game')
    if not is_valid:
        raise ValueError(error)

    classes = game.setdefault('classes', [])
    for cls in classes:
        is_valid, error = validate_catalog_entry(cls, f"class in {game['id']}")
        if not is_valid:
            raise ValueError(error)
        for skill in cls.setdefault('skills', []):
            is_valid, error = validate_catalog_entry(skill, f"build in {game['id']}/{cls['id']}")
            if not is_valid:
                raise ValueError(error)


def load_catalog(path: Union[str, Path]) -> Catalog:
    """Load and validate a catalog JSON file"""
    path = Path(path)
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    catalog = Catalog(data)
    logger.info("Loaded catalog %s: %d games", path, len(catalog.games))
    return catalog


def save_catalog(catalog: Catalog, path: Union[str, Path]) -> None:
    """Write the catalog back in the format ``load_catalog`` reads"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + '.tmp')
    with open(tmp_path, 'w', encoding='utf-8') as f:
        json.dump(catalog.data, f, ensure_ascii=False, indent=2)
        f.write('\n')
    tmp_path.replace(path)
