"""
Manage randomizer sessions per owner (Telegram chat id or the web owner id).

Sessions live in memory; favorites, sound flag and recent history are synced
to SQLite through `src.db.sqlite_store`.
"""
import logging
from typing import Dict, Optional

from config.config import CATALOG_PATH, DEFAULT_GAME_ID, HISTORY_LIMIT
from src.catalog.loader import Catalog, load_catalog
from src.db.sqlite_store import load_history, load_preferences, save_history, save_preferences, delete_owner
from src.models.build_session import BuildSession
from src.models.preferences import Preferences
from src.wheel.orchestrator import BuildRandomizer

logger = logging.getLogger(__name__)


class OwnerSession:
    """Randomizer and preferences of one owner"""

    def __init__(self, owner_id: int, randomizer: BuildRandomizer, preferences: Preferences):
        self.owner_id = owner_id
        self.randomizer = randomizer
        self.preferences = preferences


class SessionManager:
    """Manage randomizer sessions for many owners"""

    def __init__(self, catalog: Optional[Catalog] = None, randomizer_options: Optional[dict] = None):
        # Key: owner_id, Value: OwnerSession
        self._sessions: Dict[int, OwnerSession] = {}
        self._catalog = catalog
        # Extra BuildRandomizer kwargs (loop, rng, durations) for every new session
        self.randomizer_options = dict(randomizer_options or {})

    @property
    def catalog(self) -> Catalog:
        """Catalog shared by every session, loaded on first use."""
        if self._catalog is None:
            self._catalog = load_catalog(CATALOG_PATH)
        return self._catalog

    def get_session(self, owner_id: int) -> OwnerSession:
        """
        Return the session of an owner, creating it on first use.
        Preferences and history are restored from SQLite.
        """
        session = self._sessions.get(owner_id)
        if session:
            return session

        build_session = BuildSession(history_limit=HISTORY_LIMIT)
        build_session.history = load_history(owner_id)[:HISTORY_LIMIT]

        prefs_data = load_preferences(owner_id)
        preferences = Preferences.from_dict(prefs_data) if prefs_data else Preferences()

        randomizer = BuildRandomizer(
            self.catalog,
            game_id=DEFAULT_GAME_ID,
            session=build_session,
            on_result=lambda record: self.persist_history(owner_id),
            **self.randomizer_options,
        )
        session = OwnerSession(owner_id, randomizer, preferences)
        self._sessions[owner_id] = session
        logger.info("Created session for owner %s", owner_id)
        return session

    def get_randomizer(self, owner_id: int) -> BuildRandomizer:
        return self.get_session(owner_id).randomizer

    def persist_history(self, owner_id: int) -> None:
        """Save the recent results of an owner to SQLite."""
        session = self._sessions.get(owner_id)
        if session is not None:
            save_history(owner_id, session.randomizer.session.history)

    def persist_preferences(self, owner_id: int) -> None:
        """Save favorites and sound flag of an owner to SQLite."""
        session = self._sessions.get(owner_id)
        if session is not None:
            save_preferences(owner_id, session.preferences.to_dict())

    def delete_session(self, owner_id: int) -> bool:
        """
        Drop the session of an owner from RAM and DB.
        Returns True if a session was loaded in memory.
        """
        session = self._sessions.pop(owner_id, None)
        if session is not None:
            session.randomizer.reset()
        delete_owner(owner_id)
        logger.info("Deleted session for owner %s", owner_id)
        return session is not None

    def clear_all(self) -> None:
        """Drop every session from RAM (DB untouched)."""
        for session in self._sessions.values():
            session.randomizer.reset()
        self._sessions.clear()
