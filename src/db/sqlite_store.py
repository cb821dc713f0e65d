import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional
import json

from config.config import DB_PATH


def get_connection() -> sqlite3.Connection:
    """Open a connection to the SQLite DB."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def _cursor(commit: bool = False) -> Iterator[sqlite3.Cursor]:
    conn = get_connection()
    try:
        yield conn.cursor()
        if commit:
            conn.commit()
    finally:
        conn.close()


def _timestamp() -> str:
    return datetime.now().isoformat(timespec="seconds")


def init_db() -> None:
    """Create the tables if they do not exist yet."""
    with _cursor(commit=True) as cur:
        # Favorites + sound flag per owner (Telegram chat id, or the web owner id)
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS preferences (
                owner_id INTEGER PRIMARY KEY,
                favorites_json TEXT NOT NULL,
                sound_enabled INTEGER NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        # Recent results per owner, newest first
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS spin_history (
                owner_id INTEGER PRIMARY KEY,
                history_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )


# ---------- Preferences ----------
def save_preferences(owner_id: int, prefs_dict: Dict[str, Any]) -> None:
    """Save (or update) the preferences of an owner. Last write wins."""
    favorites = json.dumps(prefs_dict.get("favorites", []), ensure_ascii=False)
    sound = 1 if prefs_dict.get("sound_enabled", True) else 0

    with _cursor(commit=True) as cur:
        cur.execute(
            """
            INSERT INTO preferences(owner_id, favorites_json, sound_enabled, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(owner_id) DO UPDATE SET
                favorites_json = excluded.favorites_json,
                sound_enabled  = excluded.sound_enabled,
                updated_at     = excluded.updated_at
            """,
            (owner_id, favorites, sound, _timestamp()),
        )


def load_preferences(owner_id: int) -> Optional[Dict[str, Any]]:
    """Load the preferences of an owner, as a dict or None."""
    with _cursor() as cur:
        cur.execute(
            "SELECT favorites_json, sound_enabled FROM preferences WHERE owner_id = ?",
            (owner_id,),
        )
        row = cur.fetchone()

    if row is None:
        return None
    return {
        "favorites": json.loads(row["favorites_json"]),
        "sound_enabled": bool(row["sound_enabled"]),
    }


# ---------- History ----------
def save_history(owner_id: int, history: List[Dict[str, Any]]) -> None:
    """Save the recent results of an owner."""
    with _cursor(commit=True) as cur:
        cur.execute(
            """
            INSERT INTO spin_history(owner_id, history_json, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(owner_id) DO UPDATE SET
                history_json = excluded.history_json,
                updated_at   = excluded.updated_at
            """,
            (owner_id, json.dumps(history, ensure_ascii=False), _timestamp()),
        )


def load_history(owner_id: int) -> List[Dict[str, Any]]:
    """Load the recent results of an owner (empty list if none)."""
    with _cursor() as cur:
        cur.execute("SELECT history_json FROM spin_history WHERE owner_id = ?", (owner_id,))
        row = cur.fetchone()
    return json.loads(row["history_json"]) if row else []


def delete_owner(owner_id: int) -> None:
    """Remove everything stored for an owner."""
    with _cursor(commit=True) as cur:
        for table in ("preferences", "spin_history"):
            cur.execute(f"DELETE FROM {table} WHERE owner_id = ?", (owner_id,))
