"""
Web surface: JSON API around one BuildRandomizer plus the wheel page.

The browser is a single owner (WEB_OWNER_ID); its favorites and history are
stored in the same SQLite DB as the Telegram chats.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
import uvicorn

from config.config import (
    SPIN_DURATION_SECONDS,
    SPIN_EASING,
    WEB_HOST,
    WEB_OWNER_ID,
    WEB_PORT,
)
from src.bot.session_manager import SessionManager
from src.db.sqlite_store import init_db
from src.wheel.errors import InvalidSpinRequest, SpinInProgressError

logger = logging.getLogger(__name__)

session_manager = SessionManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield
    session_manager.clear_all()


app = FastAPI(title="Build Wheel", lifespan=lifespan)

# Serve static files
web_dir = Path(__file__).parent / "web"
app.mount("/static", StaticFiles(directory=str(web_dir)), name="static")


# ---------- Request bodies ----------
class FiltersRequest(BaseModel):
    difficulty: Optional[str] = None
    playstyle: Optional[str] = None


class FavoriteRequest(BaseModel):
    class_id: Optional[str] = None
    skill_id: Optional[str] = None


# ---------- Error mapping ----------
@app.exception_handler(InvalidSpinRequest)
async def invalid_spin_handler(request: Request, exc: InvalidSpinRequest):
    logger.warning("Spin rejected: %s", exc.reason)
    return JSONResponse(status_code=409, content={"reason": exc.reason, "detail": exc.message})


@app.exception_handler(SpinInProgressError)
async def spin_in_progress_handler(request: Request, exc: SpinInProgressError):
    return JSONResponse(status_code=409, content={"reason": "spin_in_progress", "detail": str(exc)})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# ---------- Helpers ----------
def _owner():
    return session_manager.get_session(WEB_OWNER_ID)


def _state() -> dict:
    owner = _owner()
    state = owner.randomizer.snapshot()
    state['sound_enabled'] = owner.preferences.sound_enabled
    state['spin'] = {'duration': SPIN_DURATION_SECONDS, 'easing': SPIN_EASING}
    return state


def _require_class(class_id: str) -> None:
    randomizer = _owner().randomizer
    if randomizer.catalog.find_class(randomizer.game_id, class_id) is None:
        raise HTTPException(404, f"Unknown class: {class_id}")


def _require_skill(skill_id: str) -> None:
    randomizer = _owner().randomizer
    if randomizer.catalog.find_skill(randomizer.game_id, skill_id) is None:
        raise HTTPException(404, f"Unknown build: {skill_id}")


# ---------- Pages ----------
@app.get("/")
async def read_index():
    return FileResponse(web_dir / "index.html")


# ---------- Catalog & state ----------
@app.get("/api/games")
async def list_games():
    return {
        "current": _owner().randomizer.game_id,
        "games": session_manager.catalog.game_list(),
    }


@app.get("/api/state")
async def get_state():
    return _state()


@app.post("/api/game/{game_id}")
async def switch_game(game_id: str):
    if not session_manager.catalog.has_game(game_id):
        raise HTTPException(404, f"Unknown game: {game_id}")
    _owner().randomizer.set_game(game_id)
    return _state()


# ---------- Spinning ----------
@app.post("/api/spin")
async def spin():
    # Runs on the server loop; the page follows progress through /api/state
    _owner().randomizer.request_spin()
    return _state()


@app.post("/api/reset")
async def reset():
    _owner().randomizer.reset()
    return _state()


# ---------- Filters ----------
@app.post("/api/classes/{class_id}/toggle")
async def toggle_class(class_id: str):
    _require_class(class_id)
    excluded = _owner().randomizer.toggle_class(class_id)
    return {"id": class_id, "excluded": excluded, "state": _state()}


@app.post("/api/skills/{skill_id}/toggle")
async def toggle_skill(skill_id: str):
    _require_skill(skill_id)
    excluded = _owner().randomizer.toggle_skill(skill_id)
    return {"id": skill_id, "excluded": excluded, "state": _state()}


@app.post("/api/filters")
async def set_filters(req: FiltersRequest):
    randomizer = _owner().randomizer
    # Only the fields present in the body are changed
    if "difficulty" in req.model_fields_set:
        randomizer.set_difficulty(req.difficulty)
    if "playstyle" in req.model_fields_set:
        randomizer.set_playstyle(req.playstyle)
    return _state()


# ---------- Locks ----------
@app.post("/api/lock/class/{class_id}")
async def lock_class(class_id: str):
    _require_class(class_id)
    _owner().randomizer.lock_class(class_id)
    return _state()


@app.delete("/api/lock/class")
async def unlock_class():
    _owner().randomizer.unlock_class()
    return _state()


@app.post("/api/lock/skill/{skill_id}")
async def lock_skill(skill_id: str):
    _require_skill(skill_id)
    _owner().randomizer.lock_skill(skill_id)
    return _state()


@app.delete("/api/lock/skill")
async def unlock_skill():
    _owner().randomizer.unlock_skill()
    return _state()


# ---------- Preferences ----------
@app.get("/api/favorites")
async def list_favorites():
    owner = _owner()
    return {"favorites": owner.preferences.favorites_for_game(owner.randomizer.game_id)}


@app.post("/api/favorites")
async def toggle_favorite(req: Optional[FavoriteRequest] = None):
    """Toggle a class+build pair; without a body the last result is used"""
    owner = _owner()
    randomizer = owner.randomizer

    if req is not None and req.class_id and req.skill_id:
        cls = randomizer.catalog.find_class(randomizer.game_id, req.class_id)
        found = randomizer.catalog.find_skill(randomizer.game_id, req.skill_id)
        if cls is None or found is None or found[0]['id'] != cls['id']:
            raise HTTPException(404, f"Unknown build {req.skill_id} for class {req.class_id}")
        class_id, class_name = cls['id'], cls['name']
        skill_id, skill_name = found[1]['id'], found[1]['name']
    else:
        history = randomizer.session.history
        record = history[0] if history else None
        if not record or not record.get('class') or not record.get('skill'):
            raise HTTPException(400, "Nothing to favorite yet, spin first")
        class_id, class_name = record['class']['id'], record['class']['name']
        skill_id, skill_name = record['skill']['id'], record['skill']['name']

    added = owner.preferences.toggle_favorite(
        randomizer.game_id, class_id, skill_id,
        class_name=class_name, skill_name=skill_name,
    )
    session_manager.persist_preferences(WEB_OWNER_ID)
    return {
        "favorite": added,
        "favorites": owner.preferences.favorites_for_game(randomizer.game_id),
    }


@app.post("/api/sound")
async def toggle_sound():
    enabled = _owner().preferences.toggle_sound()
    session_manager.persist_preferences(WEB_OWNER_ID)
    return {"sound_enabled": enabled}


@app.delete("/api/session")
async def forget_session():
    """Drop history, favorites, filters and locks of the browser owner"""
    session_manager.delete_session(WEB_OWNER_ID)
    return _state()


def run_web_server(host: str = WEB_HOST, port: int = WEB_PORT):
    uvicorn.run(app, host=host, port=port)

if __name__ == "__main__":
    run_web_server()
