"""
Dual-wheel randomizer: spins the class wheel, then the build wheel scoped to
the class it landed on.
"""
import asyncio
import logging
from typing import Callable, Optional

from config.config import (
    DEFAULT_GAME_ID,
    HISTORY_LIMIT,
    INTER_WHEEL_DELAY_SECONDS,
    SPIN_DURATION_SECONDS,
)
from src.catalog.filters import (
    CatalogFilters,
    all_skill_items,
    class_item,
    class_items,
    difficulty_options,
    eligible_skills,
    playstyle_options,
    skill_item,
    skill_items,
)
from src.catalog.loader import Catalog
from src.models.build_session import BuildSession
from src.models.wheel_item import WheelItem
from src.utils.validators import validate_filter_value
from src.wheel.animator import WheelAnimator
from src.wheel.errors import InvalidSpinRequest, SpinInProgressError

logger = logging.getLogger(__name__)

ResultCallback = Callable[[dict], None]


class BuildRandomizer:
    """Class wheel + build wheel for one game of the catalog"""

    def __init__(
        self,
        catalog: Catalog,
        game_id: Optional[str] = None,
        rng=None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        spin_duration: float = SPIN_DURATION_SECONDS,
        inter_wheel_delay: float = INTER_WHEEL_DELAY_SECONDS,
        history_limit: int = HISTORY_LIMIT,
        on_result: Optional[ResultCallback] = None,
        session: Optional[BuildSession] = None,
    ):
        self.catalog = catalog
        self.game_id = catalog.default_game_id(game_id or DEFAULT_GAME_ID)
        self.filters = CatalogFilters()
        self.session = session or BuildSession(history_limit=history_limit)
        self.inter_wheel_delay = inter_wheel_delay
        self.on_result = on_result
        self._loop = loop

        self.class_wheel = WheelAnimator(
            "class", on_complete=self._on_class_landed,
            duration=spin_duration, rng=rng, loop=loop,
        )
        self.build_wheel = WheelAnimator(
            "build", on_complete=self._on_build_landed,
            duration=spin_duration, rng=rng, loop=loop,
        )

        # Session generation; bumped on every start and reset
        self._session_id = 0
        self._build_handle: Optional[asyncio.TimerHandle] = None
        self._on_finished: Optional[ResultCallback] = None
        self._refresh_wheels()

    # ---------- Item sets ----------
    @property
    def game(self) -> dict:
        return self.catalog.get_game(self.game_id)

    def class_items(self) -> list[WheelItem]:
        return class_items(self.game, self.filters)

    def skills_for(self, class_id: str) -> list[WheelItem]:
        cls = self.catalog.find_class(self.game_id, class_id)
        if cls is None:
            return []
        return skill_items(cls, self.filters)

    def displayed_skills(self) -> list[WheelItem]:
        """Builds shown on the build wheel: the target class's, or all eligible ones"""
        target = self.session.spinning_class or self.session.selected_class
        if target is not None:
            return self.skills_for(target.id)
        return all_skill_items(self.game, self.filters)

    @property
    def is_spinning(self) -> bool:
        return self.session.is_spinning

    # ---------- Spin ----------
    def request_spin(self, on_finished: Optional[ResultCallback] = None) -> None:
        """
        Start a session

        Args:
            on_finished: Called once with the history record when the session ends

        Raises:
            InvalidSpinRequest: If a session is running, both wheels are locked
                or there is nothing to spin; no state is changed in that case
        """
        session = self.session
        if session.is_spinning:
            raise InvalidSpinRequest(InvalidSpinRequest.ALREADY_SPINNING, "A spin is already in progress.")
        if session.locked_class is not None and session.locked_skill is not None:
            raise InvalidSpinRequest(InvalidSpinRequest.ALL_LOCKED, "Both wheels are locked, nothing to randomize.")

        classes = self.class_items()
        if session.locked_class is not None:
            if not self.skills_for(session.locked_class.id):
                raise InvalidSpinRequest(
                    InvalidSpinRequest.NOTHING_TO_SPIN,
                    f"No builds left for {session.locked_class.name}. Enable at least one build to spin!",
                )
        elif not classes:
            raise InvalidSpinRequest(
                InvalidSpinRequest.NOTHING_TO_SPIN,
                "Please enable at least one class and one build to spin!",
            )

        self._session_id += 1
        self._on_finished = on_finished
        session.start()
        logger.info("Session %d started for %s (class lock=%s, build lock=%s)",
                    self._session_id, self.game_id,
                    session.locked_class.id if session.locked_class else None,
                    session.locked_skill.id if session.locked_skill else None)

        if session.locked_class is not None:
            self._select_class(session.locked_class, immediate=True)
            return

        self.class_wheel.set_items(classes)
        self.class_wheel.spin()

    def _on_class_landed(self, item: WheelItem) -> None:
        if not self.session.is_spinning:
            logger.debug("Class result %s outside a session discarded", item.id)
            return
        self._select_class(item, immediate=False)

    def _select_class(self, item: WheelItem, immediate: bool) -> None:
        session = self.session
        session.selected_class = item
        session.spinning_class = item

        if session.locked_skill is not None:
            self._finalize(session.locked_skill, self._other_class_of(session.locked_skill, item))
            return

        self.build_wheel.set_items(self.skills_for(item.id))
        if immediate:
            self._spin_build_wheel(self._session_id)
        else:
            loop = self._loop or asyncio.get_running_loop()
            self._build_handle = loop.call_later(
                self.inter_wheel_delay, self._spin_build_wheel, self._session_id,
            )

    def _spin_build_wheel(self, session_id: int) -> None:
        self._build_handle = None
        if session_id != self._session_id or not self.session.is_spinning:
            logger.debug("Stale build spin for session %d discarded", session_id)
            return

        if self.build_wheel.spin() is None:
            logger.warning("Build wheel could not spin for %s", self.session.selected_class)
            self._finalize(None)

    def _on_build_landed(self, item: WheelItem) -> None:
        if not self.session.is_spinning:
            logger.debug("Build result %s outside a session discarded", item.id)
            return
        self._finalize(item)

    def _other_class_of(self, skill: WheelItem, selected: WheelItem) -> Optional[WheelItem]:
        """Class of a locked build, when it is not the class the session selected"""
        if skill.group_id is None or skill.group_id == selected.id:
            return None
        cls = self.catalog.find_class(self.game_id, skill.group_id)
        return class_item(cls) if cls is not None else None

    def _finalize(self, skill: Optional[WheelItem], skill_class: Optional[WheelItem] = None) -> None:
        record = self.session.finish(self.game_id, skill, skill_class)
        logger.info("Session %d finished: %s / %s", self._session_id,
                    record['class']['name'] if record['class'] else None,
                    record['skill']['name'] if record['skill'] else None)

        on_finished, self._on_finished = self._on_finished, None
        if on_finished is not None:
            on_finished(record)
        if self.on_result is not None:
            self.on_result(record)

    def reset(self) -> None:
        """Stop both wheels and clear the result; no completion callback fires."""
        self._session_id += 1
        if self._build_handle is not None:
            self._build_handle.cancel()
            self._build_handle = None
        self._on_finished = None
        self.class_wheel.reset()
        self.build_wheel.reset()
        self.session.abort()
        self._refresh_wheels()

    # ---------- Filters & locks ----------
    def _ensure_idle(self) -> None:
        if self.session.is_spinning:
            raise SpinInProgressError("Wait for the current spin to finish.")

    def _changed(self) -> None:
        self.session.clear_selection()
        self._refresh_wheels()

    def _refresh_wheels(self) -> None:
        self.class_wheel.set_items(self.class_items())
        self.build_wheel.set_items(self.displayed_skills())

    def _require_class(self, class_id: str) -> dict:
        cls = self.catalog.find_class(self.game_id, class_id)
        if cls is None:
            raise ValueError(f"Unknown class: {class_id}")
        return cls

    def toggle_class(self, class_id: str) -> bool:
        """Exclude or include a class; returns True if it is now excluded"""
        self._ensure_idle()
        self._require_class(class_id)
        excluded = self.filters.toggle_class(class_id)
        if excluded and self.session.locked_class and self.session.locked_class.id == class_id:
            self.session.locked_class = None
        self._changed()
        return excluded

    def toggle_skill(self, skill_id: str) -> bool:
        """Exclude or include a build; returns True if it is now excluded"""
        self._ensure_idle()
        if self.catalog.find_skill(self.game_id, skill_id) is None:
            raise ValueError(f"Unknown build: {skill_id}")
        excluded = self.filters.toggle_skill(skill_id)
        if excluded and self.session.locked_skill and self.session.locked_skill.id == skill_id:
            self.session.locked_skill = None
        self._changed()
        return excluded

    def _drop_filtered_skill_lock(self) -> None:
        locked = self.session.locked_skill
        if locked is None:
            return
        found = self.catalog.find_skill(self.game_id, locked.id)
        if found is not None and found[1] in eligible_skills(found[0], self.filters):
            return
        logger.info("Build lock %s dropped: excluded by the filters", locked.id)
        self.session.locked_skill = None

    def set_difficulty(self, value: Optional[str]) -> Optional[str]:
        self._ensure_idle()
        is_valid, difficulty, error = validate_filter_value(value, difficulty_options(self.game))
        if not is_valid:
            raise ValueError(error)
        self.filters.difficulty = difficulty
        self._drop_filtered_skill_lock()
        self._changed()
        return difficulty

    def set_playstyle(self, value: Optional[str]) -> Optional[str]:
        self._ensure_idle()
        is_valid, playstyle, error = validate_filter_value(value, playstyle_options(self.game))
        if not is_valid:
            raise ValueError(error)
        self.filters.playstyle = playstyle
        self._drop_filtered_skill_lock()
        self._changed()
        return playstyle

    def lock_class(self, class_id: str) -> WheelItem:
        self._ensure_idle()
        cls = self._require_class(class_id)
        if class_id in self.filters.excluded_classes:
            raise ValueError(f"Class {cls['name']} is excluded")
        item = class_item(cls)
        self.session.locked_class = item
        self._changed()
        return item

    def lock_skill(self, skill_id: str) -> WheelItem:
        self._ensure_idle()
        found = self.catalog.find_skill(self.game_id, skill_id)
        if found is None:
            raise ValueError(f"Unknown build: {skill_id}")
        cls, skill = found
        if skill not in eligible_skills(cls, self.filters):
            raise ValueError(f"Build {skill['name']} is excluded")
        item = skill_item(cls, skill)
        self.session.locked_skill = item
        self._changed()
        return item

    def unlock_class(self) -> None:
        self._ensure_idle()
        self.session.locked_class = None
        self._changed()

    def unlock_skill(self) -> None:
        self._ensure_idle()
        self.session.locked_skill = None
        self._changed()

    def set_game(self, game_id: str) -> None:
        """Switch game and reset filters, locks and wheels to their defaults"""
        self._ensure_idle()
        self.catalog.get_game(game_id)
        self.game_id = game_id
        self.filters = CatalogFilters()
        self.session.locked_class = None
        self.session.locked_skill = None
        self.class_wheel.reset()
        self.build_wheel.reset()
        self._changed()
        logger.info("Switched to game %s", game_id)

    # ---------- Views ----------
    def snapshot(self) -> dict:
        session = self.session
        game = self.game
        return {
            'game': {'id': game['id'], 'name': game['name']},
            'is_spinning': session.is_spinning,
            'selected_class': session.selected_class.to_dict() if session.selected_class else None,
            'selected_skill': session.selected_skill.to_dict() if session.selected_skill else None,
            'locked_class': session.locked_class.to_dict() if session.locked_class else None,
            'locked_skill': session.locked_skill.to_dict() if session.locked_skill else None,
            'filters': self.filters.to_dict(),
            'difficulties': difficulty_options(game),
            'playstyles': playstyle_options(game),
            'wheels': {
                'class': self.class_wheel.to_dict(),
                'build': self.build_wheel.to_dict(),
            },
            'history': session.get_recent_history(session.history_limit),
        }
