"""
Turn catalog entries into WheelItems according to the user's filters.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from src.models.wheel_item import WheelItem

# Fields of a class entry that are not copied into a build's payload
_CLASS_FIELDS = ('id', 'name', 'color', 'skills')


@dataclass
class CatalogFilters:
    """Exclusions and metadata filters applied before items reach a wheel"""

    excluded_classes: set[str] = field(default_factory=set)
    excluded_skills: set[str] = field(default_factory=set)
    difficulty: Optional[str] = None
    playstyle: Optional[str] = None

    def toggle_class(self, class_id: str) -> bool:
        """Returns True if the class is excluded after the call."""
        if class_id in self.excluded_classes:
            self.excluded_classes.discard(class_id)
            return False
        self.excluded_classes.add(class_id)
        return True

    def toggle_skill(self, skill_id: str) -> bool:
        """Returns True if the build is excluded after the call."""
        if skill_id in self.excluded_skills:
            self.excluded_skills.discard(skill_id)
            return False
        self.excluded_skills.add(skill_id)
        return True

    def to_dict(self) -> dict:
        return {
            'excluded_classes': sorted(self.excluded_classes),
            'excluded_skills': sorted(self.excluded_skills),
            'difficulty': self.difficulty,
            'playstyle': self.playstyle,
        }


def _matches(value: Optional[str], wanted: Optional[str]) -> bool:
    if wanted is None:
        return True
    return value is not None and str(value).casefold() == wanted.casefold()


def eligible_skills(cls: dict, filters: CatalogFilters) -> List[dict]:
    """Builds of a class that pass every filter, in catalog order"""
    return [
        skill for skill in cls.get('skills', [])
        if skill['id'] not in filters.excluded_skills
        and _matches(skill.get('difficulty'), filters.difficulty)
        and _matches(skill.get('playstyle'), filters.playstyle)
    ]


def class_item(cls: dict) -> WheelItem:
    payload = {k: v for k, v in cls.items() if k not in _CLASS_FIELDS}
    return WheelItem(id=cls['id'], name=cls['name'], color=cls.get('color'), payload=payload)


def skill_item(cls: dict, skill: dict) -> WheelItem:
    payload = {k: v for k, v in skill.items() if k not in ('id', 'name')}
    payload['className'] = cls['name']
    return WheelItem(
        id=skill['id'],
        name=skill['name'],
        color=cls.get('color'),
        group_id=cls['id'],
        payload=payload,
    )


def class_items(game: dict, filters: CatalogFilters) -> List[WheelItem]:
    """Classes that are not excluded and still have at least one eligible build"""
    return [
        class_item(cls) for cls in game['classes']
        if cls['id'] not in filters.excluded_classes and eligible_skills(cls, filters)
    ]


def skill_items(cls: dict, filters: CatalogFilters) -> List[WheelItem]:
    return [skill_item(cls, skill) for skill in eligible_skills(cls, filters)]


def all_skill_items(game: dict, filters: CatalogFilters) -> List[WheelItem]:
    """Every eligible build of every eligible class (idle build wheel)"""
    items = []
    for cls in game['classes']:
        if cls['id'] in filters.excluded_classes:
            continue
        items.extend(skill_items(cls, filters))
    return items


def _options(game: dict, key: str) -> List[str]:
    values = {
        str(skill[key]) for cls in game['classes'] for skill in cls['skills']
        if skill.get(key)
    }
    return sorted(values, key=str.casefold)


def difficulty_options(game: dict) -> List[str]:
    return _options(game, 'difficulty')


def playstyle_options(game: dict) -> List[str]:
    return _options(game, 'playstyle')
