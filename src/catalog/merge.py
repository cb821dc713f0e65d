"""
Merge externally prepared build data into the catalog.

Every entry is handled on its own: a bad entry is recorded in the report and
skipped, the rest of the batch still goes through.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from src.catalog.loader import Catalog
from src.utils.validators import validate_catalog_entry

logger = logging.getLogger(__name__)

# Fields rewritten by apply_scraped_data
SCRAPED_FIELDS = ('keystones', 'topBuilds')


@dataclass
class MergeReport:
    added: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failures: List[tuple[str, str]] = field(default_factory=list)

    def fail(self, entry_id: str, reason: str) -> None:
        logger.warning("Skipping %s: %s", entry_id, reason)
        self.failures.append((entry_id, reason))

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        return (
            f"{len(self.added)} added, {len(self.updated)} updated, "
            f"{len(self.skipped)} skipped, {len(self.failures)} failed"
        )


def merge_builds(
    catalog: Catalog,
    game_id: str,
    builds_by_class: Dict[str, Iterable[Dict[str, Any]]],
) -> MergeReport:
    """
    Add new builds to the classes of a game

    A build is skipped when its class already holds a build with the same id
    or the same name (case-insensitive). Existing builds are never modified.

    Args:
        catalog: Catalog to update in place
        game_id: Target game
        builds_by_class: {class_id: [build, ...]}

    Returns:
        MergeReport of the run

    Raises:
        ValueError: If the game does not exist
    """
    report = MergeReport()
    catalog.get_game(game_id)

    for class_id, builds in builds_by_class.items():
        cls = catalog.find_class(game_id, class_id)
        if cls is None:
            report.fail(class_id, "class not found in catalog")
            continue
        if not isinstance(builds, list):
            report.fail(class_id, "builds must be a list")
            continue

        existing_ids = {skill['id'] for skill in cls['skills']}
        existing_names = {skill['name'].casefold() for skill in cls['skills']}
        new_builds = []
        duplicates = 0

        for build in builds:
            is_valid, error = validate_catalog_entry(build, f"build for {class_id}")
            if not is_valid:
                report.fail(f"{class_id}/?", error)
                continue

            if build['id'] in existing_ids or build['name'].casefold() in existing_names:
                report.skipped.append(build['id'])
                duplicates += 1
                continue

            entry = dict(build)
            entry.setdefault('plannerUrl', None)
            new_builds.append(entry)
            existing_ids.add(entry['id'])
            existing_names.add(entry['name'].casefold())
            report.added.append(entry['id'])

        if new_builds:
            # New builds go first, like the scraped lists they come from
            cls['skills'][0:0] = new_builds
        logger.info("%s: %d new builds, %d duplicates skipped",
                    class_id, len(new_builds), duplicates)

    catalog.refresh()
    return report


def apply_scraped_data(catalog: Catalog, game_id: str, results: Iterable[Dict[str, Any]]) -> MergeReport:
    """
    Patch keystones and top builds into existing builds

    Each result looks like ``{"buildId", "keystones": [...], "builds": [...],
    "error"?}``. Only the builds named by a usable result are touched.

    Returns:
        MergeReport of the run
    """
    report = MergeReport()
    catalog.get_game(game_id)

    for result in results:
        build_id = result.get('buildId') if isinstance(result, dict) else None
        if not build_id:
            report.fail("?", "result without buildId")
            continue

        if result.get('error'):
            report.fail(build_id, f"scrape failed: {result['error']}")
            continue

        keystones = result.get('keystones') or []
        top_builds = result.get('builds') or []
        if not isinstance(keystones, list) or not isinstance(top_builds, list):
            report.fail(build_id, "malformed keystones/builds")
            continue
        if not keystones and not top_builds:
            report.skipped.append(build_id)
            continue

        found = catalog.find_skill(game_id, build_id)
        if found is None:
            report.fail(build_id, "build not found in catalog")
            continue

        _, skill = found
        for key in SCRAPED_FIELDS:
            skill.pop(key, None)
        if keystones:
            skill['keystones'] = list(keystones)
        if top_builds:
            skill['topBuilds'] = list(top_builds)
        report.updated.append(build_id)
        logger.info("Updated %s (%d keystones, %d builds)", build_id, len(keystones), len(top_builds))

    return report
