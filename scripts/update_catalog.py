"""
Offline catalog maintenance.

    python scripts/update_catalog.py merge builds.json [--game poe1]
    python scripts/update_catalog.py apply scraped.json [--game poe1]

``merge`` expects ``{class_id: [build, ...]}`` or a list of
``{"id": class_id, "skills": [...]}``; ``apply`` expects a list of
``{"buildId", "keystones", "builds", "error"?}`` results. The catalog is
written back in place unless ``--dry-run`` is given.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Make sure the project root is on PYTHONPATH
root_dir = Path(__file__).resolve().parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from config.config import CATALOG_PATH
from src.catalog.loader import load_catalog, save_catalog
from src.catalog.merge import apply_scraped_data, merge_builds

logger = logging.getLogger("update_catalog")


def _builds_by_class(data) -> dict:
    if isinstance(data, dict):
        return data
    if isinstance(data, list):
        return {
            entry.get('id'): entry.get('skills', [])
            for entry in data
            if isinstance(entry, dict)
        }
    raise ValueError("builds file must be an object or a list of classes")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Update the build catalog from prepared data files.")
    parser.add_argument("--catalog", type=Path, default=CATALOG_PATH, help="Catalog JSON file")
    parser.add_argument("--game", default="poe1", help="Game id to update (default: poe1)")
    parser.add_argument("--dry-run", action="store_true", help="Report only, do not write the catalog")
    subparsers = parser.add_subparsers(dest="command", required=True)

    merge_parser = subparsers.add_parser("merge", help="Add new builds, skipping duplicates")
    merge_parser.add_argument("input", type=Path, help="JSON file with builds per class")

    apply_parser = subparsers.add_parser("apply", help="Patch keystones/top builds into existing builds")
    apply_parser.add_argument("input", type=Path, help="JSON file with scrape results")

    args = parser.parse_args(argv)

    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=logging.INFO
    )

    catalog = load_catalog(args.catalog)
    with open(args.input, encoding='utf-8') as f:
        data = json.load(f)

    if args.command == "merge":
        report = merge_builds(catalog, args.game, _builds_by_class(data))
    else:
        if not isinstance(data, list):
            parser.error("scrape results must be a JSON list")
        report = apply_scraped_data(catalog, args.game, data)

    logger.info("Done: %s", report.summary())
    for entry_id, reason in report.failures:
        logger.warning("  %s: %s", entry_id, reason)

    if args.dry_run:
        logger.info("Dry run, catalog not written")
    elif report.added or report.updated:
        save_catalog(catalog, args.catalog)
        logger.info("Wrote %s", args.catalog)
    else:
        logger.info("No changes, catalog not written")

    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
