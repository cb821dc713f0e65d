"""
Demo script for the wheel engine (no Telegram, no web)
"""
# -*- coding: utf-8 -*-
import asyncio
import io
import random
import sys

# Fix encoding on Windows
if sys.platform == 'win32':
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')

from config.config import CATALOG_PATH
from src.catalog.loader import load_catalog
from src.wheel.animator import WheelAnimator
from src.wheel.errors import InvalidSpinRequest
from src.wheel.geometry import landed_index
from src.wheel.orchestrator import BuildRandomizer

# Short timings so the demo finishes quickly
DEMO_DURATION = 0.4
DEMO_DELAY = 0.05


def print_separator():
    print("-" * 50)


def name_of(item):
    return item['name'] if item else "-"


async def spin_once(randomizer):
    loop = asyncio.get_running_loop()
    finished = loop.create_future()
    randomizer.request_spin(on_finished=finished.set_result)
    return await finished


async def demo_single_wheel():
    """One wheel, ticks and landing check"""
    print("\n[DEMO] Single wheel")
    print_separator()

    catalog = load_catalog(CATALOG_PATH)
    randomizer = BuildRandomizer(catalog, game_id="diablo4", rng=random.Random(7))
    items = randomizer.class_items()

    ticks = []
    landed = asyncio.get_running_loop().create_future()
    wheel = WheelAnimator(
        "demo", items,
        on_complete=landed.set_result,
        on_tick=lambda index, count: ticks.append(index),
        duration=DEMO_DURATION,
        rng=random.Random(7),
    )
    resolution = wheel.spin()
    print(f"[SPIN] Target: {resolution.item.name} (+{resolution.total_delta:.1f} deg)")
    item = await landed
    index = landed_index(wheel.rotation, len(items))
    print(f"[OK] Landed on {item.name}, pointer over sector {index} ({items[index].name})")
    print(f"[INFO] Ticks fired: {len(ticks)}")


async def demo_dual_wheel():
    """Class wheel then build wheel"""
    print("\n[DEMO] Dual wheel")
    print_separator()

    catalog = load_catalog(CATALOG_PATH)
    randomizer = BuildRandomizer(
        catalog, game_id="diablo4", rng=random.Random(42),
        spin_duration=DEMO_DURATION, inter_wheel_delay=DEMO_DELAY,
    )
    for i in range(3):
        record = await spin_once(randomizer)
        print(f"  Spin {i+1}: {name_of(record['class'])} / {name_of(record['skill'])}")

    print(f"\n[INFO] History: {len(randomizer.session.history)} results")


async def demo_locks_and_filters():
    """Locks skip a wheel, filters shrink the pool"""
    print("\n[DEMO] Locks and filters")
    print_separator()

    catalog = load_catalog(CATALOG_PATH)
    randomizer = BuildRandomizer(
        catalog, game_id="diablo4", rng=random.Random(3),
        spin_duration=DEMO_DURATION, inter_wheel_delay=DEMO_DELAY,
    )

    randomizer.lock_class("sorcerer")
    record = await spin_once(randomizer)
    print(f"[LOCK] Class locked: {name_of(record['class'])} / {name_of(record['skill'])}")
    randomizer.unlock_class()

    randomizer.set_difficulty("easy")
    print(f"[FILTER] Easy builds only: {len(randomizer.displayed_skills())} on the build wheel")
    record = await spin_once(randomizer)
    print(f"  Result: {name_of(record['class'])} / {name_of(record['skill'])}")

    randomizer.lock_class("barbarian")
    randomizer.lock_skill("hota-barb")
    try:
        randomizer.request_spin()
    except InvalidSpinRequest as e:
        print(f"[ERROR] {e.reason}: {e.message}")


async def main():
    await demo_single_wheel()
    await demo_dual_wheel()
    await demo_locks_and_filters()


if __name__ == "__main__":
    print("=" * 50)
    print("BUILD WHEEL - DEMO")
    print("=" * 50)

    asyncio.run(main())

    print("\n" + "=" * 50)
    print("[OK] Demo finished!")
    print("=" * 50)
