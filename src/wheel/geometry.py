"""
Sector geometry of a wheel.

Angles are in degrees, measured clockwise from the positive x axis in screen
coordinates (y grows downwards), so -90 is 12 o'clock where the pointer sits.
Sector 0 starts at the pointer and sectors follow clockwise.
"""
import math
from typing import Optional, Sequence

from src.models.wheel_item import WheelItem

POINTER_ANGLE = -90.0
WHEEL_RADIUS = 140
LABEL_RADIUS = 85


def sector_angle(item_count: int) -> float:
    if item_count <= 0:
        raise ValueError("item_count must be > 0")
    return 360.0 / item_count


def sector_bounds(index: int, item_count: int) -> tuple[float, float]:
    """Start and end angle of sector ``index``."""
    s = sector_angle(item_count)
    start = POINTER_ANGLE + index * s
    return start, start + s


def midpoint_angle(index: int, item_count: int) -> float:
    s = sector_angle(item_count)
    return POINTER_ANGLE + index * s + s / 2


def label_placement(index: int, item_count: int, radius: float = LABEL_RADIUS) -> tuple[float, float, float]:
    """
    Position and rotation of a sector label

    Args:
        index: Sector index
        item_count: Number of sectors
        radius: Distance of the label from the wheel centre

    Returns:
        Tuple (x, y, rotation); rotation is turned by 180 for labels on the
        lower half so text is never upside down
    """
    angle = midpoint_angle(index, item_count)
    rad = math.radians(angle)
    x = math.cos(rad) * radius
    y = math.sin(rad) * radius

    rotation = angle
    if 0 < angle < 180:
        rotation += 180
    return x, y, rotation


def sector_color(index: int, item_count: int, item: Optional[WheelItem] = None) -> str:
    """Explicit item colour, else an evenly spaced hue."""
    if item is not None and item.color:
        return item.color
    hue = index * 360 / item_count
    return f"hsl({hue:g}, 60%, 40%)"


def label_font_size(item_count: int) -> int:
    if item_count > 10:
        return 7
    if item_count > 6:
        return 8
    return 10


def sector_path(index: int, item_count: int, radius: float = WHEEL_RADIUS) -> str:
    """SVG path of a sector, centred on the origin."""
    start, end = sector_bounds(index, item_count)
    x1 = math.cos(math.radians(start)) * radius
    y1 = math.sin(math.radians(start)) * radius
    x2 = math.cos(math.radians(end)) * radius
    y2 = math.sin(math.radians(end)) * radius
    large_arc = 1 if sector_angle(item_count) > 180 else 0
    return (
        f"M 0 0 L {x1:.3f} {y1:.3f} "
        f"A {radius} {radius} 0 {large_arc} 1 {x2:.3f} {y2:.3f} Z"
    )


def wheel_layout(
    items: Sequence[WheelItem],
    radius: float = WHEEL_RADIUS,
    label_radius: float = LABEL_RADIUS,
) -> list[dict]:
    """Render data for every sector; empty for an empty wheel."""
    count = len(items)
    if count == 0:
        return []

    font_size = label_font_size(count)
    layout = []
    for index, item in enumerate(items):
        start, end = sector_bounds(index, count)
        x, y, rotation = label_placement(index, count, label_radius)
        layout.append({
            'id': item.id,
            'label': item.short_label(),
            'color': sector_color(index, count, item),
            'start_angle': start,
            'end_angle': end,
            'path': sector_path(index, count, radius) if count > 1 else None,
            'label_x': round(x, 3),
            'label_y': round(y, 3),
            'label_rotation': rotation,
            'font_size': font_size,
        })
    return layout


def landed_index(rotation: float, item_count: int) -> int:
    """
    Index of the sector under the pointer once the wheel is turned
    clockwise by ``rotation`` degrees.
    """
    s = sector_angle(item_count)
    offset = (-rotation) % 360.0
    return int(offset // s) % item_count
