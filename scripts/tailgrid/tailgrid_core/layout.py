"""Square-ish grid layout for panes and grid-aware selection movement."""

from __future__ import annotations

import math

from tailgrid_core.models import Rect

DIRECTIONS = ("left", "right", "up", "down")


def grid_shape(count: int) -> tuple[int, int]:
    if count <= 0:
        return 0, 0
    rows = math.ceil(math.sqrt(count))
    cols = math.ceil(count / rows)
    return rows, cols


def _split(start: int, length: int, parts: int) -> list[tuple[int, int]]:
    # Integer cut points so the parts always sum to ``length``.
    cuts = [start + (i * length) // parts for i in range(parts + 1)]
    return [(cuts[i], cuts[i + 1] - cuts[i]) for i in range(parts)]


def grid_layout(area: Rect, count: int) -> list[Rect]:
    rows, cols = grid_shape(count)
    if rows == 0:
        return []

    cells: list[Rect] = []
    for y, height in _split(area.y, area.height, rows):
        for x, width in _split(area.x, area.width, cols):
            cells.append(Rect(x, y, width, height))
    return cells[:count]


def pane_rects(area: Rect, count: int, maximized: bool, selected: int) -> dict[int, Rect]:
    if count <= 0:
        return {}
    if maximized:
        return {selected: area}
    return dict(enumerate(grid_layout(area, count)))


def neighbour_index(index: int, count: int, direction: str) -> int:
    """Index of the pane next to ``index``; clamps at the grid edges."""
    if direction not in DIRECTIONS:
        raise ValueError(f"unknown direction: {direction}")
    if count <= 0:
        return 0
    _rows, cols = grid_shape(count)
    col = index % cols

    if direction == "left":
        target = index - 1 if col > 0 else index
    elif direction == "right":
        target = index + 1 if col < cols - 1 else index
    elif direction == "up":
        target = index - cols
    else:
        target = index + cols

    if 0 <= target < count:
        return target
    return index
