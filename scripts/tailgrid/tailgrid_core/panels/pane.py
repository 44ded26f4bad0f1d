"""Pane renderer and grid composition for one frame."""

from __future__ import annotations

from itertools import groupby

from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from tailgrid_core.models import PaneFrame
from tailgrid_core.panels import PANE_STYLE, segments_to_text


def render(frame: PaneFrame) -> Panel:
    return Panel(
        segments_to_text(frame.lines),
        title=Text(frame.title, style="bold"),
        title_align="left",
        border_style=frame.border_style,
        style=PANE_STYLE,
        padding=(0, 0),
        height=frame.rect.height,
        width=frame.rect.width,
    )


def compose(frames: list[PaneFrame], width: int) -> Layout | Panel:
    """Place the panes at the rectangles computed by the layout engine."""
    if not frames:
        return Panel(Text("No sources configured", style="dim"), border_style="red")

    ordered = sorted(frames, key=lambda f: (f.rect.y, f.rect.x))
    rows: list[Layout] = []
    for _y, group in groupby(ordered, key=lambda f: f.rect.y):
        cells = list(group)
        columns = [Layout(render(f), size=f.rect.width) for f in cells]
        used = sum(f.rect.width for f in cells)
        if used < width:
            # Slots of a short last row stay empty.
            columns.append(Layout(Text(""), ratio=1))
        row = Layout(size=cells[0].rect.height)
        row.split_row(*columns)
        rows.append(row)

    root = Layout()
    root.split_column(*rows)
    return root
