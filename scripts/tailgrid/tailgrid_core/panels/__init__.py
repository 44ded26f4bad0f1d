"""Panel rendering helpers."""

from __future__ import annotations

from rich.text import Text

from tailgrid_core.models import ConnectionStatus, Segment

SELECTED_BORDER = "yellow"
STATUS_BORDER = {
    "connecting": "white",
    "connected": "white",
    "error": "red",
}
ERROR_LINE_STYLE = "bold red"
PANE_STYLE = "white on black"


def border_for(selected: bool, status: ConnectionStatus) -> str:
    if selected:
        return SELECTED_BORDER
    return STATUS_BORDER.get(status.state.value, "white")


def segments_to_text(rows: list[list[Segment]]) -> Text:
    text = Text(no_wrap=True, overflow="crop", end="")
    for i, row in enumerate(rows):
        if i:
            text.append("\n")
        for chunk, style in row:
            text.append(chunk, style=style or None)
    return text
