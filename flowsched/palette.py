"""Per-task display colours for schedule viewers."""

from typing import List, Tuple

BACKGROUND_START_RGB = 0x1aa02a
BACKGROUND_STEP_RGB = 0x33c056
# R+G+B at or above this reads better with black text
MIN_LIGHT_SUM = 383


def background_colors(count: int) -> List[str]:
    """`count` visually distinct '#rrggbb' colours."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    colors = []
    rgb = BACKGROUND_START_RGB
    for _ in range(count):
        colors.append(f"#{rgb & 0xffffff:06x}")
        rgb += BACKGROUND_STEP_RGB
    return colors


def _parse_hex(color: str) -> Tuple[int, int, int]:
    text = color.lstrip("#")
    if len(text) != 6:
        raise ValueError(f"expected a '#rrggbb' colour, got {color!r}")
    try:
        value = int(text, 16)
    except ValueError:
        raise ValueError(f"expected a '#rrggbb' colour, got {color!r}") from None
    return (value >> 16) & 0xff, (value >> 8) & 0xff, value & 0xff


def foreground_color(background: str) -> str:
    """Black or white, whichever contrasts with `background`."""
    return "#000000" if sum(_parse_hex(background)) >= MIN_LIGHT_SUM else "#ffffff"
