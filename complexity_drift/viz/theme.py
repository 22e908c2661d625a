"""Visualization theme presets for grid renderers.

Themes are frozen dataclasses that group all styling constants together so
renderers accept a ``Theme`` instead of hard-coded module-level colors.
"""

from __future__ import annotations

from dataclasses import dataclass

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    background: RGB = (0, 0, 0)
    active: RGB = (0xFF, 0xFF, 0xFF)
    noise: RGB = (0x55, 0x55, 0x55)
    progress: RGB = (0, 0, 0xFF)
    # Label colors for cell bytes 255, 254, 253, ... in that order
    label_colors: tuple[RGB, ...] = ((0xFF, 0, 0), (0, 0xFF, 0), (0, 0, 0xFF))

    def color_for(self, value: int, labeled: bool = False) -> RGB:
        """Return the fill color of a non-zero cell byte."""
        if value == 1:
            return self.noise
        if not labeled:
            return self.active
        index = 255 - value
        if 0 <= index < len(self.label_colors):
            return self.label_colors[index]
        return self.active


DEFAULT_THEME = Theme()

REGISTERED_THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "paper": Theme(
        background=(0xFF, 0xFF, 0xFF),
        active=(0x21, 0x21, 0x21),
        noise=(0xBD, 0xBD, 0xBD),
        progress=(0x21, 0x96, 0xF3),
        label_colors=((0x21, 0x96, 0xF3), (0xFF, 0x57, 0x22), (0x4C, 0xAF, 0x50)),
    ),
}


def get_theme(name: str) -> Theme:
    """Look up a registered theme by name."""
    try:
        return REGISTERED_THEMES[name]
    except KeyError as exc:
        valid = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"theme must be one of {valid}") from exc
