"""Visualization layer: themes and raster renderers."""

from complexity_drift.viz.render import cell_image, frame_image, render_animation, render_tiles
from complexity_drift.viz.theme import DEFAULT_THEME, REGISTERED_THEMES, Theme, get_theme

__all__ = [
    "DEFAULT_THEME",
    "REGISTERED_THEMES",
    "Theme",
    "cell_image",
    "frame_image",
    "get_theme",
    "render_animation",
    "render_tiles",
]
