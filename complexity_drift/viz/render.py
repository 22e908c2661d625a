"""Raster rendering of grid snapshots to animated GIFs and static PNGs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib import animation  # noqa: E402

from complexity_drift.config.constants import (  # noqa: E402
    FRAME_DELAY_CS,
    FRAME_SCALE,
    PROGRESS_BAR_HEIGHT,
)
from complexity_drift.viz.theme import DEFAULT_THEME, Theme  # noqa: E402

logger = logging.getLogger(__name__)

_DPI = 100


def _disc_mask(scale: int) -> np.ndarray:
    """Boolean ``(scale, scale)`` mask of a disc inscribed in one cell."""
    # distances are measured from pixel centers so scale 1 still fills its cell
    offsets = (scale - 1) / 2 - np.arange(scale, dtype=float)
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
    return 2 * np.sqrt(dx * dx + dy * dy) / scale < 1


def cell_image(
    cells: np.ndarray,
    scale: int = FRAME_SCALE,
    labeled: bool = False,
    theme: Theme = DEFAULT_THEME,
) -> np.ndarray:
    """Return an ``(H*scale, W*scale, 3)`` uint8 raster with one disc per active cell."""
    if scale < 1:
        raise ValueError("scale must be >= 1")
    height, width = cells.shape
    image = np.empty((height * scale, width * scale, 3), dtype=np.uint8)
    image[:, :] = theme.background
    disc = _disc_mask(scale)
    ys, xs = np.nonzero(cells)
    for y, x in zip(ys, xs, strict=True):
        block = image[y * scale : (y + 1) * scale, x * scale : (x + 1) * scale]
        block[disc] = theme.color_for(int(cells[y, x]), labeled=labeled)
    return image


def frame_image(
    cells: np.ndarray,
    step: int,
    steps: int,
    scale: int = FRAME_SCALE,
    theme: Theme = DEFAULT_THEME,
) -> np.ndarray:
    """Render one animation frame with a progress bar proportional to *step*."""
    if steps < 1:
        raise ValueError("steps must be >= 1")
    image = cell_image(cells, scale=scale, theme=theme)
    height, width = image.shape[:2]
    bar_width = min(width, int(step * cells.shape[1] * scale / steps))
    bar_top = max(0, height - PROGRESS_BAR_HEIGHT)
    image[bar_top:height, :bar_width] = theme.progress
    return image


def render_animation(
    snapshots: list[np.ndarray],
    output_path: Path,
    delay_cs: int = FRAME_DELAY_CS,
    scale: int = FRAME_SCALE,
    theme: Theme = DEFAULT_THEME,
) -> None:
    """Write *snapshots* as an animated GIF, each frame shown for *delay_cs* centiseconds."""
    if not snapshots:
        raise ValueError("snapshots must not be empty")
    if delay_cs < 1:
        raise ValueError("delay_cs must be >= 1")
    steps = len(snapshots)
    frames = [
        frame_image(cells, step, steps, scale=scale, theme=theme)
        for step, cells in enumerate(snapshots)
    ]
    height, width = frames[0].shape[:2]

    fig = plt.figure(figsize=(width / _DPI, height / _DPI), dpi=_DPI)
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_axis_off()
    img = ax.imshow(frames[0], interpolation="nearest")

    def update(frame_index: int) -> tuple[Any, ...]:
        img.set_data(frames[frame_index])
        return (img,)

    fps = 100 / delay_cs
    anim = animation.FuncAnimation(
        fig, update, frames=len(frames), interval=delay_cs * 10, blit=False
    )
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        anim.save(output_path, writer=animation.PillowWriter(fps=fps), dpi=_DPI)
    finally:
        plt.close(fig)
    logger.info("wrote %d frames to %s", len(frames), output_path)


def render_tiles(
    tiles: list[np.ndarray],
    output_path: Path,
    columns: int = 2,
    labeled: bool = True,
    theme: Theme = DEFAULT_THEME,
) -> np.ndarray:
    """Stitch per-tile grids into a sheet (one pixel per cell) and save it as PNG.

    Tiles fill the sheet row by row; missing slots stay background-colored.
    Returns the stitched raster.
    """
    if not tiles:
        raise ValueError("tiles must not be empty")
    if columns < 1:
        raise ValueError("columns must be >= 1")
    shape = tiles[0].shape
    if any(tile.shape != shape for tile in tiles):
        raise ValueError("all tiles must share one shape")
    rows = -(-len(tiles) // columns)
    height, width = shape
    sheet = np.empty((rows * height, columns * width, 3), dtype=np.uint8)
    sheet[:, :] = theme.background
    for index, tile in enumerate(tiles):
        row, col = divmod(index, columns)
        sheet[row * height : (row + 1) * height, col * width : (col + 1) * width] = cell_image(
            tile, scale=1, labeled=labeled, theme=theme
        )
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.imsave(output_path, sheet)
    logger.info("wrote %d tiles to %s", len(tiles), output_path)
    return sheet
