"""Tests for complexity_drift.viz.render and complexity_drift.viz.theme modules."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from complexity_drift.viz.render import cell_image, frame_image, render_animation, render_tiles
from complexity_drift.viz.theme import DEFAULT_THEME, REGISTERED_THEMES, get_theme


class TestCellImage:
    def test_disc_drawn_only_in_active_cell(self) -> None:
        cells = np.zeros((3, 3), dtype=np.uint8)
        cells[1, 2] = 255
        image = cell_image(cells, scale=10)
        assert image.shape == (30, 30, 3)
        # center pixel of cell (x=2, y=1)
        assert tuple(image[15, 25]) == DEFAULT_THEME.active
        # corner of that cell lies outside the disc
        assert tuple(image[10, 20]) == DEFAULT_THEME.background
        assert (image[:, :20] == 0).all()

    def test_noise_cells_use_noise_color(self) -> None:
        cells = np.zeros((1, 1), dtype=np.uint8)
        cells[0, 0] = 1
        image = cell_image(cells, scale=5)
        assert tuple(image[2, 2]) == DEFAULT_THEME.noise

    def test_labeled_colors(self) -> None:
        cells = np.array([[255, 254, 253]], dtype=np.uint8)
        image = cell_image(cells, scale=1, labeled=True)
        assert [tuple(px) for px in image[0]] == list(DEFAULT_THEME.label_colors)

    def test_rejects_zero_scale(self) -> None:
        with pytest.raises(ValueError, match="scale"):
            cell_image(np.zeros((2, 2), dtype=np.uint8), scale=0)


class TestFrameImage:
    def test_progress_bar_width_is_proportional(self) -> None:
        image = frame_image(np.zeros((9, 9), dtype=np.uint8), step=128, steps=256, scale=25)
        bar = (image[-10:, :] == DEFAULT_THEME.progress).all(axis=2)
        assert bar[:, :112].all()
        assert not bar[:, 112:].any()
        assert not (image[:-10] == DEFAULT_THEME.progress).all(axis=2).any()

    def test_first_frame_has_no_bar(self) -> None:
        image = frame_image(np.zeros((4, 4), dtype=np.uint8), step=0, steps=10, scale=5)
        assert (image == 0).all()


def test_render_animation_writes_one_frame_per_snapshot(tmp_path: Path) -> None:
    snapshots = [np.zeros((4, 4), dtype=np.uint8) for _ in range(3)]
    snapshots[1][0, 0] = 255
    snapshots[2][3, 3] = 255
    path = tmp_path / "anim" / "run.gif"
    render_animation(snapshots, path, delay_cs=20, scale=10)
    with Image.open(path) as gif:
        assert gif.format == "GIF"
        assert gif.n_frames == 3


def test_render_animation_requires_snapshots(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="snapshots"):
        render_animation([], tmp_path / "x.gif")


class TestRenderTiles:
    def test_sheet_layout(self, tmp_path: Path) -> None:
        tiles = [np.zeros((4, 6), dtype=np.uint8) for _ in range(3)]
        tiles[2][0, 0] = 255
        path = tmp_path / "sheet.png"
        sheet = render_tiles(tiles, path, columns=2)
        assert sheet.shape == (8, 12, 3)
        assert tuple(sheet[4, 0]) == DEFAULT_THEME.label_colors[0]
        assert path.exists()

    def test_rejects_mixed_shapes(self, tmp_path: Path) -> None:
        tiles = [np.zeros((4, 4), dtype=np.uint8), np.zeros((5, 5), dtype=np.uint8)]
        with pytest.raises(ValueError, match="shape"):
            render_tiles(tiles, tmp_path / "bad.png")


class TestTheme:
    def test_registered_lookup(self) -> None:
        assert get_theme("paper") is REGISTERED_THEMES["paper"]

    def test_unknown_theme(self) -> None:
        with pytest.raises(ValueError, match="theme must be one of"):
            get_theme("neon")

    def test_unlisted_label_falls_back_to_active(self) -> None:
        assert DEFAULT_THEME.color_for(200, labeled=True) == DEFAULT_THEME.active
