"""
Tests for cross-stitch pattern rendering.
"""

import numpy as np
import pytest
import matplotlib.pyplot as plt

from fssp.simulation import run_simulation
from fssp.symbols import SymbolAssignment, color_set
from fssp.visualization import (
    CUTOUT_SHAPE,
    DEFAULT_PALETTE,
    apply_mounting_mask,
    default_zero_level,
    fit_to_raster,
    history_to_identifiers,
    plot_history,
    plot_pattern,
    save_pattern,
    stitch_pattern,
)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


class TestFitToRaster:
    """Tests for centring an image in a fixed raster."""

    def test_pad_both_axes(self):
        """A small image is letterboxed in the middle."""
        image = np.array([[1, 2], [3, 4]])
        raster = fit_to_raster(image, (4, 6))

        assert raster.shape == (4, 6)
        np.testing.assert_array_equal(raster[1:3, 2:4], image)
        assert raster.sum() == image.sum()

    def test_crop_both_axes(self):
        """A large image keeps its centre."""
        image = np.arange(25).reshape(5, 5)
        raster = fit_to_raster(image, (3, 3))

        np.testing.assert_array_equal(raster, image[1:4, 1:4])

    def test_mixed_axes(self):
        """Rows and columns are fitted independently."""
        image = np.arange(12).reshape(2, 6) + 1
        raster = fit_to_raster(image, (4, 3))

        assert raster.shape == (4, 3)
        np.testing.assert_array_equal(raster[1:3, :], image[:, 1:4])
        assert not raster[0].any() and not raster[3].any()

    def test_exact_fit(self):
        """Matching sizes leave the image unchanged."""
        image = np.arange(6).reshape(2, 3)
        np.testing.assert_array_equal(fit_to_raster(image, (2, 3)), image)

    def test_fill_value(self):
        """Letterbox stitches use the fill value."""
        raster = fit_to_raster(np.ones((1, 1)), (3, 3), fill=-1)

        assert raster[1, 1] == 1
        assert (raster == -1).sum() == 8

    def test_unknown_method(self):
        """Only the crop method is supported."""
        with pytest.raises(ValueError, match="method must be one of"):
            fit_to_raster(np.ones((2, 2)), (2, 2), method="scale")


class TestMask:
    """Tests for mounting-hardware masking."""

    def test_mask_positions(self):
        """Corner clips and the camera cut-out are blanked."""
        raster = np.full((69, 33), 5)
        masked = apply_mounting_mask(raster, 0)

        for r, c in [(0, 0), (0, 1), (1, 0), (0, 32), (0, 31), (1, 32), (68, 32), (68, 31), (67, 32)]:
            assert masked[r, c] == 0
        assert not masked[-CUTOUT_SHAPE[0]:, :CUTOUT_SHAPE[1]].any()
        assert (masked == 0).sum() == 8 * 12 + 9
        assert masked[2, 2] == 5

    def test_returns_copy(self):
        """The input raster is not modified."""
        raster = np.full((20, 20), 3)
        apply_mounting_mask(raster, -1)
        assert (raster == 3).all()

    def test_float_zero_level(self):
        """Fractional mask values survive integer rasters."""
        masked = apply_mounting_mask(np.full((20, 20), 3), -0.5)
        assert masked[0, 0] == -0.5

    def test_too_small(self):
        """Rasters smaller than 2x2 cannot be masked."""
        with pytest.raises(ValueError, match="2x2"):
            apply_mounting_mask(np.ones((1, 5)), 0)


class TestZeroLevel:
    """Tests for the default mask value."""

    def test_one_step_below(self):
        """Mask sits one palette step below the smallest identifier."""
        raster = np.array([[1, 13], [7, 7]])
        assert default_zero_level(raster, 3) == -5.0

    def test_constant_raster(self):
        """A flat raster still gets a distinct mask value."""
        assert default_zero_level(np.full((3, 3), 4), 3) == 3.0


class TestStitchPattern:
    """Tests for full pattern rendering."""

    def test_identifiers_follow_assignment(self, catalog):
        """Each cell is mapped through the symbol assignment."""
        history = run_simulation(1, catalog=catalog)
        assignment = SymbolAssignment.identity()

        ids = history_to_identifiers(history, assignment)

        np.testing.assert_array_equal(ids, [[2, 3, 2], [2, 7, 2], [2, 15, 2]])

    def test_identifiers_skip_pending(self, catalog):
        """Only simulated snapshots are rendered."""
        history = run_simulation(2, steps=10, catalog=catalog)
        ids = history_to_identifiers(history, color_set(2))

        assert ids.shape == (6, 4)

    def test_reference_pattern(self, reference_history):
        """The reference run fills the default 69x33 pattern."""
        pattern = stitch_pattern(reference_history, color_set(1))

        assert pattern.shape == (69, 33)
        assert pattern.palette == DEFAULT_PALETTE
        assert pattern.zero_level < 0
        assert (pattern.raster[:CUTOUT_SHAPE[0], :CUTOUT_SHAPE[1]] == pattern.zero_level).all()
        assert pattern.raster[-1, 0] == pattern.zero_level
        assert pattern.colormap.N == len(DEFAULT_PALETTE) + 1

    def test_explicit_zero_level(self, catalog):
        """A supplied mask value is used as is."""
        history = run_simulation(5, catalog=catalog)
        pattern = stitch_pattern(history, color_set(1), dims=(20, 10), zero_level=-3)

        assert pattern.zero_level == -3
        assert pattern.raster[0, 0] == -3

    def test_color_sets_change_identifiers(self, reference_history):
        """Different colour sets give different patterns for one history."""
        first = stitch_pattern(reference_history, color_set(1))
        other = stitch_pattern(reference_history, color_set(2))

        assert first.shape == other.shape
        assert not np.array_equal(first.raster, other.raster)


class TestPlotting:
    """Tests for matplotlib output."""

    def test_plot_history(self, catalog):
        """Space-time diagram is drawn on the given axes."""
        history = run_simulation(5, catalog=catalog)
        ax = plot_history(history, color_set(1))

        assert ax.get_title() == "FSSP n=5"

    def test_plot_pattern(self, reference_history):
        """Pattern plot creates an image."""
        _, ax = plt.subplots()
        plot_pattern(stitch_pattern(reference_history, color_set(1)), ax)

        assert len(ax.images) == 1

    def test_save_pattern(self, reference_history, tmp_path, capsys):
        """Patterns are written to disk, creating parent directories."""
        path = tmp_path / "out" / "pattern.png"
        save_pattern(stitch_pattern(reference_history, color_set(1)), str(path))

        assert path.exists()
        assert "Pattern saved" in capsys.readouterr().out
