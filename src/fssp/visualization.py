"""
Visualization utilities for FSSP.

Turns a history into a cross-stitch pattern: every cell's rendering
identifier is fitted into a fixed-size raster (centred, cropped or
letterboxed per axis), the stitches reserved for mounting hardware are
masked, and the result is drawn with a small colour palette.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors

from .state import History
from .symbols import SymbolAssignment


# Coral, charcoal, azure
DEFAULT_PALETTE: tuple[tuple[float, float, float], ...] = (
    (1.0, 0.4, 0.4),
    (0.2, 0.2, 0.2),
    (0.0, 0.5, 1.0),
)
MASK_COLOR = (1.0, 1.0, 1.0)

# Three stitches at three of the corners hold the case clips
MOUNT_POINTS = (
    (0, 0), (0, 1), (1, 0),
    (0, -1), (0, -2), (1, -1),
    (-1, -1), (-1, -2), (-2, -1),
)
# Camera cut-out: last 8 rows, first 12 columns
CUTOUT_SHAPE = (8, 12)

FIT_METHODS = ("crop",)


@dataclass(frozen=True)
class StitchPattern:
    """
    A rendered pattern ready for plotting.

    Attributes:
        raster: Identifier per stitch [rows, cols]
        zero_level: Value used for masked stitches
        palette: RGB colours for the stitched identifiers
    """

    raster: np.ndarray
    zero_level: float
    palette: tuple[tuple[float, float, float], ...]

    @property
    def shape(self) -> tuple[int, int]:
        return self.raster.shape

    @property
    def colormap(self) -> mcolors.ListedColormap:
        """Palette with the mask colour prepended."""
        return mcolors.ListedColormap([MASK_COLOR, *self.palette])


def history_to_identifiers(history: History, assignment: SymbolAssignment) -> np.ndarray:
    """
    Map every simulated cell to its rendering identifier.

    Args:
        history: Simulated history (pending snapshots are skipped)
        assignment: Identifier for each role

    Returns:
        Integer array [steps_simulated, n + 2], time running down the rows
    """
    codes = np.array(history.as_array())
    lookup = np.array(assignment.identifiers)
    return lookup[codes]


def _center_slices(src: int, dst: int) -> tuple[slice, slice]:
    """Source and destination slices centring one axis (round-half-up offsets)."""
    if src <= dst:
        start = (dst + 1) // 2 - (src + 1) // 2
        return slice(0, src), slice(start, start + src)
    start = (src + 1) // 2 - (dst + 1) // 2
    return slice(start, start + dst), slice(0, dst)


def fit_to_raster(
    image: np.ndarray,
    dims: tuple[int, int],
    method: str = "crop",
    fill: float = 0,
) -> np.ndarray:
    """
    Centre an image in a raster of fixed size.

    Each axis is handled independently: a smaller axis is letterboxed with
    ``fill`` and a larger axis is centre-cropped.

    Args:
        image: 2D array
        dims: Raster size (rows, cols)
        method: Fitting method ("crop")
        fill: Value for stitches not covered by the image

    Returns:
        Array of shape ``dims``
    """
    if method not in FIT_METHODS:
        raise ValueError(f"method must be one of {FIT_METHODS}, got {method!r}")

    rows, cols = dims
    src_rows, dst_rows = _center_slices(image.shape[0], rows)
    src_cols, dst_cols = _center_slices(image.shape[1], cols)

    raster = np.full((rows, cols), fill, dtype=np.result_type(image, np.asarray(fill)))
    raster[dst_rows, dst_cols] = image[src_rows, src_cols]
    return raster


def default_zero_level(raster: np.ndarray, palette_size: int) -> float:
    """
    Mask value one palette step below the smallest identifier.

    Args:
        raster: Fitted raster
        palette_size: Number of colours used for stitched identifiers
    """
    low, high = float(np.min(raster)), float(np.max(raster))
    step = (high - low) / (palette_size - 1) if palette_size > 1 else 0.0
    if step == 0:
        step = 1.0
    return low - step


def apply_mounting_mask(raster: np.ndarray, zero_level: float) -> np.ndarray:
    """
    Blank the stitches covered by mounting hardware.

    Args:
        raster: Fitted raster (at least 2x2)
        zero_level: Value for masked stitches

    Returns:
        Masked copy of the raster
    """
    if min(raster.shape) < 2:
        raise ValueError(f"raster must be at least 2x2 to mask, got {raster.shape}")

    masked = raster.astype(np.result_type(raster, np.asarray(zero_level)), copy=True)
    for r, c in MOUNT_POINTS:
        masked[r, c] = zero_level
    masked[-CUTOUT_SHAPE[0]:, :CUTOUT_SHAPE[1]] = zero_level
    return masked


def stitch_pattern(
    history: History,
    assignment: SymbolAssignment,
    dims: tuple[int, int] = (69, 33),
    method: str = "crop",
    zero_level: Optional[float] = None,
    palette: tuple[tuple[float, float, float], ...] = DEFAULT_PALETTE,
) -> StitchPattern:
    """
    Render a history as a cross-stitch pattern.

    The history is flipped so time runs upward while fitting and masking,
    then flipped back for display.

    Args:
        history: Simulated history
        assignment: Identifier for each role
        dims: Pattern size in stitches (rows, cols)
        method: Fitting method ("crop")
        zero_level: Mask value (one palette step below the data if omitted)
        palette: RGB colours for stitched identifiers

    Returns:
        StitchPattern
    """
    image = np.flipud(history_to_identifiers(history, assignment))
    raster = fit_to_raster(image, dims, method)

    if zero_level is None:
        zero_level = default_zero_level(raster, len(palette))

    raster = apply_mounting_mask(raster, zero_level)
    return StitchPattern(raster=np.flipud(raster), zero_level=zero_level, palette=tuple(palette))


def plot_history(
    history: History,
    assignment: SymbolAssignment,
    ax: Optional[plt.Axes] = None,
) -> plt.Axes:
    """
    Draw the raw space-time diagram (time down, position across).

    Args:
        history: Simulated history
        assignment: Identifier for each role
        ax: Axes to draw on (a new figure if omitted)
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))

    ax.imshow(history_to_identifiers(history, assignment), interpolation="nearest")
    ax.set_xlabel("Position")
    ax.set_ylabel("Step")
    ax.set_title(f"FSSP n={history.n}")
    return ax


def plot_pattern(pattern: StitchPattern, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """
    Draw a stitch pattern with a 5-stitch reference grid.

    Args:
        pattern: Rendered pattern
        ax: Axes to draw on (a new figure if omitted)
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(5, 9))

    rows, cols = pattern.shape
    ax.imshow(
        pattern.raster,
        cmap=pattern.colormap,
        vmin=pattern.zero_level,
        vmax=float(np.max(pattern.raster)),
        interpolation="nearest",
    )
    ax.set_xticks(np.arange(0, cols + 1, 5))
    ax.set_yticks(np.arange(0, rows + 1, 5))
    ax.set_xticks(np.arange(-0.5, cols, 1), minor=True)
    ax.set_yticks(np.arange(-0.5, rows, 1), minor=True)
    ax.grid(which="minor", color="0.8", linewidth=0.3)
    ax.grid(which="major", color="0.4", linewidth=0.6)
    return ax


def save_pattern(pattern: StitchPattern, path: str) -> None:
    """
    Save a stitch pattern as an image.

    Args:
        pattern: Rendered pattern
        path: Output file path (png, pdf, svg, ...)
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(5, 9))
    plot_pattern(pattern, ax)
    fig.savefig(output_path, bbox_inches="tight")
    plt.close(fig)

    print(f"Pattern saved to {output_path}")
