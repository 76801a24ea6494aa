"""Histogram accumulation and per-channel statistics."""

from __future__ import annotations

import math
from typing import Any

import numpy as np
import numpy.typing as npt

from .config import DEFAULT_INTENSITY_RANGE
from .exceptions import InvalidImageError
from .models import ChannelStatistics

_COLOR_CHANNELS = 3

Histogram = npt.NDArray[np.int64]


def as_pixel_grid(pixel_grid: Any, intensity_range: int = DEFAULT_INTENSITY_RANGE) -> npt.NDArray[Any]:
    """Convert input to an (H, W, 3) integer array and check it.

    Args:
        pixel_grid: Array-like of RGB triples shaped (height, width, 3).
        intensity_range: Number of intensity levels per channel.

    Returns:
        The grid as a NumPy array.

    Raises:
        InvalidImageError: If the grid is malformed, empty, or out of range.
    """
    try:
        grid = np.asarray(pixel_grid)
    except ValueError as e:
        msg = f"Pixel grid is not rectangular: {e}"
        raise InvalidImageError(msg) from e

    if grid.ndim != 3 or grid.shape[2] != _COLOR_CHANNELS:
        msg = f"Expected a (height, width, 3) pixel grid, got shape {grid.shape}"
        raise InvalidImageError(msg)

    height, width = grid.shape[:2]
    if height == 0 or width == 0:
        msg = f"Image has zero area ({width}x{height})"
        raise InvalidImageError(msg)

    if not np.issubdtype(grid.dtype, np.integer):
        msg = f"Pixel intensities must be integers, got dtype {grid.dtype}"
        raise InvalidImageError(msg)

    low, high = int(grid.min()), int(grid.max())
    if low < 0 or high >= intensity_range:
        msg = f"Pixel intensities must lie in [0, {intensity_range - 1}], got [{low}, {high}]"
        raise InvalidImageError(msg)

    return grid


def accumulate_histograms(
    pixel_grid: Any, intensity_range: int = DEFAULT_INTENSITY_RANGE
) -> tuple[Histogram, Histogram, Histogram]:
    """Count pixels per intensity for the red, green and blue channels.

    Args:
        pixel_grid: Array-like of RGB triples shaped (height, width, 3).
        intensity_range: Number of intensity levels per channel.

    Returns:
        Tuple of (red, green, blue) histograms, each of length intensity_range.
    """
    grid = as_pixel_grid(pixel_grid, intensity_range)
    red, green, blue = (
        np.bincount(grid[:, :, c].ravel(), minlength=intensity_range).astype(np.int64)
        for c in range(_COLOR_CHANNELS)
    )
    return red, green, blue


def derive_stats(
    histogram: npt.ArrayLike, intensity_range: int | None = None
) -> ChannelStatistics:
    """Derive min, max, median, mean and standard deviation from a histogram.

    Empty histograms fall back to min=0, max=intensity_range-1, and zero for
    the remaining statistics. The median is the first intensity at which the
    cumulative count reaches total // 2, so a single-pixel channel reports 0.

    Args:
        histogram: Pixel count per intensity value.
        intensity_range: Expected histogram length. Defaults to len(histogram).

    Returns:
        ChannelStatistics for the histogram.

    Raises:
        ValueError: If the histogram is not one-dimensional, has the wrong
            length, or contains negative counts.
    """
    hist = np.asarray(histogram, dtype=np.int64)
    if hist.ndim != 1 or hist.size == 0:
        msg = f"Histogram must be a non-empty 1-D sequence, got shape {hist.shape}"
        raise ValueError(msg)
    if intensity_range is not None and hist.size != intensity_range:
        msg = f"Histogram has {hist.size} bins, expected {intensity_range}"
        raise ValueError(msg)
    if np.any(hist < 0):
        msg = "Histogram counts must be non-negative"
        raise ValueError(msg)

    n_bins = hist.size
    total = int(hist.sum())

    occupied = np.flatnonzero(hist)
    min_val = int(occupied[0]) if occupied.size else 0
    max_val = int(occupied[-1]) if occupied.size else n_bins - 1

    levels = np.arange(n_bins, dtype=np.float64)
    mean = float(np.dot(levels, hist)) / total if total > 0 else 0.0

    if total > 0:
        median = int(np.argmax(np.cumsum(hist) >= total // 2))
    else:
        median = 0

    if total > 1:
        variance = float(np.dot((levels - mean) ** 2, hist)) / total
        std_dev = math.sqrt(variance)
    else:
        std_dev = 0.0

    return ChannelStatistics(
        histogram=tuple(hist.tolist()),
        min=min_val,
        max=max_val,
        median=median,
        mean=mean,
        std_dev=std_dev,
    )
