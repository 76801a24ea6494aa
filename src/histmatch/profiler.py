"""Single-pass image profiling and ordered batch profiling."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from functools import partial
from multiprocessing import Pool
from pathlib import Path
from typing import Any, TypeVar

import numpy as np
from tqdm import tqdm

from .config import DEFAULT_INTENSITY_RANGE, Config
from .exceptions import InvalidImageError
from .histogram import accumulate_histograms, derive_stats
from .loader import load_image
from .models import ImageProfile

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ImageProfiler:
    """Builds an ImageProfile from a pixel grid in one scan."""

    def __init__(self, intensity_range: int = DEFAULT_INTENSITY_RANGE):
        """Initialize profiler.

        Args:
            intensity_range: Number of intensity levels per channel.
        """
        self.intensity_range = intensity_range

    def profile(self, pixel_grid: Any, source_id: str) -> ImageProfile:
        """Compute the color profile of one image.

        Args:
            pixel_grid: Array-like of RGB triples shaped (height, width, 3).
            source_id: Identifier recorded on the profile (e.g. the file path).

        Returns:
            ImageProfile with dimensions and per-channel statistics.

        Raises:
            InvalidImageError: If the grid has zero area or is malformed.
        """
        try:
            red, green, blue = accumulate_histograms(pixel_grid, self.intensity_range)
        except InvalidImageError as e:
            raise InvalidImageError(e.reason, str(source_id)) from e
        height, width = np.shape(pixel_grid)[:2]

        profile = ImageProfile(
            source_id=str(source_id),
            width=width,
            height=height,
            red_stats=derive_stats(red, self.intensity_range),
            green_stats=derive_stats(green, self.intensity_range),
            blue_stats=derive_stats(blue, self.intensity_range),
        )
        logger.debug(f"Profiled {profile.source_id} ({width}x{height})")
        return profile


def _profile_worker(item: tuple[Any, str], intensity_range: int) -> ImageProfile:
    """Worker function for parallel profiling of in-memory grids."""
    pixel_grid, source_id = item
    return ImageProfiler(intensity_range).profile(pixel_grid, source_id)


def _load_and_profile_worker(path: str | Path, intensity_range: int) -> ImageProfile:
    """Worker function for parallel loading and profiling of image files."""
    return ImageProfiler(intensity_range).profile(load_image(path), str(path))


class BatchProfiler:
    """Profiles many images, returning results in input order.

    Any failure aborts the whole batch; there are no partial results.
    """

    def __init__(self, config: Config | None = None):
        """Initialize batch profiler.

        Args:
            config: Configuration object. Defaults to Config().
        """
        self.config = config if config is not None else Config()
        self.config.validate()

    def profile_all(self, images: Iterable[tuple[Any, str]]) -> list[ImageProfile]:
        """Profile (pixel_grid, source_id) pairs.

        Args:
            images: Ordered (pixel_grid, source_id) pairs. May be empty.

        Returns:
            One ImageProfile per input, in the same order.
        """
        worker = partial(_profile_worker, intensity_range=self.config.intensity_range)
        return self._run(worker, list(images), desc="Profiling images")

    def profile_paths(self, paths: Iterable[str | Path]) -> list[ImageProfile]:
        """Load and profile image files.

        Args:
            paths: Ordered image paths. May be empty.

        Returns:
            One ImageProfile per path, in the same order, keyed by str(path).

        Raises:
            LoaderError: If any image cannot be read.
            InvalidImageError: If any image has zero area.
        """
        worker = partial(_load_and_profile_worker, intensity_range=self.config.intensity_range)
        return self._run(worker, list(paths), desc="Loading images")

    def _run(self, worker: Callable[[T], ImageProfile], items: Sequence[T], desc: str) -> list[ImageProfile]:
        if not items:
            return []

        disable = not self.config.show_progress
        if self.config.num_workers > 1 and len(items) > 1:
            # imap yields in submission order and re-raises worker errors
            with Pool(processes=self.config.num_workers) as pool:
                profiles = list(tqdm(pool.imap(worker, items), total=len(items), desc=desc, disable=disable))
        else:
            profiles = [worker(item) for item in tqdm(items, desc=desc, disable=disable)]

        logger.info(f"Profiled {len(profiles)} images")
        return profiles


def compute_profile(
    pixel_grid: Any, source_id: str, intensity_range: int = DEFAULT_INTENSITY_RANGE
) -> ImageProfile:
    """Compute the color profile of one image.

    Args:
        pixel_grid: Array-like of RGB triples shaped (height, width, 3).
        source_id: Identifier recorded on the profile.
        intensity_range: Number of intensity levels per channel.

    Returns:
        ImageProfile for the grid.
    """
    return ImageProfiler(intensity_range).profile(pixel_grid, source_id)


def compute_profiles_for_all(
    images: Iterable[tuple[Any, str]], config: Config | None = None
) -> list[ImageProfile]:
    """Profile every (pixel_grid, source_id) pair, preserving order."""
    return BatchProfiler(config).profile_all(images)


def profile_paths(paths: Iterable[str | Path], config: Config | None = None) -> list[ImageProfile]:
    """Load and profile every image path, preserving order."""
    return BatchProfiler(config).profile_paths(paths)
