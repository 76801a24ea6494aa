"""
Unit tests for image and batch profiling.
"""

import tempfile
from pathlib import Path

import cv2
import numpy as np
import pytest
from pydantic import ValidationError

from histmatch import (
    BatchProfiler,
    Config,
    ImageProfile,
    ImageProfiler,
    InvalidImageError,
    LoaderError,
    compute_profile,
    compute_profiles_for_all,
    profile_paths,
)


def solid_grid(rgb: tuple[int, int, int], height: int = 4, width: int = 4) -> np.ndarray:
    """Create a single-color RGB grid."""
    grid = np.zeros((height, width, 3), dtype=np.uint8)
    grid[:] = rgb
    return grid


class TestImageProfiler:
    """Test profiling of a single pixel grid."""

    def test_all_red_image(self):
        """Test statistics of a 2x2 pure red image."""
        profile = compute_profile(solid_grid((255, 0, 0), 2, 2), "red.png")

        assert profile.source_id == "red.png"
        assert profile.width == 2 and profile.height == 2

        red = profile.red_stats
        assert red.min == red.max == red.median == 255
        assert red.mean == 255.0
        assert red.std_dev == 0.0

        for stats in (profile.green_stats, profile.blue_stats):
            assert stats.histogram[0] == 4
            assert stats.min == stats.max == stats.median == 0
            assert stats.mean == 0.0
            assert stats.std_dev == 0.0

    def test_dimensions_non_square(self):
        """Test that width and height come from the grid's columns and rows."""
        profile = ImageProfiler().profile(solid_grid((1, 2, 3), height=3, width=5), "wide")

        assert profile.width == 5
        assert profile.height == 3
        assert profile.pixel_count == 15

    def test_histograms_sum_to_pixel_count(self):
        """Test pixel conservation across all channels."""
        rng = np.random.default_rng(42)
        grid = rng.integers(0, 256, (17, 23, 3), dtype=np.uint8)
        profile = compute_profile(grid, "noise")

        for stats in profile.channels:
            assert sum(stats.histogram) == 17 * 23

    def test_accepts_nested_lists(self):
        """Test that plain nested sequences are accepted as grids."""
        grid = [[(255, 0, 0), (255, 0, 0)], [(255, 0, 0), (255, 0, 0)]]
        profile = compute_profile(grid, "nested")

        assert profile.width == 2
        assert profile.red_stats.mean == 255.0

    def test_zero_height_raises(self):
        """Test that a grid with no rows is rejected."""
        with pytest.raises(InvalidImageError, match="zero area"):
            compute_profile(np.zeros((0, 4, 3), dtype=np.uint8), "empty")

    def test_zero_width_raises(self):
        """Test that a grid with no columns is rejected."""
        with pytest.raises(InvalidImageError, match="zero area"):
            compute_profile(np.zeros((4, 0, 3), dtype=np.uint8), "empty")

    def test_wrong_shape_raises(self):
        """Test that a grayscale grid is rejected."""
        with pytest.raises(InvalidImageError):
            compute_profile(np.zeros((4, 4), dtype=np.uint8), "gray")

    def test_profile_is_immutable(self):
        """Test that profiles cannot be modified after creation."""
        profile = compute_profile(solid_grid((9, 9, 9)), "frozen")

        with pytest.raises(ValidationError):
            profile.width = 10  # type: ignore[misc]

    def test_inconsistent_histograms_rejected(self):
        """Test that a profile whose histograms disagree with its size is rejected."""
        profile = compute_profile(solid_grid((9, 9, 9)), "x")

        with pytest.raises(ValidationError):
            ImageProfile(
                source_id="bad",
                width=8,
                height=8,
                red_stats=profile.red_stats,
                green_stats=profile.green_stats,
                blue_stats=profile.blue_stats,
            )


class TestBatchProfiler:
    """Test ordered, all-or-nothing batch profiling."""

    def test_empty_input(self):
        """Test that an empty batch yields an empty result."""
        assert compute_profiles_for_all([]) == []
        assert profile_paths([]) == []

    def test_order_preserved(self):
        """Test that profiles come back in input order."""
        images = [(solid_grid((i * 10, 0, 0)), f"img_{i}") for i in range(6)]
        profiles = compute_profiles_for_all(images)

        assert [p.source_id for p in profiles] == [f"img_{i}" for i in range(6)]
        assert [p.red_stats.mean for p in profiles] == [i * 10.0 for i in range(6)]

    def test_failure_aborts_batch(self):
        """Test that one invalid image fails the whole batch."""
        images = [
            (solid_grid((1, 1, 1)), "ok_1"),
            (np.zeros((0, 3, 3), dtype=np.uint8), "broken"),
            (solid_grid((2, 2, 2)), "ok_2"),
        ]
        with pytest.raises(InvalidImageError) as exc_info:
            BatchProfiler().profile_all(images)

        assert exc_info.value.source_id == "broken"
        assert "broken" in str(exc_info.value)
        assert "zero area" in str(exc_info.value)

    def test_parallel_matches_serial(self):
        """Test that worker processes give the same ordered result."""
        rng = np.random.default_rng(3)
        images = [
            (rng.integers(0, 256, (8, 8, 3), dtype=np.uint8), f"img_{i}") for i in range(5)
        ]

        serial = BatchProfiler(Config(num_workers=1)).profile_all(images)
        parallel = BatchProfiler(Config(num_workers=2)).profile_all(images)

        assert parallel == serial

    def test_parallel_failure_propagates(self):
        """Test that a worker failure is re-raised to the caller."""
        images = [
            (solid_grid((1, 1, 1)), "ok"),
            (np.zeros((3, 3), dtype=np.uint8), "flat"),
        ]
        with pytest.raises(InvalidImageError) as exc_info:
            BatchProfiler(Config(num_workers=2)).profile_all(images)

        assert exc_info.value.source_id == "flat"

    def test_progress_bar(self):
        """Test batch profiling with the progress bar enabled."""
        images = [(solid_grid((5, 5, 5)), "a"), (solid_grid((6, 6, 6)), "b")]
        profiles = BatchProfiler(Config(show_progress=True)).profile_all(images)

        assert len(profiles) == 2

    def test_profile_paths(self):
        """Test loading and profiling image files in order."""
        with tempfile.TemporaryDirectory() as tmpdir:
            paths = []
            for i, bgr in enumerate([(0, 0, 255), (0, 255, 0)]):
                path = Path(tmpdir) / f"img_{i}.png"
                cv2.imwrite(str(path), solid_grid(bgr, 6, 10))
                paths.append(path)

            profiles = profile_paths(paths)

            assert [p.source_id for p in profiles] == [str(p) for p in paths]
            assert profiles[0].red_stats.mean == 255.0
            assert profiles[1].green_stats.mean == 255.0
            assert profiles[0].width == 10 and profiles[0].height == 6

    def test_profile_paths_missing_file(self):
        """Test that a missing file aborts the batch with LoaderError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            good = Path(tmpdir) / "good.png"
            cv2.imwrite(str(good), solid_grid((1, 2, 3)))

            with pytest.raises(LoaderError) as exc_info:
                profile_paths([good, Path(tmpdir) / "missing.png"])

            assert exc_info.value.path.endswith("missing.png")

    def test_invalid_config_rejected(self):
        """Test that the batch profiler validates its configuration."""
        with pytest.raises(ValueError, match="num_workers"):
            BatchProfiler(Config(num_workers=0))

    def test_parallel_loader_failure_propagates(self):
        """Test that a LoaderError from a worker keeps its path."""
        with tempfile.TemporaryDirectory() as tmpdir:
            good = Path(tmpdir) / "good.png"
            cv2.imwrite(str(good), solid_grid((1, 2, 3)))
            missing = Path(tmpdir) / "missing.png"

            with pytest.raises(LoaderError) as exc_info:
                profile_paths([good, missing], Config(num_workers=2))

            assert exc_info.value.path == str(missing)
