#!/usr/bin/env python3
"""Cosine-angle similarity between color profiles and top-K ranking."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import numpy.typing as npt

from .config import DEFAULT_ZERO_NORM_EPSILON, Config
from .exceptions import InvalidImageError
from .loader import load_image
from .models import ChannelStatistics, ImageProfile, MatchResult
from .profiler import compute_profile

logger = logging.getLogger(__name__)

# Angle between two non-negative vectors never exceeds a right angle
_MAX_ANGLE = 90.0


def normalize_histogram(stats: ChannelStatistics, pixel_count: int) -> npt.NDArray[np.float64]:
    """Convert a channel histogram into a probability distribution.

    Args:
        stats: Channel statistics holding the histogram.
        pixel_count: Width * height of the image the histogram belongs to.

    Returns:
        float64 array of bin counts divided by pixel_count.

    Raises:
        InvalidImageError: If pixel_count is not positive.
    """
    if pixel_count <= 0:
        msg = f"Cannot normalize a histogram of a zero-area image (pixel count {pixel_count})"
        raise InvalidImageError(msg)
    return np.asarray(stats.histogram, dtype=np.float64) / pixel_count


def cosine_angle(
    v1: npt.ArrayLike, v2: npt.ArrayLike, epsilon: float = DEFAULT_ZERO_NORM_EPSILON
) -> float:
    """Angle in degrees between two vectors.

    Two vectors with squared norm below epsilon are treated as identical (0 degrees);
    if only one is that small the pair is treated as orthogonal (90 degrees).

    Args:
        v1: First vector.
        v2: Second vector, same length as v1.
        epsilon: Squared-norm threshold for a degenerate vector.

    Returns:
        Angle in degrees.
    """
    a = np.asarray(v1, dtype=np.float64)
    b = np.asarray(v2, dtype=np.float64)
    if a.shape != b.shape:
        msg = f"Vectors must have the same shape, got {a.shape} and {b.shape}"
        raise ValueError(msg)

    dot = float(np.dot(a, b))
    norm1 = float(np.dot(a, a))
    norm2 = float(np.dot(b, b))

    if norm1 < epsilon or norm2 < epsilon:
        if norm1 < epsilon and norm2 < epsilon:
            return 0.0
        return _MAX_ANGLE

    cos_theta = dot / (math.sqrt(norm1) * math.sqrt(norm2))
    cos_theta = min(1.0, max(-1.0, cos_theta))
    return math.degrees(math.acos(cos_theta))


def profile_distance(
    query: ImageProfile, target: ImageProfile, epsilon: float = DEFAULT_ZERO_NORM_EPSILON
) -> float:
    """Mean of the red, green and blue cosine angles between two profiles.

    Each profile is normalized by its own pixel count, so images of
    different sizes compare on equal terms.

    Args:
        query: Query image profile.
        target: Target image profile.
        epsilon: Squared-norm threshold for a degenerate channel.

    Returns:
        Distance in degrees within [0, 90].

    Raises:
        InvalidImageError: If either profile has zero area.
    """
    for profile in (query, target):
        if profile.pixel_count <= 0:
            msg = f"Image has zero area ({profile.width}x{profile.height})"
            raise InvalidImageError(msg, profile.source_id)

    angles = [
        cosine_angle(
            normalize_histogram(q, query.pixel_count),
            normalize_histogram(t, target.pixel_count),
            epsilon,
        )
        for q, t in zip(query.channels, target.channels, strict=True)
    ]
    return min(_MAX_ANGLE, sum(angles) / len(angles))


class SimilarityRanker:
    """Ranks target profiles by color similarity to a query profile."""

    def __init__(self, config: Config | None = None):
        """Initialize ranker.

        Args:
            config: Configuration object. Defaults to Config().
        """
        self.config = config if config is not None else Config()
        self.config.validate()

    def rank(
        self, query: ImageProfile, targets: Sequence[ImageProfile], top_k: int | None = None
    ) -> list[MatchResult]:
        """Find the top_k targets closest to the query.

        Results are sorted ascending by score; equal scores keep target order.

        Args:
            query: Query image profile.
            targets: Candidate profiles. May be empty.
            top_k: Number of matches to return. Defaults to config.top_k.

        Returns:
            Up to top_k MatchResults, best first.

        Raises:
            InvalidImageError: If the query or any target has zero area.
        """
        if top_k is None:
            top_k = self.config.top_k
        if top_k <= 0 or not targets:
            return []

        epsilon = self.config.zero_norm_epsilon
        matches = [
            MatchResult(matched_id=target.source_id, score=profile_distance(query, target, epsilon))
            for target in targets
        ]

        # list.sort is stable
        matches.sort(key=lambda m: m.score)
        top = matches[:top_k]

        logger.info(f"Ranked {len(targets)} targets against {query.source_id}, returning {len(top)}")
        return top


def find_top_matches(
    query: ImageProfile,
    targets: Sequence[ImageProfile],
    top_k: int,
    config: Config | None = None,
) -> list[MatchResult]:
    """Return the top_k targets most similar to the query profile."""
    return SimilarityRanker(config).rank(query, targets, top_k)


def find_top_matches_for_path(
    query_path: str | Path,
    targets: Sequence[ImageProfile],
    top_k: int,
    config: Config | None = None,
) -> list[MatchResult]:
    """Load and profile the query image, then rank the targets against it.

    Raises:
        LoaderError: If the query image cannot be read.
    """
    config = config if config is not None else Config()
    query = compute_profile(load_image(query_path), str(query_path), config.intensity_range)
    return SimilarityRanker(config).rank(query, targets, top_k)
