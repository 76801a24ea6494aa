#!/usr/bin/env python3
"""Configuration dataclass for histmatch."""

from __future__ import annotations

from dataclasses import dataclass

# 8 bits per channel
DEFAULT_INTENSITY_RANGE = 256
DEFAULT_ZERO_NORM_EPSILON = 1e-15

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"})


@dataclass
class Config:
    """Settings shared by profiling and ranking."""

    # Histogram Settings
    intensity_range: int = DEFAULT_INTENSITY_RANGE

    # Ranking Settings
    top_k: int = 5
    zero_norm_epsilon: float = DEFAULT_ZERO_NORM_EPSILON  # Compared against squared norms

    # Batch Settings
    num_workers: int = 1  # 1 = serial
    show_progress: bool = False

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.intensity_range < 1:
            msg = f"intensity_range must be >= 1, got {self.intensity_range}"
            raise ValueError(msg)
        if self.top_k < 0:
            msg = f"top_k must be >= 0, got {self.top_k}"
            raise ValueError(msg)
        if self.zero_norm_epsilon <= 0.0:
            msg = f"zero_norm_epsilon must be positive, got {self.zero_norm_epsilon}"
            raise ValueError(msg)
        if self.num_workers < 1:
            msg = f"num_workers must be >= 1, got {self.num_workers}"
            raise ValueError(msg)
