"""Histmatch - Rank images by color-histogram similarity to a query image."""

from .config import Config
from .exceptions import HistMatchError, InvalidImageError, LoaderError
from .histogram import accumulate_histograms, derive_stats
from .loader import list_image_files, load_image
from .models import ChannelStatistics, ImageProfile, MatchResult
from .profiler import (
    BatchProfiler,
    ImageProfiler,
    compute_profile,
    compute_profiles_for_all,
    profile_paths,
)
from .similarity import (
    SimilarityRanker,
    cosine_angle,
    find_top_matches,
    find_top_matches_for_path,
    normalize_histogram,
    profile_distance,
)

__version__ = "0.1.0"

__all__ = [
    "BatchProfiler",
    "ChannelStatistics",
    "Config",
    "HistMatchError",
    "ImageProfile",
    "ImageProfiler",
    "InvalidImageError",
    "LoaderError",
    "MatchResult",
    "SimilarityRanker",
    "accumulate_histograms",
    "compute_profile",
    "compute_profiles_for_all",
    "cosine_angle",
    "derive_stats",
    "find_top_matches",
    "find_top_matches_for_path",
    "list_image_files",
    "load_image",
    "normalize_histogram",
    "profile_distance",
    "profile_paths",
]
