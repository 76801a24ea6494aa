"""Image file loading via OpenCV."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np
import numpy.typing as npt

from .config import IMAGE_EXTENSIONS
from .exceptions import LoaderError

logger = logging.getLogger(__name__)


def load_image(path: str | Path) -> npt.NDArray[np.uint8]:
    """Load an image file as an RGB pixel grid.

    Args:
        path: Path to the image file.

    Returns:
        uint8 array shaped (height, width, 3) in RGB order.

    Raises:
        LoaderError: If the file is missing, unreadable, or not a supported image.
    """
    path = Path(path)
    if not path.is_file():
        raise LoaderError(path, "file not found")

    try:
        img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise LoaderError(path, str(e)) from e

    if img is None:
        raise LoaderError(path, "unsupported or corrupt image format")

    logger.debug(f"Loaded {path.name} ({img.shape[1]}x{img.shape[0]})")
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


def list_image_files(folder: str | Path) -> list[Path]:
    """Get all image files directly inside a folder.

    Args:
        folder: Directory to scan (not recursive).

    Returns:
        Sorted list of image file paths.
    """
    folder = Path(folder)
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in IMAGE_EXTENSIONS
    )
