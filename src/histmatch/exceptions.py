"""Exception types raised by histmatch."""

from pathlib import Path


class HistMatchError(Exception):
    """Base class for all histmatch errors."""


class InvalidImageError(HistMatchError):
    """Raised when a pixel grid or profile cannot yield defined statistics.

    Covers zero-area images, grids that are not shaped (height, width, 3),
    and intensities outside the configured range.

    Attributes:
        source_id: Identifier of the offending image, or None if unknown.
    """

    def __init__(self, reason: str, source_id: str | None = None):
        self.reason = reason
        self.source_id = source_id
        if source_id is None:
            super().__init__(reason)
        else:
            super().__init__(f"Invalid image {source_id}: {reason}")

    def __reduce__(self):
        return (type(self), (self.reason, self.source_id))


class LoaderError(HistMatchError):
    """Raised when an image file cannot be read or decoded.

    Attributes:
        path: Path of the image that failed to load.
    """

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Could not load image {self.path}: {reason}")

    def __reduce__(self):
        # Rebuild from (path, reason) when re-raised from a worker process
        return (type(self), (self.path, self.reason))
