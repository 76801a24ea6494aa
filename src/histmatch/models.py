"""Pydantic models for type-safe data structures."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ChannelStatistics(BaseModel):
    """Histogram and summary statistics for one color channel.

    Attributes:
        histogram: Pixel count per intensity value (index = intensity).
        min: Lowest intensity with a non-zero count, 0 if the histogram is empty.
        max: Highest intensity with a non-zero count, top of range if empty.
        median: Lower median from the cumulative count.
        mean: Average intensity, 0.0 if the histogram is empty.
        std_dev: Population standard deviation of intensity.
    """
    model_config = ConfigDict(frozen=True)

    histogram: tuple[int, ...]
    min: int = Field(ge=0)
    max: int = Field(ge=0)
    median: int = Field(ge=0)
    mean: float = Field(ge=0.0)
    std_dev: float = Field(ge=0.0)

    @property
    def total(self) -> int:
        """Number of pixels counted in the histogram."""
        return sum(self.histogram)


class ImageProfile(BaseModel):
    """Per-channel color statistics of a single image.

    Attributes:
        source_id: Identifier of the originating image, usually its path.
        width: Image width in pixels.
        height: Image height in pixels.
        red_stats: Statistics of the red channel.
        green_stats: Statistics of the green channel.
        blue_stats: Statistics of the blue channel.
    """
    model_config = ConfigDict(frozen=True)

    source_id: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    red_stats: ChannelStatistics
    green_stats: ChannelStatistics
    blue_stats: ChannelStatistics

    @property
    def pixel_count(self) -> int:
        """Total number of pixels (width * height)."""
        return self.width * self.height

    @property
    def channels(self) -> tuple[ChannelStatistics, ChannelStatistics, ChannelStatistics]:
        """Channel statistics in (red, green, blue) order."""
        return (self.red_stats, self.green_stats, self.blue_stats)

    @model_validator(mode="after")
    def _check_pixel_conservation(self) -> "ImageProfile":
        for name, stats in zip(("red", "green", "blue"), self.channels, strict=True):
            if stats.total != self.pixel_count:
                msg = (
                    f"{name} histogram of {self.source_id} counts {stats.total} pixels, "
                    f"expected {self.pixel_count}"
                )
                raise ValueError(msg)
        return self


class MatchResult(BaseModel):
    """Single ranked match.

    Attributes:
        matched_id: Identifier of the matched target image.
        score: Average per-channel cosine angle in degrees (lower is more similar).
    """
    model_config = ConfigDict(frozen=True)

    matched_id: str
    score: float = Field(ge=0.0, le=90.0)
