"""
Data model for the Recast conversion core.

Everything here is immutable except the Selection Set (see selection.py):
loaded images, resize policies, encoding options, conversion results and
batch summaries are frozen dataclasses created once and never mutated.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, NamedTuple, Optional, Sequence

from .errors import InvalidPolicy


class Dimensions(NamedTuple):
    """Pixel dimensions of an image."""
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}×{self.height}"


class OutputFormat(Enum):
    """Output formats the converter can produce."""
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    BMP = "bmp"
    GIF = "gif"

    @classmethod
    def parse(cls, value: Any) -> "OutputFormat":
        """
        Resolve a format from an enum member or a case-insensitive name.

        'jpg' is accepted for JPEG. Anything unrecognised resolves to PNG.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key == "jpg":
                key = "jpeg"
            for member in cls:
                if member.value == key:
                    return member
        return cls.PNG

    @property
    def is_lossy(self) -> bool:
        return self in LOSSY_FORMATS


LOSSY_FORMATS = frozenset({OutputFormat.JPEG, OutputFormat.WEBP})


def _positive_int(value: Any) -> Optional[int]:
    """Return value as a positive int, or None when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value > 0 else None
    if isinstance(value, str):
        match = re.match(r"\s*([+-]?\d+)", value)
        if match:
            number = int(match.group(1))
            return number if number > 0 else None
    return None


@dataclass(frozen=True)
class LoadedImage:
    """
    One source image as handed over by a Source Provider.

    Attributes:
        name: Original file name (may be empty when unknown)
        size: Source size in bytes
        format: Format label derived from the MIME type, e.g. 'PNG'
        dimensions: Decoded pixel dimensions
        handle: Opaque pixel handle, only the Image Codec interprets it
    """
    name: str
    size: int
    format: str
    dimensions: Dimensions
    handle: Any = field(repr=False, compare=False)


# ---------------------------------------------------------------------------
# Resize policies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResizePolicy:
    """Base of the resize policy variants: NoResize, Scale and Custom."""

    @staticmethod
    def from_settings(
        mode: Optional[str],
        scale: Any = None,
        width: Any = None,
        height: Any = None
    ) -> "ResizePolicy":
        """
        Build a policy from loose settings (config file or command line).

        Args:
            mode: 'none', 'scale' or 'custom'; anything else means no resize
            scale: Percentage for 'scale' mode (default 100)
            width: Target width for 'custom' mode
            height: Target height for 'custom' mode

        Raises:
            InvalidPolicy: If a scale percentage is given but not positive
        """
        mode = (mode or "none").strip().lower()
        if mode == "scale":
            if scale is None:
                return Scale(100)
            percent = _positive_int(scale)
            if percent is None:
                raise InvalidPolicy(f"Scale percentage must be a positive integer, got {scale!r}")
            return Scale(percent)
        if mode == "custom":
            return Custom(width, height)
        return NoResize()


@dataclass(frozen=True)
class NoResize(ResizePolicy):
    """Keep the original dimensions."""


@dataclass(frozen=True)
class Scale(ResizePolicy):
    """Scale both axes by a positive integer percentage."""
    percent: int

    def __post_init__(self):
        if isinstance(self.percent, bool) or not isinstance(self.percent, int) or self.percent <= 0:
            raise InvalidPolicy(
                f"Scale percentage must be a positive integer, got {self.percent!r}"
            )


@dataclass(frozen=True)
class Custom(ResizePolicy):
    """
    Explicit target size per axis.

    A missing, non-integer or non-positive value is stored as None and the
    original size is kept for that axis.
    """
    width: Optional[int] = None
    height: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'width', _positive_int(self.width))
        object.__setattr__(self, 'height', _positive_int(self.height))


# ---------------------------------------------------------------------------
# Encoding options
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EncodingOptions:
    """
    Output format and quality.

    Quality is clamped to [0, 100] on construction. PNG, BMP and GIF
    ignore it; effective_quality is None for them.
    """
    output_format: OutputFormat = OutputFormat.PNG
    quality: int = 90

    def __post_init__(self):
        object.__setattr__(self, 'output_format', OutputFormat.parse(self.output_format))
        try:
            quality = int(self.quality)
        except (TypeError, ValueError):
            raise InvalidPolicy(f"Quality must be an integer, got {self.quality!r}")
        object.__setattr__(self, 'quality', max(0, min(100, quality)))

    @property
    def effective_quality(self) -> Optional[int]:
        return self.quality if self.output_format.is_lossy else None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

def converted_file_name(original_name: Optional[str], extension: str) -> str:
    """
    Suggested download name for a converted file.

    Only the final extension is stripped: 'photo.v2.png' -> 'photo.v2_converted.jpg'.
    Without an original name the result is 'converted_image.<ext>'.
    """
    if not original_name:
        return f"converted_image.{extension}"
    stem = re.sub(r"\.[^/.]+$", "", original_name)
    return f"{stem}_converted.{extension}"


def percent_change(original: int, new: int) -> float:
    """(new - original) / original * 100, or NaN when original is 0."""
    if original <= 0:
        return math.nan
    return (new - original) / original * 100


@dataclass(frozen=True)
class ConversionResult:
    """
    Output of one successful conversion.

    Attributes:
        source_name: File name of the source image
        original_size: Source size in bytes
        original_format: Source format label, e.g. 'PNG'
        original_dimensions: Source pixel dimensions
        new_size: Encoded size in bytes
        new_dimensions: Encoded pixel dimensions
        output_format: Format that was produced
        file_extension: Extension for the produced file, e.g. 'jpg'
        mime_type: MIME type of the produced file
        data: Encoded bytes
    """
    source_name: str
    original_size: int
    original_format: str
    original_dimensions: Dimensions
    new_size: int
    new_dimensions: Dimensions
    output_format: OutputFormat
    file_extension: str
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def percent_change(self) -> float:
        return percent_change(self.original_size, self.new_size)

    @property
    def suggested_name(self) -> str:
        return converted_file_name(self.source_name, self.file_extension)


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate sizes over a finished batch."""
    total_original: int
    total_new: int
    count: int
    percent_change: float

    @classmethod
    def from_results(cls, results: Sequence[ConversionResult]) -> "BatchSummary":
        total_original = sum(r.original_size for r in results)
        total_new = sum(r.new_size for r in results)
        return cls(
            total_original=total_original,
            total_new=total_new,
            count=len(results),
            percent_change=percent_change(total_original, total_new)
        )


class BatchOutcome(NamedTuple):
    """Ordered results of a batch plus their summary."""
    results: List[ConversionResult]
    summary: BatchSummary
