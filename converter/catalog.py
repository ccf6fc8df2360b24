"""
Format Catalog: descriptive metadata per output format.

Used to annotate results for display, never to drive conversion.
Unrecognised formats fall back to the PNG entry.
"""

from typing import Any, NamedTuple

from .models import OutputFormat


class FormatInfo(NamedTuple):
    compression: str
    quality_note: str
    transparency: str
    usage: str


FORMAT_INFO = {
    OutputFormat.JPEG: FormatInfo(
        compression="Lossy compression",
        quality_note="Suited to photos with rich color",
        transparency="Not supported",
        usage="Web images, photo storage"
    ),
    OutputFormat.PNG: FormatInfo(
        compression="Lossless compression",
        quality_note="Highest quality, supports transparency",
        transparency="Supported",
        usage="Icons, graphics, images that need transparency"
    ),
    OutputFormat.WEBP: FormatInfo(
        compression="Modern lossy/lossless compression",
        quality_note="High compression ratio with good quality",
        transparency="Supported",
        usage="Modern web pages, replacement for JPEG/PNG"
    ),
    OutputFormat.BMP: FormatInfo(
        compression="Uncompressed",
        quality_note="Highest quality, largest files",
        transparency="Not supported",
        usage="Professional image processing, printing"
    ),
    OutputFormat.GIF: FormatInfo(
        compression="Lossy compression, 256 colors",
        quality_note="Limited palette, supports animation",
        transparency="Supported",
        usage="Simple graphics, animations"
    ),
}

EXTENSIONS = {
    OutputFormat.PNG: "png",
    OutputFormat.JPEG: "jpg",
    OutputFormat.WEBP: "webp",
    OutputFormat.BMP: "bmp",
    OutputFormat.GIF: "gif",
}

MIME_TYPES = {
    OutputFormat.PNG: "image/png",
    OutputFormat.JPEG: "image/jpeg",
    OutputFormat.WEBP: "image/webp",
    OutputFormat.BMP: "image/bmp",
    OutputFormat.GIF: "image/gif",
}


def describe(output_format: Any) -> FormatInfo:
    """Catalog entry for a format; PNG's entry for anything unrecognised."""
    return FORMAT_INFO[OutputFormat.parse(output_format)]


def extension_for(output_format: Any) -> str:
    """File extension without the dot: jpeg -> jpg, unknown or missing -> png."""
    return EXTENSIONS[OutputFormat.parse(output_format)]


def mime_type_for(output_format: Any) -> str:
    return MIME_TYPES[OutputFormat.parse(output_format)]


def is_lossy(output_format: Any) -> bool:
    """True for formats that honour the quality setting (JPEG, WEBP)."""
    return OutputFormat.parse(output_format).is_lossy
