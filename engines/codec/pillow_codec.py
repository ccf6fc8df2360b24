"""
Pillow image codec for Recast

Decodes the source bytes, resamples to the target size and encodes to
PNG, JPEG, WEBP, BMP or GIF.

Formats without an alpha channel (JPEG, BMP) get transparent pixels
composited onto a solid background colour (white by default).

Requirements:
- Pillow (pip install Pillow); WEBP needs Pillow built with libwebp
"""

import io
from pathlib import Path
from typing import Any, Optional, Tuple

from PIL import Image, features

from converter import catalog
from converter.models import OutputFormat
from utilities import Print

from . import register_codec


PILLOW_FORMATS = {
    OutputFormat.PNG: 'PNG',
    OutputFormat.JPEG: 'JPEG',
    OutputFormat.WEBP: 'WEBP',
    OutputFormat.BMP: 'BMP',
    OutputFormat.GIF: 'GIF',
}

RESAMPLING_FILTERS = {
    'nearest': Image.Resampling.NEAREST,
    'box': Image.Resampling.BOX,
    'bilinear': Image.Resampling.BILINEAR,
    'hamming': Image.Resampling.HAMMING,
    'bicubic': Image.Resampling.BICUBIC,
    'lanczos': Image.Resampling.LANCZOS,
}

OPAQUE_FORMATS = {OutputFormat.JPEG, OutputFormat.BMP}


@register_codec("pillow")
class PillowCodecFactory:
    """Factory for creating Pillow codec instances."""

    @staticmethod
    def create(config: dict) -> "PillowCodec":
        return PillowCodec(config)


class PillowCodec:
    """
    Image codec backed by Pillow.

    Attributes:
        resample: Pillow resampling filter used for resizing
        background: RGB colour that replaces transparency for JPEG/BMP
        optimize: Pass optimize=True to the PNG and JPEG encoders
    """

    def __init__(self, config: dict):
        """
        Initialize Pillow codec with configuration.

        Args:
            config: Configuration dictionary with optional keys:
                - resample: str - 'nearest', 'box', 'bilinear', 'hamming',
                  'bicubic' or 'lanczos' (default: 'lanczos')
                - background: [r, g, b] - Flattening colour (default: white)
                - optimize: bool - Extra encoder pass for PNG/JPEG (default: False)
        """
        resample_name = str(config.get('resample', 'lanczos')).lower()
        if resample_name not in RESAMPLING_FILTERS:
            Print("WARNING", f"Unknown resample filter '{resample_name}', using lanczos")
            resample_name = 'lanczos'
        self.resample = RESAMPLING_FILTERS[resample_name]
        self.background: Tuple[int, int, int] = tuple(config.get('background', [255, 255, 255]))
        self.optimize = bool(config.get('optimize', False))

        self._verify_format_support()

    def _verify_format_support(self) -> None:
        """Warn about output formats this Pillow build cannot write."""
        Image.init()
        for output_format, pillow_format in PILLOW_FORMATS.items():
            if pillow_format not in Image.SAVE:
                Print("WARNING", f"Pillow cannot encode {pillow_format}; {output_format.value} output will fail")
        if not features.check('webp'):
            Print("WARNING", "Pillow built without libwebp; webp output will fail")
        Print("DEBUG", f"Pillow {Image.__version__} codec ready")

    def _open(self, handle: Any) -> Image.Image:
        if isinstance(handle, Image.Image):
            return handle
        if isinstance(handle, (bytes, bytearray, memoryview)):
            return Image.open(io.BytesIO(bytes(handle)))
        if isinstance(handle, (str, Path)):
            return Image.open(handle)
        raise RuntimeError(f"Unsupported pixel handle type: {type(handle).__name__}")

    def _flatten(self, image: Image.Image) -> Image.Image:
        """Composite transparent images onto the background colour as RGB."""
        has_alpha = (
            image.mode in ('RGBA', 'LA', 'PA')
            or (image.mode == 'P' and 'transparency' in image.info)
        )
        if has_alpha:
            rgba = image.convert('RGBA')
            background = Image.new('RGB', rgba.size, self.background)
            background.paste(rgba, mask=rgba.split()[3])
            return background
        if image.mode not in ('RGB', 'L'):
            return image.convert('RGB')
        return image

    def _prepare(self, image: Image.Image, output_format: OutputFormat) -> Image.Image:
        if output_format in OPAQUE_FORMATS:
            return self._flatten(image)
        if output_format == OutputFormat.GIF:
            if image.mode not in ('P', 'L', 'RGB', 'RGBA'):
                return image.convert('RGBA')
            return image
        if image.mode not in ('RGB', 'RGBA', 'L', 'LA'):
            return image.convert('RGBA')
        return image

    def encode(
        self,
        handle: Any,
        width: int,
        height: int,
        output_format: OutputFormat,
        quality: Optional[int] = None
    ) -> bytes:
        """
        Decode handle, resize to width x height and encode.

        Args:
            handle: Encoded source bytes, a file path or a PIL Image
            width: Target width in pixels
            height: Target height in pixels
            output_format: Format to encode to
            quality: 0-100, only passed to JPEG and WEBP

        Returns:
            Encoded image bytes

        Raises:
            RuntimeError: If the source cannot be decoded or encoding fails
        """
        output_format = OutputFormat.parse(output_format)
        pillow_format = PILLOW_FORMATS[output_format]
        source = None

        try:
            source = self._open(handle)
            source.load()
            image = source

            if image.size != (width, height):
                # Palette and bilevel images would be resized with NEAREST only
                if image.mode in ('P', '1'):
                    image = image.convert('RGBA')
                image = image.resize((width, height), self.resample)

            image = self._prepare(image, output_format)

            save_params = {'format': pillow_format}
            if catalog.is_lossy(output_format) and quality is not None:
                save_params['quality'] = quality
            if self.optimize and output_format in (OutputFormat.PNG, OutputFormat.JPEG):
                save_params['optimize'] = True

            buffer = io.BytesIO()
            image.save(buffer, **save_params)
            encoded = buffer.getvalue()

        except RuntimeError:
            raise
        except Exception as e:
            raise RuntimeError(
                f"Pillow {pillow_format} encoding failed: {e}"
            ) from e
        finally:
            if source is not None and source is not handle:
                source.close()

        Print("DEBUG",
            f"Pillow: {width}x{height} {pillow_format} -> {len(encoded):,} bytes"
            + (f" (quality {quality})" if 'quality' in save_params else "")
        )
        return encoded

    @property
    def name(self) -> str:
        """Codec identifier."""
        return "pillow"
