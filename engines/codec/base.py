"""
Image Codec Protocol for Recast

Defines the contract that all image codecs must implement.
"""

from typing import Any, Protocol, Optional

from converter.models import OutputFormat


class ImageCodec(Protocol):
    """
    Protocol for image codecs.

    Codecs are responsible for:
    - Decoding the pixel handle a Source Provider produced
    - Resampling to the requested dimensions
    - Encoding to the requested output format
    """

    def encode(
        self,
        handle: Any,
        width: int,
        height: int,
        output_format: OutputFormat,
        quality: Optional[int] = None
    ) -> bytes:
        """
        Render the source into width x height and encode it.

        Args:
            handle: Pixel handle from the Source Provider
            width: Target width in pixels
            height: Target height in pixels
            output_format: Format to encode to
            quality: 0-100 for lossy formats (JPEG, WEBP); None otherwise
                    - PNG, BMP, GIF: ignored

        Returns:
            Encoded image as bytes

        Raises:
            RuntimeError: If decoding or encoding fails
        """
        ...

    @property
    def name(self) -> str:
        """
        Codec identifier for logging and debugging.

        Returns:
            Unique name of this codec (e.g., 'pillow')
        """
        ...
