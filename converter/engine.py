"""
Conversion Engine: one LoadedImage through the Image Codec.

Steps:
1. Target dimensions from the resize policy
2. Codec renders and encodes (awaited off the event loop)
3. Result packaged with original metadata
4. Extension and MIME type from the Format Catalog

A result is either complete or absent; any codec error becomes a
CodecFailure naming the source file and the attempted format.
"""

import asyncio

from utilities import Print, format_file_size

from . import catalog, dimensions
from .errors import CodecFailure
from .models import ConversionResult, EncodingOptions, LoadedImage, ResizePolicy


class ConversionEngine:
    """
    Converts single images with a shared Image Codec.

    The codec may not be reentrant, so at most one encode runs per engine
    at any time, including after the awaiting task was cancelled.

    Attributes:
        codec: ImageCodec instance used for every conversion
    """

    def __init__(self, codec):
        self.codec = codec
        self._codec_lock = asyncio.Lock()

    async def convert(
        self,
        image: LoadedImage,
        policy: ResizePolicy,
        options: EncodingOptions
    ) -> ConversionResult:
        """
        Convert one image.

        Args:
            image: Source image (not modified)
            policy: Resize policy
            options: Output format and quality

        Returns:
            ConversionResult holding the encoded bytes

        Raises:
            CodecFailure: If the codec produced no output
        """
        target = dimensions.compute(image.dimensions, policy)
        output_format = options.output_format

        async with self._codec_lock:
            encode = asyncio.ensure_future(asyncio.to_thread(
                self.codec.encode,
                image.handle,
                target.width,
                target.height,
                output_format,
                options.effective_quality
            ))
            try:
                data = await asyncio.shield(encode)
            except asyncio.CancelledError:
                # The worker thread cannot be interrupted; keep the lock until it is done
                await _wait_for_thread(encode)
                raise
            except Exception as e:
                raise CodecFailure(image.name, output_format.value, str(e)) from e

        if not data:
            raise CodecFailure(image.name, output_format.value, "codec returned no data")

        data = bytes(data)
        result = ConversionResult(
            source_name=image.name,
            original_size=image.size,
            original_format=image.format,
            original_dimensions=image.dimensions,
            new_size=len(data),
            new_dimensions=target,
            output_format=output_format,
            file_extension=catalog.extension_for(output_format),
            mime_type=catalog.mime_type_for(output_format),
            data=data
        )

        Print("DEBUG",
            f"{image.name}: {image.format} {image.dimensions} {format_file_size(image.size)} -> "
            f"{output_format.value.upper()} {target} {format_file_size(result.new_size)}"
        )
        return result


async def _wait_for_thread(encode: "asyncio.Future[bytes]") -> None:
    """Wait until an offloaded encode has finished, ignoring further cancellation."""
    while not encode.done():
        try:
            await asyncio.wait({encode})
        except asyncio.CancelledError:
            continue
    if not encode.cancelled():
        encode.exception()
