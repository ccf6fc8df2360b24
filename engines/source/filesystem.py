"""
Filesystem image source for Recast

Reads submitted files (or the files inside submitted directories) and
identifies them with Pillow. Anything Pillow cannot identify is dropped
with a warning, like the browser tool dropped non-image files.

The encoded file bytes become the pixel handle: nothing is decoded until
the codec needs it, so only one decoded image is alive during a batch.
"""

import io
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from natsort import natsorted
from PIL import Image, UnidentifiedImageError

from converter.errors import InvalidInput
from converter.models import Dimensions, LoadedImage
from utilities import Print, format_file_size

from . import register_source


@register_source("filesystem")
class FilesystemSourceFactory:
    """Factory for creating filesystem source instances."""

    @staticmethod
    def create(config: dict) -> "FilesystemSource":
        return FilesystemSource(config)


def format_label(image: Image.Image) -> str:
    """Upper-cased MIME subtype, e.g. 'image/jpeg' -> 'JPEG'."""
    mime = Image.MIME.get(image.format or '') or image.get_format_mimetype()
    if mime and '/' in mime:
        return mime.split('/', 1)[1].upper()
    return (image.format or 'UNKNOWN').upper()


def identify_image(name: str, data: bytes) -> Optional[LoadedImage]:
    """
    Build a LoadedImage from encoded bytes, or None if they are not an image.

    Args:
        name: File name to record
        data: Encoded file contents
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
            label = format_label(image)
    except (UnidentifiedImageError, OSError, ValueError):
        return None

    return LoadedImage(
        name=name,
        size=len(data),
        format=label,
        dimensions=Dimensions(width, height),
        handle=data
    )


class FilesystemSource:
    """
    Loads images from files and directories.

    Attributes:
        recursive: Descend into subdirectories of submitted directories
        extensions: Lower-case suffixes to consider inside directories
                    (None means every file is offered to Pillow)
    """

    def __init__(self, config: dict):
        """
        Initialize filesystem source with configuration.

        Args:
            config: Configuration dictionary with optional keys:
                - recursive: bool - Walk subdirectories (default: False)
                - extensions: List[str] - Suffixes to pick up from
                  directories, e.g. ['.png', '.jpg'] (default: all files)
        """
        self.recursive = bool(config.get('recursive', False))
        extensions = config.get('extensions')
        self.extensions = (
            {ext.lower() if ext.startswith('.') else f".{ext.lower()}" for ext in extensions}
            if extensions else None
        )

    def _expand(self, paths: Sequence[Union[str, Path]]) -> Iterable[Path]:
        for raw in paths:
            path = Path(raw)
            if not path.exists():
                raise FileNotFoundError(f"Input not found: {path}")
            if path.is_dir():
                pattern = '**/*' if self.recursive else '*'
                children = [
                    child for child in path.glob(pattern)
                    if child.is_file()
                    and (self.extensions is None or child.suffix.lower() in self.extensions)
                ]
                yield from natsorted(children, key=str)
            else:
                yield path

    def load(self, paths: Sequence[Union[str, Path]]) -> List[LoadedImage]:
        """
        Load every image among paths.

        Args:
            paths: Files and/or directories

        Returns:
            LoadedImage per image file, explicit files in the order given,
            directory contents in natural sort order

        Raises:
            FileNotFoundError: If a path does not exist
            InvalidInput: If none of the files is an image
        """
        images: List[LoadedImage] = []
        filtered = 0

        for path in self._expand(paths):
            loaded = identify_image(path.name, path.read_bytes())
            if loaded is None:
                filtered += 1
                Print("DEBUG", f"Not an image: {path}")
                continue
            images.append(loaded)
            Print("DEBUG",
                f"Loaded {loaded.name}: {loaded.format} {loaded.dimensions} "
                f"{format_file_size(loaded.size)}"
            )

        if not images:
            raise InvalidInput("No image files found in the submitted input")

        if filtered:
            Print("WARNING", f"Filtered out {filtered} non-image file{'s' if filtered != 1 else ''}")

        Print("INFO", f"Loaded {len(images)} image{'s' if len(images) != 1 else ''}")
        return images

    @property
    def name(self) -> str:
        """Source identifier."""
        return "filesystem"
