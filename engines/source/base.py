"""
Source Provider Protocol for Recast

Defines the contract that all image sources must implement.
"""

from pathlib import Path
from typing import List, Protocol, Sequence, Union

from converter.models import LoadedImage


class SourceProvider(Protocol):
    """
    Protocol for image sources.

    Sources are responsible for:
    - Turning user submissions into LoadedImage records
    - Filtering out anything that is not a raster image
    - Choosing the pixel handle the Image Codec will receive
    """

    def load(self, paths: Sequence[Union[str, Path]]) -> List[LoadedImage]:
        """
        Load every image among paths.

        Args:
            paths: Files and/or directories submitted by the user

        Returns:
            LoadedImage per accepted file, in submission order

        Raises:
            FileNotFoundError: If a path does not exist
            InvalidInput: If no image survives filtering
        """
        ...

    @property
    def name(self) -> str:
        """
        Source identifier for logging and debugging.

        Returns:
            Unique name of this source (e.g., 'filesystem')
        """
        ...
