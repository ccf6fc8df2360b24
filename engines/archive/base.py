"""
Archiver Protocol for Recast

Defines the contract that all archivers must implement.
"""

from typing import Protocol, Sequence, Tuple


class Archiver(Protocol):
    """
    Protocol for archivers.

    Archivers are responsible for:
    - Packing named byte buffers into one archive, in the given order
    - Resolving file name collisions inside the archive
    """

    def pack(self, entries: Sequence[Tuple[str, bytes]]) -> bytes:
        """
        Pack entries into a single archive.

        Args:
            entries: Ordered (file_name, data) pairs

        Returns:
            Archive as bytes

        Raises:
            ValueError: If entries is empty
            RuntimeError: If the archive cannot be written
        """
        ...

    @property
    def extension(self) -> str:
        """
        File extension for archives this archiver writes.

        Returns:
            Extension without the dot (e.g., 'zip')
        """
        ...

    @property
    def name(self) -> str:
        """
        Archiver identifier for logging and debugging.

        Returns:
            Unique name of this archiver (e.g., 'zip')
        """
        ...
