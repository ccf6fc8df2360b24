"""
ZIP archiver for Recast

Packs converted files into a single in-memory ZIP archive, the bulk
download format. Entries keep the order they are given in; a repeated
name gets a ' (n)' suffix before its extension.
"""

import io
import zipfile
from typing import Sequence, Set, Tuple

from utilities import Print, format_file_size, unique_name

from . import register_archiver


@register_archiver("zip")
class ZipArchiverFactory:
    """Factory for creating ZIP archiver instances."""

    @staticmethod
    def create(config: dict) -> "ZipArchiver":
        return ZipArchiver(config)


class ZipArchiver:
    """
    ZIP archives via the standard library zipfile module.

    Attributes:
        compression_level: Deflate level 0-9
    """

    def __init__(self, config: dict):
        """
        Initialize ZIP archiver with configuration.

        Args:
            config: Configuration dictionary with optional keys:
                - compression_level: int - Deflate level 0-9 (default: 6)
        """
        level = int(config.get('compression_level', 6))
        self.compression_level = max(0, min(9, level))

    def pack(self, entries: Sequence[Tuple[str, bytes]]) -> bytes:
        """
        Pack (file_name, data) pairs into a ZIP archive.

        Args:
            entries: Ordered (file_name, data) pairs

        Returns:
            ZIP archive bytes

        Raises:
            ValueError: If entries is empty
            RuntimeError: If writing the archive fails
        """
        if not entries:
            raise ValueError("Nothing to archive")

        buffer = io.BytesIO()
        taken: Set[str] = set()

        try:
            with zipfile.ZipFile(
                buffer,
                mode='w',
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compression_level
            ) as archive:
                for file_name, data in entries:
                    entry_name = unique_name(file_name, taken)
                    if entry_name != file_name:
                        Print("DEBUG", f"Renamed duplicate entry {file_name} -> {entry_name}")
                    taken.add(entry_name)
                    archive.writestr(entry_name, data)
        except (OSError, zipfile.BadZipFile) as e:
            raise RuntimeError(f"ZIP archive creation failed: {e}") from e

        archive_bytes = buffer.getvalue()
        Print("DEBUG", f"ZIP: {len(entries)} entries, {format_file_size(len(archive_bytes))}")
        return archive_bytes

    @property
    def extension(self) -> str:
        return "zip"

    @property
    def name(self) -> str:
        """Archiver identifier."""
        return "zip"
