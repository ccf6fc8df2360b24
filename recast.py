#!/usr/bin/env python3
"""
Recast v0.3: batch image re-encoding with resize and quality control.

This is the session object that wires the conversion core to the
source, codec and archive engines. It owns everything one user session
touches: the loaded image list, the selection, and the latest results.
Nothing is rendered here; callers read return values and progress
callbacks.

Architecture:
- Factory pattern for engines (sources, codecs, archivers)
- Protocol-based contracts for type safety
- Conversion core in converter/ knows nothing about engines or files

Usage:
    from recast import RecastSession

    session = RecastSession()
    session.initialize()
    session.load([Path("photos/")])
    session.select_all()
    outcome = asyncio.run(session.convert_batch(options=EncodingOptions("webp", 80)))
    session.save_archive(Path("out/"))

Or from command line:
    python recast.py photos/ -f webp -q 80 --scale 50 --zip
"""

import asyncio
import copy
import json
import math
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple, Union

from converter import catalog
from converter.batch import BatchCoordinator, ProgressCallback, notify_progress
from converter.engine import ConversionEngine
from converter.errors import (
    CodecFailure,
    EmptySelection,
    InvalidInput,
    InvalidPolicy,
    RecastError,
)
from converter.models import (
    BatchOutcome,
    BatchSummary,
    ConversionResult,
    Custom,
    EncodingOptions,
    LoadedImage,
    ResizePolicy,
    Scale,
)
from converter.selection import SelectionSet
from engines.archive import get_archiver
from engines.codec import get_codec
from engines.source import get_source
from utilities import Print, format_file_size, unique_name, CPU_and_Mem_usage


DEFAULT_CONFIG = {
    'version': '0.3.0',
    'defaults': {
        'format': 'png',
        'quality': 90,
        'resize': {'mode': 'none', 'scale': 100, 'width': None, 'height': None},
    },
    'sources': {'filesystem': {}},
    'codecs': {'pillow': {}},
    'archivers': {'zip': {}},
}


@dataclass(frozen=True)
class DownloadArtifact:
    """Bytes plus the file name and MIME type a caller should save them under."""
    data: bytes
    file_name: str
    mime_type: str


def describe_change(percent: float) -> str:
    """'increased 12.5%' / 'decreased 40.0%'; 'n/a' when undefined."""
    if math.isnan(percent):
        return "n/a"
    if percent > 0:
        return f"increased {percent:.1f}%"
    return f"decreased {abs(percent):.1f}%"


class RecastSession:
    """
    One in-memory conversion session.

    Mutated only from a single thread between awaits; the conversion core
    never fans out, so no locking is needed around the image list or the
    selection.

    Attributes:
        config: Loaded configuration dictionary
        source: Initialized source provider
        codec: Initialized image codec
        archiver: Initialized archiver
        images: Currently loaded images
        selection: Selected indices into images
        results: Results of the latest successful conversion
        summary: BatchSummary of the latest successful conversion
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize session with configuration.

        Args:
            config_path: Path to config.json. If None, uses default location.
        """
        self.config = self._load_config(config_path)
        self.source = None
        self.codec = None
        self.archiver = None
        self.engine: Optional[ConversionEngine] = None
        self.coordinator: Optional[BatchCoordinator] = None
        self.images: List[LoadedImage] = []
        self.selection = SelectionSet()
        self.results: List[ConversionResult] = []
        self.summary: Optional[BatchSummary] = None
        self._initialized = False

    def _load_config(self, config_path: Optional[Path]) -> dict:
        """Load configuration from JSON file."""
        if config_path is None:
            config_path = Path(__file__).parent / "config" / "config.json"
            if not config_path.exists():
                Print("WARNING", f"No config at {config_path}, using built-in defaults")
                return copy.deepcopy(DEFAULT_CONFIG)

        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}\n"
                f"Create config/config.json or specify path with config_path parameter."
            )

        with open(config_path) as f:
            config = json.load(f)

        Print("DEBUG", f"Loaded configuration v{config.get('version', 'unknown')}")
        return config

    def initialize(
        self,
        source_name: str = "filesystem",
        codec_name: str = "pillow",
        archiver_name: str = "zip"
    ) -> None:
        """
        Initialize all engines.

        This must be called before load() and convert().

        Args:
            source_name: Name of the source provider (default: filesystem)
            codec_name: Name of the image codec (default: pillow)
            archiver_name: Name of the archiver (default: zip)

        Raises:
            ValueError: If a specified engine is not registered
        """
        Print("STARTING", f"Initializing Recast v{self.config.get('version', '0.3.0')} session")

        source_config = self.config.get('sources', {}).get(source_name, {})
        self.source = get_source(source_name, source_config)
        Print("SUCCESS", f"Source: {self.source.name}")

        codec_config = self.config.get('codecs', {}).get(codec_name, {})
        self.codec = get_codec(codec_name, codec_config)
        Print("SUCCESS", f"Codec: {self.codec.name}")

        archiver_config = self.config.get('archivers', {}).get(archiver_name, {})
        self.archiver = get_archiver(archiver_name, archiver_config)
        Print("SUCCESS", f"Archiver: {self.archiver.name}")

        self.engine = ConversionEngine(self.codec)
        self.coordinator = BatchCoordinator(self.engine)

        self._initialized = True
        Print("SUCCESS", "Session initialized")

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Session not initialized. Call initialize() first.")

    # =========================================================================
    # Defaults from configuration
    # =========================================================================

    def default_policy(self) -> ResizePolicy:
        resize = self.config.get('defaults', {}).get('resize', {})
        return ResizePolicy.from_settings(
            resize.get('mode'),
            scale=resize.get('scale'),
            width=resize.get('width'),
            height=resize.get('height')
        )

    def default_options(self) -> EncodingOptions:
        defaults = self.config.get('defaults', {})
        return EncodingOptions(defaults.get('format', 'png'), defaults.get('quality', 90))

    # =========================================================================
    # Loading and selection
    # =========================================================================

    def load(self, paths: Sequence[Union[str, Path]]) -> List[LoadedImage]:
        """
        Replace the loaded images with the images among paths.

        The selection is always cleared, and previous results are dropped.

        Raises:
            FileNotFoundError: If a path does not exist
            InvalidInput: If no image was found
        """
        self._require_initialized()
        images = self.source.load(paths)

        self.images = images
        self.selection.reset(len(images))
        self.results = []
        self.summary = None

        mode = "batch" if self.is_batch_mode else "single"
        Print("STATE", f"{len(images)} file{'s' if len(images) != 1 else ''} loaded ({mode} mode)")
        return images

    @property
    def is_batch_mode(self) -> bool:
        return len(self.images) > 1

    @property
    def selected_count(self) -> int:
        return self.selection.size()

    def toggle(self, index: int) -> bool:
        """Toggle one image; returns whether it is now selected."""
        self.selection.toggle(index)
        return self.selection.contains(index)

    def select_all(self) -> None:
        self.selection.select_all(len(self.images))

    def clear_selection(self) -> None:
        self.selection.clear()

    # =========================================================================
    # Conversion
    # =========================================================================

    async def convert(
        self,
        index: int = 0,
        policy: Optional[ResizePolicy] = None,
        options: Optional[EncodingOptions] = None,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[asyncio.Event] = None
    ) -> BatchOutcome:
        """
        Convert the current input.

        In batch mode this converts the selection (see convert_batch);
        otherwise the image at index.

        Raises:
            InvalidInput: If no image exists at index
            CodecFailure: If conversion fails
        """
        self._require_initialized()

        if self.is_batch_mode:
            return await self.convert_batch(policy, options, progress, cancel)

        if not 0 <= index < len(self.images):
            raise InvalidInput(f"No image loaded at index {index}")

        policy = policy if policy is not None else self.default_policy()
        options = options if options is not None else self.default_options()

        result = await self.engine.convert(self.images[index], policy, options)
        if progress is not None:
            await notify_progress(progress, 1, 1)

        self.results = [result]
        self.summary = BatchSummary.from_results(self.results)
        Print("COMPLETED",
            f"Converted {result.source_name}: {format_file_size(result.new_size)} "
            f"({describe_change(result.percent_change)})"
        )
        return BatchOutcome(list(self.results), self.summary)

    async def convert_batch(
        self,
        policy: Optional[ResizePolicy] = None,
        options: Optional[EncodingOptions] = None,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[asyncio.Event] = None
    ) -> BatchOutcome:
        """
        Convert the selected images, in ascending index order.

        Raises:
            EmptySelection: If nothing is selected
            BatchAborted: If any item fails (no results are kept)
            BatchCancelled: If cancel is set between items
        """
        self._require_initialized()

        policy = policy if policy is not None else self.default_policy()
        options = options if options is not None else self.default_options()

        outcome = await self.coordinator.run_batch(
            self.images, self.selection, policy, options, progress=progress, cancel=cancel
        )

        self.results = list(outcome.results)
        self.summary = outcome.summary
        return outcome

    def conversion_info(self) -> List[Tuple[str, str]]:
        """
        (label, value) lines describing the latest conversion.

        Single results show the size and dimension change; batches show the
        file count and the total size change. Both end with the catalog
        entry for the output format.
        """
        if not self.results:
            return []

        first = self.results[0]
        info = catalog.describe(first.output_format)
        format_line = f"{first.original_format} → {first.output_format.value.upper()}"

        if len(self.results) == 1:
            lines = [
                ("Format", format_line),
                ("File size",
                 f"{format_file_size(first.original_size)} → {format_file_size(first.new_size)} "
                 f"({describe_change(first.percent_change)})"),
                ("Dimensions", f"{first.original_dimensions} → {first.new_dimensions}"),
            ]
        else:
            summary = self.summary or BatchSummary.from_results(self.results)
            change = describe_change(summary.percent_change)
            lines = [
                ("Batch conversion", f"{summary.count} files"),
                ("Format", format_line),
                ("Total size",
                 f"{format_file_size(summary.total_original)} → {format_file_size(summary.total_new)} "
                 f"({change})"),
                ("Average change", change),
            ]

        lines.extend([
            ("Compression", info.compression),
            ("Quality", info.quality_note),
            ("Transparency", info.transparency),
            ("Typical use", info.usage),
        ])
        return lines

    # =========================================================================
    # Download, archive, save
    # =========================================================================

    def download(self, result: Optional[ConversionResult] = None) -> DownloadArtifact:
        """
        Artifact for one result (the only result when none is given).

        Raises:
            ValueError: If no result is given and there is not exactly one
        """
        if result is None:
            if len(self.results) != 1:
                raise ValueError(f"Expected exactly one result, have {len(self.results)}")
            result = self.results[0]
        return DownloadArtifact(result.data, result.suggested_name, result.mime_type)

    def downloads(self) -> List[DownloadArtifact]:
        return [self.download(result) for result in self.results]

    def archive(self) -> DownloadArtifact:
        """
        Every result in one archive named converted_images_<epoch-ms>.<ext>.

        Raises:
            ValueError: If there are no results
        """
        self._require_initialized()
        if not self.results:
            raise ValueError("No converted files to archive")

        entries = [(result.suggested_name, result.data) for result in self.results]
        data = self.archiver.pack(entries)
        file_name = f"converted_images_{int(time.time() * 1000)}.{self.archiver.extension}"
        return DownloadArtifact(data, file_name, f"application/{self.archiver.extension}")

    def save_results(self, output_dir: Path) -> List[Path]:
        """
        Write every result to output_dir; returns the written paths.

        Results that share a download name are saved as 'stem (n).ext'.
        """
        if not self.results:
            raise ValueError("No converted files to save")
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        written = []
        taken: Set[str] = set()
        for artifact in self.downloads():
            file_name = unique_name(artifact.file_name, taken)
            taken.add(file_name)
            if file_name != artifact.file_name:
                Print("DEBUG", f"Renamed duplicate output {artifact.file_name} -> {file_name}")
            target = output_dir / file_name
            target.write_bytes(artifact.data)
            written.append(target)
            Print("DEBUG", f"Saved {target} ({format_file_size(len(artifact.data))})")

        Print("COMPLETED", f"Saved {len(written)} file{'s' if len(written) != 1 else ''} to {output_dir}")
        return written

    def save_archive(self, output_dir: Path) -> Path:
        """Write archive() into output_dir; returns its path."""
        artifact = self.archive()
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        target = output_dir / artifact.file_name
        target.write_bytes(artifact.data)
        Print("COMPLETED", f"Saved: {target} ({format_file_size(len(artifact.data))})")
        return target

    def reset(self) -> None:
        """Drop images, selection and results."""
        self.images = []
        self.selection.reset(0)
        self.results = []
        self.summary = None
        Print("STATE", "Session reset")


def parse_indices(value: str) -> List[int]:
    """'3,1,4' -> [3, 1, 4]"""
    try:
        return [int(part) for part in value.split(',') if part.strip()]
    except ValueError:
        raise ValueError(f"Expected comma-separated indices, got '{value}'")


def main():
    """Command-line entry point for quick testing."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Recast v0.3: batch image re-encoding with resize and quality control',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python recast.py photo.png -f jpeg -q 85
  python recast.py photos/ -f webp --scale 50 --zip
  python recast.py a.png b.png c.png --select 0,2 --width 800
        """
    )

    parser.add_argument('inputs', type=Path, nargs='+', help='Image files or directories')
    parser.add_argument('-o', '--output', type=Path, default=Path('converted'),
                        help='Output directory (default: ./converted)')
    parser.add_argument('-f', '--format', default=None,
                        help='Output format: png, jpeg, webp, bmp, gif (default: from config)')
    parser.add_argument('-q', '--quality', type=int, default=None,
                        help='Quality 0-100 for jpeg/webp (default: from config)')
    parser.add_argument('--scale', type=int, default=None, help='Resize by percentage')
    parser.add_argument('--width', type=int, default=None, help='Target width')
    parser.add_argument('--height', type=int, default=None, help='Target height')
    parser.add_argument('--select', type=parse_indices, default=None,
                        help='Comma-separated indices to convert in batch mode (default: all)')
    parser.add_argument('--zip', action='store_true', help='Save batch results as one ZIP archive')
    parser.add_argument('--config', type=Path, default=None, help='Path to config.json')
    parser.add_argument('--stats', action='store_true', help='Report CPU and memory usage at the end')

    args = parser.parse_args()

    try:
        session = RecastSession(config_path=args.config)
        session.initialize()
        session.load(args.inputs)

        if args.scale is not None:
            policy = Scale(args.scale)
        elif args.width is not None or args.height is not None:
            policy = Custom(args.width, args.height)
        else:
            policy = session.default_policy()

        defaults = session.default_options()
        options = EncodingOptions(
            args.format if args.format is not None else defaults.output_format,
            args.quality if args.quality is not None else defaults.quality
        )

        if session.is_batch_mode:
            if args.select is None:
                session.select_all()
            else:
                for index in args.select:
                    session.toggle(index)
            Print("INFO", f"Selected {session.selected_count} of {len(session.images)} files")

        def report(completed: int, total: int) -> None:
            Print("PROGRESS", f"Converting... ({completed}/{total})")

        asyncio.run(session.convert(policy=policy, options=options, progress=report))

        for label, value in session.conversion_info():
            Print("INFO", f"{label}: {value}")

        if args.zip and len(session.results) > 1:
            session.save_archive(args.output)
        else:
            session.save_results(args.output)

        if args.stats:
            Print("INFO", CPU_and_Mem_usage())

        return 0

    except (FileNotFoundError, InvalidInput, InvalidPolicy, EmptySelection) as e:
        Print("FAILURE", str(e))
        return 1
    except (CodecFailure, RuntimeError) as e:
        Print("FAILURE", str(e))
        return 2
    except (RecastError, ValueError) as e:
        Print("FAILURE", str(e))
        return 1
    except KeyboardInterrupt:
        Print("WARNING", "Interrupted by user")
        return 130
    except Exception as e:
        Print("FAILURE", f"Unexpected error: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    import sys
    sys.exit(main())
