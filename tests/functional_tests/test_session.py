#!/usr/bin/env python3
"""
Integration Test: RecastSession end to end

This test verifies the complete session flow with the real engines:
1. Session initialization with all engines
2. Single-file conversion, download naming and conversion info
3. Batch mode: selection, ordered conversion, archive and save
4. Loading new files clears the selection; reset drops everything
5. Saving results never overwrites outputs that share a name
6. Fail-fast batch leaves no partial results behind

Usage:
    python tests/functional_tests/test_session.py
"""

import asyncio
import io
import sys
import tempfile
import zipfile
from pathlib import Path

# Add repo root to path for imports
repo_root = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(repo_root))

import pytest
from PIL import Image

from converter.batch import BatchCoordinator
from converter.engine import ConversionEngine
from converter.errors import CodecFailure, EmptySelection
from converter.models import Dimensions, EncodingOptions, Scale
from image_helpers import FakeCodec, make_image_bytes, make_loaded_image, run_suite
from recast import RecastSession, describe_change


def write_inputs(folder: Path) -> list:
    paths = [folder / "photo.v2.png", folder / "banner.png", folder / "notes.txt"]
    paths[0].write_bytes(make_image_bytes(40, 20))
    paths[1].write_bytes(make_image_bytes(90, 30, mode='RGB', color=(10, 200, 10)))
    paths[2].write_text("ignore me")
    return paths


def new_session() -> RecastSession:
    session = RecastSession()
    session.initialize()
    return session


def test_initialization():
    session = new_session()
    assert session.source.name == "filesystem"
    assert session.codec.name == "pillow"
    assert session.archiver.name == "zip"
    assert session.selected_count == 0


def test_requires_initialize():
    session = RecastSession()
    with pytest.raises(RuntimeError):
        session.load([])
    with pytest.raises(RuntimeError):
        asyncio.run(session.convert())


def test_missing_config_path():
    with pytest.raises(FileNotFoundError):
        RecastSession(config_path=Path("/nonexistent/recast/config.json"))


def test_single_conversion():
    session = new_session()
    with tempfile.TemporaryDirectory() as tmp:
        folder = Path(tmp)
        paths = write_inputs(folder)
        session.load(paths[:1])
        assert not session.is_batch_mode

        outcome = asyncio.run(session.convert(policy=Scale(50), options=EncodingOptions("jpeg", 85)))

        assert len(outcome.results) == 1
        result = outcome.results[0]
        assert result.new_dimensions == Dimensions(20, 10)
        assert Image.open(io.BytesIO(result.data)).format == "JPEG"

        artifact = session.download()
        assert artifact.file_name == "photo.v2_converted.jpg"
        assert artifact.mime_type == "image/jpeg"

        info = dict(session.conversion_info())
        assert info["Format"] == "PNG → JPEG"
        assert info["Dimensions"] == "40×20 → 20×10"
        assert info["Transparency"] == "Not supported"

        written = session.save_results(folder / "out")
        assert [path.name for path in written] == ["photo.v2_converted.jpg"]
        assert written[0].read_bytes() == result.data


def test_batch_conversion_and_archive():
    session = new_session()
    with tempfile.TemporaryDirectory() as tmp:
        folder = Path(tmp)
        session.load(write_inputs(folder))
        assert session.is_batch_mode
        assert len(session.images) == 2

        with pytest.raises(EmptySelection):
            asyncio.run(session.convert())

        session.toggle(1)
        session.toggle(0)
        progress = []
        outcome = asyncio.run(session.convert(
            options=EncodingOptions("gif"),
            progress=lambda done, total: progress.append((done, total))
        ))

        assert progress == [(1, 2), (2, 2)]
        assert [r.source_name for r in outcome.results] == ["photo.v2.png", "banner.png"]
        assert outcome.summary.count == 2
        assert outcome.summary.total_original == sum(image.size for image in session.images)

        info = dict(session.conversion_info())
        assert info["Batch conversion"] == "2 files"
        assert info["Average change"] == describe_change(outcome.summary.percent_change)

        archive = session.archive()
        assert archive.file_name.startswith("converted_images_") and archive.file_name.endswith(".zip")
        with zipfile.ZipFile(io.BytesIO(archive.data)) as bundle:
            assert bundle.namelist() == ["photo.v2_converted.gif", "banner_converted.gif"]

        saved = session.save_archive(folder / "out")
        assert saved.exists()

        with pytest.raises(ValueError):
            session.download()


def test_load_clears_selection_and_reset():
    session = new_session()
    with tempfile.TemporaryDirectory() as tmp:
        paths = write_inputs(Path(tmp))
        session.load(paths)
        session.select_all()
        assert session.selected_count == 2

        session.load(paths)
        assert session.selected_count == 0

        session.select_all()
        asyncio.run(session.convert())
        assert len(session.results) == 2

        session.reset()
        assert session.images == []
        assert session.results == []
        assert session.summary is None
        assert session.selected_count == 0
        assert not session.toggle(0)


def test_save_results_keeps_same_named_outputs():
    session = new_session()
    with tempfile.TemporaryDirectory() as tmp:
        folder = Path(tmp)
        (folder / "photo.png").write_bytes(make_image_bytes(30, 30))
        (folder / "photo.jpg").write_bytes(
            make_image_bytes(50, 20, mode='RGB', color=(0, 90, 200), format='JPEG')
        )
        session.load([folder])
        session.select_all()
        outcome = asyncio.run(session.convert(options=EncodingOptions("png")))

        written = session.save_results(folder / "out")

        assert [path.name for path in written] == ["photo_converted.png", "photo_converted (1).png"]
        assert sorted(path.name for path in (folder / "out").iterdir()) == sorted(path.name for path in written)
        for path, result in zip(written, outcome.results):
            assert path.read_bytes() == result.data


def test_fail_fast_keeps_no_results():
    session = new_session()
    session.engine = ConversionEngine(FakeCodec(failing=["b.png"]))
    session.coordinator = BatchCoordinator(session.engine)
    session.images = [make_loaded_image(name) for name in ("a.png", "b.png", "c.png")]
    session.select_all()

    with pytest.raises(CodecFailure) as info:
        asyncio.run(session.convert_batch(options=EncodingOptions("webp", 70)))

    assert "b.png" in str(info.value)
    assert "batch aborted, 1 of 3 completed" in str(info.value)
    assert session.results == []
    assert session.summary is None


def main():
    return run_suite("Recast Session Integration Test", [
        ("Session initialization", test_initialization),
        ("Requires initialize", test_requires_initialize),
        ("Missing config path", test_missing_config_path),
        ("Single conversion", test_single_conversion),
        ("Batch conversion and archive", test_batch_conversion_and_archive),
        ("Load clears selection, reset", test_load_clears_selection_and_reset),
        ("Same-named outputs kept apart", test_save_results_keeps_same_named_outputs),
        ("Fail-fast keeps no results", test_fail_fast_keeps_no_results),
    ])


if __name__ == "__main__":
    sys.exit(main())
