#!/usr/bin/env python3
"""
Functional Test for the filesystem Source Provider and the ZIP Archiver

Verifies:
1. Non-image files are filtered out, images keep submission order
2. Directory contents are naturally sorted and extension-filtered
3. Format labels come from the MIME type
4. Missing paths and image-free input are reported
5. ZIP archives keep entry order and de-duplicate names

Usage:
    python tests/functional_tests/test_source_and_archive.py
"""

import io
import sys
import tempfile
import zipfile
from pathlib import Path

# Add repo root to path for imports
repo_root = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(repo_root))

import pytest

from converter.errors import InvalidInput
from converter.models import Dimensions
from engines.archive import get_archiver
from engines.source import get_source
from image_helpers import make_image_bytes, run_suite


def test_filters_non_images():
    source = get_source("filesystem", {})
    with tempfile.TemporaryDirectory() as tmp:
        folder = Path(tmp)
        (folder / "b.png").write_bytes(make_image_bytes(30, 10))
        (folder / "notes.txt").write_text("not an image")
        (folder / "a.jpg").write_bytes(make_image_bytes(12, 8, mode='RGB', color=(1, 2, 3), format='JPEG'))

        images = source.load([folder / "b.png", folder / "notes.txt", folder / "a.jpg"])

    assert [image.name for image in images] == ["b.png", "a.jpg"]
    assert images[0].format == "PNG"
    assert images[0].dimensions == Dimensions(30, 10)
    assert images[1].format == "JPEG"
    assert images[1].size == len(images[1].handle)


def test_directory_natural_order():
    source = get_source("filesystem", {"extensions": ["png"]})
    with tempfile.TemporaryDirectory() as tmp:
        folder = Path(tmp)
        for name in ("img10.png", "img2.png", "img1.png"):
            (folder / name).write_bytes(make_image_bytes(4, 4))
        (folder / "img3.gif").write_bytes(make_image_bytes(4, 4, format='GIF'))
        (folder / "sub").mkdir()
        (folder / "sub" / "img0.png").write_bytes(make_image_bytes(4, 4))

        flat = source.load([folder])
        recursive = get_source("filesystem", {"recursive": True, "extensions": [".png"]}).load([folder])

    assert [image.name for image in flat] == ["img1.png", "img2.png", "img10.png"]
    assert len(recursive) == 4


def test_missing_and_empty_input():
    source = get_source("filesystem", {})
    with tempfile.TemporaryDirectory() as tmp:
        folder = Path(tmp)
        (folder / "readme.md").write_text("# hello")

        with pytest.raises(FileNotFoundError):
            source.load([folder / "missing.png"])
        with pytest.raises(InvalidInput):
            source.load([folder / "readme.md"])


def test_zip_archive_order_and_names():
    archiver = get_archiver("zip", {"compression_level": 9})
    entries = [
        ("shot_converted.jpg", b"first"),
        ("shot_converted.jpg", b"second"),
        ("logo_converted.png", b"third"),
    ]

    data = archiver.pack(entries)

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        names = archive.namelist()
        assert names == ["shot_converted.jpg", "shot_converted (1).jpg", "logo_converted.png"]
        assert archive.read("shot_converted (1).jpg") == b"second"
        assert archive.read("logo_converted.png") == b"third"
    assert archiver.extension == "zip"


def test_zip_rejects_empty():
    archiver = get_archiver("zip", {})
    with pytest.raises(ValueError):
        archiver.pack([])


def main():
    return run_suite("Source and Archive Functional Test", [
        ("Filter non-images", test_filters_non_images),
        ("Directory natural order", test_directory_natural_order),
        ("Missing and empty input", test_missing_and_empty_input),
        ("ZIP order and names", test_zip_archive_order_and_names),
        ("ZIP rejects empty", test_zip_rejects_empty),
    ])


if __name__ == "__main__":
    sys.exit(main())
