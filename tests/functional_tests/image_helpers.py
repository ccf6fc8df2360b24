"""
Shared helpers for the Recast functional tests.

- Synthetic images generated in memory with Pillow
- A scriptable fake codec that records its calls
- A small runner so each test module can be executed directly
"""

import io
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

# Add repo root to path for imports
repo_root = Path(__file__).resolve().parent.parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from PIL import Image

from converter.models import Dimensions, LoadedImage
from utilities import Print


def make_image_bytes(
    width: int = 40,
    height: int = 20,
    mode: str = 'RGBA',
    color=(200, 40, 40, 128),
    format: str = 'PNG'
) -> bytes:
    """Encode a solid-colour image in memory."""
    image = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format=format)
    return buffer.getvalue()


def make_loaded_image(
    name: str,
    size: int = 1000,
    width: int = 100,
    height: int = 50,
    handle=None
) -> LoadedImage:
    return LoadedImage(
        name=name,
        size=size,
        format='PNG',
        dimensions=Dimensions(width, height),
        handle=handle if handle is not None else name
    )


class FakeCodec:
    """
    Codec double: returns `sizes[handle]` bytes (default 100) and raises
    RuntimeError for handles listed in `failing`.
    """

    def __init__(self, sizes: Optional[Dict[str, int]] = None, failing: Sequence[str] = ()):
        self.sizes = sizes or {}
        self.failing = set(failing)
        self.calls: List[Tuple] = []

    def encode(self, handle, width, height, output_format, quality=None) -> bytes:
        self.calls.append((handle, width, height, output_format, quality))
        if handle in self.failing:
            raise RuntimeError(f"cannot encode {handle}")
        return b'x' * self.sizes.get(handle, 100)

    @property
    def handles(self) -> List[str]:
        return [call[0] for call in self.calls]

    @property
    def name(self) -> str:
        return "fake"


def run_suite(title: str, tests: Sequence[Tuple[str, Callable[[], None]]]) -> int:
    """Run tests in order, print a summary, return an exit code."""
    Print("HEADER", title)
    print("=" * 70)

    results = []
    for name, test in tests:
        try:
            test()
            Print("SUCCESS", name)
            results.append((name, True))
        except Exception as e:
            Print("FAILURE", f"{name}: {type(e).__name__}: {e}")
            results.append((name, False))

    print("=" * 70)
    all_passed = True
    for name, passed in results:
        status = "PASSED" if passed else "FAILED"
        symbol = "✓" if passed else "✗"
        print(f"  {symbol} {name}: {status}")
        if not passed:
            all_passed = False

    if all_passed:
        Print("COMPLETED", f"All {len(results)} tests passed")
        return 0
    Print("FAILURE", "Some tests failed")
    return 1
