"""
Index-based selection over the currently loaded images.

The set only knows how many images are loaded (count); it never looks at
the image list itself. Indices outside [0, count) are ignored, and
reset() must be called whenever a new image list is loaded so stale
indices cannot survive.
"""

from typing import List, Set


class SelectionSet:
    """
    Mutable set of selected image indices.

    Attributes:
        count: Number of images the indices refer to
    """

    def __init__(self, count: int = 0):
        self.count = max(0, count)
        self._indices: Set[int] = set()

    def _valid(self, index) -> bool:
        return (
            isinstance(index, int)
            and not isinstance(index, bool)
            and 0 <= index < self.count
        )

    def reset(self, count: int) -> None:
        """Forget the selection and adopt a new image count."""
        self.count = max(0, count)
        self._indices.clear()

    def toggle(self, index: int) -> None:
        """Flip membership of index; out-of-range indices are ignored."""
        if not self._valid(index):
            return
        if index in self._indices:
            self._indices.remove(index)
        else:
            self._indices.add(index)

    def select_all(self, count: int) -> None:
        """Select exactly 0..count-1, with count taken as the new image count."""
        self.reset(count)
        self._indices.update(range(self.count))

    def clear(self) -> None:
        self._indices.clear()

    def size(self) -> int:
        return len(self._indices)

    def contains(self, index: int) -> bool:
        return index in self._indices

    def indices(self) -> List[int]:
        """Selected indices in ascending order, as a fresh list each call."""
        return sorted(self._indices)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, index) -> bool:
        return self.contains(index)

    def __iter__(self):
        return iter(self.indices())

    def __repr__(self) -> str:
        return f"SelectionSet(count={self.count}, indices={self.indices()})"
