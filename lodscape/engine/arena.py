"""
Flat storage for [row][col][lod] indexed collections.
"""

from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class LodArena(Generic[T]):
    """
    rows x cols x depth slots in one list.

    Slot (row, col, lod) lives at (row * cols + col) * depth + lod, so all
    levels of one cell are contiguous.
    """

    def __init__(self, rows: int, cols: int, depth: int):
        self.rows = rows
        self.cols = cols
        self.depth = depth
        self._slots: List[Optional[T]] = [None] * (rows * cols * depth)

    def index(self, row: int, col: int, lod: int) -> int:
        if not (0 <= row < self.rows and 0 <= col < self.cols and 0 <= lod < self.depth):
            raise IndexError(
                f"LodArena.index(): ({row}, {col}, {lod}) outside "
                f"{self.rows} x {self.cols} x {self.depth}"
            )
        return (row * self.cols + col) * self.depth + lod

    def get(self, row: int, col: int, lod: int) -> T:
        value = self._slots[self.index(row, col, lod)]
        if value is None:
            raise KeyError(f"LodArena.get(): ({row}, {col}, {lod}) is empty")
        return value

    def set(self, row: int, col: int, lod: int, value: T) -> None:
        self._slots[self.index(row, col, lod)] = value

    def cells(self) -> Iterator[Tuple[int, int]]:
        """(row, col) pairs in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col

    def level(self, lod: int) -> List[T]:
        """Every cell's entry at one lod, row-major."""
        return [self.get(row, col, lod) for row, col in self.cells()]

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[T]:
        return (slot for slot in self._slots if slot is not None)
