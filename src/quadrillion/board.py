"""Classes and functions for representing the game board."""

from collections.abc import Iterable

import numpy as np

from quadrillion.cells import CellValue, cell_from_char, cell_to_char

MAX_BOARD_SIZE = 16
"""Maximum width/height of a puzzle board."""


class Board:
    """Store a 2D grid of cell values as a flat bytearray.

    Contains support for both 1D (row-major) and 2D indexing.  Boards are value
    types: `copy()` gives an independent grid, and the solver never shares one
    grid between two search branches.
    """

    def __init__(self, data: bytes | Iterable[int], rows: int, cols: int) -> None:
        if not (0 < rows <= MAX_BOARD_SIZE and 0 < cols <= MAX_BOARD_SIZE):
            raise ValueError(
                f"Board dimensions {rows}x{cols} outside 1..{MAX_BOARD_SIZE}."
            )
        self.data = bytearray(data)
        if len(self.data) != rows * cols:
            raise ValueError(
                f"Board data length {len(self.data)} does not match dimensions {rows}x{cols}."
            )
        self.n_rows = rows
        self.n_cols = cols

    @classmethod
    def from_rows(cls, lines: Iterable[str]) -> "Board":
        """Build a board from text rows, padding short rows with invalid cells.

        Characters: ``' '`` invalid, ``'.'`` empty, ``'*'`` blocked, ``'A'..'L'`` pieces.
        """
        lines = [line.rstrip("\r\n") for line in lines]
        if not lines:
            raise ValueError("A board needs at least one row.")
        cols = max(1, max(len(line) for line in lines))
        board = cls.filled(CellValue.INVALID, len(lines), cols)
        for row, line in enumerate(lines):
            for col, ch in enumerate(line):
                board[row, col] = cell_from_char(ch)
        return board

    @classmethod
    def filled(cls, value: int, rows: int, cols: int) -> "Board":
        """Create a board with every cell set to `value`."""
        return cls(bytes([value]) * (rows * cols), rows, cols)

    def copy(self) -> "Board":
        """Generate a copy of the board."""
        return Board(self.data, self.n_rows, self.n_cols)

    def to_array(self) -> np.ndarray:
        """Return the cells as a read-only ``(n_rows, n_cols)`` uint8 array."""
        return np.frombuffer(bytes(self.data), dtype=np.uint8).reshape(self.n_rows, self.n_cols)

    @property
    def extent(self) -> tuple[int, int]:
        """Playable extent: rows and columns spanned by non-invalid cells, from the origin."""
        rows, cols = np.nonzero(self.to_array() != int(CellValue.INVALID))
        if rows.size == 0:
            return 0, 0
        return int(rows.max()) + 1, int(cols.max()) + 1

    def count(self, value: int) -> int:
        """Number of cells holding `value`."""
        return self.data.count(value)

    def render(self, rows: int | None = None, cols: int | None = None) -> str:
        """Text rendering of the board, limited to the extent unless `rows`/`cols` are given."""
        if rows is None or cols is None:
            ext_rows, ext_cols = self.extent
            rows = ext_rows if rows is None else rows
            cols = ext_cols if cols is None else cols
        return "\n".join(
            "".join(cell_to_char(self[row, col]) for col in range(cols)) for row in range(rows)
        )

    def __str__(self) -> str:
        """Returns the text rendering of the board."""
        return self.render()

    def __repr__(self) -> str:
        return f"Board({self.n_rows}x{self.n_cols}, {bytes(self.data)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (self.n_rows, self.n_cols, self.data) == (other.n_rows, other.n_cols, other.data)

    __hash__ = None  # mutable

    def __getitem__(self, idx: int | tuple[int, int]) -> int:
        """Get cell content by 1D (row-major order) or 2D index."""
        if isinstance(idx, int):
            return self.data[idx]
        if isinstance(idx, tuple) and len(idx) == 2:
            row, col = idx
            return self.data[row * self.n_cols + col]
        raise IndexError("Invalid index type for Board.")

    def __setitem__(self, idx: int | tuple[int, int], value: int) -> None:
        """Set cell content by 1D (row-major order) or 2D index."""
        if isinstance(idx, int):
            self.data[idx] = value
            return
        if isinstance(idx, tuple) and len(idx) == 2:
            row, col = idx
            self.data[row * self.n_cols + col] = value
            return
        raise IndexError("Invalid index type for Board.")

    def get_2d_idx(self, one_d_idx: int) -> tuple[int, int]:
        """Convert a 1D index to a (row, col) tuple."""
        return divmod(one_d_idx, self.n_cols)

    def get_1d_idx(self, row: int, col: int) -> int:
        """Convert a (row, col) tuple to a 1D index."""
        return row * self.n_cols + col
