"""Piece definitions and their canonical orientations.

Each of the 12 pieces is given as a 4x4 bitmap.  Before searching, every piece is
expanded into the list of its geometrically distinct orientations (up to 4
rotations of the piece and 4 rotations of its mirror image), each stored as a tuple
of ``(row, col)`` ball offsets pushed up and to the left.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
from bitarray import bitarray
from bitarray.util import ba2int

from quadrillion.cells import NUM_PIECES, PIECE_LETTERS

MAX_PIECE_SIZE = 4
"""Maximum horizontal/vertical size of a piece."""

MAX_BALLS = 5
"""Maximum number of balls that make up a piece."""

NUM_ROTATIONS = 4
"""Number of 90 degree rotations."""

Offset: TypeAlias = tuple[int, int]
Orientation: TypeAlias = tuple[Offset, ...]
"""Ball offsets of one orientation, in row-major order."""


class PieceDefinition:
    """A piece bitmap in its input orientation."""

    def __init__(self, balls: Sequence[Sequence[int]] | np.ndarray) -> None:
        bitmap = np.asarray(balls)
        if bitmap.shape != (MAX_PIECE_SIZE, MAX_PIECE_SIZE):
            raise ValueError(
                f"Piece bitmap must be {MAX_PIECE_SIZE}x{MAX_PIECE_SIZE}, got shape {bitmap.shape}."
            )
        if not np.isin(bitmap, (0, 1)).all():
            raise ValueError("Piece bitmap may only contain 0 and 1.")
        self.balls: np.ndarray = bitmap.astype(bool)
        """4x4 boolean bitmap, True where the piece has a ball."""

        n_balls = int(self.balls.sum())
        if not 1 <= n_balls <= MAX_BALLS:
            raise ValueError(f"A piece needs 1 to {MAX_BALLS} balls, got {n_balls}.")

    @property
    def n_balls(self) -> int:
        return int(self.balls.sum())

    def __repr__(self) -> str:
        rows = ["".join("#" if b else "." for b in row) for row in self.balls]
        return f"PieceDefinition({'/'.join(rows)})"


@dataclass(frozen=True)
class SearchPiece:
    """A canonicalized piece, as consumed by the solver."""

    index: int
    """Piece index (0..11), also its letter on the board."""

    orientations: tuple[Orientation, ...]
    """Distinct orientations, in generation order."""

    n_balls: int
    """Number of balls in every orientation."""

    @property
    def letter(self) -> str:
        return PIECE_LETTERS[self.index]


def rotate(bitmap: np.ndarray) -> np.ndarray:
    """Rotate a bitmap clockwise by 90 degrees."""
    return np.rot90(bitmap, k=-1)


def flip(bitmap: np.ndarray) -> np.ndarray:
    """Flip a bitmap vertically."""
    return np.flipud(bitmap)


def push_up_and_left(bitmap: np.ndarray) -> np.ndarray:
    """Shift the set bits up and to the left as far as possible."""
    rows, cols = np.nonzero(bitmap)
    pushed = np.zeros_like(bitmap)
    pushed[rows - rows.min(), cols - cols.min()] = True
    return pushed


def packed_signature(bitmap: np.ndarray) -> int:
    """Pack the bitmap, row by row, into an integer used for de-duplication."""
    return ba2int(bitarray(bitmap.ravel().tolist()))


def candidate_transforms(bitmap: np.ndarray) -> list[np.ndarray]:
    """The 8 candidate transforms of a bitmap.

    Order: identity, its 3 successive clockwise rotations, the vertical flip of the
    identity, then its 3 successive rotations.
    """
    candidates = [bitmap]
    for _ in range(NUM_ROTATIONS - 1):
        candidates.append(rotate(candidates[-1]))
    candidates.append(flip(bitmap))
    for _ in range(NUM_ROTATIONS - 1):
        candidates.append(rotate(candidates[-1]))
    return candidates


def orientation_offsets(bitmap: np.ndarray) -> Orientation:
    """Row-major ``(row, col)`` offsets of the balls in a bitmap."""
    return tuple((int(row), int(col)) for row, col in zip(*np.nonzero(bitmap)))


def orientation_bitmap(offsets: Orientation) -> np.ndarray:
    """Inverse of `orientation_offsets`: build a 4x4 bitmap from ball offsets."""
    bitmap = np.zeros((MAX_PIECE_SIZE, MAX_PIECE_SIZE), dtype=bool)
    for row, col in offsets:
        bitmap[row, col] = True
    return bitmap


def canonical_orientations(bitmap: np.ndarray) -> tuple[Orientation, ...]:
    """Distinct normalized orientations of a bitmap, first generated wins."""
    seen: set[int] = set()
    orientations: list[Orientation] = []
    for candidate in candidate_transforms(np.asarray(bitmap, dtype=bool)):
        pushed = push_up_and_left(candidate)
        signature = packed_signature(pushed)
        if signature in seen:
            continue
        seen.add(signature)
        orientations.append(orientation_offsets(pushed))
    return tuple(orientations)


class PieceCatalog(Sequence[SearchPiece]):
    """The canonicalized set of all 12 pieces, indexable by piece index."""

    def __init__(self, pieces: Sequence[SearchPiece]) -> None:
        if len(pieces) != NUM_PIECES:
            raise ValueError(f"Expected {NUM_PIECES} pieces, got {len(pieces)}.")
        self._pieces = tuple(pieces)

    @classmethod
    def from_definitions(cls, definitions: Sequence[PieceDefinition]) -> "PieceCatalog":
        """Expand each piece definition into its distinct orientations."""
        if len(definitions) != NUM_PIECES:
            raise ValueError(f"Expected {NUM_PIECES} piece definitions, got {len(definitions)}.")
        pieces = []
        for piece_idx, definition in enumerate(definitions):
            orientations = canonical_orientations(definition.balls)
            pieces.append(SearchPiece(piece_idx, orientations, definition.n_balls))
        return cls(pieces)

    def __getitem__(self, idx: int) -> SearchPiece:
        return self._pieces[idx]

    def __len__(self) -> int:
        return len(self._pieces)

    def total_balls(self, piece_idxs: Sequence[int]) -> int:
        """Total number of balls over the given pieces."""
        return sum(self._pieces[idx].n_balls for idx in piece_idxs)


def initialize(definitions: Sequence[PieceDefinition]) -> PieceCatalog:
    """Build the piece catalog used by the solver from raw piece definitions."""
    return PieceCatalog.from_definitions(definitions)
