import pytest

from quadrillion.board import Board
from quadrillion.cells import (
    CellValue,
    cell_from_char,
    cell_to_char,
    is_piece,
    piece_cell,
    piece_index,
)


def test_cell_characters():
    assert cell_from_char(" ") == CellValue.INVALID
    assert cell_from_char(".") == CellValue.EMPTY
    assert cell_from_char("*") == CellValue.BLOCKED
    assert cell_from_char("A") == piece_cell(0)
    assert cell_from_char("L") == piece_cell(11)
    for ch in " .*ABCDEFGHIJKL":
        assert cell_to_char(cell_from_char(ch)) == ch
    with pytest.raises(ValueError):
        cell_from_char("M")
    with pytest.raises(ValueError):
        cell_to_char(99)


def test_piece_cells():
    assert not is_piece(CellValue.EMPTY)
    assert not is_piece(CellValue.BLOCKED)
    assert is_piece(piece_cell(5))
    assert piece_index(piece_cell(7)) == 7
    with pytest.raises(ValueError):
        piece_cell(12)
    with pytest.raises(ValueError):
        piece_index(CellValue.INVALID)


def test_from_rows_pads_with_invalid():
    board = Board.from_rows(["  ..", " .*", ""])
    assert (board.n_rows, board.n_cols) == (3, 4)
    assert board[0, 0] == CellValue.INVALID
    assert board[0, 2] == CellValue.EMPTY
    assert board[1, 2] == CellValue.BLOCKED
    assert board[1, 3] == CellValue.INVALID
    assert board[2, 0] == CellValue.INVALID


def test_extent_ignores_invalid_border():
    board = Board.from_rows(["  ..", " .*", "    "])
    assert board.extent == (2, 4)
    assert Board.filled(CellValue.INVALID, 2, 2).extent == (0, 0)


def test_render_within_extent():
    board = Board.from_rows([" A.", "*B ", "   "])
    assert board.render() == " A.\n*B "
    assert str(board) == board.render()
    assert board.render(rows=1, cols=2) == " A"


def test_indexing():
    board = Board.from_rows(["..", ".*"])
    assert board[3] == CellValue.BLOCKED
    assert board.get_1d_idx(1, 1) == 3
    assert board.get_2d_idx(3) == (1, 1)
    board[0, 1] = piece_cell(2)
    assert board[1] == piece_cell(2)
    with pytest.raises(IndexError):
        board["a"]


def test_copy_is_independent():
    board = Board.from_rows(["..", ".."])
    copy = board.copy()
    assert copy == board
    copy[0] = piece_cell(0)
    assert copy != board
    assert board[0] == CellValue.EMPTY


def test_count():
    board = Board.from_rows(["..*", "A. "])
    assert board.count(CellValue.EMPTY) == 3
    assert board.count(CellValue.INVALID) == 1


def test_board_dimension_errors():
    with pytest.raises(ValueError, match="dimensions"):
        Board.from_rows(["." * 17])
    with pytest.raises(ValueError, match="dimensions"):
        Board.from_rows(["."] * 17)
    with pytest.raises(ValueError, match="length"):
        Board(b"\x00\x00\x00", 2, 2)
    with pytest.raises(ValueError, match="Invalid board character"):
        Board.from_rows(["..x"])
