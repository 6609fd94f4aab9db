"""
Tests for the NoGo board rules and moves.
"""
import numpy as np
import pytest

from nogo_ai.core.actions import Move, all_moves
from nogo_ai.core.board import Board
from nogo_ai.core.constants import PieceType, PlaceResult


def test_empty_board_every_move_legal():
    board = Board(3, 3)
    assert board.to_move == PieceType.BLACK
    assert board.empty_count() == 9
    assert len(board.legal_moves()) == 9
    assert board.has_legal_move(PieceType.WHITE)


def test_apply_returns_new_board_and_flips_turn():
    board = Board(3, 3)
    after, result = board.apply(Move(4, PieceType.BLACK))

    assert result == PlaceResult.LEGAL
    assert after.to_move == PieceType.WHITE
    assert after.at(4) == PieceType.BLACK
    # The original is untouched
    assert board.at(4) == PieceType.EMPTY
    assert board.to_move == PieceType.BLACK


def test_cells_are_read_only():
    board = Board(3, 3)
    with pytest.raises(ValueError):
        board.cells[0] = PieceType.BLACK


def test_wrong_turn_is_rejected():
    board = Board(3, 3)
    after, result = board.apply(Move(0, PieceType.WHITE))
    assert result == PlaceResult.ILLEGAL_TURN
    assert after is board


def test_off_board_and_occupied():
    board = Board.from_rows(["X..", "...", "..."], to_move=PieceType.WHITE)
    assert board.check(9, PieceType.WHITE) == PlaceResult.ILLEGAL_POSITION
    assert board.check(0, PieceType.WHITE) == PlaceResult.ILLEGAL_PIECE
    assert board.check(0, PieceType.BLACK) == PlaceResult.ILLEGAL_PIECE


def test_capture_is_illegal():
    # Black at B2 would take the last liberty of the white corner stone
    board = Board.from_rows(["O..", "X..", "..."], to_move=PieceType.BLACK)
    assert board.check(1, PieceType.BLACK) == PlaceResult.ILLEGAL_TAKE
    _, result = board.apply(Move(1, PieceType.BLACK))
    assert result == PlaceResult.ILLEGAL_TAKE


def test_suicide_is_illegal():
    board = Board.from_rows([".X.", "X..", "..."], to_move=PieceType.WHITE)
    assert board.check(0, PieceType.WHITE) == PlaceResult.ILLEGAL_SUICIDE
    # Black may fill its own point: the group keeps liberties
    assert board.check(0, PieceType.BLACK) == PlaceResult.LEGAL


def test_group_liberties_are_shared():
    # The two white stones form one group whose only liberty is C3
    board = Board.from_rows(["OOX", "XX.", "..."], to_move=PieceType.BLACK)
    assert board.check(2, PieceType.BLACK) == PlaceResult.ILLEGAL_PIECE
    board = Board.from_rows(["OO.", "XX.", "..."], to_move=PieceType.BLACK)
    assert board.check(2, PieceType.BLACK) == PlaceResult.ILLEGAL_TAKE


def test_single_point_board_has_no_legal_move():
    board = Board(1, 1)
    assert board.check(0, PieceType.BLACK) == PlaceResult.ILLEGAL_SUICIDE
    assert not board.has_legal_move()
    assert board.legal_moves() == []


def test_play_sequence_and_illegal_move():
    board = Board(2, 1).play([Move(0, PieceType.BLACK)])
    assert board.to_move == PieceType.WHITE
    # White at the last point would capture black
    with pytest.raises(ValueError):
        board.play([Move(1, PieceType.WHITE)])


def test_equality_and_hash():
    a = Board(3, 3).play([Move(4, PieceType.BLACK)])
    b = Board.from_rows(["...", ".X.", "..."], to_move=PieceType.WHITE)
    assert a == b
    assert hash(a) == hash(b)
    assert a != Board.from_rows(["...", ".X.", "..."], to_move=PieceType.BLACK)


def test_from_rows_validation():
    with pytest.raises(ValueError):
        Board.from_rows(["..", "..."])
    with pytest.raises(ValueError):
        Board.from_rows([".?", ".."])
    with pytest.raises(ValueError):
        Board(2, 2, np.zeros(3, dtype=np.int8))


def test_render_contains_stones():
    board = Board.from_rows(["X.", ".O"], to_move=PieceType.BLACK)
    text = str(board)
    assert "X" in text and "O" in text
    assert "black to move" in text


def test_move_validation_and_ordering():
    with pytest.raises(ValueError):
        Move(0, PieceType.EMPTY)
    with pytest.raises(ValueError):
        Move(-1, PieceType.BLACK)
    assert Move(1, PieceType.BLACK) < Move(2, PieceType.BLACK)
    assert Move(3, 1).side == PieceType.WHITE
    assert len({Move(3, PieceType.WHITE), Move(3, PieceType.WHITE)}) == 1


def test_move_text():
    assert Move(0, PieceType.BLACK).to_text(9, 9) == "B A9"
    assert Move.parse("W J1", 9, 9) == Move(80, PieceType.WHITE)
    assert Move.parse("b c3", 3, 3) == Move(2, PieceType.BLACK)
    with pytest.raises(ValueError):
        Move.parse("B Z9", 9, 9)
    with pytest.raises(ValueError):
        Move.parse("nonsense")


def test_all_moves_is_fixed_and_fresh():
    moves = all_moves(PieceType.WHITE, 3, 2)
    assert len(moves) == 6
    assert all(move.side == PieceType.WHITE for move in moves)
    assert [move.position for move in moves] == list(range(6))

    moves.reverse()
    assert all_moves(PieceType.WHITE, 3, 2)[0].position == 0


def test_rule_checks_do_not_copy_the_cell_array(monkeypatch):
    from nogo_ai.core import board as board_module

    board = Board(9, 9).play([Move(40, PieceType.BLACK), Move(41, PieceType.WHITE)])

    class NoNumpy:
        def __getattr__(self, name):
            raise AssertionError(f"numpy.{name} used during a rule check")

    monkeypatch.setattr(board_module, "np", NoNumpy())
    assert len(board.legal_moves()) == 79
    assert board.check(40, PieceType.BLACK) == PlaceResult.ILLEGAL_PIECE
    assert board.has_legal_move(PieceType.WHITE)


def test_apply_keeps_cells_and_rules_in_step():
    board = Board.from_rows(["O..", "...", "..."], to_move=PieceType.BLACK)
    after, result = Move(3, PieceType.BLACK).apply(board)

    assert result == PlaceResult.LEGAL
    assert after.at(3) == PieceType.BLACK
    assert after.cells[3] == PieceType.BLACK
    assert not after.cells.flags.writeable
    # The white corner stone is now down to one liberty
    assert after.check(1, PieceType.BLACK) == PlaceResult.ILLEGAL_TAKE
    assert Move(1, PieceType.BLACK).apply(after) == (after, PlaceResult.ILLEGAL_TURN)


def test_empty_points():
    board = Board.from_rows(["X.", ".O"], to_move=PieceType.BLACK)
    assert board.empty_points() == [1, 2]
    assert len(Board(3, 3).empty_points()) == Board(3, 3).empty_count()
