import random

import numpy as np
import pytest

from reversi.board import (
    BOARD_SIZE,
    DIRECTIONS,
    Board,
    IllegalMoveError,
    Side,
    new_board,
)


def random_positions(seed: int, count: int) -> list[Board]:
    """Positions reached by random play, including some with forced passes."""
    rng = random.Random(seed)
    positions: list[Board] = []
    board = Board()
    side = Side.DARK
    while len(positions) < count:
        positions.append(board)
        moves = board.legal_moves(side)
        if not moves:
            if board.is_terminal():
                board = Board()
                side = Side.DARK
            else:
                side = side.opponent
            continue
        board = board.apply_move(*rng.choice(moves), side)
        side = side.opponent
    return positions


def reference_is_valid(board: Board, row: int, col: int, side: Side) -> bool:
    if board.cell(row, col) is not None:
        return False
    for dr, dc in DIRECTIONS:
        r, c = row + dr, col + dc
        seen_opponent = False
        while 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE:
            occupant = board.cell(r, c)
            if occupant is None:
                break
            if occupant is side:
                if seen_opponent:
                    return True
                break
            seen_opponent = True
            r += dr
            c += dc
    return False


def test_initial_position_has_two_discs_per_side_in_the_centre() -> None:
    board = new_board()

    assert board.score() == (2, 2)
    assert board.cell(3, 3) is Side.LIGHT
    assert board.cell(4, 4) is Side.LIGHT
    assert board.cell(3, 4) is Side.DARK
    assert board.cell(4, 3) is Side.DARK
    assert board.empty_count() == 60


def test_initial_dark_legal_moves_are_four_expected_squares() -> None:
    assert Board().legal_moves(Side.DARK) == [(2, 3), (3, 2), (4, 5), (5, 4)]


def test_initial_light_legal_moves_are_four_expected_squares() -> None:
    assert Board().legal_moves(Side.LIGHT) == [(2, 4), (3, 5), (4, 2), (5, 3)]


def test_apply_move_flips_bracketed_disc_and_updates_counts() -> None:
    board = Board()
    after = board.apply_move(2, 3, Side.DARK)

    assert after.cell(2, 3) is Side.DARK
    assert after.cell(3, 3) is Side.DARK
    assert after.score() == (4, 1)
    assert after.empty_count() == 59


def test_apply_move_returns_new_board_and_keeps_original() -> None:
    board = Board()
    after = board.apply_move(2, 3, Side.DARK)

    assert after is not board
    assert board == Board()
    assert board.score() == (2, 2)


def test_apply_move_flips_in_several_directions_at_once() -> None:
    board = Board.from_rows(
        [
            "X..X..X.",
            ".O.O.O..",
            "..OOO...",
            "XOO.OOOX",
            "..OOO...",
            ".O.O.O..",
            "X..X..X.",
            "........",
        ]
    )

    after = board.apply_move(3, 3, Side.DARK)

    assert after.score() == (26, 0)
    assert after.cell(1, 1) is Side.DARK
    assert after.cell(5, 5) is Side.DARK


def test_run_ending_off_board_or_on_empty_is_not_flipped() -> None:
    board = Board.from_rows(
        [
            "........",
            "........",
            "........",
            "OO.OOX..",
            "...O....",
            "...O....",
            "........",
            "........",
        ]
    )

    after = board.apply_move(3, 2, Side.DARK)

    assert after.cell(3, 0) is Side.LIGHT
    assert after.cell(3, 1) is Side.LIGHT
    assert after.cell(3, 3) is Side.DARK
    assert after.cell(3, 4) is Side.DARK
    assert after.cell(4, 3) is Side.LIGHT
    assert after.cell(5, 3) is Side.LIGHT


def test_move_next_to_own_discs_only_is_illegal() -> None:
    board = Board.from_rows(
        [
            "........",
            "........",
            "........",
            "...XX...",
            "...XX...",
            "........",
            "........",
            "........",
        ]
    )

    assert not board.is_valid_move(2, 3, Side.DARK)
    assert board.legal_moves(Side.DARK) == []


def test_occupied_square_is_never_valid() -> None:
    assert not Board().is_valid_move(3, 3, Side.DARK)
    assert not Board().is_valid_move(3, 4, Side.LIGHT)


def test_illegal_apply_raises_and_keeps_state() -> None:
    board = Board()

    with pytest.raises(IllegalMoveError, match="cannot play"):
        board.apply_move(0, 0, Side.DARK)
    assert board == Board()


@pytest.mark.parametrize(("row", "col"), [(-1, 0), (0, -1), (8, 0), (0, 8)])
def test_out_of_range_coordinates_raise_value_error(row: int, col: int) -> None:
    board = Board()

    with pytest.raises(ValueError, match="coordinates"):
        board.is_valid_move(row, col, Side.DARK)
    with pytest.raises(ValueError, match="coordinates"):
        board.apply_move(row, col, Side.DARK)


def test_overlapping_masks_are_rejected() -> None:
    with pytest.raises(ValueError, match="overlap"):
        Board(dark=1, light=1)


def test_terminal_with_sixty_empty_squares() -> None:
    board = Board.from_rows(
        [
            "........",
            "........",
            "........",
            "...XX...",
            "...XX...",
            "........",
            "........",
            "........",
        ]
    )

    assert board.empty_count() == 60
    assert not board.has_legal_move(Side.DARK)
    assert not board.has_legal_move(Side.LIGHT)
    assert board.is_terminal()


def test_initial_position_is_not_terminal() -> None:
    assert not Board().is_terminal()


def test_legal_mask_matches_ray_walk_on_random_positions() -> None:
    for board in random_positions(seed=7, count=150):
        for side in Side:
            walked = [
                (row, col)
                for row in range(BOARD_SIZE)
                for col in range(BOARD_SIZE)
                if board.is_valid_move(row, col, side)
            ]
            assert board.legal_moves(side) == walked


def test_is_valid_move_matches_reference_walk() -> None:
    for board in random_positions(seed=11, count=60):
        for side in Side:
            for row in range(BOARD_SIZE):
                for col in range(BOARD_SIZE):
                    expected = reference_is_valid(board, row, col, side)
                    assert board.is_valid_move(row, col, side) is expected


def test_each_move_adds_exactly_one_disc_and_never_loses_mover_discs() -> None:
    rng = random.Random(2026)
    board = Board()
    side = Side.DARK
    while not board.is_terminal():
        moves = board.legal_moves(side)
        if not moves:
            side = side.opponent
            continue
        before = board.score()
        row, col = rng.choice(moves)
        board = board.apply_move(row, col, side)
        after = board.score()

        assert sum(after) == sum(before) + 1
        mover = 0 if side is Side.DARK else 1
        assert after[mover] >= before[mover] + 2
        assert sum(after) + board.empty_count() == 64
        side = side.opponent


def test_terminal_iff_neither_side_can_move() -> None:
    for board in random_positions(seed=3, count=200):
        expected = not board.has_legal_move(Side.DARK) and not board.has_legal_move(
            Side.LIGHT
        )
        assert board.is_terminal() is expected


def test_side_opponent_is_involutive() -> None:
    for side in Side:
        assert side.opponent is not side
        assert side.opponent.opponent is side


def test_to_array_is_side_perspective() -> None:
    board = Board().apply_move(2, 3, Side.DARK)

    dark_view = board.to_array(Side.DARK)
    light_view = board.to_array(Side.LIGHT)

    assert dark_view[2 * 8 + 3] == 1
    assert dark_view[4 * 8 + 4] == 2
    assert light_view[2 * 8 + 3] == 2
    assert light_view[4 * 8 + 4] == 1
    assert np.count_nonzero(dark_view) == 5


def test_from_rows_and_str_describe_the_same_position() -> None:
    board = Board()
    rendered = str(board).splitlines()

    assert rendered[0] == "  a b c d e f g h"
    assert rendered[4] == "4 . . . O X . . ."
    rows = [line[2:].replace(" ", "") for line in rendered[1:]]
    assert Board.from_rows(rows) == board


@pytest.mark.parametrize(
    "rows",
    [
        ["........"] * 7,
        ["........"] * 7 + ["......."],
        ["........"] * 7 + ["...Z...."],
    ],
)
def test_from_rows_rejects_malformed_input(rows: list[str]) -> None:
    with pytest.raises(ValueError):
        Board.from_rows(rows)
