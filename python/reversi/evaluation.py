"""Static evaluation of Reversi positions for the alpha-beta search."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from reversi.board import BOARD_SIZE, Board, Side


# Strategic value of each square; X- and C-squares next to the corners are
# negative because they hand the corner to the opponent.
POSITION_WEIGHTS: np.ndarray = np.array(
    [
        [100, -10, 11, 6, 6, 11, -10, 100],
        [-10, -20, 1, 2, 2, 1, -20, -10],
        [11, 1, 3, 4, 4, 3, 1, 11],
        [6, 2, 4, 3, 3, 4, 2, 6],
        [6, 2, 4, 3, 3, 4, 2, 6],
        [11, 1, 3, 4, 4, 3, 1, 11],
        [-10, -20, 1, 2, 2, 1, -20, -10],
        [100, -10, 11, 6, 6, 11, -10, 100],
    ],
    dtype=np.int32,
).flatten()

CORNER_SQUARES: tuple[int, ...] = (
    0,
    BOARD_SIZE - 1,
    BOARD_SIZE * (BOARD_SIZE - 1),
    BOARD_SIZE * BOARD_SIZE - 1,
)


@dataclass(frozen=True)
class EvalWeights:
    """Multipliers for the four evaluation terms."""

    disc: int = 10
    mobility: int = 5
    positional: int = 1
    corner: int = 100

    def __post_init__(self) -> None:
        for name in ("disc", "mobility", "positional", "corner"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} weight must be >= 0, got {value}")


DEFAULT_WEIGHTS = EvalWeights()


def disc_difference(board: Board, side: Side) -> int:
    dark_count, light_count = board.score()
    diff = dark_count - light_count
    return diff if side is Side.DARK else -diff


def mobility_difference(board: Board, side: Side) -> int:
    own = board.legal_mask(side).bit_count()
    opp = board.legal_mask(side.opponent).bit_count()
    return own - opp


def positional_score(board_array: np.ndarray) -> int:
    """Sum square weights for own discs minus those of opponent discs."""
    own = int(POSITION_WEIGHTS[board_array == 1].sum())
    opp = int(POSITION_WEIGHTS[board_array == 2].sum())
    return own - opp


def corner_difference(board_array: np.ndarray) -> int:
    corners = board_array[list(CORNER_SQUARES)]
    return int(np.count_nonzero(corners == 1)) - int(np.count_nonzero(corners == 2))


def evaluate(board: Board, side: Side, weights: EvalWeights = DEFAULT_WEIGHTS) -> int:
    """Score a position for ``side``; positive favours ``side``.

    The value is never relative to the side to move, so a search must keep
    track of whether it is maximizing or minimizing at each ply.
    """
    board_array = board.to_array(side)
    return (
        disc_difference(board, side) * weights.disc
        + mobility_difference(board, side) * weights.mobility
        + positional_score(board_array) * weights.positional
        + corner_difference(board_array) * weights.corner
    )
