"""Reversi board model: legality, capture and terminal detection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np


BOARD_SIZE = 8
NUM_SQUARES = BOARD_SIZE * BOARD_SIZE
FULL_MASK = (1 << NUM_SQUARES) - 1
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

_COL_0 = 0x0101010101010101
_COL_7 = 0x8080808080808080
# Columns a shift in a direction may legally land on.
_LANDING_MASKS: dict[int, int] = {
    -1: FULL_MASK & ~_COL_7,
    0: FULL_MASK,
    1: FULL_MASK & ~_COL_0,
}

COLUMN_LABELS = "abcdefgh"
DARK_CHAR = "X"
LIGHT_CHAR = "O"
EMPTY_CHAR = "."

Move = tuple[int, int]


class Side(Enum):
    DARK = "dark"
    LIGHT = "light"

    @property
    def opponent(self) -> Side:
        return Side.LIGHT if self is Side.DARK else Side.DARK


class IllegalMoveError(ValueError):
    """Raised when a move that captures nothing is applied."""


def _bit(pos: int) -> int:
    return 1 << pos


def _in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def _check_coords(row: int, col: int) -> None:
    if not _in_bounds(row, col):
        raise ValueError(
            f"coordinates must be in [0, {BOARD_SIZE - 1}], got ({row}, {col})"
        )


def _shift(mask: int, dr: int, dc: int) -> int:
    amount = dr * BOARD_SIZE + dc
    if amount > 0:
        shifted = (mask << amount) & FULL_MASK
    else:
        shifted = mask >> -amount
    return shifted & _LANDING_MASKS[dc]


def _mask_to_moves(mask: int) -> list[Move]:
    """Decode a move bitmask into row-major (row, col) pairs."""
    moves: list[Move] = []
    remaining = mask
    while remaining:
        lsb = remaining & -remaining
        moves.append(divmod(lsb.bit_length() - 1, BOARD_SIZE))
        remaining &= remaining - 1
    return moves


@dataclass(frozen=True)
class Board:
    """Immutable bitboard position; bit ``row * 8 + col`` marks a disc."""

    dark: int = 0x0000000810000000  # (3, 4), (4, 3)
    light: int = 0x0000001008000000  # (3, 3), (4, 4)

    def __post_init__(self) -> None:
        for name, mask in (("dark", self.dark), ("light", self.light)):
            if not 0 <= mask <= FULL_MASK:
                raise ValueError(f"{name} mask must fit in 64 bits, got {mask:#x}")
        if self.dark & self.light:
            raise ValueError(
                f"dark and light overlap at {self.dark & self.light:#018x}"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> Board:
        """Parse eight rows of ``X`` (dark), ``O`` (light) and ``.`` (empty)."""
        if len(rows) != BOARD_SIZE:
            raise ValueError(f"expected {BOARD_SIZE} rows, got {len(rows)}")

        dark = 0
        light = 0
        for row, line in enumerate(rows):
            if len(line) != BOARD_SIZE:
                raise ValueError(
                    f"row {row} must have {BOARD_SIZE} cells, got {line!r}"
                )
            for col, char in enumerate(line):
                square = _bit(row * BOARD_SIZE + col)
                if char == DARK_CHAR:
                    dark |= square
                elif char == LIGHT_CHAR:
                    light |= square
                elif char != EMPTY_CHAR:
                    raise ValueError(f"invalid cell {char!r} in row {row}")
        return cls(dark=dark, light=light)

    def _masks(self, side: Side) -> tuple[int, int]:
        if side is Side.DARK:
            return self.dark, self.light
        return self.light, self.dark

    def cell(self, row: int, col: int) -> Side | None:
        _check_coords(row, col)
        square = _bit(row * BOARD_SIZE + col)
        if self.dark & square:
            return Side.DARK
        if self.light & square:
            return Side.LIGHT
        return None

    def _collect_flips(self, row: int, col: int, side: Side) -> int:
        """Walk all eight rays from an empty square and gather bracketed runs."""
        me, opp = self._masks(side)
        if (me | opp) & _bit(row * BOARD_SIZE + col):
            return 0

        flips = 0
        for dr, dc in DIRECTIONS:
            r = row + dr
            c = col + dc
            line = 0

            while _in_bounds(r, c):
                square = _bit(r * BOARD_SIZE + c)
                if opp & square:
                    line |= square
                elif me & square:
                    flips |= line
                    break
                else:
                    break
                r += dr
                c += dc

        return flips

    def is_valid_move(self, row: int, col: int, side: Side) -> bool:
        _check_coords(row, col)
        return self._collect_flips(row, col, side) != 0

    def apply_move(self, row: int, col: int, side: Side) -> Board:
        """Return the position after ``side`` plays at (row, col)."""
        _check_coords(row, col)
        flips = self._collect_flips(row, col, side)
        if flips == 0:
            raise IllegalMoveError(
                f"{side.value} cannot play at ({row}, {col}): no discs captured"
            )

        me, opp = self._masks(side)
        next_me = me | _bit(row * BOARD_SIZE + col) | flips
        next_opp = opp & ~flips

        if side is Side.DARK:
            return Board(dark=next_me, light=next_opp)
        return Board(dark=next_opp, light=next_me)

    def legal_mask(self, side: Side) -> int:
        """Bitmask of every legal square for ``side``, built with ray shifts."""
        me, opp = self._masks(side)
        empty = ~(me | opp) & FULL_MASK
        legal = 0

        for dr, dc in DIRECTIONS:
            run = _shift(me, dr, dc) & opp
            frontier = run
            while frontier:
                frontier = _shift(frontier, dr, dc) & opp
                run |= frontier
            legal |= _shift(run, dr, dc) & empty

        return legal

    def legal_moves(self, side: Side) -> list[Move]:
        return _mask_to_moves(self.legal_mask(side))

    def has_legal_move(self, side: Side) -> bool:
        return self.legal_mask(side) != 0

    def is_terminal(self) -> bool:
        return not self.has_legal_move(Side.DARK) and not self.has_legal_move(
            Side.LIGHT
        )

    def score(self) -> tuple[int, int]:
        return self.dark.bit_count(), self.light.bit_count()

    def empty_count(self) -> int:
        dark_count, light_count = self.score()
        return NUM_SQUARES - dark_count - light_count

    def to_array(self, side: Side) -> np.ndarray:
        """Flatten the board from ``side``'s view: 0 empty, 1 own, 2 opponent."""
        arr = np.zeros(NUM_SQUARES, dtype=np.uint8)
        me, opp = self._masks(side)
        for pos in range(NUM_SQUARES):
            square = _bit(pos)
            if me & square:
                arr[pos] = 1
            elif opp & square:
                arr[pos] = 2
        return arr

    def __str__(self) -> str:
        lines = ["  " + " ".join(COLUMN_LABELS)]
        for row in range(BOARD_SIZE):
            cells = []
            for col in range(BOARD_SIZE):
                occupant = self.cell(row, col)
                if occupant is Side.DARK:
                    cells.append(DARK_CHAR)
                elif occupant is Side.LIGHT:
                    cells.append(LIGHT_CHAR)
                else:
                    cells.append(EMPTY_CHAR)
            lines.append(f"{row + 1} " + " ".join(cells))
        return "\n".join(lines)


def new_board() -> Board:
    return Board()
