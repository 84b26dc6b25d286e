"""Turn bookkeeping for a full Reversi game, including forced passes."""

from __future__ import annotations

import logging

from reversi.board import Board, Move, Side

logger = logging.getLogger(__name__)


class GameOverError(RuntimeError):
    """Raised when a move is attempted after the game has ended."""


class Game:
    """Track the board, side to move and move history of one game."""

    def __init__(self, board: Board | None = None, current: Side = Side.DARK) -> None:
        self.board = board if board is not None else Board()
        self.current = current
        self.history: list[tuple[Side, Move | None]] = []
        self.over = self.board.is_terminal()
        if not self.over and not self.board.has_legal_move(self.current):
            self.history.append((self.current, None))
            self.current = self.current.opponent

    def reset(self) -> None:
        self.board = Board()
        self.current = Side.DARK
        self.history = []
        self.over = False

    def legal_moves(self) -> list[Move]:
        if self.over:
            return []
        return self.board.legal_moves(self.current)

    def play(self, row: int, col: int) -> None:
        """Play for the side to move and hand over the turn."""
        if self.over:
            raise GameOverError("game is over; no further moves allowed")

        mover = self.current
        self.board = self.board.apply_move(row, col, mover)
        self.history.append((mover, (row, col)))

        if self.board.is_terminal():
            self.over = True
            logger.debug(
                "game over after %d plies: %s", len(self.history), self.score()
            )
            return

        self.current = mover.opponent
        if not self.board.has_legal_move(self.current):
            logger.debug("%s has no legal move and passes", self.current.value)
            self.history.append((self.current, None))
            self.current = mover

    def score(self) -> tuple[int, int]:
        return self.board.score()

    def winner(self) -> Side | None:
        """Side with more discs once the game is over; None for a tie or in play."""
        if not self.over:
            return None
        dark_count, light_count = self.score()
        if dark_count > light_count:
            return Side.DARK
        if light_count > dark_count:
            return Side.LIGHT
        return None
