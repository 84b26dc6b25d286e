"""Depth-limited minimax with alpha-beta pruning for the computer player."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math

from reversi.board import BOARD_SIZE, Board, Move, Side
from reversi.evaluation import DEFAULT_WEIGHTS, EvalWeights, evaluate

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 5


@dataclass
class SearchResult:
    """Chosen move, its minimax value from the root side, and nodes visited."""

    move: Move | None
    score: int | None
    nodes: int = 0


@dataclass
class _SearchContext:
    """Per-call state, so one engine can serve several threads."""

    root: Side
    nodes: int = 0


class AlphaBetaSearch:
    """Fixed-depth game-tree search from the point of view of one side."""

    def __init__(
        self,
        depth: int = DEFAULT_DEPTH,
        weights: EvalWeights = DEFAULT_WEIGHTS,
        prune: bool = True,
    ) -> None:
        if depth < 1:
            raise ValueError(f"depth must be >= 1, got {depth}")

        self.depth = depth
        self.weights = weights
        self.prune = prune

    def search(self, board: Board, side: Side) -> SearchResult:
        """Evaluate every legal root move and keep the first strictly best.

        With pruning on, later root moves are searched against the best score
        so far; a move that cannot beat it fails low and is never chosen.
        """
        ctx = _SearchContext(root=side)

        best_move: Move | None = None
        best_score: float = -math.inf
        for row, col in board.legal_moves(side):
            child = board.apply_move(row, col, side)
            alpha = best_score if self.prune else -math.inf
            score = self._minimax(ctx, child, self.depth - 1, alpha, math.inf, False)
            if score > best_score:
                best_score = score
                best_move = (row, col)

        if best_move is None:
            logger.debug("%s has no legal move; turn passes", side.value)
            return SearchResult(move=None, score=None, nodes=ctx.nodes)

        logger.debug(
            "%s chose %s (score=%s, depth=%d, nodes=%d, prune=%s)",
            side.value,
            best_move,
            best_score,
            self.depth,
            ctx.nodes,
            self.prune,
        )
        return SearchResult(move=best_move, score=int(best_score), nodes=ctx.nodes)

    def choose_move(self, board: Board, side: Side) -> Move | None:
        return self.search(board, side).move

    def _minimax(
        self,
        ctx: _SearchContext,
        board: Board,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
    ) -> float:
        ctx.nodes += 1
        if depth == 0 or board.is_terminal():
            return evaluate(board, ctx.root, self.weights)

        to_move = ctx.root if maximizing else ctx.root.opponent
        moves = board.legal_moves(to_move)

        # Forced pass: same position, one ply consumed, other side to move.
        if not moves:
            return self._minimax(ctx, board, depth - 1, alpha, beta, not maximizing)

        if maximizing:
            value = -math.inf
            for row, col in moves:
                child = board.apply_move(row, col, to_move)
                value = max(
                    value, self._minimax(ctx, child, depth - 1, alpha, beta, False)
                )
                alpha = max(alpha, value)
                if self.prune and beta <= alpha:
                    break
            return value

        value = math.inf
        for row, col in moves:
            child = board.apply_move(row, col, to_move)
            value = min(value, self._minimax(ctx, child, depth - 1, alpha, beta, True))
            beta = min(beta, value)
            if self.prune and beta <= alpha:
                break
        return value


def choose_move(board: Board, side: Side, depth: int = DEFAULT_DEPTH) -> Move | None:
    """Return the alpha-beta move for ``side``, or None when it must pass."""
    return AlphaBetaSearch(depth=depth).choose_move(board, side)


def _is_edge(move: Move) -> bool:
    row, col = move
    return row in (0, BOARD_SIZE - 1) or col in (0, BOARD_SIZE - 1)


def greedy_move(board: Board, side: Side) -> Move | None:
    """One-ply opponent: leave the opponent as few replies as possible.

    Ties prefer an edge or corner square when the current best is interior.
    """
    best_move: Move | None = None
    fewest_replies = math.inf
    for move in board.legal_moves(side):
        child = board.apply_move(move[0], move[1], side)
        replies = child.legal_mask(side.opponent).bit_count()
        if replies < fewest_replies:
            fewest_replies = replies
            best_move = move
        elif (
            replies == fewest_replies
            and best_move is not None
            and _is_edge(move)
            and not _is_edge(best_move)
        ):
            best_move = move
    return best_move
