"""CLI entry point for playing Reversi in the terminal."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable

from reversi.board import BOARD_SIZE, COLUMN_LABELS, Move, Side
from reversi.game import Game
from reversi.search import DEFAULT_DEPTH, AlphaBetaSearch, greedy_move

PLAYER_KINDS = ("human", "ai", "greedy")


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line interface for a terminal game."""
    parser = argparse.ArgumentParser(description="Play Reversi against the engine.")
    parser.add_argument(
        "--dark", choices=PLAYER_KINDS, default="human", help="Who plays Dark (X)."
    )
    parser.add_argument(
        "--light", choices=PLAYER_KINDS, default="ai", help="Who plays Light (O)."
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=DEFAULT_DEPTH,
        help="Search depth in plies for the ai player.",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log search diagnostics."
    )
    return parser


def parse_move(text: str) -> Move:
    """Convert ``d3`` style input into a zero-based (row, col) pair."""
    cleaned = text.strip().lower()
    if len(cleaned) != 2:
        raise ValueError(f"move must look like 'd3', got {text!r}")

    column, row = cleaned[0], cleaned[1]
    if column not in COLUMN_LABELS or not row.isdigit():
        raise ValueError(f"move must look like 'd3', got {text!r}")

    row_index = int(row) - 1
    if not 0 <= row_index < BOARD_SIZE:
        raise ValueError(f"row must be in 1..{BOARD_SIZE}, got {row}")
    return row_index, COLUMN_LABELS.index(column)


def format_move(move: Move) -> str:
    row, col = move
    return f"{COLUMN_LABELS[col]}{row + 1}"


def _ask_human(
    game: Game, read: Callable[[str], str], write: Callable[[str], None]
) -> Move:
    while True:
        text = read(f"{game.current.value} to move: ")
        try:
            move = parse_move(text)
        except ValueError as exc:
            write(f"Invalid input: {exc}")
            continue
        if not game.board.is_valid_move(move[0], move[1], game.current):
            write(f"Illegal move: {format_move(move)}")
            continue
        return move


def run_game(
    dark: str,
    light: str,
    depth: int = DEFAULT_DEPTH,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> Game:
    """Play one full game between the configured players."""
    for kind in (dark, light):
        if kind not in PLAYER_KINDS:
            raise ValueError(f"player must be one of {PLAYER_KINDS}, got {kind!r}")

    players = {Side.DARK: dark, Side.LIGHT: light}
    engine = AlphaBetaSearch(depth=depth)
    game = Game()
    reported = 0

    while not game.over:
        write(str(game.board))
        side = game.current
        kind = players[side]
        if kind == "human":
            move = _ask_human(game, read, write)
        elif kind == "ai":
            move = engine.choose_move(game.board, side)
        else:
            move = greedy_move(game.board, side)

        if move is None:
            raise RuntimeError(f"{side.value} was asked to move without a legal move")

        game.play(*move)
        for mover, played in game.history[reported:]:
            if played is None:
                write(f"{mover.value} has no legal move and passes.")
            else:
                write(f"{mover.value} plays {format_move(played)}")
        reported = len(game.history)

    write(str(game.board))
    dark_count, light_count = game.score()
    winner = game.winner()
    result = "Tie" if winner is None else f"{winner.value} wins"
    write(f"Game over: dark {dark_count} - light {light_count}. {result}.")
    return game


def main(argv: list[str] | None = None) -> int:
    """Execute a terminal game with the requested players."""
    try:
        args = build_parser().parse_args(argv)
        if args.verbose:
            logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

        run_game(dark=args.dark, light=args.light, depth=args.depth)
        return 0
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
