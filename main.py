import argparse
import glob
import json
import logging
import os
import random
from dataclasses import dataclass

from board import Board
from constants import MAX_BOARD_SIZE, MIN_BOARD_SIZE
from engine import ai_move, check_winner
from models import Cell, Difficulty, Move, Outcome


@dataclass(frozen=True)
class PlayConfig:
    size: int = 3
    difficulty: Difficulty = Difficulty.HARD
    human_mark: Cell = Cell.X
    seed: int | None = None
    show: bool = False
    save_dir: str | None = None


def parse_human_move(text: str, board: Board) -> Move:
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        raise ValueError("enter a row and a column, e.g. '1 2'")
    row, column = (int(p) for p in parts)
    if not board.in_bounds(row, column):
        raise ValueError(f"({row}, {column}) is off the board")
    if not board.is_empty_cell(row, column):
        raise ValueError(f"({row}, {column}) is already taken")
    return Move(row, column)


def _read_human_move(board: Board, mark: Cell) -> Move:
    while True:
        inp = input(f"{mark.value} to move (row column): ")
        try:
            return parse_human_move(inp, board)
        except ValueError as e:
            print(f"{str(e)}, try again. got input: {inp}")


def _next_save_path(save_dir: str) -> str:
    os.makedirs(save_dir, exist_ok=True)
    existing = [p for p in glob.glob(os.path.join(save_dir, "game_*.json"))]
    start_idx = 0
    if existing:
        def _idx(p: str) -> int:
            stem = os.path.basename(p)
            try:
                return int(stem.split("_")[1].split(".")[0])
            except ValueError:
                return -1
        start_idx = max(map(_idx, existing)) + 1
    return os.path.join(save_dir, f"game_{start_idx:05d}.json")


def save_game(cfg: PlayConfig, moves: list[dict[str, object]], outcome: Outcome) -> str:
    assert cfg.save_dir is not None
    path = _next_save_path(cfg.save_dir)
    payload: dict[str, object] = {
        "winner": outcome.to_wire(),
        "size": cfg.size,
        "moves": moves,
        "meta": {
            "mode": "human-vs-engine",
            "difficulty": cfg.difficulty.value,
            "human_mark": cfg.human_mark.value,
            "seed": cfg.seed,
        },
    }
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh)
    return path


def play(cfg: PlayConfig) -> Outcome:
    board = Board.empty(cfg.size)
    rng = random.Random(cfg.seed)
    engine_mark = cfg.human_mark.opponent
    moves: list[dict[str, object]] = []
    last_move: Move | None = None
    to_move = Cell.X
    outcome = check_winner(board)

    while not outcome.is_decided:
        if cfg.show:
            board.render(block=False, title=f"{to_move.value} to move")
        print(board, end="\n\n")

        if to_move is cfg.human_mark:
            move = _read_human_move(board, to_move)
        else:
            result = ai_move(board, engine_mark, cfg.difficulty, last_move, rng=rng)
            assert result.move is not None
            move = result.move
            print(f"engine ({cfg.difficulty.value}) plays {move.row} {move.column}")

        board.do_move(move, to_move)
        moves.append({**move.to_dict(), "mark": to_move.value})
        last_move = move
        to_move = to_move.opponent
        outcome = check_winner(board)

    print(board)
    if outcome.mark is None:
        print("draw")
    else:
        print(f"{outcome.mark.value} wins")
    if cfg.show:
        board.render(block=True, title=f"result: {outcome.to_wire()}")
    if cfg.save_dir:
        print(f"Saved game to {save_game(cfg, moves, outcome)}")
    return outcome


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Play N-in-a-row against the engine")
    parser.add_argument("--size", type=int, choices=range(MIN_BOARD_SIZE, MAX_BOARD_SIZE + 1), default=3)
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty], default=Difficulty.HARD.value)
    parser.add_argument("--human-mark", choices=["x", "o"], default="x", help="x always moves first")
    parser.add_argument("--seed", type=int, default=None, help="seed for the engine's random choices")
    parser.add_argument("--show", action="store_true", help="draw the board with matplotlib")
    parser.add_argument("--save-dir", type=str, default=None, help="write a JSON record of the game here")
    parser.add_argument("--log-level", type=str, default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(message)s",
        datefmt="%H:%M:%S",
    )

    play(
        PlayConfig(
            size=args.size,
            difficulty=Difficulty.parse(args.difficulty),
            human_mark=Cell.parse_mark(args.human_mark),
            seed=args.seed,
            show=args.show,
            save_dir=args.save_dir,
        )
    )
