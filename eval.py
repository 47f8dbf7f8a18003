from __future__ import annotations

import argparse
import cProfile
import logging
import pstats
import random
import time
from dataclasses import dataclass
from typing import Dict

from board import Board
from engine import ai_move
from models import Cell, Difficulty, Move


@dataclass(frozen=True)
class EvalConfig:
    games: int = 20
    size: int = 3
    mode: str = "hard-vs-medium"  # left-vs-right; sides swap who opens every game
    seed0: int | None = 0
    seed1: int | None = 1
    show: bool = False
    pause_s: float = 0.0
    profile: bool = False
    profile_top: int = 40
    profile_out: str | None = None

    @property
    def sides(self) -> tuple[Difficulty, Difficulty]:
        left, sep, right = self.mode.partition("-vs-")
        if not sep:
            raise ValueError(f"mode must look like 'hard-vs-medium', got {self.mode!r}")
        return Difficulty.parse(left), Difficulty.parse(right)


def play_one_game(cfg: EvalConfig, game_index: int) -> int | None:
    """Play one game; returns the winning side (0 = left, 1 = right) or None for a draw."""

    tiers = cfg.sides
    # Keep seeds deterministic but varied per game.
    rngs = [
        random.Random(None if cfg.seed0 is None else cfg.seed0 + game_index),
        random.Random(None if cfg.seed1 is None else cfg.seed1 + game_index),
    ]
    marks = (Cell.X, Cell.O) if game_index % 2 == 0 else (Cell.O, Cell.X)

    board = Board.empty(cfg.size)
    last_move: Move | None = None
    side = marks.index(Cell.X)

    while True:
        result = ai_move(board, marks[side], tiers[side], last_move, rng=rngs[side])
        assert result.move is not None
        board.do_move(result.move, marks[side])
        last_move = result.move
        if cfg.show:
            try:
                board.render(block=False, title=f"Game {game_index + 1}/{cfg.games} - {cfg.mode}")
            except SystemError:
                pass
            if cfg.pause_s > 0:
                time.sleep(cfg.pause_s)
        if result.outcome.is_decided:
            if result.outcome.mark is None:
                return None
            return marks.index(result.outcome.mark)
        side = 1 - side


def main() -> None:
    parser = argparse.ArgumentParser(description="Evaluate one difficulty tier against another")
    parser.add_argument("--mode", type=str, default="hard-vs-medium", help="e.g. hard-vs-medium, easy-vs-very-easy")
    parser.add_argument("--games", type=int, default=20)
    parser.add_argument("--size", type=int, default=3)
    parser.add_argument("--seed0", type=int, default=0)
    parser.add_argument("--seed1", type=int, default=1)
    parser.add_argument("--show", action="store_true", help="Render games as they play")
    parser.add_argument("--pause", type=float, default=0.0, help="Extra pause between moves (seconds)")
    parser.add_argument("--profile", action="store_true", help="Run under cProfile and print hotspots")
    parser.add_argument("--profile-top", type=int, default=40, help="How many lines of profile output to print")
    parser.add_argument("--profile-out", type=str, default=None, help="Optional path to write a .prof file")
    parser.add_argument("--log-level", type=str, default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(message)s",
        datefmt="%H:%M:%S",
    )

    cfg = EvalConfig(
        mode=args.mode,
        games=args.games,
        size=args.size,
        seed0=None if args.seed0 < 0 else args.seed0,
        seed1=None if args.seed1 < 0 else args.seed1,
        show=args.show,
        pause_s=args.pause,
        profile=args.profile,
        profile_top=args.profile_top,
        profile_out=args.profile_out,
    )
    left, right = cfg.sides
    wins: Dict[int | None, int] = {0: 0, 1: 0, None: 0}

    def run_eval() -> None:
        for i in range(cfg.games):
            if not cfg.show:
                print(f"Game {i + 1}/{cfg.games} ({cfg.mode})...", flush=True)
            w = play_one_game(cfg, i)
            wins[w] += 1
            if not cfg.show:
                w_s = "draw" if w is None else (left if w == 0 else right).value
                print(f"  Result: {w_s}", flush=True)

    try:
        if cfg.profile:
            pr = cProfile.Profile()
            pr.enable()
            try:
                run_eval()
            finally:
                pr.disable()
                if cfg.profile_out:
                    pr.dump_stats(cfg.profile_out)
                    print(f"Wrote profile to: {cfg.profile_out}")
                stats = pstats.Stats(pr)
                stats.strip_dirs().sort_stats(pstats.SortKey.CUMULATIVE)
                print("\n=== cProfile (top cumulative) ===")
                stats.print_stats(max(1, cfg.profile_top))
        else:
            run_eval()
    except KeyboardInterrupt:
        print("\nInterrupted by user; printing partial results...")

    total_played = int(sum(wins.values()))
    print(f"Games: {total_played}")
    if total_played <= 0:
        return
    print(f"{left.value} (left) wins: {wins[0]} ({wins[0] / total_played:.1%})")
    print(f"{right.value} (right) wins: {wins[1]} ({wins[1] / total_played:.1%})")
    print(f"Draws: {wins[None]} ({wins[None] / total_played:.1%})")


if __name__ == "__main__":
    main()
