import random

import pytest

from board import Board
from constants import WIN_SCORE
from errors import InvalidMark, NoAvailableMoves, UnknownDifficulty
from models import Cell, Difficulty, Move, Status
from players import (
    AlphaBetaPlayer,
    LineTally,
    NeighbourBiasedRandomPlayer,
    RandomPlayer,
    ScoredHeuristicPlayer,
    applied_move,
    completes_run,
    create_player,
)

FULL_3X3 = [["x", "o", "x"], ["x", "o", "o"], ["o", "x", "x"]]


@pytest.mark.parametrize(
    "difficulty, tier",
    [
        ("very-easy", RandomPlayer),
        ("easy", NeighbourBiasedRandomPlayer),
        ("medium", ScoredHeuristicPlayer),
        ("hard", AlphaBetaPlayer),
        ("very_easy", RandomPlayer),
        (Difficulty.HARD, AlphaBetaPlayer),
    ],
)
def test_create_player(difficulty, tier):
    player = create_player(difficulty, "o", seed=3)
    assert type(player) is tier
    assert player.mark is Cell.O
    assert player.difficulty is Difficulty.parse(difficulty)


def test_create_player_rejects_bad_input():
    with pytest.raises(UnknownDifficulty):
        create_player("impossible", "x")
    for spelling in ("HARD", " hard ", "Very-Easy"):
        with pytest.raises(UnknownDifficulty):
            create_player(spelling, "x")
    with pytest.raises(InvalidMark):
        create_player("easy", "")
    with pytest.raises(InvalidMark):
        create_player("easy", "q")


@pytest.mark.parametrize("tier", [RandomPlayer, NeighbourBiasedRandomPlayer, ScoredHeuristicPlayer, AlphaBetaPlayer])
def test_every_tier_refuses_a_full_board(board_from, tier):
    with pytest.raises(NoAvailableMoves):
        tier(Cell.X, seed=0).get_move(board_from(FULL_3X3), None, 3)


@pytest.mark.parametrize("tier", [RandomPlayer, NeighbourBiasedRandomPlayer, ScoredHeuristicPlayer, AlphaBetaPlayer])
def test_play_returns_copy_with_move(board_from, tier):
    board = board_from([["x", "", ""], ["", "o", ""], ["", "", ""]])
    before = board.state_key()
    played, move = tier(Cell.X, seed=1).play(board, Move(1, 1), 3)
    assert board.state_key() == before
    assert board.is_empty_cell(move.row, move.column)
    assert played[move.row, move.column] is Cell.X
    assert played.count(Cell.X) == 2


def test_random_player_is_reproducible_with_seed():
    board = Board.empty(9)
    first = [RandomPlayer(Cell.X, seed=42).get_move(board) for _ in range(5)]
    again = [RandomPlayer(Cell.X, seed=42).get_move(board) for _ in range(5)]
    assert first == again


def test_random_player_uses_injected_rng():
    board = Board.empty(5)
    a = RandomPlayer(Cell.X, rng=random.Random(7))
    b = RandomPlayer(Cell.X, rng=random.Random(7))
    assert [a.get_move(board) for _ in range(10)] == [b.get_move(board) for _ in range(10)]


def test_random_player_only_picks_empty_cells(board_from, rng):
    board = board_from([["x", "", "o"], ["o", "x", ""], ["", "x", "o"]])
    player = RandomPlayer(Cell.O, rng=rng)
    picks = {player.get_move(board) for _ in range(100)}
    assert picks == set(board.available_moves())


def test_neighbour_biased_player_stays_next_to_last_move(rng):
    board = Board.empty(5)
    board.do_move(Move(0, 0), Cell.X)
    board.do_move(Move(3, 3), Cell.O)
    player = NeighbourBiasedRandomPlayer(Cell.X, rng=rng)
    for _ in range(100):
        move = player.get_move(board, Move(3, 3), 4)
        assert move.chebyshev(Move(3, 3)) <= 1


def test_neighbour_biased_player_falls_back_to_any_cell(board_from, rng):
    board = board_from(
        [
            ["x", "o", "", ""],
            ["o", "x", "", ""],
            ["", "", "", ""],
            ["", "", "", ""],
        ]
    )
    # every neighbour of (0, 0) is taken
    player = NeighbourBiasedRandomPlayer(Cell.X, rng=rng)
    picks = {player.get_move(board, Move(0, 0), 4) for _ in range(200)}
    assert picks == set(board.available_moves())


def test_completes_run(board_from):
    board = board_from([["x", "x", ""], ["", "o", ""], ["", "", "o"]])
    assert completes_run(board, Move(0, 2), Cell.X, 3)
    assert not completes_run(board, Move(0, 2), Cell.O, 3)
    assert completes_run(board, Move(0, 2), Cell.O, 2)
    assert not completes_run(board, Move(2, 0), Cell.X, 3)


def test_scored_heuristic_scores(board_from):
    board = board_from([["x", "x", ""], ["", "o", ""], ["", "", "o"]])
    player = ScoredHeuristicPlayer(Cell.X, seed=0)
    scores = dict(player.score_moves(board, None, 3))
    # win + near-win block of the o diagonal + centre + next to our x
    assert scores[Move(0, 2)] == 100 + 80 + 10 + 5
    assert scores[Move(2, 0)] == 80 + 10
    assert scores[Move(1, 0)] == 80 + 10 + 5
    assert player.get_move(board, None, 3) == Move(0, 2)


def test_scored_heuristic_blocks_immediate_loss(board_from):
    board = board_from([["o", "o", ""], ["", "x", ""], ["", "", ""]])
    player = ScoredHeuristicPlayer(Cell.X, seed=0)
    scores = dict(player.score_moves(board, Move(0, 1), 3))
    assert scores[Move(0, 2)] == 90 + 80 + 10 + 5 + 8
    assert player.get_move(board, Move(0, 1), 3) == Move(0, 2)


def test_scored_heuristic_last_move_and_centre_weights():
    board = Board.empty(5)
    board.do_move(Move(2, 2), Cell.O)
    player = ScoredHeuristicPlayer(Cell.X, seed=0)
    scores = dict(player.score_moves(board, Move(2, 2), 4))
    assert scores[Move(0, 0)] == 4
    assert scores[Move(1, 1)] == 10 + 8
    assert scores[Move(4, 4)] == 4
    assert scores[Move(2, 4)] == 4


def test_scored_heuristic_samples_near_top_scores(rng):
    board = Board.empty(5)
    board.do_move(Move(2, 2), Cell.O)
    player = ScoredHeuristicPlayer(Cell.X, rng=rng)
    scores = dict(player.score_moves(board, Move(2, 2), 4))
    best = max(scores.values())
    picks = {player.get_move(board, Move(2, 2), 4) for _ in range(200)}
    assert all(scores[m] >= best - 5 for m in picks)
    assert len(picks) > 1


def test_alpha_beta_takes_the_win(board_from):
    board = board_from([["x", "x", ""], ["", "o", ""], ["", "", "o"]])
    assert AlphaBetaPlayer(Cell.X).get_move(board, None, 3) == Move(0, 2)


def test_alpha_beta_blocks(board_from):
    board = board_from([["o", "o", ""], ["", "x", ""], ["", "", "x"]])
    assert AlphaBetaPlayer(Cell.X).get_move(board, None, 3) == Move(0, 2)


def test_alpha_beta_prefers_win_over_block(board_from):
    board = board_from([["o", "o", ""], ["x", "x", ""], ["", "", ""]])
    assert AlphaBetaPlayer(Cell.X).get_move(board, None, 3) == Move(1, 2)


def test_alpha_beta_restores_board_after_search(board_from):
    board = board_from(
        [
            ["", "", "", ""],
            ["", "x", "", ""],
            ["", "", "o", ""],
            ["", "", "", ""],
        ]
    )
    before = board.state_key()
    player = AlphaBetaPlayer(Cell.X)
    move = player.get_move(board, Move(2, 2), 4)
    assert board.state_key() == before
    assert board.is_empty_cell(move.row, move.column)
    assert player.nodes_searched > 0


def test_evaluate_counts_open_lines_and_centrality():
    board = Board.empty(3)
    assert AlphaBetaPlayer(Cell.X).evaluate(board, 3) == 0

    board.do_move(Move(1, 1), Cell.X)
    x_view = AlphaBetaPlayer(Cell.X).evaluate(board, 3)
    o_view = AlphaBetaPlayer(Cell.O).evaluate(board, 3)
    # centre x sits on four lines (+1 each) and earns the centrality bonus
    assert x_view == 4 + 5
    assert o_view == -4


def test_evaluate_weights_threats():
    board = Board.empty(3)
    board.do_move(Move(0, 0), Cell.O)
    board.do_move(Move(0, 1), Cell.O)
    player = AlphaBetaPlayer(Cell.X)
    # row 0 is one short for o; (0,0) and (0,1) also each sit on a column,
    # and (0,0) on the diagonal
    assert player.evaluate(board, 3) == -(2000 + 2**3) - 1 - 1 - 1


def test_alpha_beta_never_misses_win_or_block(reachable_3x3):
    checked = 0
    for state in reachable_3x3:
        x, o = state.count(Cell.X), state.count(Cell.O)
        mark = Cell.O if x > o else Cell.X
        moves = state.available_moves()
        wins = [m for m in moves if completes_run(state, m, mark, 3)]
        threats = [m for m in moves if completes_run(state, m, mark.opponent, 3)]
        if not wins and not threats:
            continue
        board = state.copy()
        move = AlphaBetaPlayer(mark).get_move(board, None, 3)
        if wins:
            with applied_move(board, move, mark):
                outcome = board.winner(win_length=3)
                assert outcome.status is Status.WIN and outcome.mark is mark
        else:
            assert move in threats
        checked += 1
    assert checked > 100


def _minimax(player, board, to_move, depth, wl):
    outcome = board.winner(win_length=wl)
    if outcome.status is Status.WIN:
        return WIN_SCORE - depth if outcome.mark is player.mark else depth - WIN_SCORE
    if outcome.status is Status.DRAW:
        return 0
    if depth >= player.depth:
        return player.evaluate(board, wl)
    values = []
    for move in board.available_moves():
        with applied_move(board, move, to_move):
            values.append(_minimax(player, board, to_move.opponent, depth + 1, wl))
    return max(values) if to_move is player.mark else min(values)


@pytest.mark.parametrize(
    "rows, mark",
    [
        (
            [["x", "o", "x", "o"], ["o", "x", "o", "x"], ["x", "", "", ""], ["", "", "", ""]],
            Cell.X,
        ),
        (
            [["o", "", "x", ""], ["", "x", "", ""], ["", "o", "", ""], ["x", "", "", "o"]],
            Cell.X,
        ),
        (
            [["o", "", "x", ""], ["", "x", "", ""], ["", "o", "", ""], ["x", "", "", "o"]],
            Cell.O,
        ),
    ],
)
def test_alpha_beta_matches_plain_minimax(board_from, rows, mark):
    board = board_from(rows)
    moves = board.available_moves()
    assert not any(completes_run(board, m, c, 4) for m in moves for c in (Cell.X, Cell.O))

    player = AlphaBetaPlayer(mark)
    values = []
    for move in moves:
        with applied_move(board, move, mark):
            values.append(_minimax(player, board, mark.opponent, 0, 4))
    expected = moves[values.index(max(values))]

    assert player.get_move(board, None, 4) == expected
    assert board.to_rows() == rows


def test_line_tally_follows_place_and_lift(rng):
    board = Board.empty(6)
    tally = LineTally(board, Cell.X, 4)
    assert tally.score == 0
    played = []
    for i, move in enumerate(rng.sample(board.available_moves(), 12)):
        mark = Cell.X if i % 2 == 0 else Cell.O
        tally.place(move, mark)
        board.do_move(move, mark)
        played.append((move, mark))
        assert tally.score == AlphaBetaPlayer(Cell.X).evaluate(board, 4)
        assert tally.empty == 36 - len(played)
    for move, mark in reversed(played):
        tally.lift(move, mark)
        board.undo_move()
    assert tally.score == 0
    assert tally.empty == 36
