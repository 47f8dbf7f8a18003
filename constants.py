MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 9

# board side -> marks in a row needed to win
WIN_LENGTHS = {
    3: 3,
    4: 4,
    5: 4,
    6: 4,
    7: 5,
    8: 5,
    9: 5,
}

ALPHABETA_DEPTH = 3

# Region growth when the active window has no empty cell left.
HARD_EXPANSION_PADDING = 2
DEFAULT_EXPANSION_PADDING = 1

# Terminal scores for the alpha-beta search (depth is subtracted / added).
WIN_SCORE = 10_000

# Leaf evaluator weights.
LINE_COMPLETE_SCORE = 5_000
LINE_OWN_THREAT_SCORE = 1_500
LINE_OPP_THREAT_SCORE = 2_000
CENTRALITY_RADIUS = 5

# Medium tier feature weights.
MEDIUM_WIN_SCORE = 100
MEDIUM_BLOCK_SCORE = 90
MEDIUM_NEAR_WIN_BLOCK_SCORE = 80
MEDIUM_CENTRAL_SCORE = 10
MEDIUM_OWN_ADJACENT_SCORE = 5
MEDIUM_LAST_MOVE_ADJACENT_SCORE = 8
MEDIUM_LAST_MOVE_NEAR_SCORE = 4
MEDIUM_SCORE_WINDOW = 5
