"""Board model: nine sub-boards of nine cells, addressed board[code][cell].

A sub-board code (and a cell index inside a sub-board) is row * 3 + col, so the
cell just played names the sub-board the opponent is sent to.
"""
from .errors import IllegalMove

ALL_CODES = tuple(range(9))
SYMBOLS   = ("X", "O")


def encode(row, col):
    if not (0 <= row < 3 and 0 <= col < 3):
        raise IllegalMove(f"coordinates out of range: ({row}, {col})")
    return row * 3 + col

def decode(code):
    return divmod(code, 3)


def empty_board():
    return [[None] * 9 for _ in range(9)]

def copy_board(board):
    return [list(cells) for cells in board]

def cell_at(board, sub_row, sub_col, cell_row, cell_col):
    return board[encode(sub_row, sub_col)][encode(cell_row, cell_col)]

def place_symbol(board, sub_row, sub_col, cell_row, cell_col, symbol):
    """Return a copy of ``board`` with ``symbol`` written to the addressed cell."""
    if symbol not in SYMBOLS:
        raise ValueError(f"unknown symbol: {symbol!r}")
    b, c = encode(sub_row, sub_col), encode(cell_row, cell_col)
    if board[b][c] is not None:
        raise IllegalMove(f"cell ({sub_row},{sub_col},{cell_row},{cell_col}) is not empty")
    new_board = copy_board(board)
    new_board[b][c] = symbol
    return new_board
