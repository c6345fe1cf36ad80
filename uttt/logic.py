from collections import namedtuple

from .board import ALL_CODES, SYMBOLS, copy_board, decode, empty_board, encode, place_symbol
from .errors import IllegalMove

WIN_LINES = [
    (0,1,2),(3,4,5),(6,7,8),
    (0,3,6),(1,4,7),(2,5,8),
    (0,4,8),(2,4,6)
]
DRAWN = "D"


def other(symbol):
    return "O" if symbol == "X" else "X"


# ── Rules ─────────────────────────────────────────────────────────────────────
def sub_board_winner(cells):
    for a, b, c in WIN_LINES:
        if cells[a] and cells[a] == cells[b] == cells[c]:
            return cells[a]
    return None

def sub_board_full(cells):
    return all(cells)

def meta_winner(won):
    """True if the sub-board codes in ``won`` cover one of the meta-board lines."""
    return any(a in won and b in won and c in won for a, b, c in WIN_LINES)

def empty_completed():
    return {"X": set(), "O": set(), DRAWN: set()}

def closed_codes(completed):
    return set().union(*completed.values())

def is_draw(completed):
    # Every sub-board decided one way or another. Callers check meta_winner first.
    return sum(len(codes) for codes in completed.values()) == 9

def next_zone(target, completed):
    closed = closed_codes(completed)
    if target not in closed:
        return frozenset({target})
    return frozenset(code for code in ALL_CODES if code not in closed)

def update_completed(cells, completed, code, symbol):
    """Fold one sub-board's status into a fresh copy of the completion sets."""
    new = {key: set(codes) for key, codes in completed.items()}
    if code in closed_codes(completed):
        return new
    if sub_board_winner(cells) == symbol:
        new[symbol].add(code)
    elif sub_board_full(cells):
        new[DRAWN].add(code)
    return new


# ── Moves and states ──────────────────────────────────────────────────────────
class Move(namedtuple("Move", "sub_row sub_col cell_row cell_col")):
    __slots__ = ()

    @property
    def code(self):
        return encode(self.sub_row, self.sub_col)

    @property
    def target(self):
        """Code of the sub-board this move sends the opponent to."""
        return encode(self.cell_row, self.cell_col)

    def to_dict(self):
        return {"subRow": self.sub_row, "subCol": self.sub_col,
                "cellRow": self.cell_row, "cellCol": self.cell_col}

    @classmethod
    def from_dict(cls, data):
        try:
            move = cls(*(int(data[k]) for k in ("subRow", "subCol", "cellRow", "cellCol")))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"malformed move: {data!r}") from e
        if not all(0 <= v < 3 for v in move):
            raise ValueError(f"move out of range: {data!r}")
        return move


class GameState:
    __slots__ = ("board", "completed", "turn", "next_zone", "game_over")

    def __init__(self, board=None, completed=None, turn="X", next_zone=None, game_over=False):
        self.board     = board if board is not None else empty_board()
        self.completed = completed if completed is not None else empty_completed()
        self.turn      = turn
        self.next_zone = frozenset(ALL_CODES if next_zone is None else next_zone)
        self.game_over = game_over

    def clone(self):
        return GameState(copy_board(self.board),
                         {key: set(codes) for key, codes in self.completed.items()},
                         self.turn, self.next_zone, self.game_over)

    @property
    def winner(self):
        """'X', 'O', 'D' for a decided game, None while it is still open."""
        for symbol in SYMBOLS:
            if meta_winner(self.completed[symbol]):
                return symbol
        if is_draw(self.completed):
            return DRAWN
        return None

    def __eq__(self, rhs):
        if not isinstance(rhs, GameState):
            return NotImplemented
        return (self.board == rhs.board and self.completed == rhs.completed
                and self.turn == rhs.turn and self.next_zone == rhs.next_zone
                and self.game_over == rhs.game_over)

    __hash__ = None

    def __repr__(self):
        return (f"GameState(turn={self.turn!r}, next_zone={sorted(self.next_zone)}, "
                f"game_over={self.game_over})")

    def to_dict(self):
        return {
            "board":     copy_board(self.board),
            "completed": {key: sorted(codes) for key, codes in self.completed.items()},
            "turn":      self.turn,
            "nextZone":  sorted(self.next_zone),
            "gameOver":  self.game_over,
        }

    @classmethod
    def from_dict(cls, data):
        try:
            board = [[cell or None for cell in cells] for cells in data["board"]]
            completed = {key: {int(code) for code in data["completed"].get(key, ())}
                         for key in ("X", "O", DRAWN)}
            turn      = data["turn"]
            zone      = [int(code) for code in data["nextZone"]]
            game_over = bool(data["gameOver"])
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ValueError(f"malformed state: {e}") from e
        if len(board) != 9 or any(len(cells) != 9 for cells in board):
            raise ValueError("board must hold 9 sub-boards of 9 cells")
        if any(cell not in (None,) + SYMBOLS for cells in board for cell in cells):
            raise ValueError("cells must be empty, 'X' or 'O'")
        if turn not in SYMBOLS:
            raise ValueError(f"unknown turn symbol: {turn!r}")
        codes = [code for codes in completed.values() for code in codes] + zone
        if any(code not in ALL_CODES for code in codes):
            raise ValueError("sub-board codes must be in 0..8")
        if sum(len(c) for c in completed.values()) != len(closed_codes(completed)):
            raise ValueError("a sub-board code appears in more than one completion set")
        return cls(board, completed, turn, zone, game_over)


def legal_moves(state):
    """Every empty cell inside the next zone, sub-board code ascending then row-major."""
    return [Move(*decode(b), *decode(c))
            for b in sorted(state.next_zone)
            for c in ALL_CODES if state.board[b][c] is None]

def apply_move(state, move):
    """Play ``move`` for ``state.turn`` and return the resulting state."""
    if state.game_over:
        raise IllegalMove("the game is over")
    code, target = move.code, move.target
    if code not in state.next_zone:
        raise IllegalMove(f"sub-board {decode(code)} is outside the next zone")
    symbol    = state.turn
    board     = place_symbol(state.board, *move, symbol)
    completed = update_completed(board[code], state.completed, code, symbol)
    # The draw test uses the completion sets after this move so the move that
    # closes the last sub-board also ends the game.
    game_over = meta_winner(completed[symbol]) or is_draw(completed)
    zone      = frozenset() if game_over else next_zone(target, completed)
    return GameState(board, completed, other(symbol), zone, game_over)

def settle(state):
    """Copy of ``state`` whose game-over flag and next zone agree with its completion sets."""
    s = state.clone()
    if s.winner is not None:
        s.game_over = True
        s.next_zone = frozenset()
    return s
