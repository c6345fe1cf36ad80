"""Move selection for Ultimate Tic Tac Toe: a uniformly random player and a
plain UCT Monte Carlo Tree Search player.

Each search iteration runs four phases on a fresh tree:

1. SELECT    descend by UCT while a node is fully expanded and has children.
2. EXPAND    pop one untried move and attach the resulting child.
3. SIMULATE  play uniformly random moves from the new child to the end.
4. BACKPROP  walk back to the root; every node on the path gets a visit and
             1 / 0.5 / 0 reward for a win / draw / loss of the player whose
             move led to it.

The search stops at a wall-clock deadline taken once when it starts. Every
phase checks that same deadline, so an iteration that runs over it is dropped
before backpropagation instead of overrunning the budget.
"""
import logging
import random
import time
from collections import namedtuple

from .board import decode
from .errors import EmptySelection
from .logic import Move, apply_move, legal_moves, settle
from .tree import Node, select_best_child, select_most_visited_child

logger = logging.getLogger(__name__)

SEARCH_TIME_LIMIT = 3.0   # seconds per best-move search


class RandomMoveResult(namedtuple("RandomMoveResult", "move state")):
    __slots__ = ()

    @property
    def game_over(self):
        return self.state.game_over


class SearchResult(namedtuple("SearchResult", "move score iterations state")):
    """``state`` is the position after ``move`` (the settled input if ``move`` is None)."""
    __slots__ = ()

    @property
    def game_over(self):
        return self.state.game_over


def _expired(deadline):
    return deadline is not None and time.time() > deadline

def _playable(state):
    """Settle ``state`` and fail if it is unfinished yet has nowhere to play."""
    settled = settle(state)
    if not settled.game_over and not legal_moves(settled):
        raise EmptySelection("no legal move in an unfinished game")
    return settled


# ── Random player ─────────────────────────────────────────────────────────────
def compute_random_move(state, rng=None):
    rng = rng or random
    state = _playable(state)
    if state.game_over:
        return RandomMoveResult(None, state)
    zone = sorted(state.next_zone)
    while True:
        code, cell = rng.choice(zone), rng.randrange(9)
        if state.board[code][cell] is None: break
    move = Move(*decode(code), *decode(cell))
    return RandomMoveResult(move, apply_move(state, move))


# ── MCTS ──────────────────────────────────────────────────────────────────────
def rollout(state, rng, deadline=None):
    """Random playout to the end. Returns the winner, or None if the deadline passed."""
    s = state
    while not s.game_over:
        if _expired(deadline): return None
        moves = legal_moves(s)
        if not moves:
            raise EmptySelection(f"no legal move during rollout from {s!r}")
        s = apply_move(s, rng.choice(moves))
    return s.winner

def backprop(node, winner):
    while node is not None:
        node.update(winner)
        node = node.parent

def run_iteration(root, rng, deadline=None):
    """One select/expand/simulate/backprop pass. False if cut short by ``deadline``."""
    node = root
    while not node.untried and node.children:
        if _expired(deadline): return False
        node = select_best_child(node)

    if node.untried:
        if _expired(deadline): return False
        node = node.expand()

    winner = rollout(node.state, rng, deadline)
    if winner is None:
        logger.debug("iteration dropped: time limit exceeded")
        return False
    backprop(node, winner)
    return True

def build_tree(state, time_limit=SEARCH_TIME_LIMIT, iterations=None, rng=None):
    """Grow a search tree from ``state`` until the deadline or the iteration cap."""
    if time_limit is None and iterations is None:
        raise ValueError("need a time limit or an iteration cap")
    rng  = rng or random
    root = Node(state)
    deadline = None if time_limit is None else time.time() + time_limit
    done = 0
    while iterations is None or done < iterations:
        if _expired(deadline): break
        run_iteration(root, rng, deadline)
        done += 1
    return root

def compute_best_move(state, time_limit=SEARCH_TIME_LIMIT, iterations=None, rng=None):
    state = _playable(state)
    if state.game_over:
        return SearchResult(None, 0.0, 0, state)
    t0   = time.time()
    root = build_tree(state, time_limit, iterations, rng)
    if not root.children:
        logger.debug("search produced no children in %.2fs", time.time() - t0)
        return SearchResult(None, 0.0, root.visits, state)
    best = select_most_visited_child(root)
    logger.debug("search: %d iterations in %.2fs, best %s (score %.3f, %d visits)",
                 root.visits, time.time() - t0, best.move, best.mean(), best.visits)
    return SearchResult(best.move, best.mean(), root.visits, best.state)
