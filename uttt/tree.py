import math

from .errors import EmptySelection
from .logic import DRAWN, apply_move, legal_moves

EXPLORE = math.sqrt(2)


class Node:
    """One search-tree node. ``parent`` is a back-reference, ``children`` own the subtree."""
    __slots__ = ("state", "move", "parent", "children", "visits", "reward", "_untried")

    def __init__(self, state, move=None, parent=None):
        self.state = state; self.move = move; self.parent = parent
        self.children = []; self.visits = 0; self.reward = 0.0
        self._untried = None

    @property
    def untried(self):
        # Built once, then consumed by expand().
        if self._untried is None:
            self._untried = legal_moves(self.state)
        return self._untried

    def expand(self):
        move  = self.untried.pop()
        child = Node(apply_move(self.state, move), move, self)
        self.children.append(child)
        return child

    def update(self, winner):
        """Count a visit; credit goes to the player whose move led here."""
        self.visits += 1
        if winner == DRAWN:
            self.reward += 0.5
        elif winner != self.state.turn:
            self.reward += 1.0

    def mean(self):
        return self.reward / self.visits if self.visits else 0.0

    def __repr__(self):
        return f"Node(move={self.move}, visits={self.visits}, reward={self.reward})"


def uct(node):
    if node.visits == 0:
        return math.inf
    if node.parent is None:
        return node.reward / node.visits
    return (node.reward / node.visits
            + EXPLORE * math.sqrt(math.log(node.parent.visits) / node.visits))

def _pick(node, key):
    if not node.children:
        raise EmptySelection("node has no children")
    best = node.children[0]
    for child in node.children[1:]:
        # later child wins ties
        if key(child) >= key(best):
            best = child
    return best

def select_best_child(node):
    return _pick(node, uct)

def select_most_visited_child(node):
    return _pick(node, lambda n: n.visits)
