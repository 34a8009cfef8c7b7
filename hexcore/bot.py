# bot.py
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .board import EMPTY, CellState, HexBoard, HexPlayerColor, switch_player
from .config import Rules, SearchConfig, Visibility

logger = logging.getLogger(__name__)


def empty_cells(cells: Sequence[int]) -> List[int]:
    return [i for i, code in enumerate(cells) if code == EMPTY]


class BaseBot:
    """Common interface of every automated player.

    ``get_move(cells, color)`` receives either the labelled state (open
    games) or the player's visible board (Dark Hex) and returns a cell
    index that is empty in ``cells``.
    """

    name = "base"

    def __init__(
        self,
        board: HexBoard,
        rules: Rules = Rules.NORMAL,
        visibility: Visibility = Visibility.FULL,
        seed: Optional[int] = None,
    ):
        self.board = board
        self.rules = rules
        self.visibility = visibility
        self.rng = random.Random(seed)

    def get_move(self, cells: Sequence[int], color: HexPlayerColor) -> int:
        raise NotImplementedError

    def _prepare(self, cells: Sequence[int]) -> List[CellState]:
        # visible boards only carry reduced codes, the engine needs labels
        if self.visibility == Visibility.PARTIAL:
            return self.board.relabel(cells)
        return list(cells)

    def _outcome_sign(self) -> int:
        # value of "I completed a chain" for the player who did it
        return 1 if self.rules == Rules.NORMAL else -1


class RandomBot(BaseBot):
    name = "random"

    def get_move(self, cells: Sequence[int], color: HexPlayerColor) -> int:
        moves = empty_cells(cells)
        if not moves:
            raise ValueError("no empty cell left to play")
        return self.rng.choice(moves)


@dataclass
class Node:
    last_move: Optional[int]            # None for the root
    state: List[CellState]
    player_to_move: HexPlayerColor
    parent: Optional[int] = None        # arena index
    children: List[int] = field(default_factory=list)
    visits: int = 0
    score: float = 0.0                  # for the player who made last_move
    terminal: bool = False

    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def win_rate(self) -> float:
        return self.score / self.visits


class MCTSBot(BaseBot):
    """UCB1 tree search that expands every empty cell of a leaf at once.

    Each new child is scored straight away, either as a decisive result or
    with a few random rollouts, and the sum is backed up the selected path
    with the sign flipped at every level. The tree lives in ``self.nodes``
    (index 0 is the root) for the duration of one ``get_move`` call.
    """

    name = "mcts"

    def __init__(self, board: HexBoard, config: Optional[SearchConfig] = None, **kwargs):
        super().__init__(board, **kwargs)
        self.config = config or SearchConfig()
        self.nodes: List[Node] = []

    def get_move(self, cells: Sequence[int], color: HexPlayerColor) -> int:
        if EMPTY not in cells:
            raise ValueError("no empty cell left to play")

        self._start(cells, color)
        root = self.nodes[0]
        iterations = 0
        while root.visits < self.config.max_simulations and iterations < self.config.max_iterations:
            self._iterate()
            iterations += 1

        move = self._best_move(cells)
        if logger.isEnabledFor(logging.DEBUG):
            best = next((self.nodes[c] for c in root.children if self.nodes[c].last_move == move), None)
            logger.debug(
                "%s: %d iterations, %d simulations, move %d (win rate %s)",
                self.name, iterations, root.visits, move,
                "n/a" if best is None else f"{best.win_rate():.3f}",
            )
        self.nodes = []
        return move

    # ---------------- search steps ----------------
    def _start(self, cells: Sequence[int], color: HexPlayerColor):
        self.nodes = [Node(last_move=None, state=self._prepare(cells), player_to_move=color)]

    def _iterate(self):
        path = self._select()
        sims, value = self._evaluate_leaf(path[-1])
        self._backpropagate(path, sims, value)

    def _ucb(self, parent: Node, child: Node) -> float:
        return child.win_rate() + self.config.ucb_explore * math.sqrt(math.log(parent.visits) / child.visits)

    def _select(self) -> List[int]:
        idx = 0
        path = [idx]
        node = self.nodes[idx]
        while not node.is_leaf():
            best_idx = None
            best_val = -math.inf
            for c in node.children:
                val = self._ucb(node, self.nodes[c])
                if best_idx is None or val > best_val:
                    best_val = val
                    best_idx = c
            idx = best_idx
            node = self.nodes[idx]
            path.append(idx)
        return path

    def _evaluate_leaf(self, idx: int) -> Tuple[int, float]:
        """Expand and score a leaf; value is for the leaf's own mover."""
        node = self.nodes[idx]
        if node.terminal:
            return self._terminal_result()

        sims = 0
        value = 0.0
        for pos in self._candidates(node):
            child = self._make_child(idx, pos)
            child_sims, child_value = self._score_child(child)
            sims += child_sims
            value -= child_value
            self.nodes.append(child)
            node.children.append(len(self.nodes) - 1)
        return sims, value

    def _terminal_result(self) -> Tuple[int, float]:
        n = self.config.terminal_visits
        return n, float(n * self._outcome_sign())

    def _candidates(self, node: Node) -> List[int]:
        return empty_cells(node.state)

    def _make_child(self, idx: int, pos: int) -> Node:
        parent = self.nodes[idx]
        state = list(parent.state)
        win = self.board.move(state, parent.player_to_move, pos)
        return Node(
            last_move=pos,
            state=state,
            player_to_move=switch_player(parent.player_to_move),
            parent=idx,
            terminal=win,
        )

    def _score_child(self, child: Node) -> Tuple[int, float]:
        mover = switch_player(child.player_to_move)
        if child.terminal:
            child.visits = 1
            child.score = float(self._outcome_sign())
            return 1, child.score

        for _ in range(self.config.rollouts_per_child):
            winner = self._rollout(child)
            child.visits += 1
            child.score += 1 if winner == mover else -1
        return child.visits, child.score

    def _rollout(self, node: Node) -> HexPlayerColor:
        """Uniform random playout; returns the winner under the current rules.

        Filling every empty cell alternately and reading the finished board
        gives the same winner as stopping at the first chain, since a chain
        once made is never cut and a full board has exactly one.
        """
        state = list(node.state)
        cells = empty_cells(state)
        self.rng.shuffle(cells)
        player = node.player_to_move
        stones = (CellState.BLACK, CellState.WHITE)
        for i, pos in enumerate(cells):
            state[pos] = stones[player] if i % 2 == 0 else stones[switch_player(player)]

        connector = self.board.check_winner(state)
        return connector if self.rules == Rules.NORMAL else switch_player(connector)

    def _backpropagate(self, path: List[int], sims: int, value: float):
        direction = 1
        for idx in reversed(path):
            node = self.nodes[idx]
            node.visits += sims
            node.score += value * direction
            direction = -direction

    def _best_move(self, cells: Sequence[int]) -> int:
        root = self.nodes[0]
        best_move = None
        best_val = -math.inf
        for c in root.children:
            child = self.nodes[c]
            if child.visits == 0:
                continue
            val = child.win_rate()
            if best_move is None or val > best_val:
                best_val = val
                best_move = child.last_move
        if best_move is None:
            # nothing searched (zero budget): any legal cell
            best_move = empty_cells(cells)[0]
        return best_move
