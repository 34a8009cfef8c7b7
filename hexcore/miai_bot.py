# miai_bot.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .board import (
    EMPTY,
    CellState,
    HexBoard,
    HexPlayerColor,
    cell_color,
    new_reply_map,
    new_state,
    release_carrier,
    switch_player,
)
from .bot import MCTSBot, Node, empty_cells
from .config import Rules, SearchConfig

logger = logging.getLogger(__name__)

# one reply map per colour, indexed by HexPlayerColor
Replies = Tuple[List[int], List[int]]


@dataclass
class MiaiNode(Node):
    replies: Replies = field(default_factory=lambda: ([], []))
    # the only legal answer when last_move intruded into a bridge of player_to_move
    forced: Optional[int] = None


class MiaiMCTSBot(MCTSBot):
    """Tree search that treats bridges as virtual connections.

    Stones are placed with ``HexBoard.miai_move`` so a group linked to an
    edge through a bridge already counts as connected. When a move lands
    on a carrier of the opponent's bridge, the opponent's only candidate is
    the other carrier. Immediate wins score ``math.inf`` and are never
    simulated again.
    """

    name = "miai"

    def __init__(self, board: HexBoard, config: Optional[SearchConfig] = None, **kwargs):
        super().__init__(board, config=config, **kwargs)
        if self.rules != Rules.NORMAL:
            raise ValueError("miai search only supports normal rules")

    def play(self, state: List[CellState], replies: Replies, color: HexPlayerColor, pos: int) -> bool:
        """Place a stone, keeping both reply maps in step with the board."""
        for reply in replies:
            release_carrier(reply, pos)
        return self.board.miai_move(state, replies[color], color, pos)

    def replay(self, cells: Sequence[int]) -> Tuple[List[CellState], Replies]:
        """Miai-labelled state and reply maps for an arbitrary board.

        A board that already holds a virtual chain keeps replaying: the
        winning group stays labelled as such, so any later stone joining it
        is reported as a win by ``play``.
        """
        state = new_state(self.board.size)
        replies = (new_reply_map(self.board.size), new_reply_map(self.board.size))
        for pos, code in enumerate(cells):
            color = cell_color(code)
            if color is not None:
                if self.play(state, replies, color, pos):
                    logger.debug("virtual chain for %s after replaying %d", color.name, pos)
        return state, replies

    # ---------------- search steps ----------------
    def _start(self, cells: Sequence[int], color: HexPlayerColor):
        state, replies = self.replay(cells)
        self.nodes = [MiaiNode(last_move=None, state=state, player_to_move=color, replies=replies)]

    def _terminal_result(self) -> Tuple[int, float]:
        return 1, 1.0

    def _candidates(self, node: MiaiNode) -> List[int]:
        if node.forced is not None:
            return [node.forced]
        return empty_cells(node.state)

    def _make_child(self, idx: int, pos: int) -> MiaiNode:
        parent = self.nodes[idx]
        mover = parent.player_to_move
        opponent = switch_player(mover)

        forced = parent.replies[opponent][pos]
        state = list(parent.state)
        replies = (list(parent.replies[0]), list(parent.replies[1]))
        win = self.play(state, replies, mover, pos)
        return MiaiNode(
            last_move=pos,
            state=state,
            player_to_move=opponent,
            parent=idx,
            terminal=win,
            replies=replies,
            forced=forced if forced >= 0 and state[forced] == EMPTY else None,
        )

    def _score_child(self, child: MiaiNode) -> Tuple[int, float]:
        if child.terminal:
            child.visits = 1
            child.score = math.inf
            return 1, 1.0
        return super()._score_child(child)

    def _rollout(self, node: MiaiNode) -> HexPlayerColor:
        state = list(node.state)
        replies = (list(node.replies[0]), list(node.replies[1]))
        cells = empty_cells(state)
        self.rng.shuffle(cells)

        player = node.player_to_move
        forced = node.forced
        while True:
            if forced is not None and state[forced] == EMPTY:
                pos = forced
            else:
                pos = None
                while cells:
                    cand = cells.pop()
                    if state[cand] == EMPTY:
                        pos = cand
                        break
                if pos is None:
                    # board full without a detected chain
                    return self.board.check_winner(state)

            opponent = switch_player(player)
            answer = replies[opponent][pos]
            if self.play(state, replies, player, pos):
                return player
            forced = answer if answer >= 0 else None
            player = opponent
