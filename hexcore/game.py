# game.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .board import (
    EMPTY,
    CellState,
    HexBoard,
    HexPlayerColor,
    new_state,
    reduce_cell,
    switch_player,
)
from .config import GameOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    color: HexPlayerColor
    pos: int
    swap: bool = False


@dataclass(frozen=True)
class MoveResult:
    placed: bool
    game_over: bool = False
    # Dark Hex: the cell held a hidden enemy stone, the mover plays again
    revealed: bool = False


class HexGame:
    """Authoritative state of one local game: turns, rules and visibility."""

    def __init__(self, options: Optional[GameOptions] = None):
        self.options = options or GameOptions()
        self.options.validate()
        self.board = HexBoard(self.options.width, self.options.height)
        self.reset()

    def reset(self):
        size = self.board.size
        self.state: List[CellState] = new_state(size)
        self.visible: Optional[List[List[CellState]]] = (
            [new_state(size), new_state(size)] if self.options.dark else None
        )
        self.current = HexPlayerColor.BLACK
        self.winner: Optional[HexPlayerColor] = None
        self.history: List[HistoryEntry] = []

    @property
    def over(self) -> bool:
        return self.winner is not None

    def visible_board(self, color: HexPlayerColor) -> List[CellState]:
        """What ``color`` is allowed to see, with side labels stripped."""
        if self.visible is not None:
            return list(self.visible[color])
        return [reduce_cell(code) for code in self.state]

    def legal_moves(self) -> List[int]:
        if self.over:
            return []
        cells = self.visible[self.current] if self.visible is not None else self.state
        return [i for i, code in enumerate(cells) if code == EMPTY]

    def play(self, pos: int) -> MoveResult:
        if self.over or not self.board.in_bounds(pos):
            logger.debug("rejected move %s by %s", pos, self.current.name)
            return MoveResult(placed=False)

        color = self.current
        if self.visible is not None:
            seen = self.visible[color]
            if seen[pos] != EMPTY:
                logger.debug("rejected move %d by %s: already visible", pos, color.name)
                return MoveResult(placed=False)
            if self.state[pos] != EMPTY:
                seen[pos] = reduce_cell(self.state[pos])
                logger.debug("%s ran into a hidden stone at %d", color.name, pos)
                return MoveResult(placed=False, revealed=True)
        elif self.state[pos] != EMPTY:
            logger.debug("rejected move %d by %s: occupied", pos, color.name)
            return MoveResult(placed=False)

        self.history.append(HistoryEntry(color, pos))
        connected = self.board.move(self.state, color, pos)
        if self.visible is not None:
            self.visible[color][pos] = reduce_cell(self.state[pos])
        logger.debug("%s plays %d %s", color.name, pos, self.board.xy(pos))

        if connected:
            self._finish(color)
        self.current = switch_player(color)
        return MoveResult(placed=True, game_over=connected)

    def can_swap(self) -> bool:
        return self.options.swap_rule and not self.over and len(self.history) == 1

    def swap(self) -> bool:
        """Second player takes over the first stone, mirrored to (y, x)."""
        if not self.can_swap():
            return False

        first = self.history[0].pos
        self.state[first] = EMPTY
        x, y = self.board.xy(first)
        swap_pos = self.board.index(y, x)
        color = self.current
        self.history.append(HistoryEntry(color, swap_pos, swap=True))
        connected = self.board.move(self.state, color, swap_pos)
        logger.info("%s swaps: %d -> %d", color.name, first, swap_pos)

        if connected:
            self._finish(color)
        self.current = switch_player(color)
        return True

    def bot_move(self, bot) -> MoveResult:
        """Let ``bot`` pick for the current player with what that player may see."""
        cells = self.visible_board(self.current) if self.visible is not None else self.state
        return self.play(bot.get_move(cells, self.current))

    def _finish(self, connector: HexPlayerColor):
        self.winner = switch_player(connector) if self.options.reverse else connector
        logger.info(
            "%s connected after %d moves, winner %s",
            connector.name, len(self.history), self.winner.name,
        )

    def clone(self) -> "HexGame":
        g = HexGame.__new__(HexGame)
        g.options = self.options
        g.board = self.board
        g.state = list(self.state)
        g.visible = [list(v) for v in self.visible] if self.visible is not None else None
        g.current = self.current
        g.winner = self.winner
        g.history = list(self.history)
        return g
