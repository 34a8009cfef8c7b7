"""Hex, Dark Hex and Reverse Hex rules engine with Monte-Carlo tree search bots."""
from __future__ import annotations

from typing import Optional

from .board import (
    MIAI_EAST,
    MIAI_NONE,
    MIAI_NORTH,
    MIAI_SOUTH,
    MIAI_WEST,
    CellState,
    HexBoard,
    HexPlayerColor,
    reduce_cell,
    switch_player,
)
from .bot import BaseBot, MCTSBot, RandomBot, empty_cells
from .config import GameOptions, Rules, SearchConfig, Visibility
from .game import HexGame, MoveResult
from .miai_bot import MiaiMCTSBot

BOTS = {
    RandomBot.name: RandomBot,
    MCTSBot.name: MCTSBot,
    MiaiMCTSBot.name: MiaiMCTSBot,
}


def make_bot(name: str, board: HexBoard, options: Optional[GameOptions] = None, **kwargs) -> BaseBot:
    """Build a bot by name; ``options`` fills in rule and visibility modes."""
    try:
        cls = BOTS[name]
    except KeyError:
        raise ValueError(f"unknown bot {name!r}, expected one of {sorted(BOTS)}") from None
    if options is not None:
        kwargs.setdefault("rules", options.rules)
        kwargs.setdefault("visibility", options.visibility)
    return cls(board, **kwargs)


__all__ = [
    "BOTS",
    "MIAI_EAST",
    "MIAI_NONE",
    "MIAI_NORTH",
    "MIAI_SOUTH",
    "MIAI_WEST",
    "BaseBot",
    "CellState",
    "GameOptions",
    "HexBoard",
    "HexGame",
    "HexPlayerColor",
    "MCTSBot",
    "MiaiMCTSBot",
    "MoveResult",
    "RandomBot",
    "Rules",
    "SearchConfig",
    "Visibility",
    "empty_cells",
    "make_bot",
    "reduce_cell",
    "switch_player",
]
