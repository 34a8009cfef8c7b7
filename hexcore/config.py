# config.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

MIN_BOARD_SIZE = 2
MAX_BOARD_SIZE = 32


class Rules(str, Enum):
    NORMAL = "normal"
    REVERSE = "reverse"  # misere: completing a chain loses


class Visibility(str, Enum):
    FULL = "full"        # the bot sees the labelled state
    PARTIAL = "partial"  # the bot sees a Dark Hex visible board (reduced codes)


@dataclass(frozen=True)
class SearchConfig:
    # the search stops at whichever limit is hit first
    max_simulations: int = 2000
    max_iterations: int = 10000
    rollouts_per_child: int = 3
    # simulations credited when selection lands on an already won leaf
    terminal_visits: int = 10
    ucb_explore: float = 1.0

    def __post_init__(self):
        self.validate()

    def validate(self):
        for name in ("rollouts_per_child", "terminal_visits"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")
        for name in ("max_simulations", "max_iterations"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")
        if self.ucb_explore < 0:
            raise ValueError(f"ucb_explore must not be negative, got {self.ucb_explore}")


@dataclass
class GameOptions:
    width: int = 11
    height: int = 11
    reverse: bool = False
    swap_rule: bool = False
    dark: bool = False

    @property
    def rules(self) -> Rules:
        return Rules.REVERSE if self.reverse else Rules.NORMAL

    @property
    def visibility(self) -> Visibility:
        return Visibility.PARTIAL if self.dark else Visibility.FULL

    def validate(self):
        for name, value in (("width", self.width), ("height", self.height)):
            if not MIN_BOARD_SIZE <= value <= MAX_BOARD_SIZE:
                raise ValueError(f"{name} must be in {MIN_BOARD_SIZE}..{MAX_BOARD_SIZE}, got {value}")
        if self.swap_rule and self.dark:
            raise ValueError("swap rule is not available in Dark Hex")
        if self.swap_rule and self.width != self.height:
            raise ValueError("swap rule needs a square board")
