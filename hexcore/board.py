# board.py
from __future__ import annotations

from collections import deque
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple


class HexPlayerColor(IntEnum):
    BLACK = 0  # north <-> south
    WHITE = 1  # west <-> east


class CellState(IntEnum):
    """Occupancy plus the board sides the containing group is connected to."""

    EMPTY = 0
    WHITE = 1
    WHITE_WEST = 2
    WHITE_EAST = 3
    WHITE_WIN = 4
    BLACK = 5
    BLACK_NORTH = 6
    BLACK_SOUTH = 7
    BLACK_WIN = 8


EMPTY = CellState.EMPTY

# neighbor table marker for "off board"
NO_NEIGHBOR = -1

# miai table sentinels
MIAI_NORTH = -1
MIAI_SOUTH = -2
MIAI_WEST = -3
MIAI_EAST = -4
MIAI_NONE = -5

# plain, first side, second side, win
_CODES = {
    HexPlayerColor.BLACK: (CellState.BLACK, CellState.BLACK_NORTH, CellState.BLACK_SOUTH, CellState.BLACK_WIN),
    HexPlayerColor.WHITE: (CellState.WHITE, CellState.WHITE_WEST, CellState.WHITE_EAST, CellState.WHITE_WIN),
}
_EDGES = {
    HexPlayerColor.BLACK: (MIAI_NORTH, MIAI_SOUTH),
    HexPlayerColor.WHITE: (MIAI_WEST, MIAI_EAST),
}


def switch_player(player: HexPlayerColor) -> HexPlayerColor:
    return HexPlayerColor.WHITE if player == HexPlayerColor.BLACK else HexPlayerColor.BLACK


def reduce_cell(code: int) -> CellState:
    """Drop the side-connection detail: EMPTY, BLACK or WHITE only."""
    if code == CellState.EMPTY:
        return CellState.EMPTY
    if code >= CellState.BLACK:
        return CellState.BLACK
    return CellState.WHITE


def cell_color(code: int) -> Optional[HexPlayerColor]:
    if code == CellState.EMPTY:
        return None
    return HexPlayerColor.BLACK if code >= CellState.BLACK else HexPlayerColor.WHITE


def new_state(size: int) -> List[CellState]:
    return [EMPTY] * size


def new_reply_map(size: int) -> List[int]:
    return [-1] * size


def release_carrier(reply: List[int], pos: int):
    """An occupied carrier breaks its bridge: clear it and its partner."""
    partner = reply[pos]
    if partner >= 0:
        reply[partner] = -1
        reply[pos] = -1


def _pair(reply: List[int], a: int, b: int):
    release_carrier(reply, a)
    release_carrier(reply, b)
    reply[a] = b
    reply[b] = a


class HexBoard:
    """Topology of a width x height rhombus plus the move rules on top of it.

    Cells are addressed by a flat index ``y * width + x``. Every table is
    built once in the constructor and never changes afterwards, so a board
    can be shared between games.

    Neighbour slots, in order: N, NE, E, S, SW, W. Bridge slot ``k`` spans
    the carriers in neighbour slots ``k`` and ``k + 1``.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.size = width * height

        nb = [NO_NEIGHBOR] * (self.size * 6)
        miai = [MIAI_NONE] * (self.size * 6)
        w, h = width, height
        for x in range(w):
            for y in range(h):
                i = self.index(x, y) * 6

                nb[i + 0] = self.index(x, y - 1) if y > 0 else NO_NEIGHBOR
                nb[i + 1] = self.index(x + 1, y - 1) if y > 0 and x < w - 1 else NO_NEIGHBOR
                nb[i + 2] = self.index(x + 1, y) if x < w - 1 else NO_NEIGHBOR
                nb[i + 3] = self.index(x, y + 1) if y < h - 1 else NO_NEIGHBOR
                nb[i + 4] = self.index(x - 1, y + 1) if x > 0 and y < h - 1 else NO_NEIGHBOR
                nb[i + 5] = self.index(x - 1, y) if x > 0 else NO_NEIGHBOR

                if y == 0 or x == w - 1:
                    miai[i + 0] = MIAI_NONE
                elif y == 1:
                    miai[i + 0] = MIAI_NORTH
                else:
                    miai[i + 0] = self.index(x + 1, y - 2)

                if y == 0 or x == w - 1:
                    miai[i + 1] = MIAI_NONE
                elif x == w - 2:
                    miai[i + 1] = MIAI_EAST
                else:
                    miai[i + 1] = self.index(x + 2, y - 1)

                if x == w - 1 or y == h - 1:
                    miai[i + 2] = MIAI_NONE
                else:
                    miai[i + 2] = self.index(x + 1, y + 1)

                if y == h - 1 or x == 0:
                    miai[i + 3] = MIAI_NONE
                elif y == h - 2:
                    miai[i + 3] = MIAI_SOUTH
                else:
                    miai[i + 3] = self.index(x - 1, y + 2)

                if x == 0 or y == h - 1:
                    miai[i + 4] = MIAI_NONE
                elif x == 1:
                    miai[i + 4] = MIAI_WEST
                else:
                    miai[i + 4] = self.index(x - 2, y + 1)

                if x == 0 or y == 0:
                    miai[i + 5] = MIAI_NONE
                else:
                    miai[i + 5] = self.index(x - 1, y - 1)

        self.neighbors: Tuple[int, ...] = tuple(nb)
        self.miai: Tuple[int, ...] = tuple(miai)

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def xy(self, pos: int) -> Tuple[int, int]:
        return pos % self.width, pos // self.width

    def in_bounds(self, pos: int) -> bool:
        return 0 <= pos < self.size

    def neighbors_of(self, pos: int) -> List[int]:
        return [n for n in self.neighbors[pos * 6:pos * 6 + 6] if n != NO_NEIGHBOR]

    def carriers(self, pos: int, k: int) -> Tuple[int, int]:
        return self.neighbors[pos * 6 + k], self.neighbors[pos * 6 + (k + 1) % 6]

    def _edge_touches(self, color: HexPlayerColor, pos: int) -> Tuple[bool, bool]:
        if color == HexPlayerColor.BLACK:
            return pos < self.width, pos >= self.size - self.width
        col = pos % self.width
        return col == 0, col == self.width - 1

    # ---------------- plain connectivity ----------------
    def _fill(self, state: List[CellState], pos: int, match: Tuple[CellState, ...], label: CellState):
        # the label doubles as the visited marker
        nb = self.neighbors
        stack = [pos]
        while stack:
            base = stack.pop() * 6
            for k in range(6):
                n = nb[base + k]
                if n >= 0 and state[n] in match:
                    state[n] = label
                    stack.append(n)

    def _touches(self, code: CellState, color: HexPlayerColor) -> Tuple[bool, bool]:
        _, first_code, second_code, win_code = _CODES[color]
        if code == win_code:
            return True, True
        return code == first_code, code == second_code

    def move(self, state: List[CellState], color: HexPlayerColor, pos: int) -> bool:
        """Place a stone of ``color`` at ``pos``; True when it completes a chain.

        ``state[pos]`` must be EMPTY. That is the caller's job: an occupied
        cell is silently overwritten.
        """
        first, second = self._edge_touches(color, pos)

        nb = self.neighbors
        base = pos * 6
        for k in range(6):
            n = nb[base + k]
            if n < 0 or state[n] == EMPTY:
                continue
            f, s = self._touches(state[n], color)
            first = first or f
            second = second or s

        return self._label(state, pos, color, first, second, self._fill)

    def _label(self, state, pos, color, first, second, fill) -> bool:
        plain, first_code, second_code, win_code = _CODES[color]
        if first and second:
            # the whole group is won, so a later stone next to any of it sees the win
            state[pos] = win_code
            fill(state, pos, (plain, first_code, second_code), win_code)
            return True
        if first:
            state[pos] = first_code
            fill(state, pos, (plain,), first_code)
        elif second:
            state[pos] = second_code
            fill(state, pos, (plain,), second_code)
        else:
            state[pos] = plain
        return False

    # ---------------- miai (bridge) connectivity ----------------
    def _miai_fill(self, state: List[CellState], pos: int, match: Tuple[CellState, ...], label: CellState):
        nb, miai = self.neighbors, self.miai
        stack = [pos]
        while stack:
            base = stack.pop() * 6
            for k in range(6):
                n = nb[base + k]
                if n >= 0 and state[n] in match:
                    state[n] = label
                    stack.append(n)
                m = miai[base + k]
                if m >= 0 and state[m] in match:
                    if state[nb[base + k]] == EMPTY and state[nb[base + (k + 1) % 6]] == EMPTY:
                        state[m] = label
                        stack.append(m)

    def miai_move(self, state: List[CellState], reply: List[int], color: HexPlayerColor, pos: int) -> bool:
        """Like ``move``, but bridges with two empty carriers count as links.

        Every such bridge towards an own stone or an own edge registers its
        carriers in ``reply`` as a forced-reply pair. ``pos`` itself is
        released from ``reply`` first since it can no longer be a carrier.
        """
        first_edge, second_edge = _EDGES[color]
        first, second = self._edge_touches(color, pos)
        release_carrier(reply, pos)

        nb, miai = self.neighbors, self.miai
        base = pos * 6
        for k in range(6):
            n = nb[base + k]
            if n >= 0 and state[n] != EMPTY:
                f, s = self._touches(state[n], color)
                first = first or f
                second = second or s

            m = miai[base + k]
            if m == MIAI_NONE:
                continue
            c1, c2 = nb[base + k], nb[base + (k + 1) % 6]
            if state[c1] != EMPTY or state[c2] != EMPTY:
                continue
            if m >= 0:
                if cell_color(state[m]) == color:
                    _pair(reply, c1, c2)
                    f, s = self._touches(state[m], color)
                    first = first or f
                    second = second or s
            elif m == first_edge:
                first = True
                _pair(reply, c1, c2)
            elif m == second_edge:
                second = True
                _pair(reply, c1, c2)

        return self._label(state, pos, color, first, second, self._miai_fill)

    # ---------------- whole-board helpers ----------------
    def check_winner(self, state: Sequence[int]) -> HexPlayerColor:
        """Winner of a completely filled board; reads colours, not labels."""
        seen = [False] * self.size
        q = deque()
        for pos in range(self.width):
            if cell_color(state[pos]) == HexPlayerColor.BLACK:
                seen[pos] = True
                q.append(pos)

        last_row = self.size - self.width
        while q:
            pos = q.popleft()
            if pos >= last_row:
                return HexPlayerColor.BLACK
            for n in self.neighbors_of(pos):
                if not seen[n] and cell_color(state[n]) == HexPlayerColor.BLACK:
                    seen[n] = True
                    q.append(n)
        return HexPlayerColor.WHITE

    def relabel(self, cells: Sequence[int]) -> List[CellState]:
        """Rebuild side labels for a board holding reduced codes."""
        state = new_state(self.size)
        for pos, code in enumerate(cells):
            color = cell_color(code)
            if color is not None:
                self.move(state, color, pos)
        return state
