from collections import deque

import pytest

from hexcore import CellState, HexBoard, HexPlayerColor, SearchConfig, reduce_cell

# (dx, dy) offsets, independent from the board tables
OFFSETS = [(0, -1), (1, -1), (1, 0), (0, 1), (-1, 1), (-1, 0)]


def has_chain(cells, color, width, height) -> bool:
    """Plain BFS reference: does ``color`` join its two sides?"""
    stone = CellState.BLACK if color == HexPlayerColor.BLACK else CellState.WHITE

    def own(x, y):
        return reduce_cell(cells[y * width + x]) == stone

    if color == HexPlayerColor.BLACK:
        start = [(x, 0) for x in range(width) if own(x, 0)]
        done = lambda x, y: y == height - 1
    else:
        start = [(0, y) for y in range(height) if own(0, y)]
        done = lambda x, y: x == width - 1

    seen = set(start)
    q = deque(start)
    while q:
        x, y = q.popleft()
        if done(x, y):
            return True
        for dx, dy in OFFSETS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height and (nx, ny) not in seen and own(nx, ny):
                seen.add((nx, ny))
                q.append((nx, ny))
    return False


@pytest.fixture
def board3():
    return HexBoard(3, 3)


@pytest.fixture
def board5():
    return HexBoard(5, 5)


@pytest.fixture
def small_search():
    return SearchConfig(max_simulations=300, max_iterations=200)
