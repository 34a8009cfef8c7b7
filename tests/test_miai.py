import random

from conftest import has_chain
from hexcore import CellState, HexBoard, HexPlayerColor, MiaiMCTSBot
from hexcore.board import new_reply_map, new_state, release_carrier

BLACK, WHITE = HexPlayerColor.BLACK, HexPlayerColor.WHITE


def assert_symmetric(reply):
    for a, b in enumerate(reply):
        if b >= 0:
            assert reply[b] == a


def test_edge_bridge_registers_carriers(board5):
    state = new_state(board5.size)
    reply = new_reply_map(board5.size)
    # (1, 1) bridges to the north edge over (1, 0) and (2, 0)
    assert board5.miai_move(state, reply, BLACK, 6) is False
    assert state[6] == CellState.BLACK_NORTH
    assert reply[1] == 2 and reply[2] == 1
    # west edge bridge belongs to White, not registered for Black
    assert reply[5] == -1 and reply[0] == -1
    assert_symmetric(reply)


def test_stone_bridge_and_intrusion(board5):
    bot = MiaiMCTSBot(board5)
    state = new_state(board5.size)
    replies = (new_reply_map(board5.size), new_reply_map(board5.size))
    bot.play(state, replies, BLACK, 6)
    # (2, 2) bridges back to (1, 1) over (1, 2) and (2, 1)
    bot.play(state, replies, BLACK, 12)
    black = replies[BLACK]
    assert state[12] == CellState.BLACK_NORTH
    assert black[11] == 7 and black[7] == 11

    # White occupies one carrier: both entries go
    bot.play(state, replies, WHITE, 11)
    assert black[11] == -1 and black[7] == -1
    assert black[1] == 2 and black[2] == 1
    assert_symmetric(black)
    assert_symmetric(replies[WHITE])


def test_own_stone_on_carrier_clears_pair(board5):
    state = new_state(board5.size)
    reply = new_reply_map(board5.size)
    board5.miai_move(state, reply, BLACK, 6)
    board5.miai_move(state, reply, BLACK, 12)
    board5.miai_move(state, reply, BLACK, 11)
    assert reply[11] == -1 and reply[7] == -1
    assert_symmetric(reply)


def test_release_carrier():
    reply = new_reply_map(4)
    reply[0], reply[3] = 3, 0
    release_carrier(reply, 3)
    assert reply == [-1, -1, -1, -1]
    release_carrier(reply, 2)
    assert reply == [-1, -1, -1, -1]


def test_fill_crosses_open_bridge():
    board = HexBoard(7, 7)
    state = new_state(board.size)
    reply = new_reply_map(board.size)
    # plain stone at (3, 2), then (2, 1) links to the north edge by a bridge
    board.move(state, BLACK, 17)
    assert state[17] == CellState.BLACK
    board.miai_move(state, reply, BLACK, 9)
    assert state[9] == CellState.BLACK_NORTH
    assert state[17] == CellState.BLACK_NORTH
    assert reply[10] == 16 and reply[16] == 10


def test_plain_move_ignores_bridges():
    board = HexBoard(7, 7)
    state = new_state(board.size)
    board.move(state, BLACK, 17)
    board.move(state, BLACK, 9)
    assert state[9] == CellState.BLACK
    assert state[17] == CellState.BLACK


def test_blocked_bridge_is_not_a_link():
    board = HexBoard(7, 7)
    state = new_state(board.size)
    reply = new_reply_map(board.size)
    board.move(state, BLACK, 17)
    board.move(state, WHITE, 10)
    board.miai_move(state, reply, BLACK, 9)
    assert state[17] == CellState.BLACK
    assert reply[16] == -1


def test_virtual_win(board3):
    state = new_state(board3.size)
    reply = new_reply_map(board3.size)
    # the centre of a 3x3 board bridges to both black edges
    assert board3.miai_move(state, reply, BLACK, 4) is True
    assert state[4] == CellState.BLACK_WIN

    plain = new_state(board3.size)
    assert board3.move(plain, BLACK, 4) is False


def test_reply_maps_stay_symmetric_in_random_play():
    board = HexBoard(8, 8)
    bot = MiaiMCTSBot(board)
    rng = random.Random(11)
    for _ in range(10):
        state = new_state(board.size)
        replies = (new_reply_map(board.size), new_reply_map(board.size))
        cells = list(range(board.size))
        rng.shuffle(cells)
        player = BLACK
        for pos in cells:
            won = bot.play(state, replies, player, pos)
            for reply in replies:
                assert_symmetric(reply)
                # registered carriers are always empty
                for a, b in enumerate(reply):
                    if b >= 0:
                        assert state[a] == CellState.EMPTY
            if won:
                break
            player = HexPlayerColor(1 - player)


def test_replayed_virtual_win_stays_live(board3):
    bot = MiaiMCTSBot(board3)
    cells = new_state(board3.size)
    cells[4] = CellState.BLACK
    state, replies = bot.replay(cells)
    assert state[4] == CellState.BLACK_WIN

    results = [
        bot.play(state, replies, color, pos)
        for color, pos in ((WHITE, 1), (BLACK, 2), (WHITE, 8), (BLACK, 7))
    ]
    # (2, 0) sits on the north edge next to the won centre, (1, 2) on the south edge
    assert results == [False, True, False, True]
    assert state[2] == state[7] == CellState.BLACK_WIN


def test_win_label_covers_the_whole_chain(board5):
    state = new_state(board5.size)
    for pos in (2, 7, 12, 17):
        assert board5.move(state, BLACK, pos) is False
    assert board5.move(state, BLACK, 22) is True
    assert all(state[p] == CellState.BLACK_WIN for p in (2, 7, 12, 17, 22))
    # a stone next to the middle of a won chain is itself part of the win
    assert board5.move(state, BLACK, 13) is True
    assert state[13] == CellState.BLACK_WIN


def test_virtual_labels_never_miss_a_real_chain():
    board = HexBoard(6, 6)
    bot = MiaiMCTSBot(board)
    rng = random.Random(23)
    for _ in range(40):
        order = list(range(board.size))
        rng.shuffle(order)
        split = rng.randrange(board.size // 2)

        # an opening with no real chain yet, replayed in index order
        cells = new_state(board.size)
        player = BLACK
        for pos in order[:split]:
            cells[pos] = CellState.BLACK if player == BLACK else CellState.WHITE
            if has_chain(cells, player, 6, 6):
                cells[pos] = CellState.EMPTY
                break
            player = HexPlayerColor(1 - player)
        state, replies = bot.replay(cells)

        for pos in order:
            if cells[pos] != CellState.EMPTY:
                continue
            won = bot.play(state, replies, player, pos)
            if has_chain(state, player, 6, 6):
                assert won
                break
            player = HexPlayerColor(1 - player)
