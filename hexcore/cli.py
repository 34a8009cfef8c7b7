# cli.py
import argparse
import logging
from collections import Counter

from . import BOTS, GameOptions, HexGame, HexPlayerColor, SearchConfig, make_bot
from .board import HexBoard
from .config import MAX_BOARD_SIZE, MIN_BOARD_SIZE

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="hexcore-match", description="Play automated Hex matches between bots.")
    ap.add_argument("--width", type=int, default=7)
    ap.add_argument("--height", type=int, default=7)
    ap.add_argument("--black", choices=sorted(BOTS), default="mcts")
    ap.add_argument("--white", choices=sorted(BOTS), default="random")
    ap.add_argument("--games", type=int, default=1)
    ap.add_argument("--reverse", action="store_true", help="misere rules: connecting loses")
    ap.add_argument("--dark", action="store_true", help="players only see their own stones")
    ap.add_argument("--swap", action="store_true", help="second player may take over the opening stone")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--simulations", type=int, default=SearchConfig.max_simulations)
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def should_swap(board: HexBoard, pos: int) -> bool:
    """White takes over any opening off the outer ring of the board."""
    x, y = board.xy(pos)
    return 0 < x < board.width - 1 and 0 < y < board.height - 1


def play_match(options: GameOptions, black: str, white: str, seed=None, simulations=None) -> HexPlayerColor:
    game = HexGame(options)
    config = SearchConfig(max_simulations=simulations) if simulations else None
    bots = {}
    for i, (color, name) in enumerate(((HexPlayerColor.BLACK, black), (HexPlayerColor.WHITE, white))):
        kwargs = {"seed": None if seed is None else seed + i}
        if name != "random" and config is not None:
            kwargs["config"] = config
        bots[color] = make_bot(name, game.board, options, **kwargs)

    while not game.over:
        if game.can_swap() and should_swap(game.board, game.history[0].pos):
            game.swap()
            continue
        game.bot_move(bots[game.current])
    return game.winner


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    options = GameOptions(
        width=args.width, height=args.height, reverse=args.reverse, swap_rule=args.swap, dark=args.dark,
    )
    try:
        options.validate()
    except ValueError as e:
        raise SystemExit(f"invalid options (board {MIN_BOARD_SIZE}..{MAX_BOARD_SIZE}): {e}")

    tally = Counter()
    for g in range(args.games):
        seed = None if args.seed is None else args.seed + 2 * g
        try:
            winner = play_match(options, args.black, args.white, seed=seed, simulations=args.simulations)
        except ValueError as e:
            raise SystemExit(f"cannot play: {e}")
        tally[winner] += 1
        logger.info("game %d/%d: %s (%s) wins", g + 1, args.games, winner.name,
                    args.black if winner == HexPlayerColor.BLACK else args.white)

    print(f"black {args.black}: {tally[HexPlayerColor.BLACK]}  white {args.white}: {tally[HexPlayerColor.WHITE]}")
