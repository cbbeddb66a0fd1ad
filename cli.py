import argparse
import logging
import sys
from typing import List, Optional

from puzzle_io import format_moves, parse_puzzle
from solver import PuzzleError, solve

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="syncmaze",
        description="Find the shortest command sequence that solves every board at once.",
    )
    parser.add_argument(
        "puzzle",
        nargs="?",
        type=argparse.FileType("r"),
        default=sys.stdin,
        help="Puzzle file (default: stdin).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Trace every search step.")
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(level)

    text = ns.puzzle.read()
    if ns.puzzle is not sys.stdin:
        ns.puzzle.close()

    try:
        boards = parse_puzzle(text)
        logger.debug("Loaded %d board(s): %s", len(boards), boards)
        moves = solve(boards)
    except PuzzleError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(format_moves(moves))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
