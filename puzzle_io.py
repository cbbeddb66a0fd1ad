from typing import Any, Dict, Iterator, List

from solver import (
    CHAR_DIRECTIONS,
    DIRECTION_CHARS,
    SIZE,
    Board,
    InvalidPuzzleError,
    build_board,
)

# ----------------------------
# Text format
# ----------------------------
# <num boards>
# per board: <start_y> <start_x> <end_y> <end_x> <num walls> then <y> <x> per wall


def _ints(text: str) -> Iterator[int]:
    for token in text.split():
        try:
            yield int(token)
        except ValueError:
            raise InvalidPuzzleError(f"expected an integer, got {token!r}") from None


def _next(tokens: Iterator[int], what: str) -> int:
    try:
        return next(tokens)
    except StopIteration:
        raise InvalidPuzzleError(f"unexpected end of input while reading {what}") from None


def _count(tokens: Iterator[int], what: str) -> int:
    n = _next(tokens, what)
    if n < 0:
        raise InvalidPuzzleError(f"{what} must not be negative, got {n}")
    return n


def parse_puzzle(text: str, size: int = SIZE) -> List[Board]:
    """
    Parse the whitespace separated puzzle format. Coordinates are given row
    first (y x) and converted to (x, y) boards.
    """
    tokens = _ints(text)
    boards = []

    num_boards = _count(tokens, "number of boards")
    for i in range(num_boards):
        label = f"board {i + 1}"
        start_y = _next(tokens, f"{label} start")
        start_x = _next(tokens, f"{label} start")
        end_y = _next(tokens, f"{label} end")
        end_x = _next(tokens, f"{label} end")

        walls = []
        for _ in range(_count(tokens, f"{label} wall count")):
            y = _next(tokens, f"{label} wall")
            x = _next(tokens, f"{label} wall")
            walls.append((x, y))

        try:
            boards.append(build_board((start_x, start_y), (end_x, end_y), walls, size))
        except InvalidPuzzleError as e:
            raise InvalidPuzzleError(f"{label}: {e}") from None

    extra = sum(1 for _ in tokens)
    if extra:
        raise InvalidPuzzleError(f"{extra} unexpected token(s) after the last board")

    return boards


def format_moves(moves: List[str]) -> str:
    return "".join(DIRECTION_CHARS[m] for m in moves)


def parse_moves(text: str) -> List[str]:
    moves = []
    for c in text.strip().upper():
        if c not in CHAR_DIRECTIONS:
            raise InvalidPuzzleError(f"unknown move {c!r}, expected one of U, D, L, R")
        moves.append(CHAR_DIRECTIONS[c])
    return moves


# ----------------------------
# JSON format
# ----------------------------
# {"start": [x, y], "end": [x, y], "walls": [[x, y], ...]}

def _coord(value: Any, what: str) -> tuple:
    if (not isinstance(value, (list, tuple)) or len(value) != 2
            or not all(isinstance(v, int) and not isinstance(v, bool) for v in value)):
        raise InvalidPuzzleError(f"{what} must be a pair of integers, got {value!r}")
    return tuple(value)


def boards_from_json(data: Any, size: int = SIZE) -> List[Board]:
    if not isinstance(data, list):
        raise InvalidPuzzleError("boards must be a list")

    boards = []
    for i, item in enumerate(data):
        label = f"board {i + 1}"
        if not isinstance(item, dict):
            raise InvalidPuzzleError(f"{label} must be an object")
        walls = item.get("walls", [])
        if not isinstance(walls, list):
            raise InvalidPuzzleError(f"{label} walls must be a list")
        try:
            boards.append(build_board(
                _coord(item.get("start"), "start"),
                _coord(item.get("end"), "end"),
                [_coord(w, "wall") for w in walls],
                size,
            ))
        except InvalidPuzzleError as e:
            raise InvalidPuzzleError(f"{label}: {e}") from None
    return boards


def board_to_json(board: Board) -> Dict[str, Any]:
    return {
        "start": list(board.start),
        "end": list(board.end),
        "walls": [[x, y] for y, row in enumerate(board.grid) for x, wall in enumerate(row) if wall],
    }
