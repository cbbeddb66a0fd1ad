import logging
from collections import deque
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

SIZE = 5

# Directions (dx, dy) and name. Iteration order is the tie-break between
# equal-length solutions and must stay Up, Down, Left, Right.
DIRECTIONS = {
    "Up": (0, -1),
    "Down": (0, 1),
    "Left": (-1, 0),
    "Right": (1, 0),
}

DIRECTION_CHARS = {"Up": "U", "Down": "D", "Left": "L", "Right": "R"}
CHAR_DIRECTIONS = {c: name for name, c in DIRECTION_CHARS.items()}


class PuzzleError(Exception):
    """Base class for puzzles the solver rejects."""


class InvalidPuzzleError(PuzzleError, ValueError):
    """Raised when a board description is malformed or out of bounds."""


class UnsolvablePuzzleError(PuzzleError):
    """Raised when no command sequence puts every token on its target."""


class Pos(NamedTuple):
    x: int
    y: int


class Board(NamedTuple):
    grid: Tuple[Tuple[bool, ...], ...]  # grid[y][x], True = wall
    start: Pos
    end: Pos

    @property
    def size(self) -> int:
        return len(self.grid)


Config = Tuple[Pos, ...]


def _checked_pos(coord: Sequence[int], size: int, what: str) -> Pos:
    x, y = coord
    if not (0 <= x < size and 0 <= y < size):
        raise InvalidPuzzleError(f"{what} ({x}, {y}) is outside the {size}x{size} grid")
    return Pos(x, y)


def build_board(start: Sequence[int], end: Sequence[int],
                walls: Iterable[Sequence[int]] = (), size: int = SIZE) -> Board:
    """
    Build an immutable board from an all-open grid, marking each wall cell.
    Coordinates are (x, y); anything outside [0, size-1] is rejected.
    """
    start_pos = _checked_pos(start, size, "start")
    end_pos = _checked_pos(end, size, "end")

    grid = [[False] * size for _ in range(size)]
    for wall in walls:
        x, y = _checked_pos(wall, size, "wall")
        grid[y][x] = True

    return Board(tuple(tuple(row) for row in grid), start_pos, end_pos)


def is_wall(board: Board, pos: Pos) -> bool:
    return board.grid[pos.y][pos.x]


def move_token(board: Board, pos: Pos, direction: str) -> Pos:
    """
    Move one token a single step. The board edge is a soft stop (coordinates
    are clamped); a wall cell leaves the token where it was.
    """
    dx, dy = DIRECTIONS[direction]
    last = board.size - 1
    candidate = Pos(min(max(pos.x + dx, 0), last), min(max(pos.y + dy, 0), last))
    if is_wall(board, candidate):
        return pos
    return candidate


def step(boards: Sequence[Board], positions: Config, direction: str) -> Config:
    """Apply the same command to every token, each on its own board."""
    return tuple(move_token(board, pos, direction) for board, pos in zip(boards, positions))


def is_solved(boards: Sequence[Board], positions: Config) -> bool:
    return all(board.end == pos for board, pos in zip(boards, positions))


def _unwind(parents: List[Tuple[int, Optional[str]]], index: int) -> List[str]:
    moves = []
    while index:
        index, direction = parents[index]
        moves.append(direction)
    moves.reverse()
    return moves


def solve(boards: Sequence[Board],
          on_expand: Optional[Callable[[Config], None]] = None) -> List[str]:
    """
    BFS over joint configurations.

    Every discovered configuration gets a slot in ``parents`` holding
    (predecessor slot, command); the frontier only carries slot numbers, so
    the answer is rebuilt once from the terminal configuration.

    Returns the direction names of a shortest solution ([] when the start is
    already solved). Raises UnsolvablePuzzleError when the frontier empties.
    """
    if not boards:
        return []

    start = tuple(board.start for board in boards)
    if is_solved(boards, start):
        return []

    trace = logger.isEnabledFor(logging.DEBUG)

    configs: List[Config] = [start]
    parents: List[Tuple[int, Optional[str]]] = [(0, None)]
    visited: Dict[Config, int] = {start: 0}
    q = deque([0])

    while q:
        index = q.popleft()
        positions = configs[index]
        if on_expand is not None:
            on_expand(positions)
        if trace:
            logger.debug("Looking at %s via %s", positions, _unwind(parents, index))

        for direction in DIRECTIONS:
            new_positions = step(boards, positions, direction)

            # win check comes before dedup
            if is_solved(boards, new_positions):
                moves = _unwind(parents, index)
                moves.append(direction)
                logger.info("Solved %d board(s) in %d move(s), %d configurations seen",
                            len(boards), len(moves), len(configs))
                return moves

            if new_positions in visited:
                continue

            new_index = len(configs)
            visited[new_positions] = new_index
            configs.append(new_positions)
            parents.append((index, direction))
            if trace:
                logger.debug("Pushing %s", new_positions)
            q.append(new_index)

    logger.info("No solution after %d configurations", len(configs))
    raise UnsolvablePuzzleError(
        f"no command sequence solves all {len(boards)} board(s) "
        f"({len(configs)} reachable configurations explored)"
    )


def replay(boards: Sequence[Board], moves: Iterable[str]) -> List[Config]:
    """
    Configurations visited while applying ``moves`` from the start; index 0
    is the start configuration.
    """
    positions = tuple(board.start for board in boards)
    history = [positions]
    for direction in moves:
        if direction not in DIRECTIONS:
            raise InvalidPuzzleError(f"unknown direction: {direction!r}")
        positions = step(boards, positions, direction)
        history.append(positions)
    return history
