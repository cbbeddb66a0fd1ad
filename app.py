import random
from flask import Flask, jsonify, request
from flask_socketio import SocketIO, emit
from models import db, Puzzle
from puzzle_io import board_to_json, boards_from_json, format_moves, parse_moves, parse_puzzle
from solver import (
    SIZE,
    Board,
    InvalidPuzzleError,
    PuzzleError,
    UnsolvablePuzzleError,
    build_board,
    is_solved,
    replay,
    solve,
)
from typing import List, Optional, Tuple

# ----------------------------
# Flask + DB + SocketIO Setup
# ----------------------------
app = Flask(__name__)
app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///syncmaze.db"
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
app.config["MAX_BOARDS"] = 4
app.config["RANDOM_BOARDS"] = 2
app.config["WALL_PROB"] = 0.2
app.config.from_prefixed_env("SYNCMAZE")

db.init_app(app)
socketio = SocketIO(app, cors_allowed_origins="*")  # allow CORS for testing

with app.app_context():
    db.create_all()

rng = random.Random()

# Give up on random generation after this many unusable puzzles
GENERATE_ATTEMPTS = 1000


class UnknownPuzzleError(PuzzleError, LookupError):
    """Raised when a puzzle id has no stored record."""


# ----------------------------
# Puzzle generation
# ----------------------------
def generate_puzzle(num_boards: int, wall_prob: float, rng: random.Random) -> List[Board]:
    """
    Random boards: start and end anywhere, every other cell a wall with
    probability wall_prob.
    """
    cells = [(x, y) for y in range(SIZE) for x in range(SIZE)]
    boards = []
    for _ in range(num_boards):
        start = rng.choice(cells)
        end = rng.choice(cells)
        walls = [c for c in cells if c not in (start, end) and rng.random() < wall_prob]
        boards.append(build_board(start, end, walls))
    return boards


def generate_solvable_puzzle(num_boards: int, wall_prob: float,
                             rng: random.Random) -> Tuple[List[Board], List[str]]:
    """Keep generating until a puzzle has a non-empty solution."""
    if not 0 <= wall_prob < 1:
        raise InvalidPuzzleError(f"wall probability must be in [0, 1), got {wall_prob}")
    check_board_count(num_boards, minimum=1)

    for _ in range(GENERATE_ATTEMPTS):
        boards = generate_puzzle(num_boards, wall_prob, rng)
        try:
            moves = solve(boards)
        except UnsolvablePuzzleError:
            continue
        if moves:  # non-empty solution found
            return boards, moves

    raise UnsolvablePuzzleError(
        f"no solvable puzzle found in {GENERATE_ATTEMPTS} attempts "
        f"({num_boards} board(s), wall probability {wall_prob})"
    )


# ----------------------------
# Solving + bookkeeping
# ----------------------------
def check_board_count(num_boards: int, minimum: int = 0):
    limit = app.config["MAX_BOARDS"]
    if not minimum <= num_boards <= limit:
        raise InvalidPuzzleError(f"number of boards must be between {minimum} and {limit}, got {num_boards}")


def record_puzzle(boards: List[Board], moves: Optional[List[str]], source: str = "submitted") -> Puzzle:
    puzzle = Puzzle(
        source=source,
        boards=[board_to_json(b) for b in boards],
        status="solved" if moves is not None else "unsolvable",
        solution=format_moves(moves) if moves is not None else None,
    )
    db.session.add(puzzle)
    db.session.commit()
    return puzzle


def solve_and_record(boards: List[Board]) -> Tuple[Puzzle, List[str]]:
    check_board_count(len(boards))
    try:
        moves = solve(boards)
    except UnsolvablePuzzleError:
        puzzle = record_puzzle(boards, None)
        app.logger.info("Puzzle %s is unsolvable", puzzle.id)
        raise
    puzzle = record_puzzle(boards, moves)
    app.logger.info("Solved puzzle %s: %s", puzzle.id, puzzle.solution)
    return puzzle, moves


def is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def object_payload(data) -> dict:
    """Missing payloads count as empty; anything but a JSON object is rejected."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidPuzzleError(f"payload must be a JSON object, got {type(data).__name__}")
    return data


def solution_payload(puzzle: Puzzle, moves: List[str]) -> dict:
    return {
        "puzzle_id": puzzle.id,
        "moves": moves,
        "solution": puzzle.solution,
        "length": len(moves),
    }


def new_puzzle(num_boards: int) -> dict:
    boards, moves = generate_solvable_puzzle(num_boards, app.config["WALL_PROB"], rng)
    puzzle = record_puzzle(boards, moves, source="generated")
    app.logger.info("Generated puzzle %s with %d board(s), optimal length %d",
                    puzzle.id, num_boards, len(moves))
    return {"puzzle_id": puzzle.id, "boards": puzzle.boards, "length": len(moves)}


def check_answer(puzzle_id, moves_text: str) -> dict:
    if not is_int(puzzle_id):
        raise InvalidPuzzleError(f"puzzle_id must be an integer, got {puzzle_id!r}")
    puzzle = db.session.get(Puzzle, puzzle_id)
    if puzzle is None:
        raise UnknownPuzzleError(f"unknown puzzle: {puzzle_id}")

    boards = boards_from_json(puzzle.boards)
    moves = parse_moves(moves_text)
    final = replay(boards, moves)[-1]
    solved = is_solved(boards, final)
    optimal = solved and puzzle.solution is not None and len(moves) == len(puzzle.solution)
    return {"puzzle_id": puzzle.id, "solved": solved, "optimal": optimal, "length": len(moves)}


# ----------------------------
# HTTP
# ----------------------------
@app.errorhandler(InvalidPuzzleError)
def handle_invalid_puzzle(e):
    return jsonify({"error": str(e)}), 400


@app.errorhandler(UnsolvablePuzzleError)
def handle_unsolvable_puzzle(e):
    return jsonify({"error": str(e)}), 422


@app.errorhandler(UnknownPuzzleError)
def handle_unknown_puzzle(e):
    return jsonify({"error": str(e)}), 404


@app.route("/solve", methods=["POST"])
def solve_route():
    """
    JSON body: {"boards": [{"start": [x, y], "end": [x, y], "walls": [[x, y], ...]}, ...]}
    Any other body is read as the plain text puzzle format.
    """
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise InvalidPuzzleError("body must be a JSON object with a 'boards' list")
        boards = boards_from_json(data.get("boards"))
    else:
        boards = parse_puzzle(request.get_data(as_text=True))

    puzzle, moves = solve_and_record(boards)
    return jsonify(solution_payload(puzzle, moves))


@app.route("/puzzles/<int:puzzle_id>", methods=["GET"])
def get_puzzle(puzzle_id):
    puzzle = db.session.get(Puzzle, puzzle_id)
    if puzzle is None:
        raise UnknownPuzzleError(f"unknown puzzle: {puzzle_id}")
    return jsonify(puzzle.to_dict())


@app.route("/puzzles/random", methods=["POST"])
def random_puzzle():
    num_boards = request.args.get("boards", default=app.config["RANDOM_BOARDS"], type=int)
    return jsonify(new_puzzle(num_boards))


@app.route("/puzzles/<int:puzzle_id>/check", methods=["POST"])
def check_route(puzzle_id):
    data = object_payload(request.get_json(silent=True))
    return jsonify(check_answer(puzzle_id, str(data.get("moves", ""))))


# ----------------------------
# Socket events
# ----------------------------
@socketio.on("connect")
def handle_connect():
    emit("server_msg", {"message": "Welcome!"})


@socketio.on("solve")
def handle_solve(data):
    """
    Client emits: { "boards": [...] } (same shape as POST /solve)
    """
    try:
        boards = boards_from_json(object_payload(data).get("boards"))
        puzzle, moves = solve_and_record(boards)
    except PuzzleError as e:
        emit("solve_error", {"error": str(e)})
        return
    emit("solution", solution_payload(puzzle, moves))


@socketio.on("new_puzzle")
def handle_new_puzzle(data=None):
    """
    Client emits: { "boards": 2 } (optional)
    """
    try:
        num_boards = object_payload(data).get("boards", app.config["RANDOM_BOARDS"])
        if not is_int(num_boards):
            raise InvalidPuzzleError(f"boards must be an integer, got {num_boards!r}")
        payload = new_puzzle(num_boards)
    except PuzzleError as e:
        emit("solve_error", {"error": str(e)})
        return
    emit("puzzle", payload)


@socketio.on("check")
def handle_check(data):
    """
    Client emits: { "puzzle_id": 1, "moves": "DRRU" }
    """
    try:
        data = object_payload(data)
        result = check_answer(data.get("puzzle_id"), str(data.get("moves", "")))
    except PuzzleError as e:
        emit("solve_error", {"error": str(e)})
        return
    emit("check_result", result)


@socketio.on("disconnect")
def handle_disconnect(*args):
    app.logger.info("Client disconnected")


# ----------------------------
# Run server
# ----------------------------
if __name__ == "__main__":
    socketio.run(app, debug=True, port=5000)
