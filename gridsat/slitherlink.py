# slitherlink.py
"""
Slitherlink on top of the generic board/rule/solver layers.

A puzzle is a square grid of clues (None or 0 for a blank cell). The answer is
the edge set of one closed loop in which every clue counts the lines around its
cell.
"""

from gridsat import constants as const
from gridsat.board import BoardState, cell_edges, loop_components, render_board, vertex_degree
from gridsat.logging_utils import get_logger
from gridsat.loop_rules import CONNECTED_LOOP_RULE, NUMBER_CONSTRAINT_RULE, VERTEX_DEGREE_RULE
from gridsat.rules import EDGE_BINARY_RULE
from gridsat.z3_solver import PuzzleSolver, SolverOptions

logger = get_logger("slitherlink")

SLITHERLINK_RULES = [
    EDGE_BINARY_RULE,
    NUMBER_CONSTRAINT_RULE,
    VERTEX_DEGREE_RULE,
    CONNECTED_LOOP_RULE,
]


def normalize_clues(clues):
    return [[const.CELL_BLANK if clue is None else int(clue) for clue in row] for row in clues]


def create_slitherlink_board(clues):
    """An empty-edged board whose cells carry the clues."""
    board = BoardState.empty(len(clues))
    board.cells = normalize_clues(clues)
    return board


def _with_clues(board, clues):
    # Blank cells are unconstrained in the model; show the puzzle's clues instead.
    solved = board.copy()
    solved.cells = normalize_clues(clues)
    return solved


def solve_slitherlink(clues, solver=None):
    """
    Solves a Slitherlink puzzle.

    :param list[list[int|None]] clues: The clue grid.
    :param PuzzleSolver solver: Optional driver to reuse; a new one is made otherwise.
    :returns: The solved board (cells = clues), or None when unsolvable or on error.
    :rtype: BoardState | None
    """
    solver = solver or PuzzleSolver()
    result = solver.solve(create_slitherlink_board(clues), SLITHERLINK_RULES)
    if result.status != const.STATUS_SAT:
        if result.error:
            logger.warning("Slitherlink solve returned %s: %s", result.status, result.error)
        return None
    solution = _with_clues(result.solution, clues)
    logger.debug("Slitherlink solution:\n%s", render_board(solution))
    return solution


def solution_is_unique(clues, solver=None):
    """True when exactly one edge set solves the puzzle."""
    solver = solver or PuzzleSolver()
    options = SolverOptions(timeout=solver.options.timeout, exclusion_scope=const.EXCLUDE_EDGES)
    result = solver.solve_multiple(create_slitherlink_board(clues), SLITHERLINK_RULES,
                                   max_solutions=2, options=options)
    return result.status == const.STATUS_SAT and len(result.solutions) == 1


def check_slitherlink_solution(clues, board):
    """
    Checks a concrete answer without the solver: edges are 0/1, every clue
    matches, every vertex has degree 0 or 2, and the lines form exactly one loop.
    """
    clues = normalize_clues(clues)
    edges = [e for row in board.horizontal_edges + board.vertical_edges for e in row]
    if any(e not in (const.EDGE_OFF, const.EDGE_ON) for e in edges):
        return False
    for r, row in enumerate(clues):
        for c, clue in enumerate(row):
            if clue and sum(cell_edges(board, r, c)) != clue:
                return False
    for r in range(board.size + 1):
        for c in range(board.size + 1):
            if vertex_degree(board, r, c) not in (0, 2):
                return False
    return len(loop_components(board)) == 1
