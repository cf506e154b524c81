"""
gridsat

Grid puzzles (Slitherlink and composable number-grid rules) encoded as
constraint problems and solved with the Z3 SMT solver.
"""

from .board import BoardState, BoardVariable, board_variable_to_state, create_board_variable
from .rules import Rule, create_given_edges_rule, create_given_values_rule, get_rules
from .z3_solver import PuzzleSolver, SolverOptions, SolverResult
from .slitherlink import SLITHERLINK_RULES, solve_slitherlink

__version__ = "1.0.0"
__all__ = [
    'BoardState',
    'BoardVariable',
    'board_variable_to_state',
    'create_board_variable',
    'Rule',
    'create_given_edges_rule',
    'create_given_values_rule',
    'get_rules',
    'PuzzleSolver',
    'SolverOptions',
    'SolverResult',
    'SLITHERLINK_RULES',
    'solve_slitherlink',
]
