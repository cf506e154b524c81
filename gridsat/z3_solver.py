"""**********************************************************************************
 * Title: z3_solver.py
 *
 * -------------------------------------------------------------------------------
 * Description:
 * This module drives the Z3 theorem prover for every grid puzzle. The
 * PuzzleSolver class turns an initial board and a list of rules into z3
 * constraints, asks z3 for a model, and converts the model back into a concrete
 * board. It can enumerate several solutions by blocking each solution found
 * and checking again, and it can reject answers whose lines split into
 * several loops by blocking them the same way. Infeasibility, timeouts and
 * errors are all reported through a SolverResult; nothing is raised to the
 * caller.
 **********************************************************************************"""

# --- IMPORTS ---
import time
from dataclasses import dataclass
from typing import List, Optional

from z3 import Context, Or, Solver, sat, unsat

from gridsat import constants as const
from gridsat.board import (
    BoardState, board_variable_to_state, create_board_variable, has_valid_shape, loop_components,
)
from gridsat.logging_utils import get_logger
from gridsat.rules import create_given_edges_rule, create_given_values_rule

logger = get_logger("z3_solver")


# --- HELPER FUNCTIONS ---
def format_duration(seconds):
    """
    Formats a time duration in seconds into a more human-readable string.

    :param float seconds: The duration in seconds to format.
    :returns: The formatted time string (e.g., "1.234 s", "5.67 ms", "1 min 30.00 s").
    :rtype: str
    """
    if seconds >= 60: return f"{int(seconds//60)} min {seconds%60:.2f} s"
    if seconds >= 1: return f"{seconds:.3f} s"
    return f"{seconds*1000:.2f} ms"


def _elapsed_ms(start_time):
    return (time.monotonic() - start_time) * 1000


# --- OPTIONS & RESULTS ---
@dataclass
class SolverOptions:
    timeout: int = const.DEFAULT_TIMEOUT_MS            # milliseconds, passed to z3
    max_solutions: int = const.DEFAULT_MAX_SOLUTIONS   # default limit for solve_multiple
    context_name: str = const.DEFAULT_CONTEXT_NAME
    pin_zero_edges: bool = False
    exclusion_scope: str = const.EXCLUDE_CELLS
    reject_split_loops: bool = False

    @classmethod
    def from_dict(cls, data):
        """Builds options from a JSON object with camelCase keys; unknown keys are ignored."""
        data = data or {}
        keys = {
            'timeout': 'timeout', 'maxSolutions': 'max_solutions', 'contextName': 'context_name',
            'pinZeroEdges': 'pin_zero_edges', 'exclusionScope': 'exclusion_scope',
            'rejectSplitLoops': 'reject_split_loops',
        }
        return cls(**{attr: data[key] for key, attr in keys.items() if key in data})


@dataclass
class SolverResult:
    status: str
    execution_time: float
    constraint_count: int
    solution: Optional[BoardState] = None
    solutions: Optional[List[BoardState]] = None
    error: Optional[str] = None

    def to_dict(self):
        result = {
            'status': self.status,
            'executionTime': self.execution_time,
            'constraintCount': self.constraint_count,
        }
        if self.solution is not None:
            result['solution'] = self.solution.to_dict()
        if self.solutions is not None:
            result['solutions'] = [s.to_dict() for s in self.solutions]
        if self.error is not None:
            result['error'] = self.error
        return result


# --- SOLVER CLASS ---
class PuzzleSolver:
    """
    Solves boards against a rule set with the Z3 SMT solver.

    One instance owns one z3 Context, created on first use. Calls on the same
    instance must not overlap; use one instance per concurrent solve.
    """
    def __init__(self, options=None):
        """
        :param SolverOptions options: Defaults for every solve on this instance.
        """
        self.options = options or SolverOptions()
        self.ctx = None
        self.is_initialized = False

    def _ensure_initialized(self):
        if not self.is_initialized:
            self.ctx = Context()
            self.is_initialized = True
            logger.debug("Created z3 context '%s'", self.options.context_name)

    def _build(self, initial_board, rules, options):
        """Materializes the symbolic board and loads every constraint into a fresh z3 Solver."""
        self._ensure_initialized()
        if self.ctx is None:
            raise RuntimeError("Z3 context not initialized")
        board_var = create_board_variable(initial_board, self.ctx)

        all_rules = list(rules) + [create_given_values_rule(initial_board)]
        if any(rule.uses_edges for rule in rules):
            all_rules.append(create_given_edges_rule(initial_board, pin_zeros=options.pin_zero_edges))

        constraints = []
        for rule in all_rules:
            constraints.extend(rule.get_constraints(board_var, self.ctx))

        s = Solver(ctx=self.ctx)
        s.set("timeout", int(options.timeout))
        for constraint in constraints:
            s.add(constraint)
        return s, board_var, len(constraints)

    def _check(self, s, board_var, options):
        """
        Runs one check and returns ``(check_result, solution)``.

        With ``reject_split_loops`` a model whose lines form several loops is
        blocked and the check repeated, until a single-loop model, unsat, or
        unknown comes back.
        """
        while True:
            result = s.check()
            if result != sat:
                return result, None
            solution = board_variable_to_state(board_var, s.model())
            if not options.reject_split_loops or len(loop_components(solution)) <= 1:
                return result, solution
            logger.debug("Rejecting a model with %d separate loops", len(loop_components(solution)))
            s.add(self._block_solution(board_var, solution, const.EXCLUDE_EDGES))

    @staticmethod
    def _block_solution(board_var, solution, scope):
        """The next solution must differ from ``solution`` somewhere in ``scope``."""
        pairs = []
        if scope in (const.EXCLUDE_CELLS, const.EXCLUDE_ALL):
            pairs += [(board_var.cells, solution.cells)]
        if scope in (const.EXCLUDE_EDGES, const.EXCLUDE_ALL):
            pairs += [(board_var.horizontal_edges, solution.horizontal_edges),
                      (board_var.vertical_edges, solution.vertical_edges)]
        if not pairs:
            raise ValueError(f"Unknown exclusion scope: {scope}")
        return Or([var != value
                   for symbolic, concrete in pairs
                   for var_row, value_row in zip(symbolic, concrete)
                   for var, value in zip(var_row, value_row)])

    def solve(self, initial_board, rules, options=None):
        """
        Finds one board satisfying ``rules`` and the values given in ``initial_board``.

        :param BoardState initial_board: The puzzle; nonzero cells (and edges, for
                                         edge rules) are pinned.
        :param list[Rule] rules: The rules to apply.
        :param SolverOptions options: Overrides the instance options for this call.
        :returns: status sat / unsat / timeout / error, plus the solution when sat.
        :rtype: SolverResult
        """
        options = options or self.options
        start_time = time.monotonic()
        try:
            s, board_var, constraint_count = self._build(initial_board, rules, options)
            check_result, solution = self._check(s, board_var, options)
            execution_time = _elapsed_ms(start_time)
            logger.info("Solve finished: %s, %d constraints, %s",
                        check_result, constraint_count, format_duration(execution_time / 1000))

            if check_result == sat:
                return SolverResult(const.STATUS_SAT, execution_time, constraint_count, solution=solution)
            if check_result == unsat:
                return SolverResult(const.STATUS_UNSAT, execution_time, constraint_count)
            return SolverResult(const.STATUS_TIMEOUT, execution_time, constraint_count)
        except Exception as e:
            logger.error("Solve failed: %s", e)
            return SolverResult(const.STATUS_ERROR, _elapsed_ms(start_time), 0, error=str(e))

    def solve_multiple(self, initial_board, rules, max_solutions=None, options=None):
        """
        Collects up to ``max_solutions`` distinct solutions.

        After each solution a clause demanding a difference in at least one
        position (cells by default, see ``SolverOptions.exclusion_scope``) is
        added before checking again. Stops at the limit or the first non-sat check.

        :returns: sat with ``solution`` (the first) and ``solutions`` when at least
                  one was found, else unsat; error if anything raised.
        :rtype: SolverResult
        """
        options = options or self.options
        limit = max_solutions if max_solutions is not None else options.max_solutions
        start_time = time.monotonic()
        try:
            s, board_var, constraint_count = self._build(initial_board, rules, options)
            solutions = []
            for _ in range(limit):
                check_result, solution = self._check(s, board_var, options)
                if check_result != sat:
                    break
                solutions.append(solution)
                s.add(self._block_solution(board_var, solution, options.exclusion_scope))

            execution_time = _elapsed_ms(start_time)
            logger.info("Found %d solution(s) (limit %d), %d constraints, %s",
                        len(solutions), limit, constraint_count, format_duration(execution_time / 1000))
            if solutions:
                return SolverResult(const.STATUS_SAT, execution_time, constraint_count,
                                    solution=solutions[0], solutions=solutions)
            return SolverResult(const.STATUS_UNSAT, execution_time, constraint_count)
        except Exception as e:
            logger.error("Multiple solve failed: %s", e)
            return SolverResult(const.STATUS_ERROR, _elapsed_ms(start_time), 0, error=str(e))

    def validate_solution(self, board, rules=()):
        """
        Cheap structural check of a concrete board: shapes match ``size`` and no
        nonzero cell is below 1. ``rules`` are accepted for interface symmetry.
        """
        try:
            if not has_valid_shape(board):
                return False
            return all(cell == const.CELL_BLANK or cell >= 1 for row in board.cells for cell in row)
        except (AttributeError, TypeError):
            return False

    def dispose(self):
        """Drops the z3 context; the next solve creates a new one."""
        self.is_initialized = False
        self.ctx = None
