"""**********************************************************************************
 * Title: rules.py
 *
 * -------------------------------------------------------------------------------
 * Description:
 * Composable constraint rules. A Rule is a small record holding an id, a
 * human-readable name and description, and a pure function that takes a
 * symbolic board plus its z3 context and returns a list of z3 boolean
 * constraints. Rules carry no state, so any subset can be combined for a puzzle
 * by concatenating their constraint lists. This module holds the number-grid
 * rules (fill, uniqueness, sort, magic square), the edge binary rule, the
 * "given values / given edges" pinning rules built from an input board, and the
 * id registry used by the web API. The loop rules live in loop_rules.py.
 **********************************************************************************"""

# --- IMPORTS ---
from dataclasses import dataclass
from typing import Callable, List

from z3 import And, BoolVal, Distinct, Or

from gridsat import constants as const


# --- RULE RECORD ---
@dataclass(frozen=True)
class Rule:
    """A named constraint emitter; ``uses_edges`` marks rules that reason about edges."""
    id: str
    name: str
    description: str
    get_constraints: Callable
    uses_edges: bool = False

    def describe(self):
        return {'id': self.id, 'name': self.name, 'description': self.description}


def _all_of(constraints, ctx):
    """And() over a possibly empty list (an empty list is trivially true)."""
    return And(constraints) if constraints else BoolVal(True, ctx)


def _columns(cells):
    return [[row[c] for row in cells] for c in range(len(cells[0]))] if cells else []


def _monotonic(line, ctx):
    """The line is non-decreasing or non-increasing."""
    ascending = [line[i] <= line[i + 1] for i in range(len(line) - 1)]
    descending = [line[i] >= line[i + 1] for i in range(len(line) - 1)]
    return Or(_all_of(ascending, ctx), _all_of(descending, ctx))


# --- NUMBER GRID RULES ---
def _number_fill(board_var, ctx):
    return [v >= 1 for row in board_var.cells for v in row]


def _row_uniqueness(board_var, ctx):
    return [Distinct(row) for row in board_var.cells]


def _column_uniqueness(board_var, ctx):
    return [Distinct(column) for column in _columns(board_var.cells)]


def _row_sort(board_var, ctx):
    return [_monotonic(row, ctx) for row in board_var.cells]


def _column_sort(board_var, ctx):
    return [_monotonic(column, ctx) for column in _columns(board_var.cells)]


def _magic_square(board_var, ctx):
    n = board_var.size
    flat = [v for row in board_var.cells for v in row]
    constraints = [Distinct(flat)]
    constraints += [And(v >= 1, v <= n * n) for v in flat]

    target = sum(board_var.cells[0][1:], board_var.cells[0][0])
    lines = board_var.cells[1:] + _columns(board_var.cells)
    lines.append([board_var.cells[i][i] for i in range(n)])
    lines.append([board_var.cells[i][n - 1 - i] for i in range(n)])
    for line in lines:
        constraints.append(sum(line[1:], line[0]) == target)
    return constraints


# --- EDGE RULES ---
def _edge_binary(board_var, ctx):
    return [And(e >= const.EDGE_OFF, e <= const.EDGE_ON) for e in board_var.all_edges()]


NUMBER_FILL_RULE = Rule(
    const.NUMBER_FILL_RULE_ID, "Number fill",
    "Every cell holds a number of at least 1.", _number_fill)
ROW_UNIQUENESS_RULE = Rule(
    const.ROW_UNIQUENESS_RULE_ID, "Row uniqueness",
    "No number repeats within a row.", _row_uniqueness)
COLUMN_UNIQUENESS_RULE = Rule(
    const.COLUMN_UNIQUENESS_RULE_ID, "Column uniqueness",
    "No number repeats within a column.", _column_uniqueness)
ROW_SORT_RULE = Rule(
    const.ROW_SORT_RULE_ID, "Row sort",
    "Every row is sorted in ascending or descending order.", _row_sort)
COLUMN_SORT_RULE = Rule(
    const.COLUMN_SORT_RULE_ID, "Column sort",
    "Every column is sorted in ascending or descending order.", _column_sort)
MAGIC_SQUARE_RULE = Rule(
    const.MAGIC_SQUARE_RULE_ID, "Magic square",
    "Cells hold 1..N^2 once each; rows, columns and both diagonals share one sum.",
    _magic_square)
EDGE_BINARY_RULE = Rule(
    const.EDGE_BINARY_RULE_ID, "Edge binary",
    "Every edge is either 0 (no line) or 1 (line).", _edge_binary, uses_edges=True)


# --- GIVEN VALUE RULES (built from the input board) ---
def create_given_values_rule(initial_state):
    """
    Builds the rule pinning every nonzero cell of ``initial_state``.

    :param BoardState initial_state: The puzzle as entered; 0 means blank.
    :returns: A rule whose constraints fix the given cells.
    :rtype: Rule
    """
    def get_constraints(board_var, ctx):
        return [board_var.cells[r][c] == initial_state.cells[r][c]
                for r in range(initial_state.size)
                for c in range(initial_state.size)
                if initial_state.cells[r][c] != const.CELL_BLANK]

    return Rule(const.GIVEN_VALUES_RULE_ID, "Given values",
                "Cells given in the initial board keep their values.", get_constraints)


def create_given_edges_rule(initial_state, pin_zeros=False):
    """
    Builds the rule pinning the edges of ``initial_state``.

    By default only edges set in the input are pinned and zero edges stay free.
    With ``pin_zeros`` every edge, zero or not, is fixed to its input value.

    :param BoardState initial_state: The puzzle as entered.
    :param bool pin_zeros: Also pin edges whose input value is 0.
    :returns: A rule whose constraints fix the given edges.
    :rtype: Rule
    """
    def get_constraints(board_var, ctx):
        constraints = []
        for given, symbolic in ((initial_state.horizontal_edges, board_var.horizontal_edges),
                                (initial_state.vertical_edges, board_var.vertical_edges)):
            for r, row in enumerate(given):
                for c, value in enumerate(row):
                    if value != const.EDGE_OFF or pin_zeros:
                        constraints.append(symbolic[r][c] == value)
        return constraints

    return Rule(const.GIVEN_EDGES_RULE_ID, "Given edges",
                "Edges given in the initial board keep their values.", get_constraints,
                uses_edges=True)


# --- REGISTRY ---
def _registry():
    # Imported here: loop_rules builds on this module.
    from gridsat.loop_rules import (
        CONNECTED_LOOP_RULE, NUMBER_CONSTRAINT_RULE, SINGLE_LOOP_RULE, VERTEX_DEGREE_RULE,
    )
    rules = [
        NUMBER_FILL_RULE, ROW_UNIQUENESS_RULE, COLUMN_UNIQUENESS_RULE, ROW_SORT_RULE,
        COLUMN_SORT_RULE, MAGIC_SQUARE_RULE, EDGE_BINARY_RULE, NUMBER_CONSTRAINT_RULE,
        VERTEX_DEGREE_RULE, SINGLE_LOOP_RULE, CONNECTED_LOOP_RULE,
    ]
    return {rule.id: rule for rule in rules}


def all_rules() -> List[Rule]:
    return list(_registry().values())


def get_rules(rule_ids) -> List[Rule]:
    """Resolves rule ids to rules; raises KeyError naming the first unknown id."""
    registry = _registry()
    missing = [rule_id for rule_id in rule_ids if rule_id not in registry]
    if missing:
        raise KeyError(f"Unknown rule id: {missing[0]}")
    return [registry[rule_id] for rule_id in rule_ids]
