"""**********************************************************************************
 * Title: loop_rules.py
 *
 * -------------------------------------------------------------------------------
 * Description:
 * Rules for loop-drawing puzzles such as Slitherlink, where the answer is a set
 * of edges forming one simple closed loop.
 *
 * The local rules are easy: a clue counts the lines around its cell, and every
 * lattice vertex has degree 0 (not on the loop) or 2 (the loop passes through).
 * Degrees alone still admit several disjoint loops, so the global rules add one
 * integer label per vertex:
 *
 *   - SINGLE_LOOP_RULE labels on-loop vertices with a distance from a single
 *     root and asks every on-loop vertex for a neighbour one step nearer or
 *     farther (or the root/closure pair). A loop without the root can satisfy
 *     this with alternating labels (1, 2, 1, 2, ...), so this rule does NOT rule
 *     out disjoint loops on its own.
 *   - CONNECTED_LOOP_RULE labels vertices with a rank and requires every
 *     non-root on-loop vertex to have a neighbour of rank exactly one less. The
 *     lowest-ranked vertex of a loop without the root has no such neighbour, so
 *     only the loop holding the root can exist.
 **********************************************************************************"""

# --- IMPORTS ---
from z3 import And, BoolVal, If, Implies, Int, IntVal, Not, Or, Sum

from gridsat import constants as const
from gridsat.board import cell_edges, edge_between, vertex_edges, vertex_neighbors
from gridsat.rules import Rule


# --- HELPERS ---
def is_degree2(board_var, ctx, row, col):
    """The z3 condition "vertex (row, col) has exactly two active edges"."""
    edges = vertex_edges(board_var, row, col)
    if not edges:
        return BoolVal(False, ctx)
    return Sum(edges) == 2


def has_edge_between(board_var, ctx, a, b):
    """The z3 condition "the edge joining vertices a and b is active"."""
    edge = edge_between(board_var, a, b)
    if edge is None:
        return BoolVal(False, ctx)
    return edge == const.EDGE_ON


def _vertices(size):
    return [(p, q) for p in range(size + 1) for q in range(size + 1)]


def _root_count(on_loop, label, ctx):
    return Sum([If(And(on_loop[v], label[v] == 0), IntVal(1, ctx), IntVal(0, ctx)) for v in on_loop])


# --- LOCAL RULES ---
def _number_constraint(board_var, ctx):
    constraints = []
    for r in range(board_var.size):
        for c in range(board_var.size):
            cell = board_var.cells[r][c]
            constraints.append(And(cell >= const.MIN_CLUE, cell <= const.MAX_CLUE))
            constraints.append(Implies(cell > 0, Sum(cell_edges(board_var, r, c)) == cell))
    return constraints


def _vertex_degree(board_var, ctx):
    constraints = []
    for row, col in _vertices(board_var.size):
        edges = vertex_edges(board_var, row, col)
        if edges:
            degree = Sum(edges)
            constraints.append(Or(degree == 0, degree == 2))
    return constraints


# --- GLOBAL RULES ---
def _single_loop(board_var, ctx):
    size = board_var.size
    vertices = _vertices(size)
    on_loop = {v: is_degree2(board_var, ctx, *v) for v in vertices}
    dist = {(p, q): Int(f"dist_{p}_{q}", ctx) for p, q in vertices}
    constraints = []

    # Distances run from the off-loop sentinel up to a safe bound on loop length.
    for v in vertices:
        constraints.append(dist[v] >= const.OFF_LOOP)
        constraints.append(dist[v] <= 2 * (size + 1))
        constraints.append(Implies(Not(on_loop[v]), dist[v] == const.OFF_LOOP))

    # One root when a loop exists, none otherwise.
    has_loop = Or(list(on_loop.values()))
    root_count = _root_count(on_loop, dist, ctx)
    constraints.append(Implies(has_loop, root_count == 1))
    constraints.append(Implies(Not(has_loop), root_count == 0))

    # Every on-loop vertex needs a linked on-loop neighbour one step away,
    # or the root/closure pairing that joins the last vertex back to the root.
    for v in vertices:
        links = []
        for u in vertex_neighbors(size, *v):
            is_parent = dist[u] == dist[v] - 1
            is_child = dist[u] == dist[v] + 1
            closes_loop = Or(And(dist[v] == 0, dist[u] > 0), And(dist[u] == 0, dist[v] > 0))
            links.append(And(has_edge_between(board_var, ctx, v, u), on_loop[u],
                             Or(is_parent, is_child, closes_loop)))
        if links:
            constraints.append(Implies(on_loop[v], Or(links)))

    constraints.append(Implies(has_loop, Sum(board_var.all_edges()) >= const.MIN_LOOP_EDGES))
    return constraints


def _connected_loop(board_var, ctx):
    size = board_var.size
    vertices = _vertices(size)
    on_loop = {v: is_degree2(board_var, ctx, *v) for v in vertices}
    rank = {(p, q): Int(f"rank_{p}_{q}", ctx) for p, q in vertices}
    max_rank = len(vertices) - 1
    constraints = []

    for v in vertices:
        constraints.append(If(on_loop[v],
                              And(rank[v] >= 0, rank[v] <= max_rank),
                              rank[v] == const.OFF_LOOP))

    has_loop = Or(list(on_loop.values()))
    constraints.append(_root_count(on_loop, rank, ctx) == If(has_loop, IntVal(1, ctx), IntVal(0, ctx)))

    # Every on-loop vertex except the root hangs off a neighbour exactly one rank lower.
    for v in vertices:
        parents = [And(has_edge_between(board_var, ctx, v, u), rank[u] == rank[v] - 1)
                   for u in vertex_neighbors(size, *v)]
        if parents:
            constraints.append(Implies(And(on_loop[v], rank[v] > 0), Or(parents)))
    return constraints


NUMBER_CONSTRAINT_RULE = Rule(
    const.NUMBER_CONSTRAINT_RULE_ID, "Number constraint",
    "A clue equals the number of lines drawn around its cell.",
    _number_constraint, uses_edges=True)
VERTEX_DEGREE_RULE = Rule(
    const.VERTEX_DEGREE_RULE_ID, "Vertex degree",
    "Every vertex touches 0 or 2 lines: no dead ends, no branches.",
    _vertex_degree, uses_edges=True)
SINGLE_LOOP_RULE = Rule(
    const.SINGLE_LOOP_RULE_ID, "Single loop (distance labelling)",
    "Distance labels from one root along the loop. Does not exclude every set of disjoint loops.",
    _single_loop, uses_edges=True)
CONNECTED_LOOP_RULE = Rule(
    const.CONNECTED_LOOP_RULE_ID, "Connected loop (rank labelling)",
    "Every loop vertex but the root has a neighbour one rank lower, so all lines form one loop.",
    _connected_loop, uses_edges=True)
