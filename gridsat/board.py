"""**********************************************************************************
 * Title: board.py
 *
 * -------------------------------------------------------------------------------
 * Description:
 * The board model shared by every rule and by the solver driver. A board is an
 * N x N grid of cell values plus two edge matrices: (N+1) x N horizontal edges
 * and N x (N+1) vertical edges, laid out over an implicit (N+1) x (N+1) lattice
 * of vertices. A BoardState holds plain integers; a BoardVariable holds one z3
 * integer per slot. This module converts between the two, answers incidence
 * questions (which edges touch a vertex or a cell), parses the comma separated
 * task format, finds loop components in a concrete edge set and renders a board
 * as text for server-side debugging.
 **********************************************************************************"""

# --- IMPORTS ---
import copy
import math
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from z3 import Int

from gridsat.constants import CELL_BLANK, EDGE_OFF, EDGE_ON

Vertex = Tuple[int, int]


# --- DATA STRUCTURES ---
@dataclass
class BoardState:
    """A concrete board: every slot holds an int (0 = blank / no line)."""
    size: int
    cells: List[List[int]]
    horizontal_edges: List[List[int]]
    vertical_edges: List[List[int]]

    @classmethod
    def empty(cls, size: int) -> "BoardState":
        """Builds an all-zero board of the given size."""
        return cls(
            size=size,
            cells=[[CELL_BLANK] * size for _ in range(size)],
            horizontal_edges=[[EDGE_OFF] * size for _ in range(size + 1)],
            vertical_edges=[[EDGE_OFF] * (size + 1) for _ in range(size)],
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoardState":
        """
        Builds a board from its JSON form.

        Missing edge matrices are filled with zeros, so a payload may carry only
        ``size`` and ``cells``. Snake case keys are accepted as well.
        """
        size = int(data['size'])
        board = cls.empty(size)
        if data.get('cells') is not None:
            board.cells = [[int(v) for v in row] for row in data['cells']]
        h_edges = data.get('horizontalEdges', data.get('horizontal_edges'))
        if h_edges is not None:
            board.horizontal_edges = [[int(v) for v in row] for row in h_edges]
        v_edges = data.get('verticalEdges', data.get('vertical_edges'))
        if v_edges is not None:
            board.vertical_edges = [[int(v) for v in row] for row in v_edges]
        return board

    def to_dict(self) -> Dict[str, Any]:
        return {
            'size': self.size,
            'cells': copy.deepcopy(self.cells),
            'horizontalEdges': copy.deepcopy(self.horizontal_edges),
            'verticalEdges': copy.deepcopy(self.vertical_edges),
        }

    def copy(self) -> "BoardState":
        return copy.deepcopy(self)


@dataclass
class BoardVariable:
    """A symbolic board: every slot holds a z3 integer expression."""
    size: int
    cells: List[List[Any]]
    horizontal_edges: List[List[Any]]
    vertical_edges: List[List[Any]]

    def all_edges(self) -> List[Any]:
        return [e for row in self.horizontal_edges for e in row] + \
               [e for row in self.vertical_edges for e in row]


# --- CONVERSIONS ---
def create_board_variable(board: BoardState, ctx) -> BoardVariable:
    """
    Allocates one fresh z3 integer per cell and per edge slot of ``board``.

    Names are ``c-{row}-{col}``, ``he-{row}-{col}`` and ``ve-{row}-{col}``; they
    only need to be unique inside ``ctx``.

    :param BoardState board: The concrete board whose shape is copied.
    :param z3.Context ctx: The z3 context the variables live in.
    :returns: The symbolic board.
    :rtype: BoardVariable
    """
    return BoardVariable(
        size=board.size,
        cells=[[Int(f"c-{r}-{c}", ctx) for c in range(len(row))]
               for r, row in enumerate(board.cells)],
        horizontal_edges=[[Int(f"he-{r}-{c}", ctx) for c in range(len(row))]
                          for r, row in enumerate(board.horizontal_edges)],
        vertical_edges=[[Int(f"ve-{r}-{c}", ctx) for c in range(len(row))]
                        for r, row in enumerate(board.vertical_edges)],
    )


def board_variable_to_state(board_var: BoardVariable, model) -> BoardState:
    """
    Reads a concrete board back out of a satisfying z3 model.

    Model completion is on, so a variable the solver never had to fix still
    evaluates (to 0) and the conversion is total.

    :param BoardVariable board_var: The symbolic board used for the solve.
    :param z3.ModelRef model: The model returned after a ``sat`` check.
    :returns: The concrete board.
    :rtype: BoardState
    """
    def value_of(var):
        return int(str(model.eval(var, model_completion=True)))

    return BoardState(
        size=board_var.size,
        cells=[[value_of(v) for v in row] for row in board_var.cells],
        horizontal_edges=[[value_of(v) for v in row] for row in board_var.horizontal_edges],
        vertical_edges=[[value_of(v) for v in row] for row in board_var.vertical_edges],
    )


# --- INCIDENCE HELPERS (work on BoardState and BoardVariable alike) ---
def vertex_edges(board, row, col):
    """Returns the edges touching lattice vertex (row, col): up, down, left, right."""
    h, v = board.horizontal_edges, board.vertical_edges
    edges = []
    if 0 < row <= len(v) and col < len(v[row - 1]):
        edges.append(v[row - 1][col])
    if row < len(v) and col < len(v[row]):
        edges.append(v[row][col])
    if row < len(h) and 0 < col <= len(h[row]):
        edges.append(h[row][col - 1])
    if row < len(h) and col < len(h[row]):
        edges.append(h[row][col])
    return edges


def cell_edges(board, row, col):
    """Returns the top, bottom, left and right sides of cell (row, col)."""
    return [
        board.horizontal_edges[row][col],
        board.horizontal_edges[row + 1][col],
        board.vertical_edges[row][col],
        board.vertical_edges[row][col + 1],
    ]


def vertex_neighbors(size, row, col):
    """Lattice vertices orthogonally adjacent to (row, col)."""
    neighbors = []
    if row > 0: neighbors.append((row - 1, col))
    if row < size: neighbors.append((row + 1, col))
    if col > 0: neighbors.append((row, col - 1))
    if col < size: neighbors.append((row, col + 1))
    return neighbors


def edge_between(board, a: Vertex, b: Vertex):
    """The edge joining two adjacent lattice vertices, or None if they are not adjacent."""
    (r1, c1), (r2, c2) = a, b
    if abs(r1 - r2) + abs(c1 - c2) != 1:
        return None
    if r1 == r2:
        return board.horizontal_edges[r1][min(c1, c2)]
    return board.vertical_edges[min(r1, r2)][c1]


# --- CONCRETE BOARD ANALYSIS ---
def vertex_degree(board: BoardState, row: int, col: int) -> int:
    return sum(vertex_edges(board, row, col))


def loop_components(board: BoardState) -> List[Set[Vertex]]:
    """
    Groups the vertices touched by active edges into connected components.

    A breadth-first flood fill over the lattice, following only edges set to 1.
    A valid Slitherlink solution has exactly one component.
    """
    seen: Set[Vertex] = set()
    components = []
    for r_start in range(board.size + 1):
        for c_start in range(board.size + 1):
            start = (r_start, c_start)
            if start in seen or vertex_degree(board, r_start, c_start) == 0:
                continue
            component, q = {start}, deque([start])
            seen.add(start)
            while q:
                vertex = q.popleft()
                for neighbor in vertex_neighbors(board.size, *vertex):
                    if neighbor not in seen and edge_between(board, vertex, neighbor) == EDGE_ON:
                        seen.add(neighbor)
                        component.add(neighbor)
                        q.append(neighbor)
            components.append(component)
    return components


def active_edge_count(board: BoardState) -> int:
    return sum(sum(row) for row in board.horizontal_edges) + sum(sum(row) for row in board.vertical_edges)


def has_valid_shape(board: BoardState) -> bool:
    """True when every matrix has the dimensions implied by ``board.size``."""
    n = board.size
    if n <= 0 or len(board.cells) != n or any(len(row) != n for row in board.cells):
        return False
    if len(board.horizontal_edges) != n + 1 or any(len(row) != n for row in board.horizontal_edges):
        return False
    return len(board.vertical_edges) == n and all(len(row) == n + 1 for row in board.vertical_edges)


# --- PARSING & DISPLAY ---
def parse_task_string(task_string) -> Tuple[Optional[List[List[int]]], Optional[int]]:
    """
    Parses a comma separated, row-major list of cell values into a square grid.

    ``"0,3,0,3,0,3,0,3,0"`` becomes a 3x3 grid. Returns ``(None, None)`` when the
    string is empty, not numeric, or its length is not a perfect square.
    """
    if not task_string: return None, None
    try:
        nums = [int(n) for n in task_string.split(',')]
        dim = math.isqrt(len(nums))
        if dim == 0 or dim ** 2 != len(nums): return None, None
        return [nums[i * dim:(i + 1) * dim] for i in range(dim)], dim
    except (ValueError, TypeError): return None, None


def render_board(board: BoardState, clues: Optional[List[List[int]]] = None) -> str:
    """
    Draws a board as text: ``+`` vertices, ``---`` and ``|`` for active edges.

    Cell digits come from ``clues`` when given, otherwise from ``board.cells``;
    zeros are left blank.
    """
    digits = clues if clues is not None else board.cells
    lines = []
    for row in range(board.size + 1):
        line = ""
        for col in range(board.size + 1):
            line += "+"
            if col < board.size:
                line += "---" if board.horizontal_edges[row][col] == EDGE_ON else "   "
        lines.append(line)
        if row < board.size:
            line = ""
            for col in range(board.size + 1):
                line += "|" if board.vertical_edges[row][col] == EDGE_ON else " "
                if col < board.size:
                    value = digits[row][col]
                    line += f" {value if value else ' '} "
            lines.append(line)
    return "\n".join(lines) + "\n"
