# Description: Contains all the static DATA constants for the grid puzzle solver.

# --- Solver result statuses ---
STATUS_SAT = 'sat'
STATUS_UNSAT = 'unsat'
STATUS_TIMEOUT = 'timeout'
STATUS_ERROR = 'error'

# --- Solver defaults ---
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_MAX_SOLUTIONS = 1
DEFAULT_CONTEXT_NAME = 'puzzle-solver'

# Which slots the "at least one difference" clause of solve_multiple ranges over.
EXCLUDE_CELLS = 'cells'
EXCLUDE_EDGES = 'edges'
EXCLUDE_ALL = 'all'
EXCLUSION_SCOPES = (EXCLUDE_CELLS, EXCLUDE_EDGES, EXCLUDE_ALL)

# --- Board values ---
CELL_BLANK = 0
EDGE_OFF = 0
EDGE_ON = 1

# A Slitherlink cell has exactly four sides.
MIN_CLUE = 0
MAX_CLUE = 4

# The smallest closed loop on the lattice is a unit square.
MIN_LOOP_EDGES = 4
# Sentinel distance/rank of a vertex that is not on the loop.
OFF_LOOP = -1

# --- Rule identifiers ---
NUMBER_FILL_RULE_ID = 'number-fill-rule'
ROW_UNIQUENESS_RULE_ID = 'row-uniqueness-rule'
COLUMN_UNIQUENESS_RULE_ID = 'column-uniqueness-rule'
ROW_SORT_RULE_ID = 'row-sort-rule'
COLUMN_SORT_RULE_ID = 'column-sort-rule'
MAGIC_SQUARE_RULE_ID = 'magic-square-rule'
EDGE_BINARY_RULE_ID = 'edge-binary-rule'
GIVEN_VALUES_RULE_ID = 'given-values-rule'
GIVEN_EDGES_RULE_ID = 'given-edges-rule'
NUMBER_CONSTRAINT_RULE_ID = 'number-constraint-rule'
VERTEX_DEGREE_RULE_ID = 'vertex-degree-rule'
SINGLE_LOOP_RULE_ID = 'single-loop-rule'
CONNECTED_LOOP_RULE_ID = 'connected-loop-rule'

# --- Web app ---
DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 5001
