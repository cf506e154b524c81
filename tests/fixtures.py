"""Boards shared by the test modules."""

from gridsat.board import BoardState

# Plus-shaped region; its outline is the only loop that fits.
CROSS_CLUES = [[0, 3, 0], [3, 0, 3], [0, 3, 0]]
CROSS_TASK = "0,3,0,3,0,3,0,3,0"


def perimeter_2x2():
    """2x2 board with the outer square drawn and the inner cross empty."""
    return BoardState(
        size=2,
        cells=[[0, 0], [0, 0]],
        horizontal_edges=[[1, 1], [0, 0], [1, 1]],
        vertical_edges=[[1, 0, 1], [1, 0, 1]],
    )


def two_unit_loops_3x3():
    """3x3 board with unit squares around cells (0, 0) and (2, 2)."""
    return BoardState(
        size=3,
        cells=[[0, 0, 0], [0, 0, 0], [0, 0, 0]],
        horizontal_edges=[[1, 0, 0], [1, 0, 0], [0, 0, 1], [0, 0, 1]],
        vertical_edges=[[1, 1, 0, 0], [0, 0, 0, 0], [0, 0, 1, 1]],
    )


def marked_2x2():
    """2x2 board whose edges carry distinct markers, for incidence checks."""
    return BoardState(
        size=2,
        cells=[[0, 0], [0, 0]],
        horizontal_edges=[[1, 2], [3, 4], [5, 6]],
        vertical_edges=[[7, 8, 9], [10, 11, 12]],
    )
