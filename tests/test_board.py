import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from z3 import Context, Solver, sat

from gridsat.board import (
    BoardState, active_edge_count, board_variable_to_state, cell_edges, create_board_variable,
    edge_between, has_valid_shape, loop_components, parse_task_string, render_board,
    vertex_edges, vertex_neighbors,
)
from tests.fixtures import marked_2x2, perimeter_2x2, two_unit_loops_3x3


class TestBoardState(unittest.TestCase):
    def test_empty_shapes(self):
        board = BoardState.empty(3)
        self.assertEqual(len(board.cells), 3)
        self.assertEqual(len(board.horizontal_edges), 4)
        self.assertTrue(all(len(row) == 3 for row in board.horizontal_edges))
        self.assertEqual(len(board.vertical_edges), 3)
        self.assertTrue(all(len(row) == 4 for row in board.vertical_edges))
        self.assertTrue(has_valid_shape(board))

    def test_from_dict_fills_missing_edges(self):
        board = BoardState.from_dict({'size': 2, 'cells': [[1, 0], [0, 2]]})
        self.assertEqual(board.cells, [[1, 0], [0, 2]])
        self.assertEqual(board.horizontal_edges, [[0, 0], [0, 0], [0, 0]])
        self.assertEqual(board.vertical_edges, [[0, 0, 0], [0, 0, 0]])

    def test_from_dict_accepts_snake_case(self):
        source = perimeter_2x2()
        board = BoardState.from_dict({
            'size': 2,
            'cells': source.cells,
            'horizontal_edges': source.horizontal_edges,
            'vertical_edges': source.vertical_edges,
        })
        self.assertEqual(board, source)

    def test_dict_round_trip(self):
        board = perimeter_2x2()
        data = board.to_dict()
        self.assertIn('horizontalEdges', data)
        self.assertIn('verticalEdges', data)
        self.assertEqual(BoardState.from_dict(data), board)

    def test_copy_is_deep(self):
        board = perimeter_2x2()
        clone = board.copy()
        clone.horizontal_edges[0][0] = 0
        self.assertEqual(board.horizontal_edges[0][0], 1)

    def test_invalid_shape(self):
        board = BoardState.empty(2)
        board.vertical_edges = [[0, 0], [0, 0]]
        self.assertFalse(has_valid_shape(board))
        self.assertFalse(has_valid_shape(BoardState.empty(0)))


class TestBoardVariable(unittest.TestCase):
    def test_variable_names(self):
        board_var = create_board_variable(BoardState.empty(2), Context())
        self.assertEqual(str(board_var.cells[0][1]), "c-0-1")
        self.assertEqual(str(board_var.horizontal_edges[2][1]), "he-2-1")
        self.assertEqual(str(board_var.vertical_edges[1][2]), "ve-1-2")
        self.assertEqual(len(board_var.all_edges()), 12)

    def test_round_trip_through_model(self):
        """Pinning every slot and reading the model back gives the same board."""
        board = marked_2x2()
        board.cells = [[4, 0], [2, 9]]
        ctx = Context()
        board_var = create_board_variable(board, ctx)
        s = Solver(ctx=ctx)
        for symbolic, concrete in ((board_var.cells, board.cells),
                                   (board_var.horizontal_edges, board.horizontal_edges),
                                   (board_var.vertical_edges, board.vertical_edges)):
            for var_row, value_row in zip(symbolic, concrete):
                for var, value in zip(var_row, value_row):
                    s.add(var == value)
        self.assertEqual(s.check(), sat)
        self.assertEqual(board_variable_to_state(board_var, s.model()), board)


class TestIncidence(unittest.TestCase):
    def setUp(self):
        self.board = marked_2x2()

    def test_corner_vertex(self):
        self.assertEqual(vertex_edges(self.board, 0, 0), [7, 1])
        self.assertEqual(vertex_edges(self.board, 2, 2), [12, 6])

    def test_inner_vertex(self):
        self.assertEqual(vertex_edges(self.board, 1, 1), [8, 11, 3, 4])

    def test_cell_edges(self):
        self.assertEqual(cell_edges(self.board, 0, 1), [2, 4, 8, 9])

    def test_edge_between(self):
        self.assertEqual(edge_between(self.board, (1, 1), (1, 2)), 4)
        self.assertEqual(edge_between(self.board, (1, 2), (0, 2)), 9)
        self.assertIsNone(edge_between(self.board, (0, 0), (1, 1)))

    def test_vertex_neighbors(self):
        self.assertEqual(vertex_neighbors(2, 0, 0), [(1, 0), (0, 1)])
        self.assertEqual(len(vertex_neighbors(2, 1, 1)), 4)


class TestLoopComponents(unittest.TestCase):
    def test_single_loop(self):
        components = loop_components(perimeter_2x2())
        self.assertEqual(len(components), 1)
        self.assertEqual(len(components[0]), 8)
        self.assertEqual(active_edge_count(perimeter_2x2()), 8)

    def test_two_loops(self):
        components = loop_components(two_unit_loops_3x3())
        self.assertEqual(len(components), 2)
        self.assertIn((0, 0), components[0])
        self.assertIn((3, 3), components[1])

    def test_no_lines(self):
        self.assertEqual(loop_components(BoardState.empty(3)), [])


class TestParsingAndRendering(unittest.TestCase):
    def test_parse_square_task(self):
        grid, dim = parse_task_string("0,3,0,3,0,3,0,3,0")
        self.assertEqual(dim, 3)
        self.assertEqual(grid, [[0, 3, 0], [3, 0, 3], [0, 3, 0]])

    def test_parse_rejects_bad_input(self):
        self.assertEqual(parse_task_string(""), (None, None))
        self.assertEqual(parse_task_string("1,2,3"), (None, None))
        self.assertEqual(parse_task_string("a,b,c,d"), (None, None))

    def test_render_unit_square(self):
        board = BoardState(size=1, cells=[[3]], horizontal_edges=[[1], [1]], vertical_edges=[[1, 1]])
        self.assertEqual(render_board(board), "+---+\n| 3 |\n+---+\n")

    def test_render_blank_cells_and_clue_override(self):
        board = BoardState.empty(1)
        self.assertEqual(render_board(board), "+   +\n     \n+   +\n")
        self.assertIn(" 2 ", render_board(board, clues=[[2]]))


if __name__ == '__main__':
    unittest.main()
