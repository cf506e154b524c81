from flask import Flask, jsonify, request
from flask_cors import CORS

# Use absolute imports from the 'gridsat' package.
from gridsat.board import BoardState, parse_task_string, render_board
from gridsat.logging_utils import get_logger
from gridsat.rules import all_rules, get_rules
from gridsat.slitherlink import check_slitherlink_solution, solution_is_unique, solve_slitherlink
from gridsat.z3_solver import PuzzleSolver, SolverOptions

app = Flask(__name__)
CORS(app)
logger = get_logger("app")


def _read_board_and_rules(data):
    board_data, rule_ids = data.get('board'), data.get('rules')
    if not board_data or rule_ids is None:
        return None, None, 'Missing board or rules in request'
    try:
        rules = get_rules(rule_ids)
    except KeyError as e:
        return None, None, str(e.args[0])
    return BoardState.from_dict(board_data), rules, None


def _read_clues(data):
    clues = data.get('clues')
    if clues is None and data.get('task'):
        clues, _ = parse_task_string(data['task'])
    return clues


@app.route('/api/rules', methods=['GET'])
def list_rules():
    return jsonify({'rules': [rule.describe() for rule in all_rules()]})


@app.route('/api/solve', methods=['POST'])
def solve_board():
    try:
        data = request.get_json(silent=True) or {}
        board, rules, error = _read_board_and_rules(data)
        if error:
            return jsonify({'error': error}), 400
        options = SolverOptions.from_dict(data.get('options'))
        result = PuzzleSolver(options).solve(board, rules)
        return jsonify(result.to_dict())
    except Exception as e:
        logger.error("Error in /api/solve: %s", e)
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/solve_multiple', methods=['POST'])
def solve_board_multiple():
    try:
        data = request.get_json(silent=True) or {}
        board, rules, error = _read_board_and_rules(data)
        if error:
            return jsonify({'error': error}), 400
        options = SolverOptions.from_dict(data.get('options'))
        max_solutions = int(data.get('maxSolutions', options.max_solutions))
        result = PuzzleSolver(options).solve_multiple(board, rules, max_solutions)
        return jsonify(result.to_dict())
    except Exception as e:
        logger.error("Error in /api/solve_multiple: %s", e)
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/slitherlink/solve', methods=['POST'])
def solve_slitherlink_puzzle():
    try:
        data = request.get_json(silent=True) or {}
        clues = _read_clues(data)
        if not clues:
            return jsonify({'error': 'Missing clues or task in request'}), 400
        solver = PuzzleSolver()
        solution = solve_slitherlink(clues, solver)
        if solution is None:
            return jsonify({'solution': None})
        return jsonify({
            'solution': solution.to_dict(),
            'rendering': render_board(solution),
            'isUnique': solution_is_unique(clues, solver),
        })
    except Exception as e:
        logger.error("Error in /api/slitherlink/solve: %s", e)
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/check', methods=['POST'])
def check_solution():
    try:
        data = request.get_json(silent=True) or {}
        clues, board_data = _read_clues(data), data.get('board')
        if not clues or not board_data:
            return jsonify({'error': 'Missing data in request'}), 400
        board = BoardState.from_dict(board_data)
        if board.size != len(clues):
            return jsonify({'error': 'Board size does not match clues'}), 400
        return jsonify({'isCorrect': check_slitherlink_solution(clues, board)})
    except Exception as e:
        logger.error("Error in /api/check: %s", e)
        return jsonify({'error': 'An internal error occurred'}), 500
