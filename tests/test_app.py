import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gridsat import constants as const
from gridsat.app import app
from gridsat.slitherlink import solve_slitherlink
from tests.fixtures import CROSS_CLUES, CROSS_TASK

LATIN_RULE_IDS = [const.NUMBER_FILL_RULE_ID, const.ROW_UNIQUENESS_RULE_ID, const.COLUMN_UNIQUENESS_RULE_ID]


class TestRulesRoute(unittest.TestCase):
    def setUp(self):
        self.client = app.test_client()

    def test_list_rules(self):
        response = self.client.get('/api/rules')
        self.assertEqual(response.status_code, 200)
        ids = [rule['id'] for rule in response.get_json()['rules']]
        self.assertIn(const.SINGLE_LOOP_RULE_ID, ids)
        self.assertIn(const.MAGIC_SQUARE_RULE_ID, ids)


class TestSolveRoutes(unittest.TestCase):
    def setUp(self):
        self.client = app.test_client()

    def test_solve(self):
        payload = {'board': {'size': 2, 'cells': [[1, 0], [0, 0]]}, 'rules': LATIN_RULE_IDS}
        response = self.client.post('/api/solve', json=payload)
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['status'], const.STATUS_SAT)
        self.assertEqual(data['solution']['cells'][0][0], 1)
        self.assertIn('executionTime', data)

    def test_solve_with_options(self):
        payload = {'board': {'size': 2, 'cells': [[1, 1], [0, 0]]}, 'rules': LATIN_RULE_IDS,
                   'options': {'timeout': 5000}}
        data = self.client.post('/api/solve', json=payload).get_json()
        self.assertEqual(data['status'], const.STATUS_UNSAT)
        self.assertNotIn('solution', data)

    def test_missing_board(self):
        response = self.client.post('/api/solve', json={'rules': LATIN_RULE_IDS})
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.get_json())

    def test_unknown_rule(self):
        payload = {'board': {'size': 2}, 'rules': ['no-such-rule']}
        response = self.client.post('/api/solve', json=payload)
        self.assertEqual(response.status_code, 400)
        self.assertIn('no-such-rule', response.get_json()['error'])

    def test_solve_multiple(self):
        payload = {'board': {'size': 2}, 'rules': LATIN_RULE_IDS, 'maxSolutions': 2}
        response = self.client.post('/api/solve_multiple', json=payload)
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(len(data['solutions']), 2)
        self.assertNotEqual(data['solutions'][0]['cells'], data['solutions'][1]['cells'])


class TestSlitherlinkRoutes(unittest.TestCase):
    def setUp(self):
        self.client = app.test_client()

    def test_solve_from_task(self):
        response = self.client.post('/api/slitherlink/solve', json={'task': CROSS_TASK})
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['solution']['cells'], CROSS_CLUES)
        self.assertTrue(data['isUnique'])
        self.assertTrue(data['rendering'].startswith('+'))

    def test_unsolvable(self):
        data = self.client.post('/api/slitherlink/solve', json={'clues': [[2]]}).get_json()
        self.assertIsNone(data['solution'])

    def test_bad_task(self):
        response = self.client.post('/api/slitherlink/solve', json={'task': '1,2'})
        self.assertEqual(response.status_code, 400)

    def test_check(self):
        solution = solve_slitherlink(CROSS_CLUES)
        payload = {'clues': CROSS_CLUES, 'board': solution.to_dict()}
        data = self.client.post('/api/check', json=payload).get_json()
        self.assertTrue(data['isCorrect'])

        payload['board']['horizontalEdges'][0][1] = 0
        data = self.client.post('/api/check', json=payload).get_json()
        self.assertFalse(data['isCorrect'])

    def test_check_size_mismatch(self):
        payload = {'clues': CROSS_CLUES, 'board': {'size': 2}}
        response = self.client.post('/api/check', json=payload)
        self.assertEqual(response.status_code, 400)


if __name__ == '__main__':
    unittest.main()
