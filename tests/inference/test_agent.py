import unittest

import numpy as np

from policynet.env.pong import State
from policynet.inference.agent import Action, PolicyAgent, select_action
from policynet.modules.dense import Dense
from policynet.nn.errors import ShapeError
from policynet.nn.tensor import Tensor


class TestSelectAction(unittest.TestCase):
    def test_index_to_action(self):
        self.assertEqual(select_action(Tensor([[0.9, 0.1, 0.2]])), Action.DOWN)
        self.assertEqual(select_action(Tensor([[0.1, 0.9, 0.2]])), Action.STAY)
        self.assertEqual(select_action(Tensor([[0.1, 0.2, 0.9]])), Action.UP)
        self.assertEqual(int(Action.DOWN), 1)
        self.assertEqual(int(Action.STAY), 0)
        self.assertEqual(int(Action.UP), -1)

    def test_first_maximum_wins(self):
        self.assertEqual(select_action(Tensor([[0.5, 0.5, 0.5]])), Action.DOWN)
        self.assertEqual(select_action(Tensor([[0.1, 0.7, 0.7]])), Action.STAY)

    def test_only_first_three_columns_count(self):
        self.assertEqual(select_action(Tensor([[0.1, 0.2, 0.3, 5.0]])), Action.UP)

    def test_selects_requested_row(self):
        output = Tensor([[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        self.assertEqual(select_action(output, row=1), Action.UP)

    def test_too_few_columns(self):
        with self.assertRaises(ShapeError):
            select_action(Tensor([[0.1, 0.9]]))


class TestPolicyAgent(unittest.TestCase):
    def test_act_uses_model_output(self):
        # scores = (ball_y, paddle_y, ball_x)
        weight = np.array([[0, 0, 1], [1, 0, 0], [0, 1, 0]], dtype=np.float32)
        agent = PolicyAgent(Dense(3, 3, weight=Tensor(weight)))

        self.assertEqual(agent.act(State(0.1, 0.8, 0.2)), Action.DOWN)
        self.assertEqual(agent.act(State(0.1, 0.2, 0.8)), Action.STAY)
        self.assertEqual(agent.act(State(0.9, 0.2, 0.3)), Action.UP)

    def test_parameters_round_trip(self):
        agent = PolicyAgent(Dense(3, 3, rng=0))
        values = np.linspace(-1, 1, 12)
        agent.set_parameters(values)
        self.assertTrue(np.allclose(agent.get_parameters(), values, atol=1e-6))


if __name__ == "__main__":
    unittest.main()
