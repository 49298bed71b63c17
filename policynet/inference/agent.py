from enum import IntEnum

from ..env.pong import State
from ..nn.errors import ShapeError
from ..nn.module import Module
from ..nn.tensor import Tensor


class Action(IntEnum):
    UP = -1
    STAY = 0
    DOWN = 1


# output column -> action
ACTIONS = (Action.DOWN, Action.STAY, Action.UP)


def select_action(output: Tensor, row: int = 0) -> Action:
    """Arg-max over the first 3 columns of ``output[row]``; the first maximum wins."""
    if output.rank != 2 or output.shape[1] < len(ACTIONS):
        raise ShapeError(f"Model output must have at least {len(ACTIONS)} columns, got shape {output.shape}")

    best = 0
    best_val = output[row, 0]
    for i in range(1, len(ACTIONS)):
        if output[row, i] > best_val:
            best_val = output[row, i]
            best = i
    return ACTIONS[best]


def state_to_tensor(state: State) -> Tensor:
    return Tensor([state.as_row()])


class PolicyAgent:
    """Maps environment states to actions with a trained model."""

    def __init__(self, model: Module):
        self.model = model

    def act(self, state: State) -> Action:
        output = self.model.forward(state_to_tensor(state))
        return select_action(output)

    def get_parameters(self):
        return self.model.get_parameters()

    def set_parameters(self, values):
        self.model.set_parameters(values)
