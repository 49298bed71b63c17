"""
policynet - a small fully-connected network library and the Pong policy built on it.

Dense tensors with broadcasting, Dense/ReLU layers with manual backpropagation,
mean-squared-error training, flat parameter vectors for persistence and pruning,
and thread-pooled inference over model replicas.
"""

__version__ = "0.1.0"

# Import main components for easy access
from .nn.tensor import Tensor
from .nn.module import Module
from .nn.errors import PolicyNetError, ShapeError, LengthError, LogicError
from .nn.losses import MeanSquaredError
from .nn.network import NeuralNetwork
from .nn.optim import SGD
from .modules.dense import Dense
from .modules.activation import ReLU
from .modules.sequential import Sequential
from .inference.agent import Action, PolicyAgent, select_action
from .inference.parallel import ConcurrentQueue, WorkerPool, ParallelAgent
from .env.pong import PongEnv, State
from .config import TrainingConfiguration
from .utils.backend import xp
from .utils.lr_scheduler import LRScheduler

__all__ = [
    "Tensor",
    "Module",
    "PolicyNetError",
    "ShapeError",
    "LengthError",
    "LogicError",
    "MeanSquaredError",
    "NeuralNetwork",
    "SGD",
    "Dense",
    "ReLU",
    "Sequential",
    "Action",
    "PolicyAgent",
    "select_action",
    "ConcurrentQueue",
    "WorkerPool",
    "ParallelAgent",
    "PongEnv",
    "State",
    "TrainingConfiguration",
    "LRScheduler",
    "xp",
]
