"""
Utility functions and helpers for policynet.

Backend selection and random generators, logging, and learning rate scheduling. Sample
loading lives in ``policynet.utils.data``.
"""

from .backend import xp, make_rng
from .logger import setup_logger, train_logger, data_logger
from .lr_scheduler import LRScheduler

__all__ = [
    "xp",
    "make_rng",
    "setup_logger",
    "train_logger",
    "data_logger",
    "LRScheduler",
]
