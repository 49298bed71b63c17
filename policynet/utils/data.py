import csv
from pathlib import Path

from ..nn.errors import ShapeError
from ..nn.tensor import Tensor
from .backend import xp
from .logger import data_logger

N_FEATURES = 3  # ball_x, ball_y, paddle_y
N_ACTIONS = 3   # down, stay, up


def load_samples(filepath, n_features=N_FEATURES) -> Tensor:
    """
    Loads CSV rows of exactly ``n_features`` numeric fields into a (rows, n_features) Tensor.

    Blank lines are ignored. A row with the wrong field count or a non-numeric
    field is rejected with a warning and the load carries on with the next row.
    Raises ValueError when no row is valid.
    """
    filepath = Path(filepath)
    rows = []
    rejected = 0

    # undecodable bytes become U+FFFD so only the offending row fails float()
    with filepath.open(newline="", encoding="utf-8", errors="replace") as f:
        for line_no, fields in enumerate(csv.reader(f), start=1):
            if not fields or all(not field.strip() for field in fields):
                continue
            if len(fields) != n_features:
                data_logger.warning(
                    f"{filepath}:{line_no}: expected {n_features} values per row, got {len(fields)}"
                )
                rejected += 1
                continue
            try:
                rows.append([float(field) for field in fields])
            except ValueError:
                data_logger.warning(f"{filepath}:{line_no}: invalid numeric value in row {fields}")
                rejected += 1

    if not rows:
        raise ValueError(f"No valid data found in input file {filepath}")

    data_logger.info(f"Loaded {len(rows)} samples from {filepath} ({rejected} rejected)")
    return Tensor(rows)


def synthesize_targets(X: Tensor, dead_zone=0.1) -> Tensor:
    """
    One-hot action targets from the ball/paddle offset.

    ``ball_y - paddle_y > dead_zone`` marks column 0 (down), ``< -dead_zone``
    marks column 2 (up), anything else column 1 (stay).
    """
    if X.rank != 2 or X.shape[1] < N_FEATURES:
        raise ShapeError(f"Expected samples of shape (rows, {N_FEATURES}), got {X.shape}")

    diff = X.data[:, 1] - X.data[:, 2]
    labels = xp.ones(len(diff), dtype=xp.int64)
    labels[diff > dead_zone] = 0
    labels[diff < -dead_zone] = 2

    targets = xp.zeros((len(diff), N_ACTIONS), dtype=X.dtype)
    targets[xp.arange(len(diff)), labels] = 1.0
    return Tensor(targets, dtype=X.dtype)


def accuracy(pred: Tensor, Y: Tensor) -> float:
    """Percentage of rows whose arg-max over the first 3 columns matches the target's."""
    if pred.rank != 2 or pred.shape[1] < N_ACTIONS:
        raise ShapeError(f"Prediction must have at least {N_ACTIONS} columns, got shape {pred.shape}")
    if pred.shape[0] != Y.shape[0]:
        raise ShapeError(f"Prediction rows {pred.shape[0]} do not match target rows {Y.shape[0]}")
    if pred.shape[0] == 0:
        return 0.0

    predicted = xp.argmax(pred.data[:, :N_ACTIONS], axis=1)
    expected = xp.argmax(Y.data[:, :N_ACTIONS], axis=1)
    return float(xp.mean(predicted == expected) * 100.0)
