import os
import tomllib
from dataclasses import dataclass, fields


@dataclass
class TrainingConfiguration:
    """Configuration for a policy training run."""

    input: str
    output: str = "output.csv"
    params_output: str = "trained_params.txt"
    epochs: int = 1000
    learning_rate: float = 0.01
    warmup_epochs: int = 0  # > 0 switches to a warmup/anneal schedule peaking at learning_rate
    min_learning_rate: float = 0.0
    l2_lambda: float = 0.001
    prune_ratio: float = 0.1
    hidden_sizes: tuple[int, ...] = (64, 32)
    seed: int | None = None
    log_every: int = 10
    log_file: str | None = None
    plot: str | None = None  # path of the loss-history figure, skipped when None
    episodes: int = 0  # evaluation episodes in the Pong environment after training
    workers: int = 4

    def __post_init__(self):
        self.hidden_sizes = tuple(int(h) for h in self.hidden_sizes)

        if self.epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {self.epochs}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if self.warmup_epochs < 0:
            raise ValueError(f"warmup_epochs must be non-negative, got {self.warmup_epochs}")
        if self.warmup_epochs > 0 and self.warmup_epochs >= self.epochs:
            raise ValueError(f"warmup_epochs ({self.warmup_epochs}) must be less than epochs ({self.epochs})")
        if not 0.0 <= self.min_learning_rate <= self.learning_rate:
            raise ValueError(
                f"min_learning_rate must be in [0, learning_rate], got {self.min_learning_rate}"
            )
        if self.l2_lambda < 0:
            raise ValueError(f"l2_lambda must be non-negative, got {self.l2_lambda}")
        if not 0.0 <= self.prune_ratio <= 1.0:
            raise ValueError(f"prune_ratio must be in [0, 1], got {self.prune_ratio}")
        if any(h < 1 for h in self.hidden_sizes):
            raise ValueError(f"hidden_sizes must be positive, got {self.hidden_sizes}")
        if self.log_every < 1:
            raise ValueError(f"log_every must be at least 1, got {self.log_every}")
        if self.episodes < 0:
            raise ValueError(f"episodes must be non-negative, got {self.episodes}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

    @classmethod
    def load(cls, config_path: str, **overrides) -> "TrainingConfiguration":
        """
        Load training configuration from a TOML file.

        Parameters
        ----------
        config_path : str
            Filesystem path to a TOML file containing a "training" table.
        **overrides
            Field values that take precedence over the file; ``None`` values are ignored.

        Returns
        -------
        TrainingConfiguration
            Instance populated from the "training" table.

        Raises
        ------
        FileNotFoundError
            If no file exists at `config_path`.
        ValueError
            If the table names an unknown field.
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found at {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        training_data = data.get("training", {})
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(training_data) - known)
        if unknown:
            raise ValueError(f"Unknown training option(s) in {config_path}: {', '.join(unknown)}")

        merged = {**training_data, **{k: v for k, v in overrides.items() if v is not None}}
        return cls(**merged)
