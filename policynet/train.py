"""
Command-line driver: trains the Pong policy network on recorded game states.

    policynet-train samples.csv [output.csv] [--config training.toml] [--epochs N] ...

Writes ``epoch,reward,precision`` rows to the results CSV every ``log_every``
epochs (reward is ``100 - loss``), prunes and saves the trained parameters,
and can optionally plot the loss history and play evaluation episodes.
"""

import argparse
import csv
from pathlib import Path

from tqdm import tqdm

from .config import TrainingConfiguration
from .inference.parallel import ParallelAgent
from .modules.activation import ReLU
from .modules.dense import Dense
from .modules.sequential import Sequential
from .nn.network import NeuralNetwork
from .nn.optim import SGD
from .nn.params import prune_by_magnitude, save_parameters
from .utils.backend import make_rng
from .utils.data import N_ACTIONS, N_FEATURES, accuracy, load_samples, synthesize_targets
from .utils.logger import setup_logger, train_logger
from .utils.lr_scheduler import LRScheduler


def build_policy_network(hidden_sizes=(64, 32), rng=None) -> NeuralNetwork:
    """Dense/ReLU stack from 3 state features to 3 action scores, wrapped as one block."""
    rng = make_rng(rng)
    layers = []
    in_features = N_FEATURES
    for width in hidden_sizes:
        layers.append(Dense(in_features, width, rng=rng))
        layers.append(ReLU())
        in_features = width
    layers.append(Dense(in_features, N_ACTIONS, rng=rng))
    return NeuralNetwork([Sequential(*layers)])


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Train the Pong policy network on recorded (ball_x, ball_y, paddle_y) samples."
    )
    parser.add_argument("input", help="CSV file with 3 numeric values per row")
    parser.add_argument("output", nargs="?", default=None, help="Results CSV (default: output.csv)")
    parser.add_argument("-c", "--config", default=None, help="TOML file with a [training] table")
    parser.add_argument("--epochs", type=int, default=None)
    parser.add_argument("--lr", dest="learning_rate", type=float, default=None)
    parser.add_argument("--warmup-epochs", dest="warmup_epochs", type=int, default=None,
                        help="Warm up for this many epochs, then anneal the learning rate")
    parser.add_argument("--min-lr", dest="min_learning_rate", type=float, default=None)
    parser.add_argument("--l2", dest="l2_lambda", type=float, default=None)
    parser.add_argument("--prune", dest="prune_ratio", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--params-out", dest="params_output", default=None,
                        help="Trained parameter file (default: trained_params.txt)")
    parser.add_argument("--log-every", dest="log_every", type=int, default=None)
    parser.add_argument("--log-file", dest="log_file", default=None)
    parser.add_argument("--plot", default=None, help="Save the loss history figure to this path")
    parser.add_argument("--episodes", type=int, default=None,
                        help="Evaluation episodes to play after training")
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--no-progress", dest="progress", action="store_false")
    return parser.parse_args(argv)


def config_from_args(args) -> TrainingConfiguration:
    overrides = {
        name: getattr(args, name)
        for name in ("input", "output", "epochs", "learning_rate", "warmup_epochs", "min_learning_rate",
                     "l2_lambda", "prune_ratio", "seed", "params_output", "log_every", "log_file", "plot", "episodes", "workers")
    }
    if args.config is not None:
        return TrainingConfiguration.load(args.config, **overrides)
    return TrainingConfiguration(**{k: v for k, v in overrides.items() if v is not None})


def plot_history(history, path):
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.plot(range(1, len(history) + 1), history)
    ax.set_xlabel("Epoch")
    ax.set_ylabel("MSE loss")
    ax.set_title("Training loss")
    ax.grid(True, alpha=0.3)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)


def make_optimizer(model, config: TrainingConfiguration) -> SGD:
    lr = config.learning_rate
    if config.warmup_epochs > 0:
        lr = LRScheduler(
            warmup_steps=config.warmup_epochs,
            total_steps=config.epochs,
            min_lr=config.min_learning_rate,
            max_lr=config.learning_rate,
            final_lr=config.min_learning_rate,
        )
    return SGD(model, lr, weight_decay=config.l2_lambda)


def train_policy(config: TrainingConfiguration, X, Y, progress=True) -> NeuralNetwork:
    model = build_policy_network(config.hidden_sizes, rng=config.seed)
    optimizer = make_optimizer(model, config)

    output_path = Path(config.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["epoch", "reward", "precision"])

        for epoch in tqdm(range(config.epochs), desc="Training", unit="epoch", disable=not progress):
            loss, pred = model.train_epoch(X, Y, optimizer)

            if epoch % config.log_every == 0:
                reward = 100.0 - loss
                precision = accuracy(pred, Y)
                writer.writerow([epoch, f"{reward:.6f}", f"{precision:.2f}"])
                train_logger.info(
                    f"Epoch {epoch} | Reward: {reward:.4f} | Loss: {loss:.6f} | Precision: {precision:.2f}%"
                )

    return model


def main(argv=None) -> int:
    args = parse_args(argv)
    config = config_from_args(args)
    if config.log_file is not None:
        setup_logger("policynet.train", config.log_file)
        setup_logger("policynet.data", config.log_file)

    try:
        X = load_samples(config.input)
    except (FileNotFoundError, ValueError) as e:
        train_logger.error(str(e))
        return 1

    Y = synthesize_targets(X)
    train_logger.info(
        f"Training on {X.shape[0]} samples for {config.epochs} epochs "
        f"(lr={config.learning_rate}, l2={config.l2_lambda})"
    )
    model = train_policy(config, X, Y, progress=args.progress)

    pruned = prune_by_magnitude(model, config.prune_ratio)
    train_logger.info(
        f"Applied pruning: removed {config.prune_ratio * 100:.1f}% of smallest weights "
        f"({pruned} of {model.count_parameters()} zeroed)"
    )

    save_parameters(model, config.params_output)
    train_logger.info(f"Training complete! Parameters saved to {config.params_output}")

    if config.plot is not None and model.history:
        plot_history(model.history, config.plot)
        train_logger.info(f"Loss history plotted to {config.plot}")

    if config.episodes > 0:
        with ParallelAgent(model, pool_size=config.workers) as agent:
            rewards = agent.evaluate(config.episodes, seed=config.seed)
        train_logger.info(
            f"Evaluation over {config.episodes} episodes: mean reward {sum(rewards) / len(rewards):.3f}"
        )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
