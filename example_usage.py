#!/usr/bin/env python3
"""
Example usage of the policynet package.

This script demonstrates the core components: tensors, layers, training a
small network on XOR, parameter flattening, and concurrent action selection.
"""

import numpy as np

from policynet import (
    Dense,
    NeuralNetwork,
    ParallelAgent,
    ReLU,
    State,
    Tensor,
)


def main():
    print("policynet Example")
    print("=" * 50)

    # Create some sample data
    print("1. Creating tensors...")
    X = Tensor([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
    Y = Tensor([[0.0], [1.0], [1.0], [0.0]])
    print(f"Input tensor shape: {X.shape}, strides: {X.strides}")
    print(f"Broadcast add: {(X + Tensor([10.0, 20.0])).tolist()}")

    # Create a small network
    print("\n2. Creating a network...")
    rng = np.random.default_rng(0)
    model = NeuralNetwork([Dense(2, 8, rng=rng), ReLU(), Dense(8, 1, rng=rng)])
    print(f"Model parameters: {model.count_parameters()}")

    # Train
    print("\n3. Training on XOR...")
    loss = model.train(X, Y, epochs=5000, lr=0.1)
    print(f"Final loss: {loss:.6f}")
    print(f"Predictions: {[round(p, 3) for p in model.predict(X).numpy().reshape(-1).tolist()]}")

    # Flat parameter vector
    print("\n4. Round-tripping the parameter vector...")
    params = model.get_parameters()
    model.set_parameters(params)
    print(f"Vector length: {len(params)}")

    # Concurrent inference
    print("\n5. Selecting actions in parallel...")
    policy = NeuralNetwork([Dense(3, 16, rng=rng), ReLU(), Dense(16, 3, rng=rng)])
    states = [State(0.5, y, 0.5) for y in (0.1, 0.5, 0.9)]
    with ParallelAgent(policy, pool_size=2) as agent:
        actions = [f.result() for f in [agent.act_async(s) for s in states]]
    print(f"Actions: {[a.name for a in actions]}")

    print("\nExample completed successfully!")


if __name__ == "__main__":
    main()
