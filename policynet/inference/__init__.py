"""Action selection and concurrent inference for trained policies."""
