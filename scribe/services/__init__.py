"""Business logic: credential store, authorization policy, post store."""
