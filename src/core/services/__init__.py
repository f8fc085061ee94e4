"""Core services: request building and concurrent dispatch."""
