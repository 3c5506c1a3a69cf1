"""Boundary adapters: relational catalog, vector index, search cache."""
