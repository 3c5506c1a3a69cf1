"""Application layer: service orchestrators over the boundary adapters."""
