"""Application layer - attendance use cases."""
