"""Traversal runtime: diagnostics, the traversal engine and the driver."""
