"""Code shared across layers."""
