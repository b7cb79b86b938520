"""Multi-value expansion of list parameters."""
