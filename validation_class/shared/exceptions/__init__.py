"""Exception types and the unknown field policy."""
