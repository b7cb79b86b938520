"""CLI command plumbing."""
