"""Registries and configuration loading."""
