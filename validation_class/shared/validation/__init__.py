"""Validation engine, built-in directives and filters."""
