"""Directive and filter registries."""
