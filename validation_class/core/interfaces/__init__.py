"""
Core interfaces module for validation_class.

This module provides access to the directive contract used throughout
the package.
"""

from .directive_interface import Directive, ValidationPhase, render_message

__all__ = [
    'Directive',
    'ValidationPhase',
    'render_message'
]
