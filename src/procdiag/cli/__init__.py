"""
Command-line interface for the procdiag package.

This module provides the entry point that runs a script under diagnostics.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
