"""
setup-inspequte CLI module.

This module provides the command-line interface for setup-inspequte.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
