"""
CLI package for rawsync.
"""

from .cli import main

__all__ = ["main"]
