"""
Command-line interface for the wincpu package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
