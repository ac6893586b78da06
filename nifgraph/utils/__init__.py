"""
Utilities Module - Helper functions and classes.

This module provides logging setup for the nifgraph CLI and pipeline.
"""

from .logging import add_file_handler, remove_file_handler, setup_colored_logging

__all__ = [
    "add_file_handler",
    "remove_file_handler",
    "setup_colored_logging",
]
