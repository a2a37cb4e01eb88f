"""Command-line interface for percent-encoder.

Provides the ``percent-encoder`` command for encoding text from arguments or
standard input.
"""

from .main import main

__all__ = ["main"]
