"""Command-line interface module for the strict HTML parser.

This module provides the strict-html tool for parsing and checking document
files and for exercising single grammar rules.
"""

from .main import main

__all__ = ["main"]
