"""
BCS - Bash Coding Standard rule corpus engine

Resolves BCS rule codes to files in a tiered markdown corpus, validates the
corpus, and assembles selected rules into single documents.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
