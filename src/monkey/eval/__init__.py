"""Evaluator helper modules for the Monkey runtime."""

__all__ = [
    "blocks",
    "collections",
    "expr",
    "fn",
    "helpers",
]
