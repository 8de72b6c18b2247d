"""Evaluator helper modules for the Funkey runtime."""

__all__ = [
    "blocks",
    "expr",
    "helpers",
    "literals",
    "postfix",
]
