"""Funkey: a small dynamically-typed scripting language."""

from .runner import evaluate_to_text, parse, repl_eval, run, run_and_capture

__all__ = [
    "evaluate_to_text",
    "parse",
    "repl_eval",
    "run",
    "run_and_capture",
]
