"""Interactive REPL for Funkey, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .ast import to_tree
from .lexer import tokenize
from .parser import ParseError
from .repl_highlight import FunkeyLexer
from .runner import describe_error, make_environment, parse, print_py_trace, repl_eval, stdout_sink
from .token_types import TT
from .types import NULL, Environment, EvaluationError
from .utils import debug_py_trace_enabled, set_debug_py_trace

# Characters pasted from rich text that the lexer would report as ILLEGAL.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# name => (help text, argument hint)
SLASH_COMMANDS = {
    "/ast": ("Print the parse tree before each result", ""),
    "/clear": ("Clear the screen", ""),
    "/py-traceback": ("Show the Python traceback of evaluation errors", "[on|off]"),
    "/reset": ("Drop every binding and start from a fresh environment", ""),
}

_SWITCH_ON = ("on", "1", "true", "yes")
_SWITCH_OFF = ("off", "0", "false", "no")

_OPENERS = {TT.LPAREN, TT.LBRACKET, TT.LBRACE}
_CLOSERS = {TT.RPAREN, TT.RBRACKET, TT.RBRACE}


@dataclass
class ReplState:
    env: Environment = field(default_factory=lambda: make_environment(stdout_sink))
    show_ast: bool = False


def bracket_depth(text: str) -> int:
    """Net count of unclosed brackets; input continues while this is positive."""
    depth = 0

    for tok in tokenize(text):
        if tok.type in _OPENERS:
            depth += 1
        elif tok.type in _CLOSERS:
            depth = max(depth - 1, 0)

    return depth


class _SlashCompleter(Completer):
    """Offer slash command names while the prompt starts with '/'."""

    def get_completions(self, document, complete_event):
        prefix = document.text_before_cursor
        if not prefix.startswith("/"):
            return

        for name, (help_text, hint) in SLASH_COMMANDS.items():
            if name.startswith(prefix):
                yield Completion(
                    name,
                    start_position=-len(prefix),
                    display=f"{name} {hint}".rstrip(),
                    display_meta=help_text,
                )


def _parse_switch(arg: str) -> Optional[bool]:
    """Map an on/off argument to a bool; None for anything unrecognized."""
    word = arg.lower()
    if word in _SWITCH_ON:
        return True
    if word in _SWITCH_OFF:
        return False
    return None


def handle_slash(line: str, state: ReplState) -> bool:
    """Run a slash command. False means the line is Funkey source instead."""
    words = line.split(None, 1)
    if not words or not words[0].startswith("/"):
        return False

    name = words[0]
    arg = words[1].strip() if len(words) > 1 else ""

    match name:
        case "/clear":
            clear()
        case "/ast":
            state.show_ast = not state.show_ast
            print(f"Parse tree: {'on' if state.show_ast else 'off'}")
        case "/reset":
            state.env = make_environment(stdout_sink)
            print("Environment reset.")
        case "/py-traceback":
            enabled = not debug_py_trace_enabled() if arg == "" else _parse_switch(arg)
            if enabled is None:
                print("Usage: /py-traceback [on|off]", file=sys.stderr)
                return True

            set_debug_py_trace(enabled)
            print(f"Python traceback: {'on' if enabled else 'off'}")
        case _:
            print(f"Unknown command: {name}", file=sys.stderr)

    return True


def _normalize(text: str) -> str:
    return _INVISIBLE_RE.sub("", text)


def eval_submission(text: str, state: ReplState) -> None:
    """Parse and evaluate one submission, printing the result or the errors."""
    try:
        if state.show_ast:
            print(to_tree(parse(text)).pretty(), end="")

        result = repl_eval(text, state.env)
    except ParseError as exc:
        for msg in exc.errors:
            print(f"Error: {msg}", file=sys.stderr)
        return
    except EvaluationError as exc:
        print(f"Error: {describe_error(exc)}", file=sys.stderr)
        if debug_py_trace_enabled():
            print_py_trace(exc.inner)
        return

    if result is not NULL:
        print(result.inspect())


def _key_bindings() -> KeyBindings:
    bindings = KeyBindings()

    @bindings.add("backspace")
    def _(event):
        # Reopen the command menu after deleting back into a slash command.
        buffer = event.app.current_buffer
        buffer.delete_before_cursor(1)
        if buffer.text.startswith("/"):
            buffer.start_completion()

    @bindings.add("enter")
    def _(event):
        buffer = event.app.current_buffer
        depth = 0 if buffer.text.startswith("/") else bracket_depth(buffer.text)

        if depth > 0:
            buffer.insert_text("\n" + "    " * depth)
        else:
            buffer.validate_and_handle()

    return bindings


def repl() -> None:
    state = ReplState()
    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=FunkeyLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=_key_bindings(),
        multiline=True,
        prompt_continuation="... ",
    )

    print("funkey repl, Ctrl-D to exit, / for commands")

    while True:
        try:
            text = _normalize(session.prompt(">>> "))
        except EOFError:
            print()
            return
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        if not text.strip() or handle_slash(text, state):
            continue

        eval_submission(text, state)
