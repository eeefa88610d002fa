"""Interactive REPL for Monkey, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
import traceback
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .ast_nodes import as_tree
from .lexer import tokenize
from .parser import parse
from .repl_highlight import MonkeyLexer
from .runner import format_parse_errors, run_parsed
from .runtime import Environment, MkNull, new_environment
from .token_types import TT
from .utils import debug_py_trace_enabled, repl_prompt, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/ast": ("Toggle printing the syntax tree of each input", ""),
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_DEPTH_OPEN = {TT.LPAREN, TT.LBRACKET, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAREN, TT.RBRACKET, TT.RBRACE}


class ReplState:
    """Mutable session state so slash commands can swap the environment."""

    def __init__(self) -> None:
        self.env: Environment = new_environment()
        self.show_ast = False


def open_depth(text: str) -> int:
    """Unclosed ( [ { count; a positive depth means the input continues."""
    depth = 0

    for tok in tokenize(text):
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth -= 1

    return depth


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/ast":
        state.show_ast = not state.show_ast
        print(f"Syntax tree: {'on' if state.show_ast else 'off'}")
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            set_debug_py_trace(True)
        elif arg.lower() in ("off", "0", "false", "no"):
            set_debug_py_trace(False)
        elif arg == "":
            set_debug_py_trace(not debug_py_trace_enabled())
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state_str = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state_str}")
        return True

    if cmd == "/reset":
        state.env = new_environment()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, state: ReplState) -> None:
    """Evaluate one submission and print its result or errors."""
    program, errors = parse(text)
    if errors:
        print(format_parse_errors(errors), file=sys.stderr)
        return

    if state.show_ast:
        print(as_tree(program).pretty(), end="")

    try:
        result = run_parsed(program, state.env)
    except RecursionError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            print("\nPython traceback:", file=sys.stderr)
            print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
        return

    if not isinstance(result, MkNull):
        print(repr(result))


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    state = ReplState()

    history = InMemoryHistory()
    lexer = MonkeyLexer(frozenset(state.env.builtins))

    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer

        # Keep reading while a bracket is still open.
        if not buf.text.startswith("/") and open_depth(buf.text) > 0:
            buf.insert_text("\n")
            return

        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=lexer,
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation=".. ",
    )

    print("Welcome to the Monkey programming language! Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(repl_prompt())
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, state):
            continue

        eval_line(text, state)


if __name__ == "__main__":
    repl()
