"""Tiny terminal UI helpers (prompt_toolkit-based).

Kept apart from the approval logic so the prompt can be exercised in
isolation with a pipe input and a dummy output.
"""

from __future__ import annotations

from prompt_toolkit import PromptSession


def prompt_yes_no(message: str, *, session: PromptSession | None = None) -> bool:
    """Ask a single ``(y/N)`` question; only ``y`` (any case) counts as yes.

    An empty answer takes the default, which is *no*. ``EOFError`` and
    ``KeyboardInterrupt`` (Ctrl-D / Ctrl-C) are also read as *no*.
    """

    sess = session or PromptSession()
    try:
        answer = sess.prompt(f"{message} (y/N): ")
    except (EOFError, KeyboardInterrupt):
        return False
    return answer.strip().lower() == "y"


__all__ = ["prompt_yes_no"]
