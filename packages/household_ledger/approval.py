"""Approval gate between record building and any database write.

The gate never raises on denial: a ``False`` return means the caller skips
its write phase and reports the run as skipped.
"""

from __future__ import annotations

import sys
from collections.abc import Callable

from .logging_setup import get_logger
from .term_ui import prompt_yes_no

logger = get_logger("household_ledger.approval")

type Confirm = Callable[[str], bool]
type Emit = Callable[[str], None]


def stdin_is_interactive() -> bool:
    stdin = sys.stdin
    return stdin is not None and stdin.isatty()


def confirm_approval(
    message: str,
    *,
    auto_approve: bool,
    confirm: Confirm | None = None,
    is_interactive: Callable[[], bool] | None = None,
    emit: Emit = print,
) -> bool:
    """Return whether the write phase may proceed.

    Order of checks:

    1. ``auto_approve`` grants consent without prompting.
    2. Without an interactive stdin, consent is denied (there is nobody to ask).
    3. Otherwise ``confirm(message)`` decides; the default asks on the
       terminal via :func:`household_ledger.term_ui.prompt_yes_no`.
    """

    if auto_approve:
        emit("Auto-approve (--yes) is set; proceeding.")
        return True

    interactive = (is_interactive or stdin_is_interactive)()
    if not interactive:
        emit("Non-interactive session: pass --yes (or SEED_XLSX_YES=true) to write.")
        logger.info("Approval denied: no interactive input")
        return False

    approved = (confirm or prompt_yes_no)(message)
    if not approved:
        logger.info("Approval declined by operator")
    return approved


__all__ = ["Confirm", "Emit", "stdin_is_interactive", "confirm_approval"]
