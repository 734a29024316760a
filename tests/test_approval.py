from household_ledger import approval
from household_ledger.approval import confirm_approval


def _never_called(message):
    raise AssertionError(f"confirm should not be called: {message}")


def test_auto_approve_skips_prompt():
    lines = []
    assert confirm_approval(
        "Write?", auto_approve=True, confirm=_never_called, is_interactive=lambda: False,
        emit=lines.append,
    )
    assert "--yes" in lines[0]


def test_non_interactive_without_auto_approve_denies():
    lines = []
    assert not confirm_approval(
        "Write?", auto_approve=False, confirm=_never_called, is_interactive=lambda: False,
        emit=lines.append,
    )
    assert lines == ["Non-interactive session: pass --yes (or SEED_XLSX_YES=true) to write."]


def test_interactive_defers_to_confirm():
    asked = []

    def confirm(message):
        asked.append(message)
        return message.endswith("expense data?")

    assert confirm_approval(
        "Write expense data?", auto_approve=False, confirm=confirm, is_interactive=lambda: True,
        emit=lambda _line: None,
    )
    assert not confirm_approval(
        "Write income data?", auto_approve=False, confirm=confirm, is_interactive=lambda: True,
        emit=lambda _line: None,
    )
    assert asked == ["Write expense data?", "Write income data?"]


def test_default_confirm_is_terminal_prompt(monkeypatch):
    seen = []
    monkeypatch.setattr(approval, "prompt_yes_no", lambda message: seen.append(message) or True)

    assert confirm_approval("Write asset data?", auto_approve=False, is_interactive=lambda: True)
    assert seen == ["Write asset data?"]


def test_stdin_is_interactive_reflects_tty(monkeypatch):
    class _Stdin:
        def __init__(self, tty):
            self._tty = tty

        def isatty(self):
            return self._tty

    monkeypatch.setattr(approval.sys, "stdin", _Stdin(False))
    assert approval.stdin_is_interactive() is False
    monkeypatch.setattr(approval.sys, "stdin", _Stdin(True))
    assert approval.stdin_is_interactive() is True
    monkeypatch.setattr(approval.sys, "stdin", None)
    assert approval.stdin_is_interactive() is False
