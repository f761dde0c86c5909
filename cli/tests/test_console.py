from __future__ import annotations

import logging

from qc_cli import console
from qc_cli.logging_ import setup_logging


def test_field_renders_missing_values_as_dash(capsys) -> None:
    console.field("department", None)
    console.field("root_cause", "")
    console.field("severity", "high")

    out = capsys.readouterr().out.splitlines()
    assert out == ["  department: -", "  root_cause: -", "  severity: high"]


def test_field_does_not_interpret_markup(capsys) -> None:
    console.field("description", "[red]scratch[/red] on lid")
    assert capsys.readouterr().out.strip() == "description: [red]scratch[/red] on lid"


def test_hint_names_the_command(capsys) -> None:
    console.hint("qc auth login")
    assert capsys.readouterr().out.strip() == "Run: qc auth login"


def test_client_error_log_hidden_unless_verbose() -> None:
    try:
        setup_logging(False)
        assert not logging.getLogger("qc_client").isEnabledFor(logging.ERROR)
        assert not logging.getLogger("httpx").isEnabledFor(logging.INFO)

        setup_logging(True)
        assert logging.getLogger("qc_client").isEnabledFor(logging.DEBUG)
        assert logging.getLogger("httpx").isEnabledFor(logging.DEBUG)
    finally:
        for name in ("qc_client", "httpx", "httpcore"):
            logging.getLogger(name).setLevel(logging.NOTSET)
