"""Summary: Tests for the command-line interface.

Importance: Ensures local messaging workflows run end to end from the shell.
Alternatives: Exercise the CLI manually.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from growthpro.cli import build_parser, run_cli


def _prepare(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Point the CLI at an isolated config and database.

    Importance: Keeps CLI tests from touching a developer's database.
    Alternatives: Pass a config object into run_cli.
    """

    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "defaults.json").write_text(
        json.dumps(
            {
                "db_path": str(tmp_path / "cli.db"),
                "api_host": "127.0.0.1",
                "api_port": "8000",
                "api_key": "",
                "hourly_message_limit": "10",
                "conversation_rpc_enabled": "true",
                "welcome_email_url": "",
                "welcome_email_key": "",
                "notice_history": "50",
                "log_level": "WARNING",
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GROWTHPRO_DB_PATH", raising=False)
    monkeypatch.delenv("GROWTHPRO_HOURLY_MESSAGE_LIMIT", raising=False)


def test_parser_requires_command() -> None:
    """Summary: Verify the parser rejects a missing command.

    Importance: Users get usage help instead of a silent no-op.
    Alternatives: Default to listing messages.
    """

    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_cli_send_and_list(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Summary: Verify profiles, sends, and listings through the CLI.

    Importance: Confirms the CLI shares storage and routing with the API.
    Alternatives: Only test the service layer.
    """

    _prepare(tmp_path, monkeypatch)
    assert run_cli(["add-profile", "admin-1", "Ada Admin", "ada@growthpro.com", "--role", "admin"]) == 0
    assert run_cli(["add-profile", "client-1", "Carl Client", "carl@example.com"]) == 0
    assert run_cli(["--as", "client-1", "send", "Help", "Question"]) == 0
    capsys.readouterr()
    assert run_cli(["--as", "admin-1", "list-messages"]) == 0
    listing = capsys.readouterr().out
    assert "Help (Carl Client, direct)" in listing
    assert run_cli(["--as", "admin-1", "conversations"]) == 0
    assert "client-1: Carl Client [1 unread] Question" in capsys.readouterr().out
    assert run_cli(["--as", "client-1", "stats"]) == 0
    assert "sent: 1" in capsys.readouterr().out


def test_cli_reports_validation_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Summary: Verify invalid sends print field errors and exit non-zero.

    Importance: Scripts can detect rejected drafts.
    Alternatives: Print a generic failure.
    """

    _prepare(tmp_path, monkeypatch)
    run_cli(["add-profile", "admin-1", "Ada Admin", "ada@growthpro.com", "--role", "admin"])
    assert run_cli(["--as", "admin-1", "send", "Hello", "Body"]) == 2
    assert "recipients: Please select at least one recipient" in capsys.readouterr().err


def test_cli_requires_known_viewer(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Ensure messaging commands need an existing viewer profile.

    Importance: Every command is scoped to an explicit identity.
    Alternatives: Default to the first admin.
    """

    _prepare(tmp_path, monkeypatch)
    with pytest.raises(SystemExit):
        run_cli(["list-messages"])
    with pytest.raises(SystemExit):
        run_cli(["--as", "ghost", "list-messages"])
