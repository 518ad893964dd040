"""Summary: Tests for configuration loading.

Importance: Ensures defaults, .env, and environment overrides behave correctly.
Alternatives: Validate configuration manually during runtime.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from growthpro.config import AppConfig, load_defaults, load_dotenv, parse_bool

DEFAULTS = {
    "db_path": "test.db",
    "api_host": "127.0.0.1",
    "api_port": "8000",
    "api_key": "",
    "hourly_message_limit": "10",
    "conversation_rpc_enabled": "true",
    "welcome_email_url": "",
    "welcome_email_key": "",
    "notice_history": "50",
    "log_level": "INFO",
}


def _write_defaults(root: Path) -> None:
    (root / "config").mkdir()
    (root / "config" / "defaults.json").write_text(json.dumps(DEFAULTS), encoding="utf-8")


def test_load_defaults_reads_json(tmp_path: Path) -> None:
    """Summary: Verify defaults are parsed from JSON.

    Importance: Confirms config file is the source of truth for variables.
    Alternatives: Hardcode defaults in the test.
    """

    defaults_path = tmp_path / "defaults.json"
    defaults_path.write_text("{\"db_path\": \"test.db\"}", encoding="utf-8")
    defaults = load_defaults(defaults_path)
    assert defaults["db_path"] == "test.db"


def test_load_defaults_requires_file(tmp_path: Path) -> None:
    """Summary: Ensure a missing defaults file fails loudly.

    Importance: Misconfigured deployments should not start with partial settings.
    Alternatives: Fall back to hardcoded values.
    """

    with pytest.raises(FileNotFoundError):
        load_defaults(tmp_path / "missing.json")


def test_load_dotenv_sets_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Ensure .env values populate environment variables.

    Importance: Validates local secret loading without external tools.
    Alternatives: Assume OS environment is always set.
    """

    env_path = tmp_path / ".env"
    env_path.write_text("# local\nGROWTHPRO_API_KEY=secret\n", encoding="utf-8")
    monkeypatch.delenv("GROWTHPRO_API_KEY", raising=False)
    load_dotenv(env_path)
    assert os.getenv("GROWTHPRO_API_KEY") == "secret"
    monkeypatch.delenv("GROWTHPRO_API_KEY", raising=False)


def test_app_config_uses_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Verify AppConfig honors defaults when env is absent.

    Importance: Confirms config file remains the baseline for variables.
    Alternatives: Inline defaults directly in the AppConfig class.
    """

    _write_defaults(tmp_path)
    monkeypatch.chdir(tmp_path)
    for key in (
        "DB_PATH",
        "API_PORT",
        "HOURLY_MESSAGE_LIMIT",
        "CONVERSATION_RPC",
        "WELCOME_EMAIL_URL",
        "NOTICE_HISTORY",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(f"GROWTHPRO_{key}", raising=False)
    config = AppConfig.from_env()
    assert config.db_path == "test.db"
    assert config.api_port == 8000
    assert config.hourly_message_limit == 10
    assert config.conversation_rpc_enabled is True
    assert config.welcome_email_url == ""
    assert config.notice_history == 50
    assert config.log_level == "INFO"


def test_environment_overrides_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Verify environment variables take precedence over defaults.

    Importance: Deployments tune quotas and features without editing files.
    Alternatives: Require a separate defaults file per environment.
    """

    _write_defaults(tmp_path)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GROWTHPRO_HOURLY_MESSAGE_LIMIT", "3")
    monkeypatch.setenv("GROWTHPRO_CONVERSATION_RPC", "off")
    monkeypatch.setenv("GROWTHPRO_DB_PATH", "other.db")
    config = AppConfig.from_env()
    assert config.hourly_message_limit == 3
    assert config.conversation_rpc_enabled is False
    assert config.db_path == "other.db"


def test_parse_bool_accepts_common_spellings() -> None:
    """Summary: Verify boolean flags accept the usual truthy spellings.

    Importance: Avoids surprises when toggling features from the shell.
    Alternatives: Accept only "true" and "false".
    """

    assert parse_bool("Yes")
    assert parse_bool(" 1 ")
    assert parse_bool(True)
    assert not parse_bool("0")
    assert not parse_bool("")
