"""Summary: Application configuration for GrowthPro messaging.

Importance: Centralizes environment, .env, and config defaults for consistent behavior.
Alternatives: Use a dedicated settings library like Pydantic Settings.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    """Summary: Holds configuration values for storage, quotas, and the HTTP layer.

    Importance: Ensures all services derive settings from a single source of truth.
    Alternatives: Store settings in a shared config file and parse at startup.
    """

    db_path: str
    api_host: str
    api_port: int
    api_key: str
    hourly_message_limit: int
    conversation_rpc_enabled: bool
    welcome_email_url: str
    welcome_email_key: str
    notice_history: int
    log_level: str

    @staticmethod
    def from_env() -> "AppConfig":
        """Summary: Build configuration from defaults, .env, and environment.

        Importance: Keeps all variables defined in config defaults while allowing overrides.
        Alternatives: Parse only environment variables without a defaults file.
        """

        defaults = load_defaults(Path("config") / "defaults.json")
        load_dotenv(Path(".env"))
        return AppConfig(
            db_path=os.getenv("GROWTHPRO_DB_PATH", defaults["db_path"]),
            api_host=os.getenv("GROWTHPRO_API_HOST", defaults["api_host"]),
            api_port=int(os.getenv("GROWTHPRO_API_PORT", defaults["api_port"])),
            api_key=os.getenv("GROWTHPRO_API_KEY", defaults["api_key"]),
            hourly_message_limit=int(
                os.getenv("GROWTHPRO_HOURLY_MESSAGE_LIMIT", defaults["hourly_message_limit"])
            ),
            conversation_rpc_enabled=parse_bool(
                os.getenv("GROWTHPRO_CONVERSATION_RPC", defaults["conversation_rpc_enabled"])
            ),
            welcome_email_url=os.getenv(
                "GROWTHPRO_WELCOME_EMAIL_URL", defaults["welcome_email_url"]
            ),
            welcome_email_key=os.getenv(
                "GROWTHPRO_WELCOME_EMAIL_KEY", defaults["welcome_email_key"]
            ),
            notice_history=int(os.getenv("GROWTHPRO_NOTICE_HISTORY", defaults["notice_history"])),
            log_level=os.getenv("GROWTHPRO_LOG_LEVEL", defaults["log_level"]),
        )


def parse_bool(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_defaults(path: Path) -> dict[str, str]:
    """Summary: Load configuration defaults from JSON.

    Importance: Ensures all variables exist in a single config file.
    Alternatives: Inline defaults in the AppConfig initializer.
    """

    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dotenv(path: Path) -> None:
    """Summary: Load key-value pairs from a .env file into the environment.

    Importance: Keeps secrets out of code while supporting local workflows.
    Alternatives: Use python-dotenv or OS-specific secret stores.
    """

    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())
