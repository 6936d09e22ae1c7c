import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

__version__ = "0.3.0"

# --------------------------------------------------------------------
# Utility
# --------------------------------------------------------------------
def _bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _str(name: str, default: str = "") -> Optional[str]:
    return os.getenv(name, default).strip() or None

# --------------------------------------------------------------------
# Defaults
# --------------------------------------------------------------------
DEFAULT_USER_AGENT = f"pagewatch/{__version__}"
DEFAULT_SOURCES_YAML = Path(__file__).resolve().parent / "data" / "sources.yaml"
DEFAULT_GIST_FILENAME = "seenItems.json"
GITHUB_API = "https://api.github.com"
TELEGRAM_API = "https://api.telegram.org"


@dataclass(frozen=True)
class Settings:
    # Telegram
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    telegram_parse_mode: str = "Markdown"
    telegram_link_preview: bool = True

    # Gist state
    gist_token: Optional[str] = None
    gist_id: Optional[str] = None
    gist_filename: str = DEFAULT_GIST_FILENAME

    # Fetching
    sources_yaml: Path = DEFAULT_SOURCES_YAML
    http_timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    # Runtime flags
    dry_run: bool = False
    commit_on_notify_failure: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Read every setting from the process environment."""
        return cls(
            telegram_bot_token=_str("TELEGRAM_BOT_TOKEN"),
            telegram_chat_id=_str("TELEGRAM_CHAT_ID"),
            telegram_parse_mode=_str("TELEGRAM_PARSE_MODE") or "Markdown",
            telegram_link_preview=_bool("TELEGRAM_LINK_PREVIEW", "true"),
            gist_token=_str("GIST_TOKEN"),
            gist_id=_str("GIST_ID"),
            gist_filename=_str("GIST_FILENAME") or DEFAULT_GIST_FILENAME,
            sources_yaml=Path(_str("SOURCES_YAML") or DEFAULT_SOURCES_YAML),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            user_agent=_str("USER_AGENT") or DEFAULT_USER_AGENT,
            dry_run=_bool("DRY_RUN", "false"),
            commit_on_notify_failure=_bool("COMMIT_ON_NOTIFY_FAILURE", "true"),
        )
