"""Static configuration for spamscope.

All user-editable settings (lexicon, alert gating, history, server, logging)
live in a single JSON file for quick edits without touching Python. SMTP
credentials come from the environment (.env) to keep secrets out of the repo.
"""

import json
import os

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_NAME = "config.json"


def _resolve_config_path() -> str:
    """Pick config.json: SPAMSCOPE_CONFIG, then the working directory, then the checkout root."""

    explicit = os.getenv("SPAMSCOPE_CONFIG")
    if explicit:
        return os.path.abspath(explicit)

    candidates = [os.path.join(os.getcwd(), CONFIG_NAME), os.path.join(PROJECT_ROOT, CONFIG_NAME)]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    # Missing everywhere; the loader reports the working-directory path.
    return candidates[0]


CONFIG_PATH = _resolve_config_path()

# Relative paths in config.json (database, log file) resolve next to it.
CONFIG_DIR = os.path.dirname(CONFIG_PATH)


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _env_flag(name: str):
    """Return True/False for an explicit env flag, None when unset."""

    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip().lower() in {"1", "true", "yes", "on"}


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite database.
_database = _CONFIG.get("database", {})
DB_PATH = _database.get("path", "spamscope.db")
if not os.path.isabs(DB_PATH):
    DB_PATH = os.path.join(CONFIG_DIR, DB_PATH)

# Indicator phrases; an empty or missing list falls back to the built-in lexicon.
LEXICON = _CONFIG.get("lexicon") or None

# Alert gating. ALERT_DEFAULT_TO in the environment wins over config.json.
_notifications = _CONFIG.get("notifications", {})
THRESHOLD_PERCENT = float(_notifications.get("threshold_percent", 40))
DEFAULT_RECIPIENT = os.getenv("ALERT_DEFAULT_TO") or _notifications.get("default_recipient")

# History retrieval bounds.
_history = _CONFIG.get("history", {})
HISTORY_LIMIT = int(_history.get("limit", 10))
PREVIEW_CHARS = int(_history.get("preview_chars", 80))

# HTTP server. PORT in the environment wins over config.json.
_server = _CONFIG.get("server", {})
SERVER_HOST = _server.get("host", "0.0.0.0")
SERVER_PORT = int(os.getenv("PORT") or _server.get("port", 5000))
CORS_ORIGINS = _server.get("cors_origins", ["*"])

# SMTP relay used for alert delivery.
MAIL_HOST = os.getenv("MAIL_HOST")
MAIL_PORT = int(os.getenv("MAIL_PORT") or 587)
MAIL_USER = os.getenv("MAIL_USER")
MAIL_PASS = os.getenv("MAIL_PASS")
MAIL_FROM = os.getenv("MAIL_FROM")
MAIL_STARTTLS = _env_flag("MAIL_STARTTLS")
MAIL_USE_TLS = bool(_env_flag("MAIL_USE_TLS"))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
