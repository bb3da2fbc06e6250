from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, fields
from datetime import datetime
from typing import Any, Dict, Optional

from .datamodels import Settings

# --- Configuration ---
DEFAULT_NOTE_FOLDER = "Wallabag"
TOKEN_ENDPOINT = "/oauth/v2/token"
ENTRIES_ENDPOINT = "/api/entries.json"
PER_PAGE = 30
TOKEN_EXPIRY_MARGIN = 60
HTTP_TIMEOUT = 30

CONFIG_PATH = os.path.expanduser(
    os.environ.get("WALLABAG_NOTES_CONFIG", "~/.config/wallabag-notes/config.json")
)
VAULT_PATH = os.environ.get("WALLABAG_NOTES_VAULT", ".")

REQUEST_HEADERS = {
    "User-Agent": "wallabag-notes/0.1 (+https://github.com/wallabag/wallabag)",
    "Accept": "application/json",
}
RETRY_ATTEMPTS = 3
RETRY_BACKOFF = 0.5

SECRET_FIELDS = {"client_secret", "password", "access_token", "refresh_token"}
CREDENTIAL_FIELDS = ("instance_url", "client_id", "client_secret", "username", "password")

# --- Logging ---
logger = logging.getLogger("wallabag_notes")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/wallabag_notes_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def settings_from_dict(data: Dict[str, Any]) -> Settings:
    """Build Settings from a loaded JSON object, ignoring unknown keys."""
    known = {f.name for f in fields(Settings)}
    settings = Settings(**{k: v for k, v in data.items() if k in known})
    settings.note_folder = settings.note_folder.strip() or DEFAULT_NOTE_FOLDER
    settings.instance_url = settings.instance_url.rstrip("/")
    return settings


def load_settings(path: Optional[str] = None) -> Settings:
    """Load the settings file, falling back to defaults."""
    path = path or CONFIG_PATH
    if not os.path.exists(path):
        logger.info("Config file not found at %s, using defaults.", path)
        return Settings()
    try:
        with open(path, "r") as f:
            data = json.load(f)
        logger.info("Loaded config from %s", path)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        return Settings()
    if not isinstance(data, dict):
        logger.error("Ignoring config at %s: expected a JSON object", path)
        return Settings()
    try:
        return settings_from_dict(data)
    except (TypeError, AttributeError) as e:
        logger.error("Invalid config values in %s: %s", path, e)
        return Settings()


def save_settings(settings: Settings, path: Optional[str] = None) -> None:
    """Save the whole settings object, overwriting the file."""
    path = path or CONFIG_PATH
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        json.dump(asdict(settings), f, indent=2)
    logger.info("Saved config to %s", path)


def masked_settings(settings: Settings) -> Dict[str, Any]:
    """Settings as a dict with secrets replaced, for display."""
    shown = asdict(settings)
    for key in SECRET_FIELDS:
        if shown.get(key):
            shown[key] = "*" * 8
    return shown
