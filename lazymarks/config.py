"""Persistent JSON preferences and bookmarks-file location.

Stores the default group name, highlight style, and an optional bookmarks file
override. Preference access is defensive: malformed or missing config falls
back safely. The bookmarks file itself is not handled here.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazymarks"
CONFIG_FILENAME = "config.json"
BOOKMARKS_FILENAME = "bookmarks.json"
BOOKMARKS_FILE_ENV = "LAZYMARKS_FILE"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_BOOKMARKS_PATH = Path(user_data_dir(APP_NAME, appauthor=False)) / BOOKMARKS_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_GROUP = "default"
DEFAULT_STYLE = "monokai"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are logged and otherwise ignored; preferences are never
    worth aborting a command over.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write config %s: %s", CONFIG_PATH, exc)


def _load_nonempty_str(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _save_nonempty_str(key: str, value: str) -> None:
    stripped = str(value).strip()
    if not stripped:
        return
    config = load_config()
    config[key] = stripped
    save_config(config)


def load_default_group() -> str:
    """Return the group new bookmarks go to when none is given."""
    return _load_nonempty_str("default_group") or DEFAULT_GROUP


def save_default_group(group_name: str) -> None:
    _save_nonempty_str("default_group", group_name)


def load_style() -> str:
    """Return the persisted Pygments style name."""
    return _load_nonempty_str("style") or DEFAULT_STYLE


def save_style(style: str) -> None:
    _save_nonempty_str("style", style)


def resolve_bookmarks_path(override: str | Path | None = None) -> Path:
    """Pick the bookmarks file.

    Precedence: explicit ``override``, the ``LAZYMARKS_FILE`` environment
    variable, the ``bookmarks_file`` config key, then the per-user data dir.
    """
    if override:
        return Path(override).expanduser()
    env_value = os.environ.get(BOOKMARKS_FILE_ENV, "").strip()
    if env_value:
        return Path(env_value).expanduser()
    configured = _load_nonempty_str("bookmarks_file")
    if configured:
        return Path(configured).expanduser()
    return DEFAULT_BOOKMARKS_PATH
