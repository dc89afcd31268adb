"""Centralized configuration for modgraph.

Settings are read from the environment, after loading the nearest .env file
found from the current working directory. Loading happens lazily, once.
"""

import os

from dotenv import find_dotenv, load_dotenv


DEFAULT_ROOT_MARKERS = ("tsconfig.json", ".git")
DEFAULT_LOG_LEVEL = "WARNING"

_ENV_LOADED = False
_CACHED_ROOT_MARKERS: tuple[str, ...] | None = None


def _load_config():
    """Load the .env file into the environment (lazy)."""
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path)
    _ENV_LOADED = True


def get_root_markers() -> tuple[str, ...]:
    """Get the directory entries that mark a project root.

    Reads MODGRAPH_ROOT_MARKERS as a comma-separated list, falling back to
    tsconfig.json and .git.
    """
    global _CACHED_ROOT_MARKERS
    if _CACHED_ROOT_MARKERS is None:
        _load_config()
        raw = os.environ.get("MODGRAPH_ROOT_MARKERS") or ""
        markers = tuple(m.strip() for m in raw.split(",") if m.strip())
        _CACHED_ROOT_MARKERS = markers or DEFAULT_ROOT_MARKERS
    return _CACHED_ROOT_MARKERS


def get_log_level() -> str:
    """Get the configured log level name (MODGRAPH_LOG_LEVEL)."""
    _load_config()
    return (os.environ.get("MODGRAPH_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()


def reset_config():
    """Forget cached settings so the next call re-reads the environment."""
    global _ENV_LOADED, _CACHED_ROOT_MARKERS
    _ENV_LOADED = False
    _CACHED_ROOT_MARKERS = None
