"""Environment-based configuration.

Settings come from process environment variables. An optional ``.env``
file is loaded first with python-dotenv; variables already present in the
environment take precedence over the file.

Example:
    settings = load_settings()
    if not settings.discogs_configured:
        print("Discogs lookups will be skipped")
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from mediacloset.api.providers.provider import REQUEST_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

# Environment keys
_KEY_DISCOGS_KEY = "DISCOGS_CONSUMER_KEY"
_KEY_DISCOGS_SECRET = "DISCOGS_CONSUMER_SECRET"
_KEY_OMDB_API_KEY = "OMDB_API_KEY"
_KEY_ENABLE_RATE_LIMIT = "ENABLE_RATE_LIMIT"
_KEY_USER_AGENT = "MEDIACLOSET_USER_AGENT"
_KEY_REQUEST_TIMEOUT = "MEDIACLOSET_REQUEST_TIMEOUT"
_KEY_LOOKUP_TIMEOUT = "MEDIACLOSET_LOOKUP_TIMEOUT"

# Whole-chain deadline default (seconds)
LOOKUP_TIMEOUT = 30.0

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _read_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logger.warning("Ignoring invalid boolean %s=%r, using %s", key, raw, default)
    return default


def _read_seconds(
    env: Mapping[str, str], key: str, default: float, low: float, high: float
) -> float:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid number %s=%r, using %s", key, raw, default)
        return default
    return max(low, min(high, value))


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolver configuration.

    Attributes:
        discogs_key: Discogs consumer key (empty disables Discogs).
        discogs_secret: Discogs consumer secret.
        omdb_api_key: OMDb API key (empty disables movie lookups).
        enable_rate_limit: Apply published provider rate limits.
        user_agent: User-Agent header sent with every request.
        request_timeout: Per-request timeout in seconds (1-60).
        lookup_timeout: Default deadline for a whole lookup in seconds (1-300).
    """

    discogs_key: str = ""
    discogs_secret: str = ""
    omdb_api_key: str = ""
    enable_rate_limit: bool = True
    user_agent: str = USER_AGENT
    request_timeout: float = REQUEST_TIMEOUT
    lookup_timeout: float = LOOKUP_TIMEOUT

    @property
    def discogs_configured(self) -> bool:
        """Return True if both Discogs credentials are set."""
        return bool(self.discogs_key and self.discogs_secret)

    @property
    def omdb_configured(self) -> bool:
        """Return True if an OMDb key is set."""
        return bool(self.omdb_api_key)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            env: Mapping to read instead of os.environ.

        Returns:
            Settings with invalid values replaced by defaults.
        """
        source = os.environ if env is None else env
        return cls(
            discogs_key=source.get(_KEY_DISCOGS_KEY, "").strip(),
            discogs_secret=source.get(_KEY_DISCOGS_SECRET, "").strip(),
            omdb_api_key=source.get(_KEY_OMDB_API_KEY, "").strip(),
            enable_rate_limit=_read_bool(source, _KEY_ENABLE_RATE_LIMIT, True),
            user_agent=source.get(_KEY_USER_AGENT, "").strip() or USER_AGENT,
            request_timeout=_read_seconds(source, _KEY_REQUEST_TIMEOUT, REQUEST_TIMEOUT, 1.0, 60.0),
            lookup_timeout=_read_seconds(source, _KEY_LOOKUP_TIMEOUT, LOOKUP_TIMEOUT, 1.0, 300.0),
        )


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Load a .env file (if any) into the environment, then read settings.

    Args:
        env_file: Explicit .env path. When None, the nearest .env found by
            walking up from the working directory is used, if any.

    Returns:
        Settings from the environment.
    """
    path = str(env_file) if env_file is not None else find_dotenv(usecwd=True)
    if path:
        loaded = load_dotenv(path, override=False)
        logger.debug("Loaded .env from %s: %s", path, loaded)
    else:
        logger.debug("No .env file found, using environment variables")

    settings = Settings.from_env()
    logger.info(
        "Config loaded: discogs=%s omdb=%s rate_limit=%s",
        "configured" if settings.discogs_configured else "off",
        "configured" if settings.omdb_configured else "off",
        settings.enable_rate_limit,
    )
    return settings
