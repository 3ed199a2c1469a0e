"""
Configuration management for the Recipe Manager.

This module centralizes environment variable loading from the .env file at the
project root. It should be imported early in both the development backend
(api/main.py) and the frontend (streamlit_app/app.py) so .env is loaded before any
other code reads environment variables.

In production there is usually no .env file; load_dotenv() then does nothing and
the platform's environment variables are used.

Environment Variables:
- BACKEND_URL: Optional, recipes API base URL (defaults to http://localhost:8000)
- API_REQUEST_TIMEOUT: Optional, timeout in seconds for reads (default: 10)
- API_MUTATION_TIMEOUT: Optional, timeout in seconds for writes (default: 15)
- QUERY_CACHE_TTL_SECONDS: Optional, age after which cached reads are refetched (default: 60)
- SEED_DEMO_DATA: Optional, seed the development backend with demo data (default: true)
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    Safe to call multiple times. Existing environment variables take precedence
    over values in .env (override=False).
    """
    # api/config.py -> api/ -> project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env file on module import
load_env_file()


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid value for %s=%r, using default %s", name, raw, default)
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class BackendConfig:
    """Configuration for talking to the recipes API."""

    @staticmethod
    def get_backend_url() -> str:
        """
        Get the recipes API base URL.

        Returns:
            URL with trailing slash removed (default: http://localhost:8000)
        """
        return os.getenv("BACKEND_URL", "http://localhost:8000").rstrip("/")

    @staticmethod
    def get_request_timeout() -> float:
        """Timeout in seconds for GET requests (default: 10)."""
        return _get_float("API_REQUEST_TIMEOUT", 10.0)

    @staticmethod
    def get_mutation_timeout() -> float:
        """Timeout in seconds for POST/PATCH/DELETE requests (default: 15)."""
        return _get_float("API_MUTATION_TIMEOUT", 15.0)


class CacheConfig:
    """Configuration for the frontend query cache."""

    @staticmethod
    def get_ttl_seconds() -> float:
        """Seconds after which a cached read is refetched (default: 60)."""
        return _get_float("QUERY_CACHE_TTL_SECONDS", 60.0)


class DevServerConfig:
    """Configuration for the in-memory development backend."""

    @staticmethod
    def seed_demo_data() -> bool:
        """Whether to start with demo inventory and recipes (default: True)."""
        return _get_bool("SEED_DEMO_DATA", True)
