"""
Configuration module for the Bene validation service.

Centralizes all configuration with environment variable support,
validation, and caching of the campaign constants file.
"""

import json
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional

from bene.constants import CampaignConstants
from bene.variants import resolve_variant

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("BENE_ENV", "dev")  # dev|stage|prod

# Contract generation used when a request does not name one
CONTRACT_VERSION = os.getenv("BENE_CONTRACT_VERSION", "v1_2")

# Default campaign constants (JSON, hex-encoded byte fields)
CONSTANTS_PATH = os.getenv("BENE_CONSTANTS_PATH", "config/constants.json")

# Logging
LOG_LEVEL = os.getenv("BENE_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("BENE_LOG_JSON", "true").lower() in ("1", "true", "yes")

# Cache TTL (seconds)
CONFIG_CACHE_TTL = int(os.getenv("CONFIG_CACHE_TTL", "60"))


# ============================================================
# Cached Configuration Loaders
# ============================================================

class CachedConfig:
    """
    Thread-safe cached configuration loader.
    Reloads configuration files periodically based on TTL.
    """

    def __init__(self, ttl_seconds: int = 60):
        self._cache: Dict[str, Any] = {}
        self._timestamps: Dict[str, float] = {}
        self._lock = threading.RLock()
        self._ttl = ttl_seconds

    def _is_stale(self, key: str) -> bool:
        if key not in self._timestamps:
            return True
        return (time.time() - self._timestamps[key]) > self._ttl

    def get_json(self, path: str, force_reload: bool = False) -> Dict[str, Any]:
        """Return the cached file within TTL, otherwise reload it."""
        with self._lock:
            if not force_reload and path in self._cache and not self._is_stale(path):
                return self._cache[path]

            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)

            self._cache[path] = data
            self._timestamps[path] = time.time()
            return data

    def invalidate(self, path: Optional[str] = None) -> None:
        """Invalidate cache for a specific path or all paths."""
        with self._lock:
            if path:
                self._cache.pop(path, None)
                self._timestamps.pop(path, None)
            else:
                self._cache.clear()
                self._timestamps.clear()


# Global cached config instance
_config_cache = CachedConfig(ttl_seconds=CONFIG_CACHE_TTL)


def load_json_cached(path: str) -> Dict[str, Any]:
    return _config_cache.get_json(path)


def load_default_constants() -> CampaignConstants:
    """
    Campaign constants from BENE_CONSTANTS_PATH.

    Raises:
        FileNotFoundError: no constants file is deployed
        ConfigurationError: the file holds invalid constants
    """
    return CampaignConstants.from_dict(load_json_cached(CONSTANTS_PATH))


def invalidate_config_cache() -> None:
    _config_cache.invalidate()


# ============================================================
# Validation
# ============================================================

def validate_config() -> Dict[str, bool]:
    """
    Check the deployed configuration.
    Returns dict of check name -> ok.
    """
    checks = {"constants_file": Path(CONSTANTS_PATH).exists()}

    try:
        resolve_variant(CONTRACT_VERSION)
        checks["contract_version"] = True
    except ValueError:
        checks["contract_version"] = False

    return checks


# ============================================================
# Feature Flags
# ============================================================

def is_production() -> bool:
    """Check if running in production mode."""
    return ENV == "prod"


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("BENE_DEBUG", "").lower() in ("1", "true", "yes")
