"""CLI configuration: singleton VhmConfig resolved at startup."""

from __future__ import annotations

from functools import lru_cache

from vhm_common import VhmConfig


@lru_cache(maxsize=1)
def get_config() -> VhmConfig:
    """Return the global VhmConfig (resolved once, cached)."""
    return VhmConfig()
