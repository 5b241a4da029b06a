"""Central configuration for VHM tools."""

from __future__ import annotations

import os
import shlex
from pathlib import Path

from pydantic import BaseModel, Field

from vhm_common.constants import (
    APACHE_SITES_AVAILABLE,
    APACHE_SITES_ENABLED,
    AUDIT_DB_PATH,
    AUDIT_JSONL_PATH,
    COMMAND_TIMEOUT,
    CONFIGTEST_CMD,
    DISABLE_SITE_CMD,
    ENABLE_SITE_CMD,
    RELOAD_CMD,
    SITES_DIR,
    SSL_CERT_DIR,
    SSL_KEY_DIR,
)


def _env_path(name: str, default: Path) -> Path:
    env = os.environ.get(name)
    return Path(env) if env else default


def _env_cmd(name: str, default: tuple[str, ...]) -> list[str]:
    env = os.environ.get(name)
    if env:
        return shlex.split(env)
    return list(default)


def _env_timeout() -> float:
    env = os.environ.get("VHM_COMMAND_TIMEOUT")
    return float(env) if env else COMMAND_TIMEOUT


class VhmConfig(BaseModel):
    """Runtime configuration resolved once at startup."""

    sites_dir: Path = Field(default_factory=lambda: _env_path("VHM_SITES_DIR", SITES_DIR))
    apache_sites_available: Path = Field(
        default_factory=lambda: _env_path("VHM_APACHE_SITES_AVAILABLE", APACHE_SITES_AVAILABLE)
    )
    apache_sites_enabled: Path = Field(
        default_factory=lambda: _env_path("VHM_APACHE_SITES_ENABLED", APACHE_SITES_ENABLED)
    )
    ssl_cert_dir: Path = Field(default_factory=lambda: _env_path("VHM_SSL_CERT_DIR", SSL_CERT_DIR))
    ssl_key_dir: Path = Field(default_factory=lambda: _env_path("VHM_SSL_KEY_DIR", SSL_KEY_DIR))
    enable_site_cmd: list[str] = Field(default_factory=lambda: _env_cmd("VHM_ENABLE_SITE_CMD", ENABLE_SITE_CMD))
    disable_site_cmd: list[str] = Field(
        default_factory=lambda: _env_cmd("VHM_DISABLE_SITE_CMD", DISABLE_SITE_CMD)
    )
    reload_cmd: list[str] = Field(default_factory=lambda: _env_cmd("VHM_RELOAD_CMD", RELOAD_CMD))
    configtest_cmd: list[str] = Field(default_factory=lambda: _env_cmd("VHM_CONFIGTEST_CMD", CONFIGTEST_CMD))
    command_timeout: float = Field(default_factory=_env_timeout, gt=0)
    audit_jsonl_path: Path = Field(default_factory=lambda: _env_path("VHM_AUDIT_JSONL_PATH", AUDIT_JSONL_PATH))
    audit_db_path: Path = Field(default_factory=lambda: _env_path("VHM_AUDIT_DB_PATH", AUDIT_DB_PATH))

    def conf_name(self, domain: str) -> str:
        return f"{domain}.conf"

    def available_conf(self, domain: str) -> Path:
        return self.apache_sites_available / self.conf_name(domain)

    def enabled_conf(self, domain: str) -> Path:
        return self.apache_sites_enabled / self.conf_name(domain)

    def site_file(self, domain: str) -> Path:
        return self.sites_dir / f"{domain}.json"
