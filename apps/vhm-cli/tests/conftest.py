"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable

import pytest

from vhm_common import VhmConfig

from vhm.config import get_config
from vhm.services.site_service import SiteService
from vhm.services.site_store import SiteStore
from vhm.services.synchronizer import ApacheSynchronizer


@pytest.fixture
def tmp_config(tmp_path: Path) -> VhmConfig:
    """Return a VhmConfig pointing at temp directories."""
    (tmp_path / "apache" / "sites-available").mkdir(parents=True)
    (tmp_path / "apache" / "sites-enabled").mkdir(parents=True)
    return VhmConfig(
        sites_dir=tmp_path / "sites",
        apache_sites_available=tmp_path / "apache" / "sites-available",
        apache_sites_enabled=tmp_path / "apache" / "sites-enabled",
        ssl_cert_dir=tmp_path / "ssl" / "certs",
        ssl_key_dir=tmp_path / "ssl" / "private",
        enable_site_cmd=["a2ensite"],
        disable_site_cmd=["a2dissite"],
        reload_cmd=["systemctl", "reload", "apache2"],
        configtest_cmd=["apachectl", "configtest"],
        command_timeout=5.0,
        audit_jsonl_path=tmp_path / "log" / "audit.jsonl",
        audit_db_path=tmp_path / "lib" / "audit.db",
    )


class FakeApache:
    """Stands in for ``subprocess.run``: records argv, simulates a2ensite/a2dissite.

    ``fail`` maps a command name (``a2ensite``, ``systemctl``...) to the
    stderr it should fail with; ``timeout`` lists command names that hang.
    """

    def __init__(self, cfg: VhmConfig):
        self.cfg = cfg
        self.calls: list[list[str]] = []
        self.fail: dict[str, str] = {}
        self.timeout: set[str] = set()
        self.stdout: dict[str, str] = {}

    def __call__(self, argv: list[str], **kwargs) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(argv))
        name = argv[0]
        if name in self.timeout:
            raise subprocess.TimeoutExpired(argv, kwargs.get("timeout"))
        if name in self.fail:
            return subprocess.CompletedProcess(argv, 1, "", self.fail[name])
        if name == "a2ensite":
            link = self.cfg.apache_sites_enabled / argv[-1]
            if not link.is_symlink():
                link.symlink_to(self.cfg.apache_sites_available / argv[-1])
        elif name == "a2dissite":
            link = self.cfg.apache_sites_enabled / argv[-1]
            if link.is_symlink():
                link.unlink()
        return subprocess.CompletedProcess(argv, 0, self.stdout.get(name, ""), "")

    def names(self) -> list[str]:
        """Calls as ``"a2ensite example.com.conf"`` strings for order assertions."""
        return [" ".join(call) for call in self.calls]


@pytest.fixture
def fake_apache(tmp_config: VhmConfig, monkeypatch) -> FakeApache:
    fake = FakeApache(tmp_config)
    monkeypatch.setattr("vhm.services.apache.subprocess.run", fake)
    return fake


@pytest.fixture
def synchronizer(tmp_config: VhmConfig) -> ApacheSynchronizer:
    return ApacheSynchronizer(tmp_config)


@pytest.fixture
def store(tmp_config: VhmConfig) -> SiteStore:
    return SiteStore(tmp_config.sites_dir)


@pytest.fixture
def service(store: SiteStore, synchronizer: ApacheSynchronizer, fake_apache: FakeApache) -> SiteService:
    return SiteService(store, synchronizer)


@pytest.fixture
def vhm_env(tmp_config: VhmConfig, monkeypatch) -> Callable[[], VhmConfig]:
    """Point the process-wide config (env vars + cached get_config) at tmp_config."""
    env = {
        "VHM_SITES_DIR": tmp_config.sites_dir,
        "VHM_APACHE_SITES_AVAILABLE": tmp_config.apache_sites_available,
        "VHM_APACHE_SITES_ENABLED": tmp_config.apache_sites_enabled,
        "VHM_SSL_CERT_DIR": tmp_config.ssl_cert_dir,
        "VHM_SSL_KEY_DIR": tmp_config.ssl_key_dir,
        "VHM_ENABLE_SITE_CMD": "a2ensite",
        "VHM_DISABLE_SITE_CMD": "a2dissite",
        "VHM_RELOAD_CMD": "systemctl reload apache2",
        "VHM_CONFIGTEST_CMD": "apachectl configtest",
        "VHM_COMMAND_TIMEOUT": "5",
        "VHM_AUDIT_JSONL_PATH": tmp_config.audit_jsonl_path,
        "VHM_AUDIT_DB_PATH": tmp_config.audit_db_path,
        "VHM_ACTOR": "tester",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, str(value))
    get_config.cache_clear()
    yield get_config
    get_config.cache_clear()
