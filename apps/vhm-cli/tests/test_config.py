"""Tests for VhmConfig."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from vhm_common import VhmConfig


class TestVhmConfig:
    def test_defaults(self, monkeypatch):
        for name in ("VHM_SITES_DIR", "VHM_APACHE_SITES_AVAILABLE", "VHM_RELOAD_CMD", "VHM_COMMAND_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)
        cfg = VhmConfig()
        assert cfg.sites_dir == Path("/var/lib/vhm/sites")
        assert cfg.apache_sites_available == Path("/etc/apache2/sites-available")
        assert cfg.reload_cmd == ["sudo", "systemctl", "reload", "apache2"]
        assert cfg.command_timeout == 30.0

    def test_derived_paths(self, tmp_config: VhmConfig):
        assert tmp_config.conf_name("example.com") == "example.com.conf"
        assert tmp_config.available_conf("example.com") == tmp_config.apache_sites_available / "example.com.conf"
        assert tmp_config.enabled_conf("example.com") == tmp_config.apache_sites_enabled / "example.com.conf"
        assert tmp_config.site_file("example.com") == tmp_config.sites_dir / "example.com.json"

    def test_from_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("VHM_SITES_DIR", str(tmp_path / "sites"))
        monkeypatch.setenv("VHM_RELOAD_CMD", "apache2ctl graceful")
        monkeypatch.setenv("VHM_COMMAND_TIMEOUT", "7.5")
        cfg = VhmConfig()
        assert cfg.sites_dir == tmp_path / "sites"
        assert cfg.reload_cmd == ["apache2ctl", "graceful"]
        assert cfg.command_timeout == 7.5

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            VhmConfig(command_timeout=0)
