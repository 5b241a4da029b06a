"""Tests for the site service (store + Apache synchronisation)."""

from __future__ import annotations

import pytest

from vhm_common import FailureKind, ProxySite, StaticSite, SyncStatus, VhmConfig
from vhm.errors import PersistenceError, SiteConflictError, SiteNotFoundError, SiteValidationError
from vhm.services.site_service import SiteService, build_site
from vhm.services.synchronizer import ApacheSynchronizer

STATIC = {"domain": "example.com", "kind": "static", "documentRoot": "/var/www/example", "port": 80}
PROXY = {
    "domain": "api.example.com",
    "kind": "proxy",
    "proxyTarget": "http://127.0.0.1:5000",
    "enableSSL": True,
}


class TestBuildSite:
    def test_accepts_model(self):
        site = StaticSite(domain="a.com", document_root="/srv")
        assert build_site(site) is site

    def test_missing_document_root(self):
        with pytest.raises(SiteValidationError) as exc_info:
            build_site({"domain": "a.com", "kind": "static"})
        assert exc_info.value.field == "documentRoot"
        assert exc_info.value.exit_code == 2

    def test_missing_proxy_target(self):
        with pytest.raises(SiteValidationError) as exc_info:
            build_site({"domain": "a.com", "kind": "proxy", "proxyTarget": "  "})
        assert exc_info.value.field == "proxyTarget"

    def test_contradictory_fields(self):
        with pytest.raises(SiteValidationError) as exc_info:
            build_site({"domain": "a.com", "kind": "proxy", "proxyTarget": "http://x", "documentRoot": "/srv"})
        assert exc_info.value.field == "documentRoot"
        assert "not allowed for proxy sites" in str(exc_info.value)

    def test_empty_foreign_field_ignored(self):
        site = build_site({"domain": "a.com", "kind": "static", "documentRoot": "/srv", "proxyTarget": ""})
        assert isinstance(site, StaticSite)

    def test_bad_domain(self):
        with pytest.raises(SiteValidationError) as exc_info:
            build_site({"domain": "../../etc/passwd", "kind": "static", "documentRoot": "/srv"})
        assert exc_info.value.field == "domain"

    def test_injected_directive(self):
        with pytest.raises(SiteValidationError) as exc_info:
            build_site({"domain": "a.com", "kind": "static", "documentRoot": "/srv/a\n    Include /etc/evil.conf"})
        assert exc_info.value.field == "documentRoot"

    def test_unknown_kind(self):
        with pytest.raises(SiteValidationError) as exc_info:
            build_site({"domain": "a.com", "kind": "redirect"})
        assert exc_info.value.field == "kind"


class TestCreate:
    def test_static_site(self, service: SiteService, tmp_config: VhmConfig, fake_apache):
        result = service.create(STATIC)

        assert result.status is SyncStatus.OK
        assert result.message == "Site example.com created."
        assert service.get("example.com") == result.site
        config = tmp_config.available_conf("example.com").read_text()
        assert "ServerName example.com" in config
        assert 'DocumentRoot "/var/www/example"' in config
        assert "SSLEngine" not in config
        assert tmp_config.enabled_conf("example.com").is_symlink()

    def test_proxy_site_with_ssl(self, service: SiteService, tmp_config: VhmConfig):
        result = service.create(PROXY)

        # No certificate on disk yet.
        assert result.status is SyncStatus.WARNING
        config = tmp_config.available_conf("api.example.com").read_text()
        plain, tls = [b for b in config.split("</VirtualHost>") if b.strip()]
        assert '"ws://127.0.0.1:5000/$1"' in plain
        assert '"wss://127.0.0.1:5000/$1"' in tls

    def test_enable_failure_keeps_record(self, service: SiteService, fake_apache):
        fake_apache.fail["a2ensite"] = "ERROR: could not enable"
        result = service.create(STATIC)

        assert result.status is SyncStatus.WARNING
        assert result.message == "Site example.com created. Apache update requires manual action."
        assert "ERROR: could not enable" in result.warnings[0]
        assert service.get("example.com").domain == "example.com"

    def test_duplicate(self, service: SiteService):
        service.create(STATIC)
        with pytest.raises(SiteConflictError):
            service.create(STATIC)

    def test_invalid_input_touches_nothing(self, service: SiteService, tmp_config: VhmConfig, fake_apache):
        with pytest.raises(SiteValidationError):
            service.create({"domain": "a.com", "kind": "static"})
        assert service.list() == []
        assert list(tmp_config.apache_sites_available.iterdir()) == []
        assert fake_apache.calls == []

    def test_write_failure_not_stored(self, store, fake_apache, tmp_config: VhmConfig, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        cfg = tmp_config.model_copy(update={"apache_sites_available": blocker / "x"})
        service = SiteService(store, ApacheSynchronizer(cfg))

        result = service.create(STATIC)

        assert result.failed
        assert result.failure_kind is FailureKind.WRITE
        assert result.site is None
        assert not store.exists("example.com")
        assert fake_apache.calls == []

    def test_store_failure_discards_config(self, service: SiteService, tmp_config: VhmConfig, monkeypatch):
        def broken_put(site):
            raise PersistenceError("disk full")

        monkeypatch.setattr(service.store, "put", broken_put)
        with pytest.raises(PersistenceError):
            service.create(STATIC)
        assert not tmp_config.available_conf("example.com").exists()


class TestUpdate:
    def test_same_domain(self, service: SiteService, tmp_config: VhmConfig):
        service.create(STATIC)
        result = service.update("example.com", {**STATIC, "documentRoot": "/srv/new"})

        assert result.status is SyncStatus.OK
        assert service.get("example.com").document_root == "/srv/new"
        assert 'DocumentRoot "/srv/new"' in tmp_config.available_conf("example.com").read_text()

    def test_switch_kind(self, service: SiteService):
        service.create(STATIC)
        service.update(
            "example.com",
            {"domain": "example.com", "kind": "proxy", "proxyTarget": "http://localhost:3000"},
        )
        site = service.get("example.com")
        assert isinstance(site, ProxySite)
        assert "documentRoot" not in site.to_document()

    def test_rename(self, service: SiteService, tmp_config: VhmConfig, fake_apache):
        service.create({**STATIC, "domain": "old.com"})
        fake_apache.calls.clear()

        result = service.update("old.com", {**STATIC, "domain": "new.com"})

        assert result.status is SyncStatus.OK
        assert [site.domain for site in service.list()] == ["new.com"]
        assert not tmp_config.available_conf("old.com").exists()
        assert not tmp_config.enabled_conf("old.com").is_symlink()
        assert tmp_config.enabled_conf("new.com").is_symlink()
        names = fake_apache.names()
        assert names.index("a2dissite old.com.conf") < names.index("a2ensite new.com.conf")
        assert names[-1] == "systemctl reload apache2"

    def test_rename_onto_stored_site(self, service: SiteService):
        service.create({**STATIC, "domain": "a.com"})
        service.create({**STATIC, "domain": "b.com"})
        with pytest.raises(SiteConflictError):
            service.update("a.com", {**STATIC, "domain": "b.com"})
        assert {site.domain for site in service.list()} == {"a.com", "b.com"}

    def test_rename_collision(self, service: SiteService, tmp_config: VhmConfig, fake_apache):
        service.create({**STATIC, "domain": "old.com"})
        tmp_config.available_conf("taken.com").write_text("# hand-written\n")
        fake_apache.calls.clear()

        result = service.update("old.com", {**STATIC, "domain": "taken.com"})

        assert result.failed
        assert result.failure_kind is FailureKind.COLLISION
        assert service.get("old.com").domain == "old.com"
        assert tmp_config.available_conf("taken.com").read_text() == "# hand-written\n"
        assert fake_apache.calls == []

    def test_rename_undone_when_old_record_cannot_be_removed(
        self, service: SiteService, tmp_config: VhmConfig, fake_apache, monkeypatch
    ):
        service.create({**STATIC, "domain": "old.com"})
        fake_apache.calls.clear()
        real_remove = service.store.remove

        def remove(domain):
            if domain == "old.com":
                raise PersistenceError("read-only")
            real_remove(domain)

        monkeypatch.setattr(service.store, "remove", remove)
        with pytest.raises(PersistenceError):
            service.update("old.com", {**STATIC, "domain": "new.com"})

        assert [site.domain for site in service.list()] == ["old.com"]
        assert not tmp_config.available_conf("new.com").exists()
        assert tmp_config.enabled_conf("old.com").is_symlink()
        assert fake_apache.calls == []

    def test_missing(self, service: SiteService):
        with pytest.raises(SiteNotFoundError):
            service.update("nope.com", STATIC)

    def test_store_failure_restores_previous_config(self, service: SiteService, tmp_config: VhmConfig, monkeypatch):
        service.create(STATIC)
        before = tmp_config.available_conf("example.com").read_text()

        def broken_put(site):
            raise PersistenceError("disk full")

        monkeypatch.setattr(service.store, "put", broken_put)
        with pytest.raises(PersistenceError):
            service.update("example.com", {**STATIC, "documentRoot": "/srv/new"})
        assert tmp_config.available_conf("example.com").read_text() == before


class TestDelete:
    def test_delete(self, service: SiteService, tmp_config: VhmConfig):
        service.create(STATIC)
        result = service.delete("example.com")

        assert result.status is SyncStatus.OK
        assert result.message == "Site example.com deleted."
        assert service.list() == []
        assert not tmp_config.available_conf("example.com").exists()

    def test_delete_with_apache_failure(self, service: SiteService, fake_apache):
        service.create(STATIC)
        fake_apache.fail["systemctl"] = "Job for apache2.service failed"
        result = service.delete("example.com")
        assert result.status is SyncStatus.WARNING
        assert service.list() == []

    def test_delete_corrupt_record(self, service: SiteService, store, tmp_config: VhmConfig, fake_apache):
        store.sites_dir.mkdir(parents=True)
        (store.sites_dir / "broken.com.json").write_text("{not json")
        tmp_config.available_conf("broken.com").write_text("# stale\n")

        result = service.delete("broken.com")

        assert result.ok
        assert not store.exists("broken.com")
        assert not tmp_config.available_conf("broken.com").exists()
        assert "a2dissite broken.com.conf" in fake_apache.names()

    def test_delete_rejects_path_domain(self, service: SiteService, tmp_config: VhmConfig, fake_apache):
        (tmp_config.sites_dir.parent / "outside.json").write_text("{}")
        with pytest.raises(SiteNotFoundError):
            service.delete("../outside")
        assert (tmp_config.sites_dir.parent / "outside.json").exists()
        assert fake_apache.calls == []

    def test_delete_missing(self, service: SiteService, fake_apache):
        with pytest.raises(SiteNotFoundError):
            service.delete("nope.com")
        assert fake_apache.calls == []


class TestSyncAndStatus:
    def test_sync_retries_after_warning(self, service: SiteService, fake_apache):
        fake_apache.fail["a2ensite"] = "busy"
        service.create(STATIC)
        assert not service.status("example.com").in_sync

        del fake_apache.fail["a2ensite"]
        result = service.sync_site("example.com")
        assert result.status is SyncStatus.OK
        assert service.status("example.com").in_sync

    def test_status_all(self, service: SiteService):
        service.create(STATIC)
        service.create({**STATIC, "domain": "b.com"})
        assert [s.domain for s in service.status_all()] == ["b.com", "example.com"]
