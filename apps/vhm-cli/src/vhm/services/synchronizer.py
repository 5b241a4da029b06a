"""Apache synchroniser: projects site records onto sites-available/enabled.

Writing the config file is the only step whose failure is fatal. The
privileged enable/disable/reload commands are best-effort: when they fail
the result is downgraded to a warning that carries the raw command output,
and re-running :meth:`ApacheSynchronizer.apply` retries them.
"""

from __future__ import annotations

import logging

from jinja2 import TemplateError

from vhm_common import (
    ArtifactStatus,
    FailureKind,
    Site,
    SyncResult,
    SyncStatus,
    VhmConfig,
)

from vhm.services import apache, certs, vhost_renderer

log = logging.getLogger(__name__)


class ApacheSynchronizer:
    """Aligns Apache's on-disk and runtime state with site records."""

    def __init__(self, config: VhmConfig):
        self.config = config

    # -- rendering ----------------------------------------------------------

    def render(self, site: Site) -> str:
        return vhost_renderer.render_vhost(
            site,
            ssl_cert_dir=self.config.ssl_cert_dir,
            ssl_key_dir=self.config.ssl_key_dir,
        )

    # -- phases -------------------------------------------------------------

    def check_collision(self, domain: str) -> SyncResult | None:
        """Fail if a config file for ``domain`` already exists on disk."""
        path = self.config.available_conf(domain)
        if path.exists():
            return SyncResult.failure(
                FailureKind.COLLISION,
                f"{path} already exists and does not belong to a stored site",
            )
        return None

    def stage(self, site: Site) -> SyncResult:
        """Render and write ``<domain>.conf`` into sites-available."""
        path = self.config.available_conf(site.domain)
        try:
            content = self.render(site)
        except TemplateError as exc:
            log.error("Rendering vhost for %s failed: %s", site.domain, exc)
            return SyncResult.failure(FailureKind.RENDER, f"Cannot render config for {site.domain}: {exc}")
        try:
            vhost_renderer.write_vhost(path, content)
        except OSError as exc:
            log.error("Writing %s failed: %s", path, exc)
            return SyncResult.failure(FailureKind.WRITE, f"Cannot write {path}: {exc}")

        result = SyncResult(message=f"Wrote {path}")
        if site.enable_ssl:
            cert_file, key_file = vhost_renderer.cert_paths(
                site.domain,
                ssl_cert_dir=self.config.ssl_cert_dir,
                ssl_key_dir=self.config.ssl_key_dir,
            )
            status, _ = certs.check_cert(cert_file, key_file)
            if status == "missing":
                result.warn(f"SSL enabled but certificate {cert_file} or key {key_file} is missing")
        return result

    def activate(self, domain: str) -> SyncResult:
        """Enable the site and reload Apache; both steps are attempted."""
        result = SyncResult()
        result.record(apache.enable_site(self.config, self.config.conf_name(domain)))
        result.record(apache.reload_server(self.config))
        return result

    def deactivate(self, domain: str) -> SyncResult:
        """Disable the site and delete its config file, without reloading."""
        result = SyncResult()
        result.record(apache.disable_site(self.config, self.config.conf_name(domain)))
        result.merge(self.discard(domain))
        return result

    def discard(self, domain: str) -> SyncResult:
        """Delete the config file for ``domain``; a missing file is not an error."""
        result = SyncResult()
        path = self.config.available_conf(domain)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            result.warn(f"Cannot delete {path}: {exc}")
        return result

    # -- public operations --------------------------------------------------

    def apply(self, site: Site) -> SyncResult:
        """Render, write, enable and reload. Safe to repeat."""
        result = self.stage(site)
        if result.failed:
            return result
        result.merge(self.activate(site.domain))
        result.message = _summary(result, f"{site.domain} applied")
        return result

    def remove(self, domain: str) -> SyncResult:
        """Disable, delete the config file, reload. Every step is best-effort."""
        result = self.deactivate(domain)
        result.record(apache.reload_server(self.config))
        result.message = _summary(result, f"{domain} removed")
        return result

    def test(self) -> SyncResult:
        """Run Apache's config self-check and return its output verbatim."""
        result = SyncResult()
        outcome = apache.configtest(self.config)
        result.record(outcome, fatal=True)
        result.output = outcome.output
        result.message = "Apache configuration OK" if result.ok else "Apache configuration test failed"
        return result

    def reload(self) -> SyncResult:
        result = SyncResult()
        outcome = apache.reload_server(self.config)
        result.record(outcome, fatal=True)
        result.output = outcome.output
        result.message = "Apache reloaded" if result.ok else "Apache reload failed"
        return result

    # -- inspection ---------------------------------------------------------

    def inspect(self, site: Site) -> ArtifactStatus:
        """Compare the on-disk artifacts for ``site`` with what it should render to."""
        available = self.config.available_conf(site.domain)
        status = ArtifactStatus(
            domain=site.domain,
            available=available.is_file(),
            enabled=self.config.enabled_conf(site.domain).exists(),
        )
        if status.available:
            try:
                status.current = available.read_text() == self.render(site)
            except (OSError, TemplateError) as exc:
                log.warning("Cannot compare %s: %s", available, exc)
        if site.enable_ssl:
            cert_file, key_file = vhost_renderer.cert_paths(
                site.domain,
                ssl_cert_dir=self.config.ssl_cert_dir,
                ssl_key_dir=self.config.ssl_key_dir,
            )
            status.ssl_certificate, status.cert_expiry = certs.check_cert(cert_file, key_file)
        return status


def _summary(result: SyncResult, done: str) -> str:
    if result.status is SyncStatus.OK:
        return done
    return f"{done}; Apache update requires manual action"
