"""VHM Common: shared models and constants for the VHM CLI and API."""

from vhm_common.constants import (
    APACHE_SITES_AVAILABLE,
    APACHE_SITES_ENABLED,
    AUDIT_DB_PATH,
    AUDIT_JSONL_PATH,
    COMMAND_TIMEOUT,
    DEFAULT_HTTP_PORT,
    LOG_DIR,
    SITES_DIR,
    SSL_CERT_DIR,
    SSL_KEY_DIR,
    SSL_PORT,
)
from vhm_common.config import VhmConfig
from vhm_common.models.audit_event import AuditEvent
from vhm_common.models.site import ProxySite, Site, StaticSite, parse_site
from vhm_common.models.sync_result import (
    ArtifactStatus,
    CommandOutcome,
    FailureKind,
    SiteOperationResult,
    SyncResult,
    SyncStatus,
)

__all__ = [
    "APACHE_SITES_AVAILABLE",
    "APACHE_SITES_ENABLED",
    "AUDIT_DB_PATH",
    "AUDIT_JSONL_PATH",
    "ArtifactStatus",
    "AuditEvent",
    "COMMAND_TIMEOUT",
    "CommandOutcome",
    "DEFAULT_HTTP_PORT",
    "FailureKind",
    "LOG_DIR",
    "ProxySite",
    "SITES_DIR",
    "SSL_CERT_DIR",
    "SSL_KEY_DIR",
    "SSL_PORT",
    "Site",
    "SiteOperationResult",
    "StaticSite",
    "SyncResult",
    "SyncStatus",
    "VhmConfig",
    "parse_site",
]
