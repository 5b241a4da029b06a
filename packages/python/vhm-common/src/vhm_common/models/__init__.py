"""Shared Pydantic models."""

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
    "ArtifactStatus",
    "AuditEvent",
    "CommandOutcome",
    "FailureKind",
    "ProxySite",
    "Site",
    "SiteOperationResult",
    "StaticSite",
    "SyncResult",
    "SyncStatus",
    "parse_site",
]
