"""Result models for Apache synchronisation and site operations."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from vhm_common.models.site import Site


class SyncStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    FAILED = "failed"


class FailureKind(str, Enum):
    RENDER = "render"
    WRITE = "write"
    COLLISION = "collision"
    COMMAND = "command"
    TIMEOUT = "timeout"


class CommandOutcome(BaseModel):
    """One external command invocation and what it printed."""

    step: str
    command: list[str]
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    timeout: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        return self.stdout or self.stderr

    def describe(self) -> str:
        """Human-readable failure text including the raw command output."""
        cmd = " ".join(self.command)
        if self.timed_out:
            limit = f" after {self.timeout:g}s" if self.timeout else ""
            return f"Command timed out{limit}: {cmd}"
        detail = (self.stderr or self.stdout).rstrip()
        return f"Command failed: {cmd} (exit {self.returncode})\n{detail}".rstrip()


class SyncResult(BaseModel):
    """Outcome of a synchroniser call.

    ``ok`` means every step succeeded, ``warning`` means the config was written
    but one or more commands failed, ``failed`` means nothing was applied.
    """

    status: SyncStatus = SyncStatus.OK
    message: str = ""
    warnings: list[str] = Field(default_factory=list)
    error: Optional[str] = None
    failure_kind: Optional[FailureKind] = None
    output: str = ""
    outcomes: list[CommandOutcome] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is not SyncStatus.FAILED

    @property
    def failed(self) -> bool:
        return self.status is SyncStatus.FAILED

    @classmethod
    def failure(cls, kind: FailureKind, error: str, message: str = "") -> SyncResult:
        return cls(status=SyncStatus.FAILED, failure_kind=kind, error=error, message=message or error)

    def warn(self, text: str) -> None:
        self.warnings.append(text)
        if self.status is SyncStatus.OK:
            self.status = SyncStatus.WARNING

    def fail(self, kind: FailureKind, error: str) -> None:
        self.status = SyncStatus.FAILED
        self.failure_kind = kind
        self.error = error

    def record(self, outcome: CommandOutcome, *, fatal: bool = False) -> bool:
        """Attach a command outcome; failures become warnings unless ``fatal``."""
        self.outcomes.append(outcome)
        if outcome.ok:
            return True
        if fatal:
            kind = FailureKind.TIMEOUT if outcome.timed_out else FailureKind.COMMAND
            self.fail(kind, outcome.describe())
        else:
            self.warn(outcome.describe())
        return False

    def merge(self, other: SyncResult) -> SyncResult:
        self.outcomes.extend(other.outcomes)
        for text in other.warnings:
            self.warn(text)
        if other.failed:
            self.fail(other.failure_kind or FailureKind.COMMAND, other.error or "")
        if other.output:
            self.output = other.output
        return self


class SiteOperationResult(SyncResult):
    """A :class:`SyncResult` together with the record the operation persisted."""

    site: Optional[Site] = None

    @classmethod
    def from_sync(cls, result: SyncResult, site: Optional[Site] = None, message: str = "") -> SiteOperationResult:
        data = result.model_dump(exclude={"message", "site"})
        return cls(**data, site=site, message=message or result.message)


class ArtifactStatus(BaseModel):
    """Observed state of the Apache artifacts backing one site record."""

    domain: str
    available: bool = False
    enabled: bool = False
    current: bool = False
    ssl_certificate: Optional[str] = None
    cert_expiry: Optional[datetime] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def in_sync(self) -> bool:
        cert_ok = self.ssl_certificate in (None, "valid", "warning")
        return self.available and self.enabled and self.current and cert_ok
