"""Custom exceptions for VHM operations."""

from __future__ import annotations

from typing import Any


class VhmError(Exception):
    """Base exception for all VHM operations."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class SiteValidationError(VhmError):
    """A site record is missing a required field or carries a contradictory one."""

    def __init__(self, field: str, message: str):
        super().__init__(f"Invalid site: {field}: {message}", exit_code=2)
        self.field = field

    @classmethod
    def from_pydantic(cls, exc: Any) -> SiteValidationError:
        """Build from a ``pydantic.ValidationError``, naming the first bad field."""
        err = exc.errors()[0]
        names = [part for part in err.get("loc", ()) if isinstance(part, str) and part not in ("static", "proxy")]
        field = names[-1] if names else "kind"
        return cls(field, err.get("msg", "invalid value"))


class SiteNotFoundError(VhmError):
    """No site record is stored under the requested domain."""

    def __init__(self, domain: str):
        super().__init__(f"Site not found: {domain}")
        self.domain = domain


class SiteConflictError(VhmError):
    """A site record already exists under the requested domain."""

    def __init__(self, domain: str):
        super().__init__(f"Site already exists: {domain}")
        self.domain = domain


class PersistenceError(VhmError):
    """Reading or writing the site store failed."""
