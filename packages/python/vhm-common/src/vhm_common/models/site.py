"""Site record model.

A site is either a *static* site (Apache serves files from a document root) or
a *proxy* site (Apache forwards to an upstream URL). The two variants share the
virtual-host fields and are discriminated by ``kind``; each carries only the
field that is meaningful for it.

Records are persisted with camelCase keys (``documentRoot``, ``serverAlias``,
``enableSSL``...). Documents from older releases that use an ``isProxy`` flag
instead of ``kind`` are still accepted by :func:`parse_site`.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel, to_snake

from vhm_common.constants import DEFAULT_HTTP_PORT

SiteKind = Literal["static", "proxy"]

# Document key carried by each variant.
VARIANT_FIELDS: dict[str, str] = {
    "static": "documentRoot",
    "proxy": "proxyTarget",
}

_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?"
_DOMAIN_RE = re.compile(rf"^{_LABEL}(?:\.{_LABEL})*$")
_ALIAS_RE = re.compile(rf"^(?:\*\.)?{_LABEL}(?:\.{_LABEL})*$")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def _directive_safe(value: str, *, spaces: bool) -> str:
    # Values are interpolated into Apache directives, one per line.
    if _CONTROL_RE.search(value):
        raise ValueError("must not contain control characters")
    if '"' in value:
        raise ValueError("must not contain double quotes")
    if not spaces and any(ch.isspace() for ch in value):
        raise ValueError("must not contain whitespace")
    return value


class _SiteBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    domain: str = Field(min_length=1, max_length=253)
    port: int = Field(default=DEFAULT_HTTP_PORT, ge=1, le=65535)
    server_alias: Optional[str] = None
    enable_ssl: bool = Field(default=False, alias="enableSSL")

    @field_validator("domain")
    @classmethod
    def _plain_hostname(cls, value: str) -> str:
        # Used verbatim in file names under the store and sites-available.
        if not _DOMAIN_RE.match(value):
            raise ValueError("must be a plain hostname (letters, digits, '-' and '.')")
        return value

    @field_validator("port", mode="before")
    @classmethod
    def _default_port(cls, value: Any) -> Any:
        return value or DEFAULT_HTTP_PORT

    @field_validator("server_alias", mode="before")
    @classmethod
    def _blank_alias(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("server_alias")
    @classmethod
    def _alias_hostnames(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        names = _directive_safe(value, spaces=True).split()
        if not all(_ALIAS_RE.match(name) for name in names):
            raise ValueError("must be space-separated hostnames (optionally *.-prefixed)")
        return " ".join(names)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the on-disk JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StaticSite(_SiteBase):
    """Virtual host serving files from ``document_root``."""

    kind: Literal["static"] = "static"
    document_root: str = Field(min_length=1)

    @field_validator("document_root")
    @classmethod
    def _safe_path(cls, value: str) -> str:
        return _directive_safe(value, spaces=True)


class ProxySite(_SiteBase):
    """Virtual host reverse-proxying to ``proxy_target``."""

    kind: Literal["proxy"] = "proxy"
    proxy_target: str = Field(min_length=1)

    @field_validator("proxy_target")
    @classmethod
    def _safe_target(cls, value: str) -> str:
        return _directive_safe(value, spaces=False)


Site = Annotated[Union[StaticSite, ProxySite], Field(discriminator="kind")]

_SITE_ADAPTER: TypeAdapter[Any] = TypeAdapter(Site)


def is_hostname(value: str) -> bool:
    return bool(_DOMAIN_RE.match(value))


def other_kind(kind: str) -> str:
    return "proxy" if kind == "static" else "static"


def parse_site(data: Mapping[str, Any]) -> StaticSite | ProxySite:
    """Validate a site document, accepting the legacy ``isProxy`` shape.

    Raises ``pydantic.ValidationError`` on invalid input.
    """
    doc = dict(data)
    is_proxy = doc.pop("isProxy", None)
    if "kind" not in doc:
        kind = "proxy" if is_proxy else "static"
        doc["kind"] = kind
        # Legacy documents always carried both fields, one of them unused.
        foreign = VARIANT_FIELDS[other_kind(kind)]
        doc.pop(foreign, None)
        doc.pop(to_snake(foreign), None)
    return _SITE_ADAPTER.validate_python(doc)
