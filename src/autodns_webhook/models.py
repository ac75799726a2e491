"""Data classes exchanged with cert-manager and the AutoDNS zone API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

_CHALLENGE_TTL = 60

# JSON key -> attribute name
_PROVIDER_CONFIG_KEYS = {
    "zone": "zone",
    "nameserver": "name_server",
    "context": "context",
    "username": "username",
    "password": "password",
    "url": "url",
}


@dataclass(frozen=True)
class ProviderConfig:
    """AutoDNS endpoint and credentials, supplied per challenge by the issuer."""

    zone: str = ""
    name_server: str = ""
    context: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> ProviderConfig:
        """Build a config from decoded JSON, ignoring unknown keys.

        Raises:
            ValueError: a known key holds something other than a string or null.
        """
        values: dict[str, str] = {}
        for key, attr in _PROVIDER_CONFIG_KEYS.items():
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"field '{key}' must be a string, got {type(value).__name__}")
            values[attr] = value
        return cls(**values)


@dataclass(frozen=True)
class ChallengeRequest:
    """The ``request`` member of a cert-manager ChallengePayload."""

    uid: str
    action: str
    resolved_fqdn: str
    resolved_zone: str
    key: str
    type: str = "dns-01"
    dns_name: str = ""
    resource_namespace: str = ""
    allow_ambient_credentials: bool = False
    config: Any = None

    @classmethod
    def from_dict(cls, data: dict) -> ChallengeRequest:
        return cls(
            uid=data.get("uid", ""),
            action=data.get("action", ""),
            type=data.get("type", "dns-01"),
            dns_name=data.get("dnsName", ""),
            key=data.get("key", ""),
            resource_namespace=data.get("resourceNamespace", ""),
            resolved_fqdn=data.get("resolvedFQDN", ""),
            resolved_zone=data.get("resolvedZone", ""),
            allow_ambient_credentials=bool(data.get("allowAmbientCredentials", False)),
            config=data.get("config"),
        )


@dataclass(frozen=True)
class ResourceRecord:
    """A single record entry in an AutoDNS zone patch."""

    name: str
    value: str
    type: str = "TXT"
    ttl: int = _CHALLENGE_TTL
    pref: int | None = None

    def to_dict(self) -> dict:
        data = {"name": self.name, "value": self.value, "type": self.type, "ttl": self.ttl}
        if self.pref:
            data["pref"] = self.pref
        return data


@dataclass(frozen=True)
class RecordChangeDocument:
    """Body of ``PATCH /zone/{zone}/{nameserver}``: records to add or remove."""

    origin: str
    records_to_add: tuple[ResourceRecord, ...] = ()
    records_to_remove: tuple[ResourceRecord, ...] = ()

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"origin": self.origin}
        if self.records_to_add:
            data["resourceRecordsAdd"] = [r.to_dict() for r in self.records_to_add]
        if self.records_to_remove:
            data["resourceRecordsRem"] = [r.to_dict() for r in self.records_to_remove]
        return data


@dataclass(frozen=True)
class ChallengeResponse:
    """The ``response`` member of a ChallengePayload sent back to cert-manager."""

    uid: str
    success: bool
    message: str | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"uid": self.uid, "success": self.success}
        if not self.success:
            data["status"] = {"message": self.message or "", "reason": "Failure"}
        return data
