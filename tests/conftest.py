"""Shared test fixtures for autodns-webhook."""

import pytest

from autodns_webhook.models import ChallengeRequest

PROVIDER_CONFIG = {
    "nameserver": "ns1",
    "context": "42",
    "username": "u",
    "password": "p",
    "url": "https://api.example.com",
}


@pytest.fixture
def challenge_request():
    """Factory for a ChallengeRequest carrying the default provider config."""

    def _make(**overrides) -> ChallengeRequest:
        defaults = {
            "uid": "uid-1",
            "action": "present",
            "resolved_fqdn": "_acme-challenge.example.com",
            "resolved_zone": "example.com",
            "key": "abc123",
            "config": dict(PROVIDER_CONFIG),
        }
        defaults.update(overrides)
        return ChallengeRequest(**defaults)

    return _make
