"""Exceptions raised by the challenge solver."""

from __future__ import annotations


class SolverError(Exception):
    """Base class for failures reported back to cert-manager."""


class ConfigDecodeError(SolverError, ValueError):
    """The per-challenge solver config could not be decoded."""


class RequestConstructionError(SolverError):
    """The provider request could not be built (e.g. an invalid base URL)."""


class TransportError(SolverError):
    """The provider API could not be reached."""


class ProviderAPIError(SolverError):
    """The provider API answered with a status other than 200."""

    def __init__(self, message: str, status_code: int, url: str, method: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.method = method


class ClusterClientError(SolverError):
    """A Kubernetes client handle could not be built from the given credentials."""
