"""AutoDNS solver — add/remove challenge TXT records via the Domainrobot zone API."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any

import httpx
from kubernetes import client as kube_client

from autodns_webhook.errors import (
    ClusterClientError,
    ConfigDecodeError,
    ProviderAPIError,
    RequestConstructionError,
    TransportError,
)
from autodns_webhook.models import ChallengeRequest, ProviderConfig, RecordChangeDocument, ResourceRecord
from autodns_webhook.solver.base import ChallengeSolver

logger = logging.getLogger(__name__)

_SOLVER_NAME = "autoDNS"
_CONTEXT_HEADER = "X-Domainrobot-Context"


def load_provider_config(raw: Any) -> ProviderConfig:
    """Decode the per-challenge solver config.

    ``raw`` is whatever cert-manager attached to the challenge: a decoded JSON
    object, JSON text/bytes, or nothing. Nothing (or an empty blob) yields the
    zero-value config, as does a JSON ``null``.

    Raises:
        ConfigDecodeError: the blob is not a JSON object of string fields.
    """
    if raw is None or raw in (b"", ""):
        return ProviderConfig()
    try:
        data = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
        if data is None:
            return ProviderConfig()
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return ProviderConfig.from_dict(data)
    except ValueError as err:
        raise ConfigDecodeError(f"error decoding solver config: {err}") from err


class AutoDnsSolver(ChallengeSolver):
    """Solver backed by the AutoDNS (InterNetX Domainrobot) JSON API."""

    def __init__(self, _transport: httpx.BaseTransport | None = None) -> None:
        self._transport = _transport
        # Set once by initialize(); not used when solving challenges.
        self._kube: kube_client.CoreV1Api | None = None

    @property
    def name(self) -> str:
        return _SOLVER_NAME

    def initialize(self, kube_config: kube_client.Configuration) -> None:
        if kube_config is None or not kube_config.host:
            raise ClusterClientError("Kubernetes client configuration has no API server host")
        try:
            self._kube = kube_client.CoreV1Api(kube_client.ApiClient(kube_config))
        except (ValueError, OSError) as err:
            raise ClusterClientError(f"unable to build Kubernetes client: {err}") from err

    def present(self, request: ChallengeRequest) -> None:
        cfg = self._effective_config(request)
        document = RecordChangeDocument(
            origin=request.resolved_zone,
            records_to_add=(ResourceRecord(name=request.resolved_fqdn, value=request.key),),
        )
        self._call_api("PATCH", document, cfg)
        logger.info("Presented TXT record %s in AutoDNS zone %s", request.resolved_fqdn, cfg.zone)

    def clean_up(self, request: ChallengeRequest) -> None:
        cfg = self._effective_config(request)
        document = RecordChangeDocument(
            origin=request.resolved_zone,
            records_to_remove=(ResourceRecord(name=request.resolved_fqdn, value=request.key),),
        )
        self._call_api("PATCH", document, cfg)
        logger.info("Removed TXT record %s from AutoDNS zone %s", request.resolved_fqdn, cfg.zone)

    @staticmethod
    def _effective_config(request: ChallengeRequest) -> ProviderConfig:
        cfg = load_provider_config(request.config)
        if not cfg.zone:
            cfg = replace(cfg, zone=request.resolved_zone)
        return cfg

    def _call_api(self, method: str, document: RecordChangeDocument, cfg: ProviderConfig) -> None:
        """Send one request to ``{url}/zone/{zone}/{nameserver}``; anything but 200 is a failure."""
        url = f"{cfg.url}/zone/{cfg.zone}/{cfg.name_server}"
        headers = {"Content-Type": "application/json", _CONTEXT_HEADER: cfg.context}

        with httpx.Client(transport=self._transport, timeout=None) as http:
            try:
                req = http.build_request(method, url, json=document.to_dict(), headers=headers)
                resp = http.send(req, auth=(cfg.username, cfg.password))
            except (httpx.InvalidURL, httpx.UnsupportedProtocol, UnicodeEncodeError) as err:
                raise RequestConstructionError(f"unable to execute request {err} url: {url} method: {method}") from err
            except httpx.TransportError as err:
                raise TransportError(f"{err} url: {url} method: {method}") from err

        if resp.status_code == httpx.codes.OK:
            return

        text = f"Error calling API status: {resp.status_code} {resp.reason_phrase} url: {url} method: {method}"
        logger.error(text)
        raise ProviderAPIError(text, status_code=resp.status_code, url=url, method=method)
