"""Tests for the webhook server."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from autodns_webhook.app import create_app
from autodns_webhook.config import AppConfig
from autodns_webhook.errors import ProviderAPIError
from autodns_webhook.models import ChallengeRequest

_GROUP = "acme.example.com"
_PATH = f"/apis/{_GROUP}/v1alpha1/autoDNS"


def _payload(action="present", **request_overrides) -> dict:
    request = {
        "uid": "uid-1",
        "action": action,
        "type": "dns-01",
        "dnsName": "example.com",
        "key": "abc123",
        "resourceNamespace": "default",
        "resolvedFQDN": "_acme-challenge.example.com",
        "resolvedZone": "example.com",
        "config": {"nameserver": "ns1", "url": "https://api.example.com"},
    }
    request.update(request_overrides)
    return {
        "apiVersion": "webhook.acme.cert-manager.io/v1alpha1",
        "kind": "ChallengePayload",
        "request": request,
    }


@pytest.fixture
def solver():
    mock_solver = MagicMock()
    mock_solver.name = "autoDNS"
    return mock_solver


@pytest.fixture
def client(solver):
    return TestClient(create_app(AppConfig(group_name=_GROUP), solver))


class TestSolveChallenge:
    def test_present_dispatches_to_solver(self, client, solver):
        resp = client.post(_PATH, json=_payload("present"))

        assert resp.status_code == 200
        body = resp.json()
        assert body["kind"] == "ChallengePayload"
        assert body["response"] == {"uid": "uid-1", "success": True}
        solver.present.assert_called_once()
        request = solver.present.call_args.args[0]
        assert isinstance(request, ChallengeRequest)
        assert request.resolved_fqdn == "_acme-challenge.example.com"
        assert request.config == {"nameserver": "ns1", "url": "https://api.example.com"}
        solver.clean_up.assert_not_called()

    def test_cleanup_dispatches_to_solver(self, client, solver):
        resp = client.post(_PATH, json=_payload("cleanup"))

        assert resp.json()["response"]["success"] is True
        solver.clean_up.assert_called_once()
        solver.present.assert_not_called()

    def test_solver_error_reported_as_failure(self, client, solver):
        solver.present.side_effect = ProviderAPIError(
            "Error calling API status: 401 Unauthorized url: https://api.example.com/zone/example.com/ns1 method: PATCH",
            status_code=401,
            url="https://api.example.com/zone/example.com/ns1",
            method="PATCH",
        )

        resp = client.post(_PATH, json=_payload("present"))

        assert resp.status_code == 200
        response = resp.json()["response"]
        assert response["uid"] == "uid-1"
        assert response["success"] is False
        assert "401 Unauthorized" in response["status"]["message"]

    def test_unknown_action_reported_as_failure(self, client, solver):
        resp = client.post(_PATH, json=_payload("renew"))

        response = resp.json()["response"]
        assert response["success"] is False
        assert "unknown action 'renew'" in response["status"]["message"]
        solver.present.assert_not_called()
        solver.clean_up.assert_not_called()

    def test_missing_request_is_bad_request(self, client):
        resp = client.post(_PATH, json={"kind": "ChallengePayload"})

        assert resp.status_code == 400

    def test_other_group_not_found(self, client):
        resp = client.post("/apis/other.example.com/v1alpha1/autoDNS", json=_payload())

        assert resp.status_code == 404


class TestDiscoveryAndHealth:
    def test_lists_solver_resource(self, client):
        resp = client.get(f"/apis/{_GROUP}/v1alpha1")

        assert resp.status_code == 200
        body = resp.json()
        assert body["groupVersion"] == f"{_GROUP}/v1alpha1"
        assert body["resources"][0]["name"] == "autoDNS"
        assert body["resources"][0]["verbs"] == ["create"]

    def test_healthz(self, client):
        resp = client.get("/healthz")

        assert resp.status_code == 200
        assert resp.text == "ok"


class TestMain:
    @patch("autodns_webhook.app.uvicorn.run")
    @patch("autodns_webhook.app.load_cluster_config")
    @patch("autodns_webhook.app.AutoDnsSolver")
    @patch("autodns_webhook.app.load_config")
    def test_initializes_solver_and_serves(self, mock_load_config, mock_solver_cls, mock_cluster, mock_run):
        from autodns_webhook.app import main

        mock_load_config.return_value = AppConfig(
            group_name=_GROUP,
            port=8443,
            tls_cert_file="/tls/tls.crt",
            tls_key_file="/tls/tls.key",
        )
        mock_solver_cls.return_value.name = "autoDNS"

        main()

        mock_solver_cls.return_value.initialize.assert_called_once_with(mock_cluster.return_value)
        mock_run.assert_called_once()
        kwargs = mock_run.call_args.kwargs
        assert kwargs["port"] == 8443
        assert kwargs["ssl_certfile"] == "/tls/tls.crt"
        assert kwargs["ssl_keyfile"] == "/tls/tls.key"

    @patch("autodns_webhook.app.uvicorn.run")
    def test_missing_group_name_aborts_startup(self, mock_run, monkeypatch):
        from autodns_webhook.app import main

        monkeypatch.delenv("GROUP_NAME", raising=False)

        with pytest.raises(ValueError, match="GROUP_NAME"):
            main()
        mock_run.assert_not_called()


class TestEndToEnd:
    def test_present_reaches_provider_api(self):
        import httpx

        from autodns_webhook.solver import AutoDnsSolver

        sent = []

        def handler(request):
            sent.append(request)
            return httpx.Response(200)

        app = create_app(AppConfig(group_name=_GROUP), AutoDnsSolver(_transport=httpx.MockTransport(handler)))
        config = {
            "nameserver": "ns1",
            "context": "42",
            "username": "u",
            "password": "p",
            "url": "https://api.example.com",
        }

        resp = TestClient(app).post(_PATH, json=_payload("present", config=config))

        assert resp.json()["response"]["success"] is True
        assert str(sent[0].url) == "https://api.example.com/zone/example.com/ns1"
        assert sent[0].headers["X-Domainrobot-Context"] == "42"

    def test_unencodable_context_reported_as_failure(self):
        import httpx

        from autodns_webhook.solver import AutoDnsSolver

        sent = []

        def handler(request):
            sent.append(request)
            return httpx.Response(200)

        app = create_app(AppConfig(group_name=_GROUP), AutoDnsSolver(_transport=httpx.MockTransport(handler)))
        config = {"nameserver": "ns1", "context": "kontext-ä", "url": "https://api.example.com"}

        resp = TestClient(app).post(_PATH, json=_payload("present", config=config))

        assert resp.status_code == 200
        response = resp.json()["response"]
        assert response["success"] is False
        assert "unable to execute request" in response["status"]["message"]
        assert sent == []
