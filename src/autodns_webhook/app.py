"""Webhook server entry point — serves cert-manager ChallengePayload requests."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse

from autodns_webhook.config import AppConfig, load_config
from autodns_webhook.errors import SolverError
from autodns_webhook.kube import load_cluster_config
from autodns_webhook.models import ChallengeRequest, ChallengeResponse
from autodns_webhook.solver import AutoDnsSolver, ChallengeSolver

logger = logging.getLogger(__name__)

_API_VERSION = "v1alpha1"
_PAYLOAD_API_VERSION = "webhook.acme.cert-manager.io/v1alpha1"
_PAYLOAD_KIND = "ChallengePayload"


def _solve(solver: ChallengeSolver, request: ChallengeRequest) -> ChallengeResponse:
    """Run the requested action and fold any solver failure into the response."""
    if request.action == "present":
        action = solver.present
    elif request.action == "cleanup":
        action = solver.clean_up
    else:
        logger.warning("Rejected challenge %s with unknown action '%s'", request.uid, request.action)
        return ChallengeResponse(uid=request.uid, success=False, message=f"unknown action '{request.action}'")

    try:
        action(request)
    except SolverError as err:
        return ChallengeResponse(uid=request.uid, success=False, message=str(err))
    return ChallengeResponse(uid=request.uid, success=True)


def create_app(config: AppConfig, solver: ChallengeSolver) -> FastAPI:
    """Build the webhook API for ``solver`` under ``config.group_name``."""
    app = FastAPI(title="autodns-webhook", docs_url=None, redoc_url=None, openapi_url=None)
    group_version = f"{config.group_name}/{_API_VERSION}"

    @app.get("/healthz", response_class=PlainTextResponse)
    def healthz() -> str:
        return "ok"

    # Discovery — lets the aggregated API server list the solver resource
    @app.get(f"/apis/{group_version}")
    def api_resources() -> dict:
        return {
            "kind": "APIResourceList",
            "apiVersion": "v1",
            "groupVersion": group_version,
            "resources": [
                {
                    "name": solver.name,
                    "singularName": solver.name,
                    "namespaced": False,
                    "kind": _PAYLOAD_KIND,
                    "verbs": ["create"],
                }
            ],
        }

    # Challenge — cert-manager POSTs a ChallengePayload for each present/cleanup
    @app.post(f"/apis/{group_version}/{solver.name}")
    def solve_challenge(payload: dict = Body(...)) -> dict:
        raw_request = payload.get("request")
        if not isinstance(raw_request, dict):
            logger.warning("Rejected ChallengePayload without a request")
            raise HTTPException(status_code=400, detail="ChallengePayload has no request")

        request = ChallengeRequest.from_dict(raw_request)
        response = _solve(solver, request)
        return {
            "apiVersion": payload.get("apiVersion", _PAYLOAD_API_VERSION),
            "kind": _PAYLOAD_KIND,
            "response": response.to_dict(),
        }

    return app


def main() -> None:
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    solver = AutoDnsSolver()
    solver.initialize(load_cluster_config())
    logger.info("Serving solver %s under API group %s", solver.name, config.group_name)

    uvicorn.run(
        create_app(config, solver),
        host=config.host,
        port=config.port,
        ssl_certfile=config.tls_cert_file,
        ssl_keyfile=config.tls_key_file,
        log_level=config.log_level.lower(),
    )
