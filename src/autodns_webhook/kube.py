"""Kubernetes credential loading for the hosting cluster."""

from __future__ import annotations

import logging

from kubernetes import config as kube_config
from kubernetes.client import Configuration

from autodns_webhook.errors import ClusterClientError

logger = logging.getLogger(__name__)


def load_cluster_config() -> Configuration:
    """Return client configuration for the cluster the webhook runs in.

    Uses the pod's service account when available, otherwise the local
    kubeconfig (useful when running the webhook outside the cluster).
    """
    configuration = Configuration()
    try:
        kube_config.load_incluster_config(client_configuration=configuration)
        return configuration
    except kube_config.ConfigException:
        logger.info("No in-cluster service account found, falling back to kubeconfig")

    try:
        kube_config.load_kube_config(client_configuration=configuration)
    except kube_config.ConfigException as err:
        raise ClusterClientError(f"unable to load Kubernetes credentials: {err}") from err
    return configuration
