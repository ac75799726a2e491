"""Abstract base class for cert-manager DNS-01 challenge solvers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from kubernetes.client import Configuration

from autodns_webhook.models import ChallengeRequest


class ChallengeSolver(ABC):
    """Interface the webhook host dispatches ChallengePayload requests to."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Solver name, served as the webhook API resource name."""

    @abstractmethod
    def initialize(self, kube_config: Configuration) -> None:
        """Prepare the solver once at startup.

        Args:
            kube_config: Credentials for the Kubernetes API of the hosting cluster.
        """

    @abstractmethod
    def present(self, request: ChallengeRequest) -> None:
        """Publish the TXT record for a DNS-01 challenge.

        Args:
            request: Challenge decoded from cert-manager (resolved FQDN, zone and key).
        """

    @abstractmethod
    def clean_up(self, request: ChallengeRequest) -> None:
        """Remove the TXT record published by :meth:`present`.

        Args:
            request: The same challenge that was presented.
        """
