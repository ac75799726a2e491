"""Challenge solver contract and the AutoDNS implementation."""

from autodns_webhook.solver.autodns import AutoDnsSolver
from autodns_webhook.solver.base import ChallengeSolver

__all__ = ["AutoDnsSolver", "ChallengeSolver"]
