"""cert-manager DNS-01 webhook solver for the AutoDNS zone API."""
