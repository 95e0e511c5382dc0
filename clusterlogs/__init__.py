"""Collect diagnostic logs from a local Kubernetes cluster and spot known failures."""

__version__ = "0.1.0"
