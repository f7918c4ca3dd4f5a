"""Kubernetes API access for kubevents.

This package holds the connection to the API server, the events transport
and the namespace-safe events client built on it.
"""

from kubevents.kubernetes.events import NamespacedEventClient

__all__ = [
    "NamespacedEventClient",
]
