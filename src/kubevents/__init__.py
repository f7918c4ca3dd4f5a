"""Namespace-safe client for Kubernetes events."""

__version__ = "0.1.0"
__description__ = (
    "Namespace-safe create, update, patch and search of Kubernetes events "
    "by the object they are about"
)
