"""Kubernetes connection management.

This module handles the connection to the Kubernetes API.
"""
import logging
import socket

from kubernetes import client, config

logger = logging.getLogger(__name__)


class KubernetesConnection:
    """Connection manager for the Kubernetes API.

    Loads the cluster configuration once and exposes the API clients the
    events transport needs.
    """

    def __init__(self, context: str | None = None):
        """Initialize the Kubernetes connection.

        Attempts to connect to the Kubernetes API using in-cluster config first,
        falling back to kubeconfig for local development.

        Args:
            context: Optional kubeconfig context to use instead of the current one.
        """
        self.context = context
        self._setup_connection()
        # Reported as the source host of events created through this connection
        self.hostname = socket.gethostname()

    def _setup_connection(self) -> None:
        """Set up the connection to the Kubernetes API."""
        try:
            # Try to load in-cluster config first (for when running in a pod)
            config.load_incluster_config()
            logger.info("Using in-cluster configuration")
        except config.ConfigException:
            try:
                config.load_kube_config(context=self.context)
                logger.info("Using kubeconfig configuration")
            except config.ConfigException as e:
                logger.error(
                    "Failed to load Kubernetes configuration. Ensure that the kubeconfig file is available and valid."
                )
                raise RuntimeError("Kubernetes configuration error: kubeconfig file is missing or invalid.") from e

        self.core_v1_api = client.CoreV1Api()
        self.api_client = self.core_v1_api.api_client
