"""Transport for the Kubernetes events resource.

This module sends create, update, patch and list requests for core/v1
events to the API server.
"""

import json
import logging
from typing import Any, Protocol

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from kubevents.errors import TransportError
from kubevents.kubernetes.connection import KubernetesConnection

logger = logging.getLogger(__name__)

EVENTS_RESOURCE = "events"
STRATEGIC_MERGE_PATCH = "application/strategic-merge-patch+json"


class ResourceTransport(Protocol):
    """The requests a namespace-safe events client issues.

    ``namespace`` is the scope of a single request; an empty namespace sends
    the request to the cluster-level path.
    """

    @property
    def api_version(self) -> str: ...

    def post(self, namespace: str, resource: str, body: Any) -> Any: ...

    def put(self, namespace: str, resource: str, name: str, body: Any) -> Any: ...

    def patch(self, namespace: str, resource: str, name: str, body: Any) -> Any: ...

    def list(self, namespace: str, field_selector: str) -> Any: ...


def decode_patch(data: bytes | str | dict | list) -> dict | list:
    """Decode a JSON patch body given as bytes or text.

    Args:
        data: The patch, either already decoded or as JSON bytes/text.

    Returns:
        The decoded patch.

    Raises:
        ValueError: If the bytes or text are not valid JSON.
    """
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    if isinstance(data, str):
        return json.loads(data)
    return data


class KubernetesEventTransport:
    """Events transport backed by the official Kubernetes client.

    Namespaced creates, updates and lists use the generated ``CoreV1Api``
    methods. Patches and requests without a namespace go through the
    ``ApiClient`` directly, to the namespaced or cluster-level events path.
    """

    def __init__(self, connection: KubernetesConnection, api_version: str = "v1"):
        """Initialize the events transport.

        Args:
            connection: The Kubernetes connection to use
            api_version: API version used to talk to the server.
        """
        self.connection = connection
        self._api_version = api_version
        self.api = connection.core_v1_api

    @property
    def api_version(self) -> str:
        return self._api_version

    def post(self, namespace: str, resource: str, body: Any) -> client.CoreV1Event:
        """Create an event.

        Args:
            namespace: Namespace to create the event in, empty for the cluster-level path.
            resource: The resource name, always ``events``.
            body: The event to create.

        Returns:
            The event returned by the server.
        """
        self._check_resource(resource)
        logger.debug(f"Creating event in namespace {namespace or '<cluster>'}")
        try:
            if namespace:
                return self.api.create_namespaced_event(namespace=namespace, body=body)
            return self._call_path("POST", body=body)
        except ApiException as e:
            raise TransportError("create", e.status, e.reason) from e

    def put(self, namespace: str, resource: str, name: str, body: Any) -> client.CoreV1Event:
        """Replace an event.

        Args:
            namespace: Namespace of the event, empty for the cluster-level path.
            resource: The resource name, always ``events``.
            name: Name of the event.
            body: The new event, including its resource version.

        Returns:
            The event returned by the server.
        """
        self._check_resource(resource)
        logger.debug(f"Updating event {namespace or '<cluster>'}/{name}")
        try:
            if namespace:
                return self.api.replace_namespaced_event(name=name, namespace=namespace, body=body)
            return self._call_path("PUT", name=name, body=body)
        except ApiException as e:
            raise TransportError("update", e.status, e.reason) from e

    def patch(self, namespace: str, resource: str, name: str, body: Any) -> client.CoreV1Event:
        """Apply a strategic merge patch to an event.

        The content type is set explicitly: the generated ``patch_namespaced_event``
        would send a dict body as a JSON Patch.

        Args:
            namespace: Namespace of the event, empty for the cluster-level path.
            resource: The resource name, always ``events``.
            name: Name of the event.
            body: The patch, as a dict or JSON bytes/text.

        Returns:
            The event returned by the server.
        """
        self._check_resource(resource)
        patch = decode_patch(body)
        logger.debug(f"Patching event {namespace or '<cluster>'}/{name}")
        try:
            return self._call_path(
                "PATCH", namespace=namespace, name=name, body=patch, content_type=STRATEGIC_MERGE_PATCH
            )
        except ApiException as e:
            raise TransportError("patch", e.status, e.reason) from e

    def list(self, namespace: str, field_selector: str) -> client.CoreV1EventList:
        """List events matching a field selector.

        Args:
            namespace: Namespace to list events in, empty to list in all namespaces.
            field_selector: The serialized field selector, empty to match all events.

        Returns:
            The event list returned by the server.
        """
        logger.debug(f"Listing events in namespace {namespace or '<all>'} with selector {field_selector!r}")
        try:
            if namespace:
                return self.api.list_namespaced_event(namespace, field_selector=field_selector)
            return self.api.list_event_for_all_namespaces(field_selector=field_selector)
        except ApiException as e:
            raise TransportError("list", e.status, e.reason) from e

    def _check_resource(self, resource: str) -> None:
        if resource != EVENTS_RESOURCE:
            raise ValueError(f"This transport only serves {EVENTS_RESOURCE}, not {resource}")

    def _call_path(
        self,
        method: str,
        body: Any,
        namespace: str = "",
        name: str | None = None,
        content_type: str = "application/json",
    ) -> client.CoreV1Event:
        path = "/api/v1"
        if namespace:
            path = f"{path}/namespaces/{namespace}"
        path = f"{path}/{EVENTS_RESOURCE}"
        if name:
            path = f"{path}/{name}"
        return self.connection.api_client.call_api(
            path,
            method,
            header_params={"Accept": "application/json", "Content-Type": content_type},
            body=body,
            response_type="CoreV1Event",
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
        )
