"""Namespace-safe client for Kubernetes events.

Events are created, updated and patched in their own namespace, which must
match the namespace the client is bound to unless the client is bound to
no namespace at all. Events about an object are found with a field
selector over the involved object.
"""

import logging
from typing import Any

from kubevents.errors import NamespaceMismatchError
from kubevents.fields import (
    INVOLVED_OBJECT_KIND,
    INVOLVED_OBJECT_NAMESPACE,
    INVOLVED_OBJECT_UID,
    FieldSelector,
    involved_object_name_field_label,
)
from kubevents.kubernetes.transport import EVENTS_RESOURCE, ResourceTransport
from kubevents.references import ReferenceResolver

logger = logging.getLogger(__name__)


def _event_metadata(event: Any) -> tuple[str, str]:
    """Return the namespace and name of an event model or dict."""
    if isinstance(event, dict):
        metadata = event.get("metadata") or {}
        return metadata.get("namespace") or "", metadata.get("name") or ""
    metadata = getattr(event, "metadata", None)
    if metadata is None:
        return "", ""
    return metadata.namespace or "", metadata.name or ""


def build_involved_object_selector(
    api_version: str,
    name: str | None = None,
    namespace: str | None = None,
    kind: str | None = None,
    uid: str | None = None,
) -> FieldSelector:
    """Build a field selector over the involved object of events.

    Only the arguments that are not None become clauses, in the order
    name, namespace, kind, uid.

    Args:
        api_version: API version used to talk to the server; decides the name field label.
        name: Name of the involved object.
        namespace: Namespace of the involved object.
        kind: Kind of the involved object.
        uid: UID of the involved object.

    Returns:
        The field selector.
    """
    clauses: dict[str, str] = {}
    if name is not None:
        clauses[involved_object_name_field_label(api_version)] = name
    if namespace is not None:
        clauses[INVOLVED_OBJECT_NAMESPACE] = namespace
    if kind is not None:
        clauses[INVOLVED_OBJECT_KIND] = kind
    if uid is not None:
        clauses[INVOLVED_OBJECT_UID] = uid
    return FieldSelector(clauses)


class NamespacedEventClient:
    """Client for the events resource bound to a namespace.

    An empty namespace binds the client to the whole cluster: events of any
    namespace are accepted. A non-empty namespace refuses every event, or
    searched object, living elsewhere; the refusal happens before any
    request is sent.
    """

    def __init__(self, transport: ResourceTransport, namespace: str | None = None):
        """Initialize the events client.

        Args:
            transport: The transport used to talk to the API server
            namespace: Namespace the client is bound to. If None or empty, the client is cluster-wide.
        """
        self.transport = transport
        self.namespace = namespace or ""

    def create_in_namespace(self, event: Any) -> Any:
        """Create an event in the event's own namespace.

        Args:
            event: The event to create.

        Returns:
            The copy of the event returned by the server.

        Raises:
            NamespaceMismatchError: If the event belongs to another namespace than the client.
            TransportError: If the request fails.
        """
        namespace, _ = _event_metadata(event)
        self._check_namespace("create", namespace)
        return self.transport.post(namespace, EVENTS_RESOURCE, body=event)

    def update_in_namespace(self, event: Any) -> Any:
        """Replace an existing event, addressed by its own namespace and name.

        The event must carry its resource version; without one the server
        rejects the update.

        Args:
            event: The updated event.

        Returns:
            The copy of the event returned by the server.

        Raises:
            NamespaceMismatchError: If the event belongs to another namespace than the client.
            TransportError: If the request fails.
        """
        namespace, name = _event_metadata(event)
        self._check_namespace("update", namespace)
        return self.transport.put(namespace, EVENTS_RESOURCE, name, body=event)

    def patch_in_namespace(self, event: Any, data: bytes | str | dict) -> Any:
        """Apply a strategic merge patch to an existing event.

        Args:
            event: The event to patch; only its namespace and name are used.
            data: The patch body.

        Returns:
            The copy of the event returned by the server.

        Raises:
            NamespaceMismatchError: If the event belongs to another namespace than the client.
            TransportError: If the request fails.
        """
        namespace, name = _event_metadata(event)
        self._check_namespace("patch", namespace)
        return self.transport.patch(namespace, EVENTS_RESOURCE, name, body=data)

    def search(self, scheme: ReferenceResolver, obj_or_ref: Any) -> Any:
        """Find the events about an object.

        Args:
            scheme: Resolver turning the object into an object reference.
            obj_or_ref: The object, or a reference to it.

        Returns:
            The list of events about the object.

        Raises:
            ReferenceResolutionError: If the object cannot be resolved.
            NamespaceMismatchError: If the object lives in another namespace than the client.
            TransportError: If the request fails.
        """
        ref = scheme.resolve(obj_or_ref)
        self._check_namespace("search", ref.namespace or "")
        field_selector = self.build_field_selector(
            name=ref.name or None,
            namespace=ref.namespace or None,
            kind=ref.kind or None,
            uid=ref.uid or None,
        )
        logger.debug(f"Searching events about {ref.kind} {ref.namespace or ''}/{ref.name or ''}")
        return self.transport.list(self.namespace, field_selector=str(field_selector))

    def build_field_selector(
        self,
        name: str | None = None,
        namespace: str | None = None,
        kind: str | None = None,
        uid: str | None = None,
    ) -> FieldSelector:
        """Build a field selector over the involved object of events.

        Only the given arguments become clauses. The result can be passed
        to list and watch calls.

        Args:
            name: Name of the involved object.
            namespace: Namespace of the involved object.
            kind: Kind of the involved object.
            uid: UID of the involved object.

        Returns:
            The field selector.
        """
        return build_involved_object_selector(
            self.transport.api_version, name=name, namespace=namespace, kind=kind, uid=uid
        )

    def _check_namespace(self, operation: str, namespace: str) -> None:
        if self.namespace and namespace != self.namespace:
            raise NamespaceMismatchError(operation, namespace, self.namespace)
