"""Object references for the objects events are about.

This module turns Kubernetes objects (client models or plain dicts) into
references carrying their kind, name, namespace and UID.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from kubernetes import client

from kubevents.errors import ReferenceResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvolvedObjectReference:
    """Reference to the object an event is about.

    Attributes:
        kind: Kind of the object (e.g. ``Pod``).
        name: Name of the object.
        namespace: Namespace of the object, empty for cluster-scoped objects.
        uid: UID of the object.
        api_version: API version of the object (e.g. ``apps/v1``).
        resource_version: Resource version the reference was taken at.
        field_path: Path to a sub-object, if the reference points into one.
    """

    kind: str | None = None
    name: str | None = None
    namespace: str | None = None
    uid: str | None = None
    api_version: str | None = None
    resource_version: str | None = None
    field_path: str | None = None

    @classmethod
    def from_object_reference(cls, ref: client.V1ObjectReference) -> "InvolvedObjectReference":
        return cls(
            kind=ref.kind,
            name=ref.name,
            namespace=ref.namespace,
            uid=ref.uid,
            api_version=ref.api_version,
            resource_version=ref.resource_version,
            field_path=ref.field_path,
        )

    def to_object_reference(self) -> client.V1ObjectReference:
        return client.V1ObjectReference(
            api_version=self.api_version,
            kind=self.kind,
            name=self.name,
            namespace=self.namespace,
            uid=self.uid,
            resource_version=self.resource_version,
            field_path=self.field_path,
        )


class ReferenceResolver(Protocol):
    """Anything that can turn an object into an :class:`InvolvedObjectReference`."""

    def resolve(self, obj: Any) -> InvolvedObjectReference: ...


class Scheme:
    """Registry of Python types to their API version and kind.

    Objects read from the API server usually carry ``kind`` and
    ``api_version``; objects built locally often do not, and the scheme
    fills them in from the object's type.
    """

    def __init__(self):
        self._kinds: dict[type, tuple[str, str]] = {}

    def register(self, model: type, api_version: str, kind: str) -> None:
        """Register the API version and kind of a model type.

        Args:
            model: The Python type of the objects.
            api_version: API version of the objects (e.g. ``apps/v1``).
            kind: Kind of the objects (e.g. ``Deployment``).
        """
        self._kinds[model] = (api_version, kind)

    def object_kind(self, obj: Any) -> tuple[str, str] | None:
        """Look up the API version and kind registered for an object's type."""
        for model in type(obj).__mro__:
            if model in self._kinds:
                return self._kinds[model]
        return None

    def resolve(self, obj: Any) -> InvolvedObjectReference:
        return get_reference(self, obj)


def default_scheme() -> Scheme:
    """Build a scheme that knows the common core, apps and batch models."""
    scheme = Scheme()
    for model, api_version, kind in (
        (client.V1Pod, "v1", "Pod"),
        (client.V1Service, "v1", "Service"),
        (client.V1ConfigMap, "v1", "ConfigMap"),
        (client.V1Secret, "v1", "Secret"),
        (client.V1Node, "v1", "Node"),
        (client.V1Namespace, "v1", "Namespace"),
        (client.V1PersistentVolumeClaim, "v1", "PersistentVolumeClaim"),
        (client.V1Deployment, "apps/v1", "Deployment"),
        (client.V1StatefulSet, "apps/v1", "StatefulSet"),
        (client.V1DaemonSet, "apps/v1", "DaemonSet"),
        (client.V1ReplicaSet, "apps/v1", "ReplicaSet"),
        (client.V1Job, "batch/v1", "Job"),
        (client.V1CronJob, "batch/v1", "CronJob"),
    ):
        scheme.register(model, api_version, kind)
    return scheme


def _read_metadata(obj: Any) -> dict[str, str | None]:
    if isinstance(obj, dict):
        metadata = obj.get("metadata")
        if not isinstance(metadata, dict):
            raise ReferenceResolutionError("Object has no metadata; cannot build a reference")
        return {
            "name": metadata.get("name"),
            "namespace": metadata.get("namespace"),
            "uid": metadata.get("uid"),
            "resource_version": metadata.get("resourceVersion"),
        }

    metadata = getattr(obj, "metadata", None)
    if metadata is None:
        raise ReferenceResolutionError(
            f"Object of type {type(obj).__name__} has no metadata; cannot build a reference"
        )
    return {
        "name": getattr(metadata, "name", None),
        "namespace": getattr(metadata, "namespace", None),
        "uid": getattr(metadata, "uid", None),
        "resource_version": getattr(metadata, "resource_version", None),
    }


def get_reference(scheme: Scheme, obj: Any) -> InvolvedObjectReference:
    """Build a reference to an object.

    References are returned as they are. Other objects must have metadata;
    their kind and API version come from the object itself, or from the
    scheme when the object does not carry them.

    Args:
        scheme: The scheme used to look up kinds of untyped objects.
        obj: A client model, a dict, or an existing object reference.

    Returns:
        The reference to the object.

    Raises:
        ReferenceResolutionError: If the object has no metadata or its kind
            cannot be determined.
    """
    if isinstance(obj, InvolvedObjectReference):
        return obj
    if isinstance(obj, client.V1ObjectReference):
        return InvolvedObjectReference.from_object_reference(obj)

    metadata = _read_metadata(obj)

    if isinstance(obj, dict):
        api_version, kind = obj.get("apiVersion"), obj.get("kind")
    else:
        api_version, kind = getattr(obj, "api_version", None), getattr(obj, "kind", None)

    if not kind:
        registered = scheme.object_kind(obj)
        if registered is None:
            raise ReferenceResolutionError(
                f"Unable to determine the kind of {type(obj).__name__} "
                f"{metadata['namespace'] or ''}/{metadata['name'] or ''}"
            )
        registered_version, kind = registered
        api_version = api_version or registered_version

    ref = InvolvedObjectReference(
        kind=kind,
        name=metadata["name"],
        namespace=metadata["namespace"],
        uid=metadata["uid"],
        api_version=api_version,
        resource_version=metadata["resource_version"],
    )
    logger.debug(f"Resolved reference to {ref.kind} {ref.namespace or ''}/{ref.name or ''}")
    return ref
