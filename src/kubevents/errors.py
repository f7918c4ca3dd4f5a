"""Exceptions raised by kubevents.

Every failure is raised to the caller. Local precondition failures never
reach the API server; transport failures keep the original exception as
their cause.
"""


class KubeventsError(Exception):
    """Base class for all kubevents errors."""


class NamespaceMismatchError(KubeventsError):
    """The target namespace disagrees with the namespace the client is bound to.

    Attributes:
        operation: The operation that was refused (create, update, patch, search).
        namespace: The namespace of the event or involved object.
        bound_namespace: The namespace the client is bound to.
    """

    def __init__(self, operation: str, namespace: str, bound_namespace: str):
        self.operation = operation
        self.namespace = namespace
        self.bound_namespace = bound_namespace
        if operation == "search":
            message = (
                f"won't be able to find any events of namespace '{namespace}' "
                f"in namespace '{bound_namespace}'"
            )
        else:
            message = f"can't {operation} an event with namespace '{namespace}' in namespace '{bound_namespace}'"
        super().__init__(message)


class ReferenceResolutionError(KubeventsError):
    """An object could not be turned into an object reference."""


class TransportError(KubeventsError):
    """A request to the Kubernetes API failed.

    Attributes:
        operation: The operation that issued the request.
        status: HTTP status code, if the server answered.
        reason: Reason phrase or error description.
    """

    def __init__(self, operation: str, status: int | None = None, reason: str | None = None):
        self.operation = operation
        self.status = status
        self.reason = reason
        detail = f"{status} {reason}" if status is not None else f"{reason}"
        super().__init__(f"Failed to {operation} events: {detail}")
