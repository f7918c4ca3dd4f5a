"""Command-line interface for kubevents.

This module serves as the entrypoint for the kubevents application.
"""

import argparse
import datetime
import logging
import sys
from typing import Any

import pytz
from kubernetes import client

from kubevents import __description__, __version__
from kubevents.config import KubeventsConfig
from kubevents.errors import KubeventsError
from kubevents.kubernetes.connection import KubernetesConnection
from kubevents.kubernetes.events import NamespacedEventClient, build_involved_object_selector
from kubevents.kubernetes.transport import KubernetesEventTransport
from kubevents.references import InvolvedObjectReference, default_scheme

EVENT_COMPONENT = "kubevents"
EVENT_TYPES = ("Normal", "Warning")


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration.

    Args:
        verbose: Whether to enable verbose logging.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Logs go to stderr, stdout carries the selectors and events printed
    logging.basicConfig(level=log_level, format=log_format, stream=sys.stderr)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Command-line arguments to parse. If None, sys.argv will be used.

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(prog="kubevents", description=__description__)

    parser.add_argument("--version", action="version", version=f"kubevents {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--namespace", help="Namespace the client is bound to (overrides KUBEVENTS_NAMESPACE)")
    parser.add_argument("--context", help="Kubeconfig context to use (overrides KUBEVENTS_CONTEXT)")
    parser.add_argument(
        "--timezone", help="Timezone for displayed timestamps (e.g. 'Europe/Paris', overrides KUBEVENTS_TIMEZONE)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    selector = subparsers.add_parser("selector", help="Print the field selector for an involved object")
    selector.add_argument("--name", help="Name of the involved object")
    selector.add_argument("--involved-namespace", help="Namespace of the involved object")
    selector.add_argument("--kind", help="Kind of the involved object")
    selector.add_argument("--uid", help="UID of the involved object")
    selector.add_argument(
        "--api-version", help="API version the selector is built for (overrides KUBEVENTS_API_VERSION)"
    )

    search = subparsers.add_parser("search", help="List the events about an object")
    search.add_argument("--kind", required=True, help="Kind of the involved object")
    search.add_argument("--name", required=True, help="Name of the involved object")
    search.add_argument("--involved-namespace", help="Namespace of the involved object (defaults to --namespace)")
    search.add_argument("--uid", help="UID of the involved object")
    search.add_argument(
        "--api-version", help="API version used to talk to the server (overrides KUBEVENTS_API_VERSION)"
    )

    create = subparsers.add_parser("create", help="Create an event about an object")
    create.add_argument("--involved-kind", required=True, help="Kind of the involved object")
    create.add_argument("--involved-name", required=True, help="Name of the involved object")
    create.add_argument(
        "--involved-namespace", help="Namespace of the involved object and of the event (defaults to --namespace)"
    )
    create.add_argument("--involved-api-version", default="v1", help="API version of the involved object")
    create.add_argument("--reason", required=True, help="Short machine-readable reason")
    create.add_argument("--message", required=True, help="Human-readable description")
    create.add_argument("--type", choices=EVENT_TYPES, default="Normal", help="Event type")

    return parser.parse_args(args)


def build_config(parsed_args: argparse.Namespace) -> KubeventsConfig:
    """Create the config from environment variables, overridden by command-line arguments."""
    config = KubeventsConfig.from_env()
    overrides: dict[str, Any] = {}
    if parsed_args.namespace:
        overrides["namespace"] = parsed_args.namespace
    if parsed_args.context:
        overrides["context"] = parsed_args.context
    if parsed_args.timezone:
        overrides["timezone"] = parsed_args.timezone
    if getattr(parsed_args, "api_version", None):
        overrides["api_version"] = parsed_args.api_version
    if overrides:
        # Re-validate so overrides go through the same checks as the environment
        config = KubeventsConfig(**{**config.model_dump(), **overrides})
    return config


def build_event_client(config: KubeventsConfig) -> tuple[KubernetesConnection, NamespacedEventClient]:
    """Connect to the cluster and build an events client bound to the configured namespace."""
    connection = KubernetesConnection(context=config.context)
    transport = KubernetesEventTransport(connection, api_version=config.api_version)
    return connection, NamespacedEventClient(transport, namespace=config.namespace)


def format_event(event: client.CoreV1Event, timezone: str) -> str:
    """Render an event as a single line.

    Args:
        event: The event to render.
        timezone: Timezone in which to display the timestamp.

    Returns:
        The rendered line.
    """
    timestamp = event.last_timestamp or event.event_time or event.metadata.creation_timestamp
    if timestamp is not None:
        if timestamp.tzinfo is None:
            timestamp = pytz.utc.localize(timestamp)
        when = timestamp.astimezone(pytz.timezone(timezone)).strftime("%Y-%m-%d %H:%M:%S %Z")
    else:
        when = "<unknown>"
    involved = event.involved_object
    return f"{when} {event.type} {event.reason} {involved.kind}/{involved.name}: {event.message}"


def build_event(
    involved: InvolvedObjectReference,
    reason: str,
    message: str,
    event_type: str,
    host: str,
) -> client.CoreV1Event:
    """Build a new event about an object, to be created in the object's namespace."""
    now = datetime.datetime.now(pytz.utc)
    return client.CoreV1Event(
        metadata=client.V1ObjectMeta(generate_name=f"{involved.name}-", namespace=involved.namespace),
        involved_object=involved.to_object_reference(),
        reason=reason,
        message=message,
        type=event_type,
        source=client.V1EventSource(component=EVENT_COMPONENT, host=host),
        first_timestamp=now,
        last_timestamp=now,
        count=1,
    )


def main(args: list[str] | None = None) -> int:
    """Main entry point for the kubevents application.

    Args:
        args: Command-line arguments. If None, sys.argv will be used.

    Returns:
        Exit code.
    """
    logger = logging.getLogger(__name__)
    try:
        parsed_args = parse_args(args)
        setup_logging(parsed_args.verbose)
        config = build_config(parsed_args)

        logger.debug(
            f"Configuration: namespace={config.namespace or 'all'}, api_version={config.api_version}, "
            f"timezone={config.timezone}, context={config.context or 'default'}"
        )

        if parsed_args.command == "selector":
            selector = build_involved_object_selector(
                config.api_version,
                name=parsed_args.name,
                namespace=parsed_args.involved_namespace,
                kind=parsed_args.kind,
                uid=parsed_args.uid,
            )
            print(selector)
            return 0

        connection, event_client = build_event_client(config)

        if parsed_args.command == "search":
            ref = InvolvedObjectReference(
                kind=parsed_args.kind,
                name=parsed_args.name,
                namespace=parsed_args.involved_namespace or config.namespace,
                uid=parsed_args.uid,
            )
            events = event_client.search(default_scheme(), ref)
            for event in events.items:
                print(format_event(event, config.timezone))
            logger.info(f"Found {len(events.items)} events about {ref.kind} {ref.namespace or ''}/{ref.name}")
        elif parsed_args.command == "create":
            involved = InvolvedObjectReference(
                api_version=parsed_args.involved_api_version,
                kind=parsed_args.involved_kind,
                name=parsed_args.involved_name,
                namespace=parsed_args.involved_namespace or config.namespace or "default",
            )
            event = build_event(
                involved,
                reason=parsed_args.reason,
                message=parsed_args.message,
                event_type=parsed_args.type,
                host=connection.hostname,
            )
            created = event_client.create_in_namespace(event)
            print(f"{created.metadata.namespace}/{created.metadata.name}")

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except KubeventsError as e:
        logger.error(f"{e}")
        return 1
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except Exception as e:
        logger.error(f"An unexpected error occurred: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
