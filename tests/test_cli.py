"""Tests for the command-line interface."""

import datetime
import io
import logging
import sys
import unittest
from contextlib import redirect_stdout
from unittest import mock

import pytz
from kubernetes import client

from kubevents.cli import build_config, build_event, format_event, main, parse_args, setup_logging
from kubevents.errors import NamespaceMismatchError
from kubevents.references import InvolvedObjectReference


class TestParseArgs(unittest.TestCase):
    """Test cases for argument parsing and config building."""

    def test_search_arguments(self):
        """Test parsing the search subcommand."""
        args = parse_args(["--namespace", "team-a", "search", "--kind", "Pod", "--name", "web"])
        self.assertEqual(args.command, "search")
        self.assertEqual(args.namespace, "team-a")
        self.assertEqual(args.kind, "Pod")
        self.assertIsNone(args.involved_namespace)

    @mock.patch.dict("os.environ", {"KUBEVENTS_NAMESPACE": "from-env"}, clear=True)
    def test_command_line_overrides_environment(self):
        """Test that command-line options override environment variables."""
        args = parse_args(["--namespace", "from-cli", "--timezone", "Europe/Paris", "selector", "--name", "n"])
        config = build_config(args)
        self.assertEqual(config.namespace, "from-cli")
        self.assertEqual(config.timezone, "Europe/Paris")

    @mock.patch.dict("os.environ", {}, clear=True)
    def test_invalid_override_is_rejected(self):
        """Test that overrides are validated."""
        args = parse_args(["--timezone", "Nowhere/Land", "selector"])
        with self.assertRaises(ValueError):
            build_config(args)


class TestFormatting(unittest.TestCase):
    """Test cases for event rendering and building."""

    def test_format_event_in_timezone(self):
        """Test that timestamps are shown in the configured timezone."""
        event = client.CoreV1Event(
            metadata=client.V1ObjectMeta(name="web.1", namespace="default"),
            involved_object=client.V1ObjectReference(kind="Pod", name="web"),
            last_timestamp=datetime.datetime(2024, 1, 15, 12, 0, tzinfo=pytz.utc),
            type="Warning",
            reason="BackOff",
            message="Back-off restarting failed container",
        )

        line = format_event(event, "Europe/Paris")

        self.assertEqual(line, "2024-01-15 13:00:00 CET Warning BackOff Pod/web: Back-off restarting failed container")

    def test_format_event_without_timestamp(self):
        """Test rendering an event that carries no timestamp."""
        event = client.CoreV1Event(
            metadata=client.V1ObjectMeta(name="web.1"),
            involved_object=client.V1ObjectReference(kind="Pod", name="web"),
            type="Normal",
            reason="Pulled",
            message="Pulled image",
        )

        self.assertTrue(format_event(event, "UTC").startswith("<unknown> Normal Pulled"))

    def test_build_event(self):
        """Test building an event about an object."""
        involved = InvolvedObjectReference(api_version="apps/v1", kind="Deployment", name="web", namespace="prod")

        event = build_event(involved, reason="Scaled", message="Scaled to 3", event_type="Normal", host="node-1")

        self.assertEqual(event.metadata.namespace, "prod")
        self.assertEqual(event.metadata.generate_name, "web-")
        self.assertEqual(event.involved_object.kind, "Deployment")
        self.assertEqual(event.source.component, "kubevents")
        self.assertEqual(event.source.host, "node-1")
        self.assertEqual(event.count, 1)


class TestMain(unittest.TestCase):
    """Test cases for the main entry point."""

    def setUp(self):
        """Set up test fixtures."""
        self.env_patcher = mock.patch.dict("os.environ", {}, clear=True)
        self.env_patcher.start()
        self.logging_patcher = mock.patch("kubevents.cli.setup_logging")
        self.logging_patcher.start()
        self.build_client_patcher = mock.patch("kubevents.cli.build_event_client")
        self.build_client_mock = self.build_client_patcher.start()
        self.connection_mock = mock.Mock(hostname="node-1")
        self.event_client_mock = mock.Mock()
        self.build_client_mock.return_value = (self.connection_mock, self.event_client_mock)

    def tearDown(self):
        """Tear down test fixtures."""
        self.env_patcher.stop()
        self.logging_patcher.stop()
        self.build_client_patcher.stop()

    def test_selector_needs_no_connection(self):
        """Test that the selector subcommand prints the selector offline."""
        output = io.StringIO()
        with redirect_stdout(output):
            code = main(["selector", "--name", "web", "--kind", "Pod"])

        self.assertEqual(code, 0)
        self.assertEqual(output.getvalue().strip(), "involvedObject.name=web,involvedObject.kind=Pod")
        self.build_client_mock.assert_not_called()

    def test_search(self):
        """Test that search prints one line per event."""
        event = client.CoreV1Event(
            metadata=client.V1ObjectMeta(name="web.1", namespace="team-a"),
            involved_object=client.V1ObjectReference(kind="Pod", name="web"),
            type="Normal",
            reason="Started",
            message="Started container",
        )
        self.event_client_mock.search.return_value = client.CoreV1EventList(items=[event, event])

        output = io.StringIO()
        with redirect_stdout(output):
            code = main(["--namespace", "team-a", "search", "--kind", "Pod", "--name", "web"])

        self.assertEqual(code, 0)
        self.assertEqual(len(output.getvalue().splitlines()), 2)
        _, ref = self.event_client_mock.search.call_args.args
        self.assertEqual(ref, InvolvedObjectReference(kind="Pod", name="web", namespace="team-a"))

    def test_create(self):
        """Test that create sends the event through the client."""
        created = client.CoreV1Event(
            metadata=client.V1ObjectMeta(name="web-x1", namespace="team-a"),
            involved_object=client.V1ObjectReference(kind="Pod", name="web"),
        )
        self.event_client_mock.create_in_namespace.return_value = created

        output = io.StringIO()
        with redirect_stdout(output):
            code = main(
                [
                    "--namespace", "team-a",
                    "create", "--involved-kind", "Pod", "--involved-name", "web",
                    "--reason", "Checked", "--message", "All good",
                ]
            )

        self.assertEqual(code, 0)
        self.assertEqual(output.getvalue().strip(), "team-a/web-x1")
        (event,) = self.event_client_mock.create_in_namespace.call_args.args
        self.assertEqual(event.metadata.namespace, "team-a")
        self.assertEqual(event.reason, "Checked")

    def test_client_errors_exit_with_failure(self):
        """Test that library errors give a non-zero exit code."""
        self.event_client_mock.search.side_effect = NamespaceMismatchError("search", "team-b", "team-a")

        code = main(["--namespace", "team-a", "search", "--kind", "Pod", "--name", "web", "--involved-namespace", "team-b"])

        self.assertEqual(code, 1)

    def test_search_api_version_override(self):
        """Test that search builds its client for the API version given on the command line."""
        self.event_client_mock.search.return_value = client.CoreV1EventList(items=[])

        code = main(["search", "--kind", "Pod", "--name", "web", "--api-version", "events.k8s.io/v1beta1"])

        self.assertEqual(code, 0)
        (config,) = self.build_client_mock.call_args.args
        self.assertEqual(config.api_version, "events.k8s.io/v1beta1")


class TestSetupLogging(unittest.TestCase):
    """Test cases for logging setup."""

    @mock.patch("kubevents.cli.logging.basicConfig")
    def test_logs_go_to_stderr(self, basic_config_mock):
        """Test that logs do not mix with the data printed on stdout."""
        setup_logging(verbose=True)

        _, kwargs = basic_config_mock.call_args
        self.assertIs(kwargs["stream"], sys.stderr)
        self.assertEqual(kwargs["level"], logging.DEBUG)
