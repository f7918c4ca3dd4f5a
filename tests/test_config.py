"""Tests for the configuration module."""

import os
import unittest
from unittest import mock

from pydantic import ValidationError

from kubevents.config import KubeventsConfig


class TestKubeventsConfig(unittest.TestCase):
    """Test cases for KubeventsConfig."""

    def test_default_values(self):
        """Test that default values are set correctly."""
        config = KubeventsConfig()
        self.assertIsNone(config.namespace)
        self.assertEqual(config.api_version, "v1")
        self.assertEqual(config.timezone, "UTC")
        self.assertIsNone(config.context)

    def test_invalid_timezone(self):
        """Test that invalid timezones are rejected."""
        with self.assertRaises(ValidationError):
            KubeventsConfig(timezone="Mars/Olympus_Mons")

    def test_valid_timezone(self):
        """Test that valid timezones are accepted."""
        config = KubeventsConfig(timezone="Europe/Paris")
        self.assertEqual(config.timezone, "Europe/Paris")

    def test_blank_api_version(self):
        """Test that a blank API version is rejected."""
        with self.assertRaises(ValidationError):
            KubeventsConfig(api_version="  ")

    @mock.patch.dict(
        os.environ,
        {
            "KUBEVENTS_NAMESPACE": "team-a",
            "KUBEVENTS_API_VERSION": "events.k8s.io/v1beta1",
            "KUBEVENTS_TIMEZONE": "America/New_York",
            "KUBEVENTS_CONTEXT": "staging",
        },
    )
    def test_from_env(self):
        """Test creating config from environment variables."""
        config = KubeventsConfig.from_env()
        self.assertEqual(config.namespace, "team-a")
        self.assertEqual(config.api_version, "events.k8s.io/v1beta1")
        self.assertEqual(config.timezone, "America/New_York")
        self.assertEqual(config.context, "staging")

    @mock.patch.dict(os.environ, {"KUBEVENTS_NAMESPACE": ""}, clear=True)
    def test_from_env_empty_namespace_is_unbound(self):
        """Test that an empty namespace variable means cluster-wide."""
        config = KubeventsConfig.from_env()
        self.assertIsNone(config.namespace)
        self.assertEqual(config.api_version, "v1")
