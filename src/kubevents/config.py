"""Configuration module for kubevents.

This module handles the configuration of kubevents through environment variables.
"""
import os

import pytz
from pydantic import BaseModel, Field, field_validator


class KubeventsConfig(BaseModel):
    """Configuration class for kubevents.

    Attributes:
        namespace: Namespace the events client is bound to. None means cluster-wide.
        api_version: API version used to talk to the server.
        timezone: Timezone used to display event timestamps.
        context: Kubeconfig context to use when running outside a cluster.
    """
    namespace: str | None = Field(default=None)
    api_version: str = Field(default="v1")
    timezone: str = Field(default="UTC")
    context: str | None = Field(default=None)

    @field_validator("api_version")
    def validate_api_version(cls, v):
        """Validate that the API version is not blank"""
        if not v or not v.strip():
            raise ValueError("API version must not be empty")
        return v.strip()

    @field_validator("timezone")
    def validate_timezone(cls, v):
        """Validate that the timezone is valid"""
        try:
            pytz.timezone(v)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @classmethod
    def from_env(cls):
        """Create a config instance from environment variables."""
        return cls(
            namespace=os.getenv("KUBEVENTS_NAMESPACE") or None,
            api_version=os.getenv("KUBEVENTS_API_VERSION", "v1"),
            timezone=os.getenv("KUBEVENTS_TIMEZONE", "UTC"),
            context=os.getenv("KUBEVENTS_CONTEXT") or None,
        )
