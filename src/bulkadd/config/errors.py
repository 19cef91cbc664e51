"""Errors raised while assembling service and pipeline configuration."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is present but unusable, e.g. a non-numeric concurrency."""


class MissingConfigurationError(ConfigurationError):
    """One or more required ``BULKADD_*`` variables are absent or blank."""
