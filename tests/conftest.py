"""Shared pytest configuration."""

pytest_plugins = ["arango_plugin.testing.fixtures"]
