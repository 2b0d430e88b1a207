"""Config settings – 12-factor env-based configuration."""
from arango_plugin.config.settings.base import Settings
from arango_plugin.config.settings.factory import SettingsFactory
from arango_plugin.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsFactory", "SettingsLoader"]
