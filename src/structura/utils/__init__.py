"""Utility module for Structura package."""

from .cli_utils import exit_with_error, loading_spinner, show_error, show_warning
from .config_loader import ConfigError, ConfigLoader
from .log_setup import console, setup_logging

__all__ = [
	"ConfigError",
	"ConfigLoader",
	"console",
	"exit_with_error",
	"loading_spinner",
	"setup_logging",
	"show_error",
	"show_warning",
]
