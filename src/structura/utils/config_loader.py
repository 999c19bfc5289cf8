"""
Configuration loader for Structura.

This module provides functionality for loading and managing
configuration settings.

"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, TypeVar, cast

import yaml
from xdg.BaseDirectory import xdg_config_home

from structura.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Minimum number of parts in an override variable name (section + key)
MIN_ENV_VAR_PARTS = 2

ENV_PREFIX = "STRUCTURA_"


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


class ConfigLoader:
	"""
	Loads and manages configuration for Structura.

	Configuration is assembled from the built-in defaults, an optional YAML
	file and ``STRUCTURA_SECTION_KEY`` environment variables, in that order
	of increasing precedence.

	"""

	_instance: ConfigLoader | None = None

	@classmethod
	def get_instance(cls, config_file: str | None = None, reload: bool = False) -> ConfigLoader:
		"""
		Get the singleton instance of ConfigLoader.

		Args:
		        config_file: Path to configuration file (optional)
		        reload: Whether to reload config even if already loaded

		Returns:
		        ConfigLoader: Singleton instance

		"""
		if cls._instance is None or reload:
			cls._instance = cls(config_file)
		return cls._instance

	def __init__(self, config_file: str | None = None) -> None:
		"""
		Initialize the configuration loader.

		Args:
		        config_file: Path to configuration file (optional)

		"""
		self.config: dict[str, Any] = {}
		self.config_file = self._resolve_config_file(config_file)
		self.load_config()

	def _resolve_config_file(self, config_file: str | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified, use that. Otherwise, look in standard locations:
		1. ./.structura.yml in the current directory
		2. $XDG_CONFIG_HOME/structura/config.yml
		3. ~/.structura/config.yml

		Args:
		        config_file: Explicitly provided config file path (optional)

		Returns:
		        Optional[Path]: Resolved config file path or None if no suitable file found

		"""
		if config_file:
			path = Path(config_file).expanduser().resolve()
			if not path.exists():
				logger.warning("Specified config file not found: %s", path)
			return path

		local_config = Path(".structura.yml")
		if local_config.exists():
			return local_config

		xdg_config_file = Path(xdg_config_home) / "structura" / "config.yml"
		if xdg_config_file.exists():
			return xdg_config_file

		legacy_config = Path.home() / ".structura" / "config.yml"
		if legacy_config.exists():
			return legacy_config

		return None

	def load_config(self) -> dict[str, Any]:
		"""
		Load configuration from file and apply environment variable overrides.

		Returns:
		        Dict[str, Any]: Loaded configuration

		Raises:
		        ConfigError: If configuration file exists but cannot be loaded

		"""
		self.config = copy.deepcopy(DEFAULT_CONFIG)

		if self.config_file:
			try:
				if self.config_file.exists():
					with self.config_file.open(encoding="utf-8") as f:
						file_config = yaml.safe_load(f)
					if file_config:
						if not isinstance(file_config, dict):
							msg = f"Configuration in {self.config_file} must be a mapping"
							raise ConfigError(msg)
						self._merge_configs(self.config, file_config)
					logger.info("Loaded configuration from %s", self.config_file)
				else:
					logger.warning("Configuration file not found: %s", self.config_file)
			except (OSError, yaml.YAMLError) as e:
				error_msg = f"Error loading configuration from {self.config_file}: {e}"
				logger.exception(error_msg)
				raise ConfigError(error_msg) from e

		self._apply_env_overrides()

		return self.config

	def _merge_configs(self, base: dict[str, Any], override: dict[str, Any]) -> None:
		"""
		Recursively merge two configuration dictionaries.

		Args:
		        base: Base configuration dictionary to merge into
		        override: Override configuration to apply

		"""
		for key, value in override.items():
			if isinstance(value, dict) and key in base and isinstance(base[key], dict):
				self._merge_configs(base[key], value)
			else:
				base[key] = value

	def _apply_env_overrides(self) -> None:
		"""Apply environment variable overrides to configuration."""
		for env_var, value in os.environ.items():
			if not env_var.startswith(ENV_PREFIX):
				continue
			parts = env_var[len(ENV_PREFIX) :].lower().split("_")
			if len(parts) < MIN_ENV_VAR_PARTS:
				continue
			section, key = parts[0], "_".join(parts[1:])

			typed_value: Any
			if value.lower() in ("true", "yes"):
				typed_value = True
			elif value.lower() in ("false", "no"):
				typed_value = False
			else:
				try:
					typed_value = int(value)
				except ValueError:
					try:
						typed_value = float(value)
					except ValueError:
						typed_value = value

			self.config.setdefault(section, {})[key] = typed_value
			logger.debug("Applied environment override %s: %s", env_var, typed_value)

	def get(self, key: str, default: T | None = None) -> T | None:
		"""
		Get a configuration value using dot notation.

		Examples:
		        config.get("github")
		        config.get("dependencies.fetch_limit")

		Args:
		        key: Configuration key, can include dots for nested access
		        default: Default value if key not found

		Returns:
		        T: Configuration value or default

		"""
		current: Any = self.config
		for part in key.split("."):
			if isinstance(current, dict) and part in current:
				current = current[part]
			else:
				return default
		return cast("T", current)

	def get_github_config(self) -> dict[str, Any]:
		"""Get the source host access section."""
		return self.config.get("github", {})

	def get_dependency_config(self) -> dict[str, Any]:
		"""
		Get the dependency enrichment section.

		The fetch limit is clamped to the parse limit so the fetched sample is
		always a subset of the selected one.

		Returns:
		        Dict[str, Any]: Dependency configuration

		"""
		deps = dict(self.config.get("dependencies", {}))
		parse_limit = int(deps.get("parse_limit", DEFAULT_CONFIG["dependencies"]["parse_limit"]))
		fetch_limit = int(deps.get("fetch_limit", DEFAULT_CONFIG["dependencies"]["fetch_limit"]))
		if fetch_limit > parse_limit:
			logger.warning("fetch_limit %d exceeds parse_limit %d, clamping", fetch_limit, parse_limit)
			fetch_limit = parse_limit
		deps["parse_limit"] = parse_limit
		deps["fetch_limit"] = fetch_limit
		return deps

	def get_analysis_config(self) -> dict[str, Any]:
		"""Get the AI analysis section."""
		return self.config.get("analysis", {})
