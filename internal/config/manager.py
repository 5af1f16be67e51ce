"""
Configuration management for weather resolver.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils
from lib.weather.providers import ProviderConfig

logger = logging.getLogger(__name__)


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholder with its value.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    return os.getenv(match.group(1), match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute `${VAR_NAME}` placeholders in configuration values.

    Strings get placeholders replaced, dicts and lists are processed
    recursively, other values are returned unchanged.
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Loads and validates weather resolver configuration."""

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        """Initialize ConfigManager with config file path and optional config directories."""
        self.configPath = configPath
        self.configDirs = configDirs or []
        utils.load_dotenv(path=dotEnvFile)
        self.config = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory"""
        tomlFiles: List[Path] = []
        dirPath = Path(directory)

        if not dirPath.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping")
            return tomlFiles

        if not dirPath.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping")
            return tomlFiles

        for tomlFile in dirPath.rglob("*.toml"):
            if tomlFile.is_file():
                tomlFiles.append(tomlFile)
                logger.debug(f"Found config file: {tomlFile}")

        return sorted(tomlFiles)  # Sort for consistent ordering

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries.

        Nested tables are merged, any other value (including arrays such as
        `[[providers]]`) is replaced by the later one.
        """
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """
        Load configuration from TOML file and optional config directories.

        Returns:
            Dict[str, Any]: The loaded and merged configuration dictionary.

        Raises:
            SystemExit: If neither config file nor config directories are given,
                        if no upstream provider is configured,
                        or if some config file can't be parsed.
        """
        configFile = Path(self.configPath)
        hasConfigFile = configFile.exists()
        if not hasConfigFile and not self.configDirs:
            logger.error(f"Configuration file {self.configPath} not found!")
            sys.exit(1)

        try:
            config: Dict[str, Any] = {}
            if hasConfigFile:
                with open(configFile, "rb") as f:
                    config = tomli.load(f)
                logger.info(f"Loaded main config from {self.configPath}")

            for configDir in self.configDirs:
                tomlFiles = self._findTomlFilesRecursive(configDir)
                logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")

                for tomlFile in tomlFiles:
                    with open(tomlFile, "rb") as f:
                        config = self._mergeConfigs(config, tomli.load(f))
                    logger.info(f"Merged config from {tomlFile}")

        except (OSError, tomli.TOMLDecodeError) as e:
            logger.error(f"Failed to load configuration: {e}")
            sys.exit(1)

        providers = config.get("providers", [])
        if not isinstance(providers, list) or not providers:
            logger.error("No upstream weather providers configured, add at least one [[providers]] entry!")
            sys.exit(1)

        logger.info("Configuration loaded and merged successfully")
        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getCacheConfig(self) -> Dict[str, Any]:
        """
        Get cache store configuration.

        Example:
            {
                "type": "redis",
                "cache-ttl": "5m",
                "lock-ttl": "3s",
                "lock-retry-interval": "100ms",
                "lock-max-wait": "3s",
                "redis": {"url": "redis://localhost:6379/0", "password": "..."},
            }
        """
        return self.get("cache", {})

    def getProvidersConfig(self) -> List[ProviderConfig]:
        """Get ordered list of upstream providers, first one is tried first."""
        return self.get("providers", [])

    def getResolverConfig(self) -> Dict[str, Any]:
        """Get resolver configuration (request-timeout)."""
        return self.get("resolver", {})

    def getRequestTimeout(self) -> Optional[float]:
        """
        Get overall per-request timeout in seconds, None if not limited.

        Raises:
            ValueError: If configured value is not a valid duration
        """
        timeout = self.getResolverConfig().get("request-timeout")
        if timeout is None:
            return None
        return utils.parseDuration(timeout)
