"""
Weather resolver - resolves current weather for cities through cached,
coalesced requests to a chain of upstream weather providers.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import httpx

import lib.utils as utils
from internal.config.manager import ConfigManager
from internal.services.weather import WeatherService
from lib.cache import CacheConfigError
from lib.context import RequestContext
from lib.logging_utils import initLogging
from lib.weather import AppError, ProviderChainConfigError

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO)
# set higher logging level for httpx to avoid all GET requests being logged
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

SECRET_CONFIG_KEYS = {"api-key", "password"}


class WeatherResolver:
    """Main orchestrator: builds weather service from config and resolves cities."""

    def __init__(
        self,
        configPath: str = "config.toml",
        configDirs: Optional[List[str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize resolver with all components."""
        self.configManager = ConfigManager(configPath, configDirs)

        initLogging(self.configManager.getLoggingConfig())

        self.requestTimeout = self.configManager.getRequestTimeout()
        self.service = WeatherService.fromConfig(self.configManager, transport)

    async def resolveCity(self, city: str, timeout: Optional[float]) -> Dict[str, Any]:
        """Resolve single city into output record"""
        ctx = RequestContext.new(timeout=timeout)
        try:
            result = await self.service.resolve(ctx, city)
            return {"city": city, "weather": result.toDict()}
        except AppError as e:
            return {"city": city, "error": e.toDict()}

    async def run(self, cities: List[str], timeout: Optional[float] = None) -> bool:
        """
        Resolve all cities concurrently and print one JSON line per city.

        Returns:
            bool: True if all cities were resolved
        """
        if timeout is None:
            timeout = self.requestTimeout

        try:
            records = await asyncio.gather(*[self.resolveCity(city, timeout) for city in cities])
        finally:
            logger.debug(f"Resolver stats: {self.service.getStats()}")
            await self.service.close()

        for record in records:
            print(utils.jsonDumps(record, sort_keys=False))
        return all("error" not in record for record in records)


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Weather resolver - get current weather for cities")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument(
        "--timeout",
        type=utils.parseDuration,
        default=None,
        help="Per-city request timeout, e.g. 10s or 500ms (default: [resolver] request-timeout)",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )
    parser.add_argument("cities", nargs="*", metavar="CITY", help="City to resolve weather for")
    args = parser.parse_args()

    if not args.print_config and not args.cities:
        parser.error("at least one CITY is required")

    args.config = os.path.abspath(args.config)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dirPath) for dirPath in args.config_dir]

    return args


def redactSecrets(value: Any) -> Any:
    """Replace secret values in configuration with asterisks"""
    if isinstance(value, dict):
        return {k: "***" if k in SECRET_CONFIG_KEYS and v else redactSecrets(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [redactSecrets(item) for item in value]
    return value


def prettyPrintConfig(configManager: ConfigManager):
    """Pretty-print the loaded configuration (with secrets hidden)"""
    print("=== Weather Resolver Configuration ===")
    print()
    print(json.dumps(redactSecrets(configManager.config), indent=2, ensure_ascii=False, sort_keys=True))
    print()
    print("=== Configuration loaded successfully ===")


def main():
    """Main entry point."""
    args = parse_arguments()

    try:
        if args.print_config:
            prettyPrintConfig(ConfigManager(args.config, args.config_dir))
            sys.exit(0)

        resolver = WeatherResolver(configPath=args.config, configDirs=args.config_dir)
        success = asyncio.run(resolver.run(args.cities, args.timeout))
    except (ProviderChainConfigError, CacheConfigError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Resolver stopped by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Resolver crashed: {e}")
        logger.exception(e)
        sys.exit(1)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
