"""
Logging utilities for weather resolver.
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Client libraries logging every request on INFO/DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "redis")


def getLogLevelByStr(levelStr: str, default: Optional[int] = None) -> Optional[int]:
    """Get log level by string."""
    level = getattr(logging, levelStr.upper(), None)
    if not isinstance(level, int):
        logger.error(f"Invalid log level '{levelStr}'")
        return default
    return level


class TraceLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter bound to a single request.

    Prefixes every message with the request trace id and passes it
    down to handlers as `record.traceId`.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return f"[{extra.get('traceId', '-')}] {msg}", kwargs


def _createFileHandler(logFile: str, rotate: bool) -> logging.Handler:
    """Create file handler, rotating daily with a week of history if asked."""
    Path(logFile).parent.mkdir(parents=True, exist_ok=True)
    if rotate:
        return TimedRotatingFileHandler(filename=logFile, when="midnight", backupCount=7, encoding="utf-8")
    return logging.FileHandler(logFile, encoding="utf-8")


def initLogging(config: Dict[str, Any]) -> None:
    """
    Configure root logger from `[logging]` config section.

    Console output always goes to stderr, stdout is reserved for resolution results.
    Chatty client libraries are kept at WARNING unless root level is WARNING or higher.

    Args:
        config: Dict with optional `level`, `format`, `console`, `file` and `rotate` keys
    """
    rootLogger = logging.getLogger()
    rootLogger.setLevel(getLogLevelByStr(config.get("level", "INFO"), logging.INFO) or logging.INFO)
    logLevel = rootLogger.getEffectiveLevel()
    formatter = logging.Formatter(config.get("format", DEFAULT_LOG_FORMAT))

    # Drop handlers installed by basicConfig or previous init
    for handler in rootLogger.handlers[:]:
        rootLogger.removeHandler(handler)

    if config.get("console", False):
        consoleHandler = logging.StreamHandler(sys.stderr)
        consoleHandler.setFormatter(formatter)
        rootLogger.addHandler(consoleHandler)

    if "file" in config:
        try:
            fileHandler = _createFileHandler(config["file"], bool(config.get("rotate", False)))
        except OSError as e:
            logger.error(f"Failed to setup file logging to {config['file']}: {e}")
        else:
            fileHandler.setFormatter(formatter)
            rootLogger.addHandler(fileHandler)

    if logLevel < logging.WARNING:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logger.info(f"Logging configured: level={logging.getLevelName(logLevel)}, handlers={len(rootLogger.handlers)}")
