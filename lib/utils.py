"""
Common utilities for weather resolver.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_NUM = r"(\d+(?:\.\d+)?)"
_DURATION_RE = re.compile(rf"^(?:{_NUM}d)?(?:{_NUM}h)?(?:{_NUM}m)?(?:{_NUM}s)?(?:{_NUM}ms)?$")
_DURATION_MULTIPLIERS = (86400.0, 3600.0, 60.0, 1.0, 0.001)


def parseDuration(value: str | int | float) -> float:
    """
    Parse duration to seconds.

    Args:
        value: Either a number of seconds or a string in one of formats:
            1. `[DDd][HHh][MMm][SSs][MSms]` (e.g., "1h30m", "3s", "100ms", "1.5s") -
               each section is optional but at least one must be present
            2. `HH:MM[:SS]` (e.g., "2:30" or "2:30:15")
            3. Plain number as string (e.g., "0.25"), treated as seconds

    Returns:
        Total duration in seconds as float.

    Raises:
        ValueError: If the value doesn't match any supported format.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    durationStr = value.strip().lower()
    if not durationStr:
        raise ValueError("Empty duration string")

    try:
        return float(durationStr)
    except ValueError:
        pass  # Will try next format

    # Format 1: unit-suffixed sections in fixed order
    match = _DURATION_RE.match(durationStr)
    if match:
        return sum(float(part) * multiplier for part, multiplier in zip(match.groups(), _DURATION_MULTIPLIERS) if part)

    # Format 2: HH:MM[:SS]
    timeParts = durationStr.split(":")
    if 2 <= len(timeParts) <= 3:
        try:
            hours = int(timeParts[0])
            minutes = int(timeParts[1])
            seconds = int(timeParts[2]) if len(timeParts) == 3 else 0

            if 0 <= minutes < 60 and 0 <= seconds < 60:
                return float(hours * 3600 + minutes * 60 + seconds)

        except ValueError:
            pass  # Will raise ValueError at end

    raise ValueError(
        f"Invalid duration format: {value}. Expected formats: '[DDd][HHh][MMm][SSs][MSms]', 'HH:MM[:SS]' or seconds"
    )


def jsonDumps(data: Any, compact: Optional[bool] = None, **kwargs) -> str:
    dumpKwargs = {
        "ensure_ascii": False,
        "default": str,
        "sort_keys": True,
    }

    if compact is None:
        # If indent is passed, then user want pretty-printed JSON,
        #  no need to use compact separators
        compact = "indent" not in kwargs

    if compact:
        dumpKwargs["separators"] = (",", ":")
    dumpKwargs.update(kwargs)
    return json.dumps(data, **dumpKwargs)


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.
    Just read file line by line and put key-value pairs into dictionary.
    Missing file is not an error, empty dictionary is returned.

    Args:
        path: Path to .env file (default ".env")
        populateEnv: Whether to populate environment variables (default True)

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    if not Path(path).is_file():
        logger.debug(f"No dotenv file at {path}, skipping")
        return ret

    with open(path, "rt") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if sep:
                ret[key.strip()] = value.strip().strip('"')

    if populateEnv:
        for k, v in ret.items():
            os.environ.setdefault(k, v)
    return ret
