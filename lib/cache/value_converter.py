"""
Value converter implementations for cache storage, dood!

This module provides ValueConverter implementation
for values stored in string-only cache backends: JSON encoding of record
classes providing toDict()/fromDict().
"""

import json
from typing import Any, Callable, Dict, Type

import lib.utils as utils

from .types import V, ValueConverter


class DataclassValueConverter(ValueConverter[V]):
    """
    JSON converter for record classes, dood!

    Class must provide `toDict()` method and `fromDict()` classmethod,
    the latter is expected to raise KeyError/TypeError/ValueError on
    malformed data.

    Example:
        >>> converter = DataclassValueConverter(WeatherResult)
        >>> converter.encode(WeatherResult(25.0, 60, "Sunny"))
        '{"temperature":25.0,"humidity":60,"description":"Sunny"}'
    """

    def __init__(self, cls: Type[V]):
        self.cls = cls
        self._fromDict: Callable[[Dict[str, Any]], V] = getattr(cls, "fromDict")

    def encode(self, obj: V) -> str:
        if not isinstance(obj, self.cls):
            raise TypeError(f"{type(self).__name__} expects {self.cls.__name__}, got {type(obj).__name__}, dood!")
        return utils.jsonDumps(obj.toDict(), sort_keys=False)  # type: ignore[attr-defined]

    def decode(self, value: str) -> V:
        data = json.loads(value)
        if not isinstance(data, dict):
            raise ValueError(f"Expected JSON object for {self.cls.__name__}, got {type(data).__name__}")
        return self._fromDict(data)
