"""
Typed filters for the `filters` query parameter

The Engine API takes filters as a JSON object mapping a filter name to a
list of strings, e.g. {"label": ["a=1"], "dangling": ["true"]}.
"""

import json
from dataclasses import dataclass
from typing import Any, List, Optional

from .exceptions import RequestBuildError


def encode_value(value: Any) -> str:
    """Encode a scalar the way the Engine API expects it in a query string"""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


@dataclass(frozen=True)
class Filter:
    """One entry of a `filters` query parameter"""

    kind: str
    value: str


class _KindFilter(Filter):
    KIND = ''

    def __init__(self, value: Any):
        super().__init__(self.KIND, encode_value(value))


class Label(Filter):
    """label=<key> or label=<key>=<value>"""

    def __init__(self, name: str, value: Optional[str] = None):
        super().__init__('label', name if value is None else f"{name}={value}")


class LabelName(Label):
    """Match on label presence only"""

    def __init__(self, name: str):
        super().__init__(name)


class Dangling(_KindFilter):
    KIND = 'dangling'

    def __init__(self, value: bool = True):
        super().__init__(value)


class ExitCode(_KindFilter):
    KIND = 'exited'


class IsTask(_KindFilter):
    KIND = 'is-task'


class Ancestor(_KindFilter):
    KIND = 'ancestor'


class Before(_KindFilter):
    KIND = 'before'


class Since(_KindFilter):
    KIND = 'since'


class Until(_KindFilter):
    KIND = 'until'


class Expose(_KindFilter):
    KIND = 'expose'


class Publish(_KindFilter):
    KIND = 'publish'


class Health(_KindFilter):
    KIND = 'health'


class Isolation(_KindFilter):
    KIND = 'isolation'


class Id(_KindFilter):
    KIND = 'id'


class Name(_KindFilter):
    KIND = 'name'


class Status(_KindFilter):
    KIND = 'status'


class Reference(_KindFilter):
    KIND = 'reference'


class Driver(_KindFilter):
    KIND = 'driver'


class Scope(_KindFilter):
    KIND = 'scope'


class Type(_KindFilter):
    """Object type: container, image, volume, ... for events; custom or builtin for networks"""
    KIND = 'type'


class NetworkType(Type):
    """custom or builtin"""


class Mode(_KindFilter):
    """Service mode: replicated or global"""
    KIND = 'mode'


class Event(_KindFilter):
    KIND = 'event'


class Container(_KindFilter):
    KIND = 'container'


class Image(_KindFilter):
    KIND = 'image'


class Volume(_KindFilter):
    KIND = 'volume'


class Network(_KindFilter):
    KIND = 'network'


class Daemon(_KindFilter):
    KIND = 'daemon'


class Node(_KindFilter):
    KIND = 'node'


class Service(_KindFilter):
    KIND = 'service'


def parse_filters(raw: Optional[str]) -> List[Filter]:
    """
    Parse the JSON form of a `filters` parameter into filters

    Accepts both {"label": ["a=1"]} and the legacy {"label": {"a=1": true}}.

    Args:
        raw: JSON text or None

    Returns:
        List of Filter entries, empty when raw is empty

    Raises:
        RequestBuildError: If the text is not a valid filters object
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise RequestBuildError(f"filters is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise RequestBuildError("filters must be a JSON object")

    result = []
    for kind, values in data.items():
        if isinstance(values, dict):
            values = [key for key, enabled in values.items() if enabled]
        elif isinstance(values, (str, int, bool)):
            values = [values]
        if not isinstance(values, list):
            raise RequestBuildError(f"filters.{kind} must be a list of strings")
        for value in values:
            result.append(Filter(str(kind), encode_value(value)))
    return result

