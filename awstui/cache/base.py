"""
Cache interfaces for aws-tui.
"""

from typing import Any, Protocol, Tuple, Union
from datetime import timedelta


TTL = Union[int, float, timedelta]


class CacheBackend(Protocol):
    def get(self, key: str) -> Tuple[Any, bool]:
        ...

    def set(self, key: str, value: Any, ttl: TTL) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def delete_prefix(self, prefix: str) -> int:
        ...
