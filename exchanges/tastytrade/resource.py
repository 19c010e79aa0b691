from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

if TYPE_CHECKING:
    from .client import TastytradeClient


def segment(value: Any) -> str:
    """Percent-escape one path segment (symbols such as `/ESZ9` or `BRK/B`)."""
    return quote(str(value), safe="")


class Resource:
    """Group of endpoint accessors sharing one client handle."""

    def __init__(self, client: "TastytradeClient") -> None:
        self._client = client
