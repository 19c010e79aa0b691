"""Response envelopes shared by every resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Pagination:
    per_page: int = 0
    page_offset: int = 0
    item_offset: int = 0
    total_items: int = 0
    total_pages: int = 0
    current_item_count: int = 0
    previous_link: Optional[str] = None
    next_link: Optional[str] = None
    paging_link_template: Optional[str] = None


@dataclass(frozen=True)
class DataResponse(Generic[T]):
    """`{"data": <T>, "context": ...}`"""

    data: T
    context: str = ""


@dataclass(frozen=True)
class ListResponse(Generic[T]):
    """A list of records plus whatever envelope metadata came with it."""

    items: List[T] = field(default_factory=list)
    context: str = ""
    api_version: str = ""
    pagination: Optional[Pagination] = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
