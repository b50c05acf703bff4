"""Pagination value objects."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

ASC = "ASC"
DESC = "DESC"


def parse_direction(value: str | None) -> str:
    """``"desc"`` in any case means descending; anything else is ascending."""
    return DESC if (value or "").strip().lower() == "desc" else ASC


@dataclass(frozen=True)
class PageRequest:
    """Which slice of a result set to return, and in what order."""

    page: int = 0
    size: int = 10
    sort_field: str = "id"
    sort_direction: str = ASC

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("page must be >= 0")
        if self.size < 1:
            raise ValueError("size must be >= 1")
        object.__setattr__(self, "sort_direction", parse_direction(self.sort_direction))

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def descending(self) -> bool:
        return self.sort_direction == DESC

    @property
    def sort_descriptor(self) -> str:
        return f"{self.sort_field}: {self.sort_direction}"


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the size of the whole result set."""

    content: tuple[T, ...] = field(default_factory=tuple)
    page_number: int = 0
    page_size: int = 10
    total_elements: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.page_size) if self.page_size else 0

    @property
    def number_of_elements(self) -> int:
        return len(self.content)
