"""Pagination schemas for offset-based pagination."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageRequest(BaseModel):
    """1-based page number and page size requested by the caller."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1)

    def clamp(self, max_page_size: int) -> "PageRequest":
        """Return a copy whose page_size does not exceed max_page_size."""
        if self.page_size <= max_page_size:
            return self
        return self.model_copy(update={"page_size": max_page_size})

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class Page(BaseModel, Generic[T]):
    """One page of results plus the totals needed to render a pager."""

    items: list[T]
    page: int
    page_size: int
    total: int = Field(description="Number of matching rows across all pages.")
    total_pages: int

    @classmethod
    def build(cls, items: list[T], total: int, request: PageRequest) -> "Page[T]":
        total_pages = -(-total // request.page_size) if total else 0
        return cls(
            items=items,
            page=request.page,
            page_size=request.page_size,
            total=total,
            total_pages=total_pages,
        )
