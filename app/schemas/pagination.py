"""Pagination schemas."""

from math import ceil
from typing import Self

from pydantic import BaseModel, Field


class PaginationInfo(BaseModel):
    """Page metadata: ``pages`` is ``ceil(total / limit)``."""

    total: int = Field(ge=0, description="Matching record count")
    page: int = Field(ge=1, description="Current page (1-based)")
    pages: int = Field(ge=0, description="Total number of pages")
    limit: int = Field(ge=1, description="Page size")

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> Self:
        return cls(total=total, page=page, pages=ceil(total / limit), limit=limit)
