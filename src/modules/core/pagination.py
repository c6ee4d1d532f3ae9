"""Pagination primitives for list queries.

``normalize_pagination`` applies defaults and clamps; repositories
return a ``PaginatedResult`` built with ``create_paginated_result``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class PaginationParams(BaseModel):
    """Normalised page request (1-indexed)."""

    model_config = ConfigDict(frozen=True)

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    items: List[T]
    pagination: PaginationMeta


def normalize_pagination(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> PaginationParams:
    """Apply defaults, force ``page >= 1`` and clamp ``limit`` to ``[1, max_limit]``."""
    page = max(1, page if page is not None else DEFAULT_PAGE)
    limit = limit if limit is not None else default_limit
    limit = min(max_limit, max(1, limit))
    return PaginationParams(page=page, limit=limit)


def create_pagination_meta(total: int, params: PaginationParams) -> PaginationMeta:
    total_pages = math.ceil(total / params.limit) or 1
    return PaginationMeta(
        page=params.page,
        limit=params.limit,
        total=total,
        total_pages=total_pages,
        has_next=params.page < total_pages,
        has_previous=params.page > 1,
    )


def create_paginated_result(
    items: List[T], total: int, params: PaginationParams
) -> PaginatedResult[T]:
    return PaginatedResult(items=items, pagination=create_pagination_meta(total, params))
