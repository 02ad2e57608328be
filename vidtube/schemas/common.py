"""
Schemas shared across resources
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Generic, List, Optional, TypeVar
from uuid import UUID

T = TypeVar("T")


class MediaAsset(BaseModel):
    """Reference to a binary stored by the media delegate"""
    url: str
    asset_id: str


class OwnerSummary(BaseModel):
    """Minimal projection of a user embedded in other resources"""
    id: UUID
    username: str
    fullname: str
    avatar: MediaAsset

    model_config = ConfigDict(from_attributes=True)


class Envelope(BaseModel, Generic[T]):
    """Uniform response wrapper (documentation only; endpoints build it via api_response)"""
    statusCode: int
    data: Optional[T] = None
    message: str
    success: bool
    errors: Optional[List[Any]] = None


class Page(BaseModel, Generic[T]):
    """One page of a listing plus total-count metadata"""
    docs: List[T]
    total_docs: int
    limit: int
    page: int
    total_pages: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: Optional[int] = None
    next_page: Optional[int] = None


class PageParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def build_page(docs: List[Any], total: int, params: PageParams) -> Page:
    total_pages = max((total + params.limit - 1) // params.limit, 1)
    has_prev = params.page > 1
    has_next = params.page < total_pages
    return Page(
        docs=docs,
        total_docs=total,
        limit=params.limit,
        page=params.page,
        total_pages=total_pages,
        has_prev_page=has_prev,
        has_next_page=has_next,
        prev_page=params.page - 1 if has_prev else None,
        next_page=params.page + 1 if has_next else None,
    )
