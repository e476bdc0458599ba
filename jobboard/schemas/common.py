"""Response envelope and shared schema helpers."""

from math import ceil
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Schema exchanged as camelCase JSON, populated by field name in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FieldError(BaseModel):
    field: str
    error_code: str


class Pagination(CamelModel):
    total: int
    page: int
    size: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, size: int) -> "Pagination":
        return cls(total=total, page=page, size=size, total_pages=ceil(total / size) if size else 0)

    @classmethod
    def single_page(cls, total: int) -> "Pagination":
        """Pagination of an unpaged listing: everything on page 1."""
        return cls(total=total, page=1, size=total, total_pages=1)


class ListData(BaseModel, Generic[T]):
    data: List[T]
    pagination: Pagination


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every endpoint."""

    success: bool = True
    message_code: Optional[str] = None
    data: Optional[T] = None
    error_code: Optional[str] = None
    errors: List[FieldError] = []


def ok(data=None, message_code: Optional[str] = None) -> dict:
    """Successful envelope as a plain dict (validated by the route's response_model)."""
    return {
        "success": True,
        "message_code": message_code,
        "data": data,
        "error_code": None,
        "errors": [],
    }


def ok_list(items, pagination: Pagination, message_code: Optional[str] = None) -> dict:
    return ok({"data": items, "pagination": pagination}, message_code)


def page_offset(page: int, size: int) -> int:
    return (page - 1) * size
