"""
API Dependencies
Common dependencies for API endpoints (database, storage, authorization, paging).
"""

from dataclasses import dataclass

from fastapi import Query

from jobboard.config import settings
from jobboard.core.security import get_current_actor, require_admin, require_company
from jobboard.db.session import get_db
from jobboard.services.storage_service import get_storage

__all__ = [
    "PageParams",
    "get_current_actor",
    "get_db",
    "get_page",
    "get_storage",
    "require_admin",
    "require_company",
]


@dataclass
class PageParams:
    page: int
    size: int


async def get_page(
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
) -> PageParams:
    """Pagination query parameters; ``size`` is capped at ``MAX_PAGE_SIZE``."""
    return PageParams(page=page, size=min(size, settings.MAX_PAGE_SIZE))
