"""Page/limit pagination shared by every list endpoint."""
import math
from dataclasses import dataclass

from fastapi import Query
from pydantic import BaseModel

DEFAULT_LIMIT = 20
ADMIN_DEFAULT_LIMIT = 50
MAX_LIMIT = 100


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


@dataclass
class PageParams:
    page: int = 1
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def describe(self, total: int) -> Pagination:
        return Pagination(
            page=self.page,
            limit=self.limit,
            total=total,
            pages=math.ceil(total / self.limit) if self.limit else 0,
        )


def page_params(default_limit: int = DEFAULT_LIMIT):
    """Build a dependency reading ?page=&limit= with the given default limit. Limits above MAX_LIMIT are clamped."""

    def dependency(
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=1),
    ) -> PageParams:
        return PageParams(page=page, limit=min(limit, MAX_LIMIT))

    return dependency
