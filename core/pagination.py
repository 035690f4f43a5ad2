"""
Offset pagination over async SQLAlchemy selects.

paginate() runs one COUNT and one windowed SELECT and returns a snapshot
PageResult. build_page_meta() holds the navigation math on its own so it can
be reused and tested without a database.
"""
import math
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel
from sqlalchemy import Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import InvalidArgumentError


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: "str | SortOrder") -> "SortOrder":
        try:
            return cls(str(value.value if isinstance(value, SortOrder) else value).upper())
        except ValueError:
            raise InvalidArgumentError(f"order must be ASC or DESC, got '{value}'") from None


class PageMeta(BaseModel):
    total_elements: int
    page: int
    limit: int
    total_pages: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: Optional[int] = None
    next_page: Optional[int] = None


class PageResult(PageMeta):
    items: list[Any]
    sorted_by: str
    ordered: SortOrder


def validate_window(page: int, limit: int) -> None:
    if page < 1:
        raise InvalidArgumentError("page must be >= 1")
    if limit < 1:
        raise InvalidArgumentError("limit must be >= 1")


def build_page_meta(total: int, page: int, limit: int) -> PageMeta:
    validate_window(page, limit)
    total_pages = math.ceil(total / limit)
    has_prev_page = page > 1
    has_next_page = page < total_pages
    return PageMeta(
        total_elements=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
        has_prev_page=has_prev_page,
        has_next_page=has_next_page,
        prev_page=page - 1 if has_prev_page else None,
        next_page=page + 1 if has_next_page else None,
    )


def _sort_column(model, sort_by: str, sortable: Optional[Iterable[str]] = None):
    columns = inspect(model).columns
    allowed_fields = set(columns.keys()) if sortable is None else set(sortable) & set(columns.keys())
    if sort_by not in allowed_fields:
        allowed = ", ".join(sorted(allowed_fields))
        raise InvalidArgumentError(f"Cannot sort by '{sort_by}'. Allowed fields: {allowed}")
    return getattr(model, sort_by)


async def paginate(
    session: AsyncSession,
    model,
    page: int,
    limit: int,
    sort_by: str,
    order: "str | SortOrder" = SortOrder.ASC,
    stmt: Optional[Select] = None,
    sortable: Optional[Iterable[str]] = None,
    serializer: Optional[Callable[[Any], Any]] = None,
) -> PageResult:
    """
    Return one page of `model` rows ordered by `sort_by`.

    Args:
        session: AsyncSession used for the count and window queries
        model: mapped ORM class; `sort_by` must be one of its columns
        page: 1-based page number
        limit: page size (>= 1)
        sort_by: column name to order by
        order: ASC or DESC (case-insensitive)
        stmt: optional base select (filters, eager loads); defaults to select(model)
        sortable: optional subset of column names callers may sort by; defaults to all
        serializer: optional callable applied to every row of the window

    Raises:
        InvalidArgumentError: on page/limit < 1, unknown sort field or order
    """
    validate_window(page, limit)
    direction = SortOrder.parse(order)
    column = _sort_column(model, sort_by, sortable)
    base = stmt if stmt is not None else select(model)

    count_stmt = select(func.count()).select_from(base.order_by(None).subquery())
    total = (await session.execute(count_stmt)).scalar_one()

    primary_keys = inspect(model).primary_key
    ordering = [column.desc() if direction is SortOrder.DESC else column.asc()]
    ordering += [pk.asc() for pk in primary_keys if pk.key != sort_by]
    window = base.order_by(*ordering).offset((page - 1) * limit).limit(limit)
    rows = (await session.execute(window)).scalars().unique().all()

    meta = build_page_meta(total, page, limit)
    items = [serializer(row) for row in rows] if serializer else list(rows)
    return PageResult(items=items, sorted_by=sort_by, ordered=direction, **meta.model_dump())
