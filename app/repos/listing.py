# app/repos/listing.py
"""
Shared search/filter/sort/paginate helper for admin listings.

Callers describe the base ``select()``, the filter predicates and an allow-list
of sortable columns. Sort names never reach SQL text: they only pick a column
object out of the allow-list, and anything unknown falls back to the default.
"""
import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

DEFAULT_PAGE = 1
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = 20
    sort: str | None = None
    direction: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Page:
    rows: List[Any]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    def pagination(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
        }


def total_pages(total: int, limit: int) -> int:
    return max(1, math.ceil(total / limit))


def normalize_direction(direction: str | None, default: str = "DESC") -> str:
    if direction is None or not direction.strip():
        return default
    return "ASC" if direction.strip().lower() == "asc" else "DESC"


def resolve_sort(
    requested: str | None,
    allowed: Mapping[str, ColumnElement],
    default: str,
) -> ColumnElement:
    if requested in allowed:
        return allowed[requested]
    return allowed[default]


def contains(term: str) -> str:
    """LIKE pattern for a substring match with wildcards in the term escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def paginate(
    db: Session,
    stmt: Select,
    filters: Sequence[ColumnElement],
    request: PageRequest,
    sortable: Mapping[str, ColumnElement],
    default_sort: str,
    default_direction: str = "DESC",
    tiebreaker: ColumnElement | None = None,
) -> Page:
    """
    Runs a count query and a data query over the same predicate.

    A page past the end yields an empty row list together with a consistent
    pagination payload.
    """
    filtered = stmt.where(*filters) if filters else stmt

    count_stmt = select(func.count()).select_from(filtered.order_by(None).subquery())
    total = db.execute(count_stmt).scalar_one()

    column = resolve_sort(request.sort, sortable, default_sort)
    direction = normalize_direction(request.direction, default_direction)
    ordering = [column.asc() if direction == "ASC" else column.desc()]
    if tiebreaker is not None:
        ordering.append(tiebreaker.asc() if direction == "ASC" else tiebreaker.desc())

    data_stmt = filtered.order_by(*ordering).limit(request.limit).offset(request.offset)
    rows = list(db.execute(data_stmt).all())

    return Page(rows=rows, page=request.page, limit=request.limit, total=total)
