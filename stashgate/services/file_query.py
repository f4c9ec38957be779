from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, func, or_, select

from stashgate.core.config import settings
from stashgate.core.errors import InvalidInput
from stashgate.models.file import File
from stashgate.services.identity import TenantIdentity
from stashgate.services.ownership import tenant_prefix
from stashgate.utils.clock import to_naive_utc

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so user input only ever matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _contains(column, needle: str):
    return column.ilike(f"%{escape_like(needle)}%", escape=LIKE_ESCAPE)


@dataclass
class FileListCriteria:
    search: str | None = None
    path: str | None = None
    mime: str | None = None
    min_size: int | None = None
    max_size: int | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    page: int = 1
    limit: int | None = None


@dataclass
class FileQuery:
    count_statement: Select
    page_statement: Select
    page: int
    limit: int


@dataclass
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int


def paginate(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))


def _validate(criteria: FileListCriteria, max_limit: int) -> tuple[int, int]:
    page = criteria.page
    limit = criteria.limit if criteria.limit is not None else settings.DEFAULT_PAGE_SIZE
    if page < 1:
        raise InvalidInput("page must be at least 1")
    if limit < 1 or limit > max_limit:
        raise InvalidInput(f"limit must be between 1 and {max_limit}")
    for name in ("min_size", "max_size"):
        value = getattr(criteria, name)
        if value is not None and value < 0:
            raise InvalidInput(f"{name} must not be negative")
    if criteria.min_size is not None and criteria.max_size is not None and criteria.min_size > criteria.max_size:
        raise InvalidInput("min_size must not exceed max_size")
    if criteria.date_from is not None and criteria.date_to is not None:
        if to_naive_utc(criteria.date_from) > to_naive_utc(criteria.date_to):
            raise InvalidInput("date_from must not be after date_to")
    return page, limit


def build_file_query(
    tenant: TenantIdentity,
    criteria: FileListCriteria,
    *,
    max_limit: int | None = None,
) -> FileQuery:
    """Translate listing criteria into a count and a page statement.

    Both statements share the same WHERE clause, always starting with the
    tenant's key prefix. Pages are ordered newest first with ``id`` breaking
    ties so consecutive pages never overlap.
    """
    page, limit = _validate(criteria, max_limit or settings.MAX_PAGE_SIZE)

    conditions = [File.key.startswith(tenant_prefix(tenant.id), autoescape=True)]

    if criteria.search and criteria.search.strip():
        needle = criteria.search.strip()
        conditions.append(or_(_contains(File.name, needle), _contains(File.custom_name, needle)))
    if criteria.path and criteria.path.strip():
        conditions.append(_contains(File.path, criteria.path.strip()))
    if criteria.mime:
        conditions.append(File.mime == criteria.mime)

    if criteria.min_size is not None:
        conditions.append(File.size >= criteria.min_size)
    if criteria.max_size is not None:
        conditions.append(File.size <= criteria.max_size)

    if criteria.date_from is not None:
        conditions.append(File.created_at >= to_naive_utc(criteria.date_from))
    if criteria.date_to is not None:
        conditions.append(File.created_at <= to_naive_utc(criteria.date_to))

    count_statement = select(func.count()).select_from(File).where(*conditions)
    page_statement = (
        select(File)
        .where(*conditions)
        .order_by(File.created_at.desc(), File.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return FileQuery(count_statement=count_statement, page_statement=page_statement, page=page, limit=limit)
