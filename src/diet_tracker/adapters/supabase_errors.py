"""Error translation for Supabase queries."""

from typing import Any

import httpx
from postgrest.exceptions import APIError

from diet_tracker.domain.errors import StoreUnavailableError

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class UniqueViolation(Exception):
    """A write hit a unique constraint."""


class ForeignKeyViolation(Exception):
    """A write hit a foreign key constraint."""


def execute(query: Any) -> Any:
    """Run a query builder, translating store failures."""
    try:
        return query.execute()
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise UniqueViolation(exc.message) from exc
        if exc.code == FOREIGN_KEY_VIOLATION:
            raise ForeignKeyViolation(exc.message) from exc
        raise StoreUnavailableError(f"Store query failed: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise StoreUnavailableError(f"Store unreachable: {exc}") from exc
