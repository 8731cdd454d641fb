"""Translation of Supabase/PostgREST failures into tracker errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from activity_tracker.domain.errors import NotProvisionedError, StoreError

# Postgres "undefined_table" and PostgREST "relation not in schema cache".
MISSING_RELATION_CODES = frozenset({"42P01", "PGRST205"})


@contextmanager
def translate_errors(table: str) -> Iterator[None]:
    """Re-raise store failures for ``table`` as tracker errors."""
    try:
        yield
    except APIError as exc:
        if exc.code in MISSING_RELATION_CODES:
            raise NotProvisionedError(table, exc.code) from exc
        raise StoreError(f"{table}: {exc.message or exc.code}") from exc
    except httpx.HTTPError as exc:
        raise StoreError(f"{table}: {exc}") from exc
