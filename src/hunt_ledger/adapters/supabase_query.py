"""Shared helpers for executing Supabase queries."""

import httpx
from postgrest import APIError

from hunt_ledger.errors import StorageError

UNIQUE_VIOLATION = "23505"
PAGE_SIZE = 1000


def execute(query, failure_message: str):  # type: ignore[no-untyped-def]
    """Execute a PostgREST query, translating transport and API failures."""
    try:
        return query.execute()
    except APIError as exc:
        raise StorageError(f"{failure_message}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise StorageError(f"{failure_message}: {exc}") from exc


def insert_unique(  # type: ignore[no-untyped-def]
    query, failure_message: str
) -> dict[str, object] | None:
    """Execute an insert and return its row, or None on a unique-key conflict."""
    try:
        response = query.execute()
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            return None
        raise StorageError(f"{failure_message}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise StorageError(f"{failure_message}: {exc}") from exc
    if not response.data:
        raise StorageError(failure_message)
    return response.data[0]


def fetch_all(  # type: ignore[no-untyped-def]
    build_query, failure_message: str
) -> list[dict[str, object]]:
    """Read every row of a select, one range request at a time.

    PostgREST caps each response at its max-rows setting, which may be lower
    than PAGE_SIZE, so paging advances by the rows actually returned and ends
    on an empty page. `build_query` must return a fresh, stably ordered query.
    """
    rows: list[dict[str, object]] = []
    while True:
        response = execute(
            build_query().range(len(rows), len(rows) + PAGE_SIZE - 1),
            failure_message,
        )
        page = response.data or []
        if not page:
            return rows
        rows.extend(page)
