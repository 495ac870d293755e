"""Typer-based CLI entry point."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from pagesync.config import DEFAULT_LIMIT
from pagesync.domain.query import query_fingerprint
from pagesync.errors import InvalidQueryError, MissingIdError, PageSyncError
from pagesync.infrastructure.memory_service import InMemoryService
from pagesync.settings.options import PaginationState
from pagesync.store.item_store import ItemStore
from pagesync.utils.logging import enable_console_logging
from pagesync.viewmodels.find_viewmodel import FindViewModel

app = typer.Typer(help="Browse paginated collections through the pagesync engine")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (json.JSONDecodeError, OSError, InvalidQueryError, MissingIdError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except PageSyncError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _parse_query(raw: Optional[str]) -> dict:
    if not raw:
        return {}
    query = json.loads(raw)
    if not isinstance(query, dict):
        raise typer.BadParameter("query must be a JSON object")
    return query


def _load_items(path: Path) -> list[dict]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    if not isinstance(payload, list):
        raise typer.BadParameter(f"{path} must hold a JSON list of items")
    return payload


def _render(items: list[dict], title: str) -> Table:
    columns: list[str] = []
    for item in items:
        for key in item:
            if key not in columns:
                columns.append(key)
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for item in items:
        table.add_row(*(_cell(item.get(column)) for column in columns))
    return table


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


async def _browse(
    items: list[dict],
    query: dict,
    *,
    limit: int,
    page: int,
    server: bool,
) -> FindViewModel:
    service = InMemoryService(items)
    store = ItemStore()
    if not server:
        store.upsert(items)
    vm = FindViewModel(
        {"query": query},
        service,
        store,
        {
            "pagination": PaginationState.create(limit=limit),
            "paginate_on_server": server,
            "immediate": False,
            "debounce_ms": 0,
        },
    )
    try:
        if server:
            await vm.make_request()
        if page > 1:
            await vm.to_page(page)
        return vm
    finally:
        vm.dispose()


@app.command()
@_handle_errors
def fingerprint(query: str = typer.Argument(..., help="Query as a JSON object")) -> None:
    """Print the fingerprint of a query (pagination fields ignored)."""

    typer.echo(query_fingerprint(_parse_query(query)))


@app.command()
@_handle_errors
def browse(
    items_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of items"),
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Query as a JSON object"),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-l", min=1),
    page: int = typer.Option(1, "--page", "-p", min=1),
    server: bool = typer.Option(True, "--server/--local", help="Paginate on the service or in the store"),
    show_all: bool = typer.Option(False, "--all", help="Show every item fetched so far (server mode)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Show one page of ITEMS_FILE as seen through the engine."""

    if verbose:
        enable_console_logging(logging.DEBUG)

    items = _load_items(items_file)
    vm = asyncio.run(
        _browse(items, _parse_query(query), limit=limit, page=page, server=server)
    )
    data = list(vm.all_local_data.value if show_all and server else vm.data.value)

    title = f"Page {vm.current_page.value} of {vm.page_count.value} ({vm.total.value} items)"
    Console().print(_render(data, title))


def main() -> None:  # pragma: no cover - console script
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
