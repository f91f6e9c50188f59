from __future__ import annotations
from typing import Any, Iterable, Mapping, Sequence
from sqlalchemy import Column, MetaData, Table, Text
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from .parsers import cell_text, is_blank

def normalize_database_url(url: str) -> str:
    url = url.strip()
    # the sync sqlite driver cannot back an async engine
    if url.startswith("sqlite://"):
        return "sqlite+aiosqlite://" + url[len("sqlite://"):]
    return url

def make_engine(database_url: str) -> AsyncEngine:
    try:
        return create_async_engine(normalize_database_url(database_url), echo=False, future=True)
    except ArgumentError as exc:
        raise ValueError(f"unsupported database url: {database_url} ({exc})") from exc

def _clean_headers(headers: Iterable[Any]) -> list[str]:
    out: list[str] = []
    for h in headers:
        name = cell_text(h)
        if name and name not in out:
            out.append(name)
    return out

def sheet_table(metadata: MetaData, name: str, headers: Sequence[str]) -> Table:
    return Table(name, metadata, *(Column(h, Text) for h in headers))

async def write_sheet(
    engine: AsyncEngine,
    name: str,
    headers: Iterable[Any],
    rows: Iterable[Mapping[str, Any]],
) -> int:
    """Replace table ``name`` with the given header row and data rows."""
    columns = _clean_headers(headers)
    if not columns:
        raise ValueError(f"sheet {name} has no headers")
    table = sheet_table(MetaData(), name, columns)
    values = [
        {h: None if is_blank(row.get(h)) else cell_text(row.get(h)) for h in columns}
        for row in rows
    ]
    async with engine.begin() as conn:
        await conn.run_sync(lambda sync_conn: table.drop(sync_conn, checkfirst=True))
        await conn.run_sync(table.create)
        if values:
            await conn.execute(table.insert(), values)
    return len(values)
