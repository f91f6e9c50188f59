from __future__ import annotations

import asyncio
import logging
import zipfile
from pathlib import Path
from typing import Any, Iterable, Protocol, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy import MetaData, Table, select, text
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from .db import make_engine
from .parsers import cell_text, is_blank
from .types import Row, SheetData, SheetSnapshot

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIXES = (".xlsx", ".xlsm")
SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")


class StoreError(Exception):
    pass


class SheetNotFound(StoreError):
    pass


class SheetReadError(StoreError):
    pass


class StoreUnavailable(StoreError):
    pass


class SheetStore(Protocol):
    async def ping(self) -> None: ...

    async def read_sheet(self, name: str) -> SheetData: ...

    async def close(self) -> None: ...


def rows_from_grid(header_cells: Sequence[Any], grid: Iterable[Sequence[Any]]) -> SheetData:
    """Turn a header row plus data rows into field maps.

    Blank header cells drop their column; rows whose kept cells are all blank
    are skipped.
    """
    columns = [(i, cell_text(h)) for i, h in enumerate(header_cells) if not is_blank(h)]
    rows: list[Row] = []
    for raw in grid:
        row = {name: (raw[i] if i < len(raw) else None) for i, name in columns}
        if all(is_blank(v) for v in row.values()):
            continue
        rows.append(row)
    return SheetData(headers=[name for _, name in columns], rows=rows)


class SqlSheetStore:
    """Sheets are tables; headers are the column names in declaration order."""

    def __init__(self, engine: AsyncEngine, *, owns_engine: bool = False):
        self.engine = engine
        self._owns_engine = owns_engine

    @classmethod
    def from_url(cls, database_url: str) -> "SqlSheetStore":
        return cls(make_engine(database_url), owns_engine=True)

    async def ping(self) -> None:
        url = self.engine.url
        if url.get_backend_name() == "sqlite":
            database = url.database or ""
            # sqlite would silently create a missing file
            if database and database != ":memory:" and not Path(database).is_file():
                raise StoreUnavailable(f"sqlite database not found: {database}")
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (OSError, SQLAlchemyError) as exc:
            raise StoreUnavailable(str(exc)) from exc

    async def read_sheet(self, name: str) -> SheetData:
        try:
            async with self.engine.connect() as conn:
                table = await conn.run_sync(
                    lambda sync_conn: Table(name, MetaData(), autoload_with=sync_conn)
                )
                result = await conn.execute(select(table))
                grid = [tuple(r) for r in result.all()]
        except NoSuchTableError:
            raise SheetNotFound(name) from None
        except SQLAlchemyError as exc:
            raise SheetReadError(f"{name}: {exc}") from exc
        return rows_from_grid([c.name for c in table.columns], grid)

    async def close(self) -> None:
        if self._owns_engine:
            await self.engine.dispose()


class WorkbookSheetStore:
    """Sheets are worksheets of an .xlsx file with the header on row 1."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _open(self):
        return load_workbook(self.path, read_only=True, data_only=True)

    async def ping(self) -> None:
        if not self.path.is_file():
            raise StoreUnavailable(f"workbook not found: {self.path}")
        try:
            wb = await asyncio.to_thread(self._open)
        except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as exc:
            raise StoreUnavailable(f"cannot open workbook {self.path}: {exc}") from exc
        wb.close()

    def _read_sync(self, name: str) -> SheetData:
        try:
            wb = self._open()
        except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as exc:
            raise SheetReadError(f"{name}: {exc}") from exc
        try:
            if name not in wb.sheetnames:
                raise SheetNotFound(name)
            # read-only sheets parse their XML lazily, while iterating
            it = wb[name].iter_rows(values_only=True)
            header = next(it, None) or ()
            grid = [tuple(r) for r in it]
        except (SyntaxError, KeyError, ValueError, OSError, zipfile.BadZipFile) as exc:
            raise SheetReadError(f"{name}: {exc}") from exc
        finally:
            wb.close()
        return rows_from_grid(header, grid)

    async def read_sheet(self, name: str) -> SheetData:
        return await asyncio.to_thread(self._read_sync, name)

    async def close(self) -> None:
        return None


def open_store(ref: str | Path) -> SheetStore:
    raw = str(ref or "").strip()
    if not raw:
        raise ValueError("data source reference is empty")
    if "://" in raw:
        return SqlSheetStore.from_url(raw)
    suffix = Path(raw).suffix.lower()
    if suffix in WORKBOOK_SUFFIXES:
        return WorkbookSheetStore(raw)
    if suffix in SQLITE_SUFFIXES:
        return SqlSheetStore.from_url(f"sqlite+aiosqlite:///{raw}")
    raise ValueError(f"unsupported data source: {raw}")


async def read_snapshot(store: SheetStore, name: str) -> SheetSnapshot:
    """Read one sheet; sheet-level failures are folded into the snapshot.

    ``StoreUnavailable`` is not caught: an outage must not look like an empty
    catalog.
    """
    try:
        data = await store.read_sheet(name)
    except SheetNotFound:
        logger.warning("sheet_missing sheet=%s", name)
        return SheetSnapshot(name=name, exists=False)
    except SheetReadError as exc:
        logger.warning("sheet_read_failed sheet=%s err=%s", name, exc)
        return SheetSnapshot(name=name, exists=True, read_error=str(exc))
    return SheetSnapshot(name=name, exists=True, headers=data.headers, rows=data.rows)


async def load_all(store: SheetStore, name: str) -> list[Row]:
    snapshot = await read_snapshot(store, name)
    return snapshot.rows
