import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .config import env_catalog_source
from .db import make_engine, write_sheet
from .schema import sheet_names
from .store import SheetNotFound, StoreError, WorkbookSheetStore

logger = logging.getLogger(__name__)

async def import_workbook(path: str, database_url: str) -> dict[str, int]:
    store = WorkbookSheetStore(path)
    await store.ping()
    engine = make_engine(database_url)
    database = engine.url.database
    if engine.url.get_backend_name() == "sqlite" and database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    imported: dict[str, int] = {}
    try:
        for name in sheet_names():
            try:
                data = await store.read_sheet(name)
            except SheetNotFound:
                logger.warning("import_sheet_missing sheet=%s", name)
                continue
            if not data.headers:
                logger.warning("import_sheet_no_headers sheet=%s", name)
                continue
            imported[name] = await write_sheet(engine, name, data.headers, data.rows)
            logger.info("import_sheet_done sheet=%s rows=%s", name, imported[name])
    finally:
        await engine.dispose()
    return imported

def main(argv: list[str]) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(description="Copy catalog sheets from a workbook into the SQL store.")
    parser.add_argument("workbook")
    parser.add_argument("--db")
    args = parser.parse_args(argv)
    try:
        database_url = args.db or env_catalog_source()
    except RuntimeError as exc:
        print(f"ERROR: {exc}")
        return 2
    if "://" not in database_url:
        print("ERROR: --db must be a database URL")
        return 2
    try:
        imported = asyncio.run(import_workbook(args.workbook, database_url))
    except (StoreError, ValueError) as exc:
        logger.error("import_failed workbook=%s err=%s", args.workbook, exc)
        print(f"ERROR: {exc}")
        return 2
    print(", ".join(f"{name}={count}" for name, count in imported.items()) or "nothing imported")
    return 0

def cli() -> None:
    raise SystemExit(main(sys.argv[1:]))

if __name__ == "__main__":
    cli()
