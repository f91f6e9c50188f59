from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .checks import DEFAULT_DISPLAY_LIMIT, run_health_check
from .schema import SCHEMAS
from .store import SheetStore, open_store, read_snapshot
from .types import HealthReport

logger = logging.getLogger(__name__)


async def get_health(
    source: SheetStore | str | Path,
    *,
    display_limit: int | None = None,
) -> HealthReport:
    """Load every catalog sheet from ``source`` and validate it.

    Raises ``StoreUnavailable`` when the data source cannot be reached and
    ``ValueError`` for an unusable reference; everything else is reported.
    """
    owned = isinstance(source, (str, Path))
    store = open_store(source) if owned else source
    try:
        await store.ping()
        snapshots = await asyncio.gather(*(read_snapshot(store, s.sheet) for s in SCHEMAS))
    finally:
        if owned:
            await store.close()

    sheets = {snap.name: snap for snap in snapshots}
    entities = {schema.kind: sheets[schema.sheet].rows for schema in SCHEMAS}
    report = run_health_check(
        entities,
        sheets,
        display_limit=DEFAULT_DISPLAY_LIMIT if display_limit is None else display_limit,
    )
    logger.info(
        "health_check_done ok=%s errors=%s warnings=%s",
        report.ok,
        len(report.errors),
        len(report.warnings),
    )
    return report


def get_health_sync(source: SheetStore | str | Path, *, display_limit: int | None = None) -> HealthReport:
    return asyncio.run(get_health(source, display_limit=display_limit))
