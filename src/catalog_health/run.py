import argparse
import asyncio
import json
import logging
import sys

from .config import SUPPORTED_LANGS, env_catalog_source, env_display_limit, env_ui_lang
from .health import get_health
from .report import assemble, render_text
from .store import StoreUnavailable

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNAVAILABLE = 2

def positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {raw}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {raw}")
    return value

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the catalog data health check.")
    parser.add_argument("--source", help="database URL or .xlsx path (default: CATALOG_SOURCE)")
    parser.add_argument("--lang", choices=SUPPORTED_LANGS, help="report language (default: UI_LANG)")
    parser.add_argument("--display-limit", type=positive_int, help="default: HEALTH_DISPLAY_LIMIT")
    parser.add_argument("--json", action="store_true", default=False)
    return parser

def main(argv: list[str]) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger(__name__)
    # environment only fills options missing from the command line
    try:
        source = args.source or env_catalog_source()
        lang = args.lang or env_ui_lang()
        display_limit = args.display_limit or env_display_limit()
    except RuntimeError as exc:
        print(f"ERROR: {exc}")
        return EXIT_UNAVAILABLE

    try:
        report = asyncio.run(get_health(source, display_limit=display_limit))
    except (StoreUnavailable, ValueError) as exc:
        logger.error("health_check_unavailable source=%s err=%s", source, exc)
        print(f"ERROR: {exc}")
        return EXIT_UNAVAILABLE

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(render_text(assemble(report, lang)))
    return EXIT_OK if report.ok else EXIT_FAILED

def cli() -> None:
    raise SystemExit(main(sys.argv[1:]))

if __name__ == "__main__":
    cli()
