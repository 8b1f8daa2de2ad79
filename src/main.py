# src/main.py — v1
"""CLI entry point — dossier, search, cache commands.

Usage:
    suppliercheck dossier <company_number> [options]
    suppliercheck search <query>
    suppliercheck cache clean|clear
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from suppliercheck.config.settings import ConfigurationError, Settings
from suppliercheck.connectors.models import ConnectorError
from suppliercheck.logging.logger import setup_logging
from suppliercheck.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except (ConfigurationError, ValidationError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except ConnectorError as exc:
        logger.error("Companies House request failed: %s", exc)
        return 1
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _iso_date(value: str) -> str:
    """argparse type for ISO calendar dates, normalized to YYYY-MM-DD."""
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid date {value!r}, expected YYYY-MM-DD"
        ) from None


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="suppliercheck",
        description=f"suppliercheck v{__version__} — UK supplier due-diligence dossiers",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- dossier ---
    p_dossier = subparsers.add_parser(
        "dossier", help="Compile a dossier for one company",
    )
    p_dossier.add_argument("company_number", help="Companies House number")
    p_dossier.add_argument(
        "--reference-date", type=_iso_date, default=None,
        help="Anchor date for time-window risk rules (default: today, UTC)",
    )
    p_dossier.add_argument(
        "--generated-at", default=None,
        help="Fixed generatedAt timestamp for reproducible output",
    )
    p_dossier.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Write JSON to this file instead of stdout",
    )
    p_dossier.set_defaults(func=_cmd_dossier)

    # --- search ---
    p_search = subparsers.add_parser(
        "search", help="Search companies by name or number",
    )
    p_search.add_argument("query", help="Company name or number")
    p_search.add_argument(
        "-n", "--limit", type=int, default=20,
        help="Maximum results (default: 20)",
    )
    p_search.set_defaults(func=_cmd_search)

    # --- cache ---
    p_cache = subparsers.add_parser(
        "cache", help="Maintain the fetch cache",
    )
    p_cache.add_argument(
        "action", choices=["clean", "clear"],
        help="clean: drop expired entries; clear: drop everything",
    )
    p_cache.set_defaults(func=_cmd_cache)

    return parser


async def _cmd_dossier(args: argparse.Namespace, settings: Settings) -> int:
    """Compile one dossier and emit it as JSON."""
    from suppliercheck.api.facade import compile_dossier

    result = await compile_dossier(
        args.company_number,
        settings=settings,
        reference_date=args.reference_date,
        generated_at=args.generated_at,
    )
    output = result.to_json()

    if args.output is None:
        print(output)
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info("Dossier written to %s", args.output)

    flag_ids = ", ".join(f.id.value for f in result.flags) or "none"
    print(f"Risk flags: {flag_ids}", file=sys.stderr)
    return 0


async def _cmd_search(args: argparse.Namespace, settings: Settings) -> int:
    """Print matching companies, one per line."""
    from suppliercheck.api.facade import create_fetch_cache
    from suppliercheck.connectors.companies_house import CompaniesHouseConnector

    async with create_fetch_cache(settings) as cache:
        connector = CompaniesHouseConnector(cache, settings)
        response = await connector.search_companies(args.query, items_per_page=args.limit)

    for item in response.data.items:
        snippet = item.address_snippet or ""
        print(f"{item.company_number}\t{item.company_status}\t{item.title}\t{snippet}")
    return 0


async def _cmd_cache(args: argparse.Namespace, settings: Settings) -> int:
    """Clean expired entries or clear the whole fetch cache."""
    from suppliercheck.api.facade import create_fetch_cache

    async with create_fetch_cache(settings) as cache:
        if args.action == "clean":
            removed = await cache.clean_expired()
            print(f"Removed {removed} expired entries")
        else:
            await cache.clear()
            print("Cache cleared")
    return 0


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
