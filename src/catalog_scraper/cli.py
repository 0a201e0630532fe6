"""Command-line interface for the catalog scraper."""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from catalog_scraper.config import ScraperConfig, settings
from catalog_scraper.exceptions import ScraperError
from catalog_scraper.logging_config import setup_logging
from catalog_scraper.scraper import CatalogScraper
from catalog_scraper.storage import JsonlProductStore


def load_config(path: Optional[str]) -> ScraperConfig:
    """Config file when given, environment otherwise."""
    if path:
        return ScraperConfig.from_file(path)
    return ScraperConfig.from_env()


def read_url_file(path: str) -> List[str]:
    """One URL per line; blank lines and # comments are skipped."""
    urls = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            urls.append(line)
    return urls


def write_output(payload: dict, output_file: Optional[str]) -> None:
    output = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"\nResult written to {output_file}", file=sys.stderr)
    else:
        print(output)


def error_payload(error: Exception) -> dict:
    include_details = not settings.is_production
    if isinstance(error, ScraperError):
        return {"success": False, "error": error.to_dict(include_details)}
    return {"success": False, "error": {"kind": "unexpected_error", "message": str(error)}}


async def _scrape(args) -> int:
    config = load_config(args.config)
    store = JsonlProductStore(args.save) if args.save else None

    async with CatalogScraper(config) as scraper:
        try:
            if store:
                data = await scraper.scrape_and_save(args.url, store, args.actor)
            else:
                data = (await scraper.scrape_single(args.url)).to_dict()
        except Exception as e:
            write_output(error_payload(e), args.output_file)
            return 1

    write_output(
        {"success": True, "message": "Product scraped successfully", "data": data},
        args.output_file,
    )
    return 0


async def _batch(args) -> int:
    config = load_config(args.config)
    urls = list(args.urls or [])
    if args.file:
        urls.extend(read_url_file(args.file))

    store = JsonlProductStore(args.save) if args.save else None

    async with CatalogScraper(config) as scraper:
        try:
            result = await scraper.scrape_batch(urls)
        except ScraperError as e:
            write_output(error_payload(e), args.output_file)
            return 1

    payload = {"success": True, **result.to_dict()}
    if store:
        saved, skipped = [], []
        for item in result.results:
            try:
                store.insert(item.record, args.actor)
                saved.append(item.url)
            except ScraperError as e:
                skipped.append({"url": item.url, **e.to_dict()})
        payload["saved"] = {"stored": saved, "skipped": skipped}

    write_output(payload, args.output_file)
    return 0


def scrape_command(args):
    """Scrape a single product URL."""
    sys.exit(asyncio.run(_scrape(args)))


def batch_command(args):
    """Scrape several product URLs in sequence."""
    sys.exit(asyncio.run(_batch(args)))


def main():
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Catalog Scraper - Turn product listing pages into catalog records"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.upper(),
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-dir",
        help="Write scraper.log and scraper-error.log to this directory",
    )
    parser.add_argument(
        "--config",
        help="JSON configuration file (default: SCRAPER_* environment variables)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_common(subparser):
        subparser.add_argument(
            "--output-file",
            "-f",
            help="Write JSON result to file instead of stdout",
        )
        subparser.add_argument(
            "--save",
            help="Append scraped records to this JSON-lines product store",
        )
        subparser.add_argument(
            "--actor",
            default="cli",
            help="Identity recorded as createdBy when saving (default: cli)",
        )

    scrape_parser = subparsers.add_parser("scrape", help="Scrape a single product URL.")
    scrape_parser.add_argument("url", help="Product page URL")
    add_common(scrape_parser)
    scrape_parser.set_defaults(func=scrape_command)

    batch_parser = subparsers.add_parser("batch", help="Scrape up to 10 product URLs.")
    batch_parser.add_argument("urls", nargs="*", help="Product page URLs")
    batch_parser.add_argument("--file", help="File with one URL per line")
    add_common(batch_parser)
    batch_parser.set_defaults(func=batch_command)

    args = parser.parse_args()

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_dir=args.log_dir,
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
