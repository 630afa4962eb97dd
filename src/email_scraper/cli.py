#!/usr/bin/env python3
"""
Command-line batch scraper.
Usage: email-scraper https://example.com https://example.org --max-depth 1 --output data
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from .config import settings
from .errors import InvalidInputError
from .logging_config import setup_logging
from .models import BatchResult, ScrapeOptions
from .services.batch.orchestrator import run_batch
from .services.export.csv_export import export_filename, to_csv

logger = setup_logging("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="email-scraper",
        description=f"Crawl up to {settings.max_batch_size} sites for contact emails.",
    )
    parser.add_argument("urls", nargs="+", help="Seed URLs (http or https)")
    parser.add_argument("--max-depth", type=int, default=settings.default_max_depth)
    parser.add_argument("--max-pages", type=int, default=settings.default_max_pages)
    parser.add_argument("--delay-ms", type=int, default=settings.default_delay_ms)
    parser.add_argument("--timeout-ms", type=int, default=settings.default_timeout_ms)
    parser.add_argument("--restrict-to-path", default=None, help="Only follow links with this prefix")
    parser.add_argument("--fast", action="store_true", help="Use the fast preset (ignores robots.txt)")
    parser.add_argument("--ignore-robots", action="store_true")
    parser.add_argument("--no-personal-data", action="store_true")
    parser.add_argument("--ai", action="store_true", help="Categorize contacts with the LLM")
    parser.add_argument("--show-browser", action="store_true")
    parser.add_argument("--concurrency", type=int, default=settings.max_concurrent_seeds)
    parser.add_argument("--output", default="data", help="Directory for the CSV export")
    return parser


def options_from_args(args: argparse.Namespace) -> ScrapeOptions:
    common = dict(
        collect_personal_data=not args.no_personal_data,
        use_ai_categorization=args.ai,
        headless=not args.show_browser,
        restrict_to_path=args.restrict_to_path,
    )
    if args.fast:
        return ScrapeOptions.fast(**common)
    return ScrapeOptions(
        max_depth=args.max_depth,
        max_pages=args.max_pages,
        delay_ms=args.delay_ms,
        timeout_ms=args.timeout_ms,
        respect_robots=not args.ignore_robots,
        **common,
    )


def save_to_csv(batch: BatchResult, output_dir: str) -> Optional[str]:
    """Write the CSV export; returns its path, or None when there is nothing to write."""
    if not batch.total_emails:
        logger.info("No emails found, nothing to export")
        return None

    os.makedirs(output_dir, exist_ok=True)
    filename = os.path.join(output_dir, export_filename())
    with open(filename, "w", newline="", encoding="utf-8") as f:
        f.write(to_csv(batch))
    logger.info("Saved CSV export", extra={"path": filename, "total_emails": batch.total_emails})
    return filename


def print_summary(batch: BatchResult) -> None:
    print(
        f"{batch.successful_urls}/{batch.total_urls} sites scraped, "
        f"{batch.total_emails} emails found"
    )
    for result in batch.results:
        if result.success:
            print(f"  {result.url}: {result.total_emails} emails, {result.pages_visited} pages")
            for email in result.emails:
                print(f"    {email}")
        else:
            print(f"  {result.url}: FAILED ({result.error_type}: {result.error})")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        options = options_from_args(args)
        batch = asyncio.run(run_batch(args.urls, options, max_concurrent=args.concurrency))
    except (InvalidInputError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print_summary(batch)
    path = save_to_csv(batch, args.output)
    if path:
        print(f"CSV written to {path}")
    return 0 if batch.successful_urls else 1


if __name__ == "__main__":
    sys.exit(main())
