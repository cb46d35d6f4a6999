#!/usr/bin/env python3
"""
Backfill a missing attribute on every item of a DynamoDB table.

- Scans the table page by page (50 items first, then 100)
- Selects items where the missing attribute is absent
- Derives the value from the item's ARN (account id) and writes it with an
  unconditional SET on that single attribute

Usage:
  attr-backfill --table AgentEndpoint --missing-attribute AccountId \\
      --key-attributes AgentArn EndpointName

Env vars respected (see attr_backfill.core.config):
  AWS_REGION, DYNAMODB_TABLE, MISSING_ATTRIBUTE, TARGET_ATTRIBUTE, KEY_ATTRIBUTES, ...
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from attr_backfill.core.config import Settings, settings
from attr_backfill.core.errors import BackfillError
from attr_backfill.core.logging_config import configure_logging
from attr_backfill.db.dynamodb import DynamoRepository
from attr_backfill.models.schemas import RunStats
from attr_backfill.pipeline.derivers import ArnAccountIdDeriver
from attr_backfill.pipeline.paginator import Paginator
from attr_backfill.pipeline.runner import BackfillRunner
from attr_backfill.pipeline.updater import Updater

logger = logging.getLogger("attr_backfill")


def build_runner(cfg: Settings, dry_run: bool = False) -> BackfillRunner:
    repo = DynamoRepository(cfg.dynamodb_table, cfg.aws_region, cfg.dynamodb_endpoint_url)
    paginator = Paginator(
        repo,
        first_page_limit=cfg.first_page_limit,
        page_limit=cfg.page_limit,
        page_delay_seconds=cfg.page_delay_seconds,
    )
    updater = Updater(
        repo,
        target_attribute=cfg.target_attribute,
        deriver=ArnAccountIdDeriver(cfg.source_attribute),
        key_attributes=cfg.key_attributes,
        concurrency=cfg.update_concurrency,
        dry_run=dry_run,
    )
    return BackfillRunner(cfg.dynamodb_table, cfg.missing_attribute, paginator, updater)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="attr-backfill", description="Backfill a missing attribute on a DynamoDB table")
    parser.add_argument("--table", default=settings.dynamodb_table)
    parser.add_argument("--region", default=settings.aws_region)
    parser.add_argument("--endpoint-url", default=settings.dynamodb_endpoint_url)
    parser.add_argument("--missing-attribute", default=settings.missing_attribute)
    parser.add_argument("--target-attribute", default=settings.target_attribute)
    parser.add_argument("--key-attributes", nargs="+", default=settings.key_attributes,
                        help="primary key attribute names, partition key first")
    parser.add_argument("--source-attribute", default=settings.source_attribute,
                        help="attribute holding the ARN to derive the value from")
    parser.add_argument("--concurrency", type=int, default=settings.update_concurrency)
    parser.add_argument("--page-delay", type=float, default=settings.page_delay_seconds)
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--dry-run", action="store_true")
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> Settings:
    return settings.model_copy(update={
        "dynamodb_table": args.table,
        "aws_region": args.region,
        "dynamodb_endpoint_url": args.endpoint_url,
        "missing_attribute": args.missing_attribute,
        "target_attribute": args.target_attribute,
        "key_attributes": list(args.key_attributes),
        "source_attribute": args.source_attribute,
        "update_concurrency": max(1, args.concurrency),
        "page_delay_seconds": max(0.0, args.page_delay),
        "log_level": args.log_level,
    })


def run(cfg: Settings, dry_run: bool = False) -> RunStats:
    logger.info("DynamoDB Attribute Updater%s", " (DRY RUN)" if dry_run else "")
    logger.info("Table: %s", cfg.dynamodb_table)
    logger.info("Missing Attribute: %s", cfg.missing_attribute)
    logger.info("Target Attribute: %s (from %s)", cfg.target_attribute, cfg.source_attribute)
    logger.info("Key Attributes: %s", ", ".join(cfg.key_attributes))
    return asyncio.run(build_runner(cfg, dry_run=dry_run).run())


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = settings_from_args(args)
    configure_logging(cfg.log_level)
    try:
        stats = run(cfg, dry_run=args.dry_run)
    except BackfillError:
        # already logged by the runner
        return 1
    print(stats.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
