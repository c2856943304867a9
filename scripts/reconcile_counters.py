#!/usr/bin/env python3
"""Operator tool for counter reconciliation and cold-start seeding.

Scheduling is external (cron, a k8s CronJob); each run is one pass.

    reconcile_counters.py reconcile                       # every post, default policy
    reconcile_counters.py reconcile --post p1 --policy durable_wins
    reconcile_counters.py seed                            # cold start, every post
    reconcile_counters.py seed --post p1 --post p2 --counts-only

``seed`` overwrites live Redis state. Never run it against a warm store
that is taking traffic.
"""

import argparse
import asyncio
import sys

import logfire

from tally.adapter.error import CounterStoreError
from tally.application.usecase.counter import (
    InitializeCountersRequest,
    InitializeCountersUseCase,
    ReconcileCountersRequest,
    ReconcileCountersUseCase,
)
from tally.config import Settings
from tally.domain.error import NotFoundError
from tally.domain.value import ReconcilePolicy
from tally.util.di.container import create_script_container
from tally.util.logging import get_logger, setup_logging
from tally.util.observability import configure_logfire

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    commands = parser.add_subparsers(dest="command", required=True)

    reconcile = commands.add_parser("reconcile", help="Detect and correct count drift")
    reconcile.add_argument(
        "--post", dest="post_id", help="Reconcile a single post (default: all)"
    )
    reconcile.add_argument(
        "--policy",
        type=ReconcilePolicy,
        choices=list(ReconcilePolicy),
        default=None,
        help="Which store wins (default: SYNC__DEFAULT_POLICY)",
    )

    seed = commands.add_parser("seed", help="Seed Redis from PostgreSQL")
    seed.add_argument(
        "--post",
        dest="post_ids",
        action="append",
        help="Post to seed, repeatable (default: all)",
    )
    seed.add_argument(
        "--counts-only",
        action="store_true",
        help="Only overwrite counters, keep membership sets",
    )
    seed.add_argument("--batch-size", type=int, default=200)

    return parser


async def run(args: argparse.Namespace) -> int:
    """Run one command inside a DI request scope."""
    container = create_script_container()
    try:
        async with container() as request_container:
            if args.command == "reconcile":
                use_case = await request_container.get(ReconcileCountersUseCase)
                result = await use_case.execute(
                    ReconcileCountersRequest(post_id=args.post_id, policy=args.policy)
                )
                for report in result.reports:
                    if report.corrected or report.error:
                        logger.info(
                            "%s policy=%s atomic=%s durable=%s corrected=%s error=%s",
                            report.post_id,
                            report.policy.value,
                            report.atomic_count,
                            report.durable_count,
                            report.corrected,
                            report.error,
                        )
                logger.info(
                    "Reconciled %d posts: %d corrected, %d failed",
                    len(result.reports),
                    result.corrected,
                    result.failed,
                )
                return 1 if result.failed else 0

            use_case = await request_container.get(InitializeCountersUseCase)
            result = await use_case.execute(
                InitializeCountersRequest(
                    post_ids=args.post_ids,
                    counts_only=args.counts_only,
                    batch_size=args.batch_size,
                )
            )
            logger.info("Seeded %d posts", result.seeded)
            return 0
    except (CounterStoreError, NotFoundError, ValueError) as e:
        logfire.error("Counter maintenance failed", command=args.command, error=str(e))
        logger.error("%s failed: %s", args.command, e)
        return 1
    finally:
        await container.close()


def main() -> int:
    """Parse arguments and run the requested command."""
    args = build_parser().parse_args()
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
