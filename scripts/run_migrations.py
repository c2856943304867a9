#!/usr/bin/env python3
"""Apply database migrations with Logfire error tracking.

    run_migrations.py            # upgrade to head
    run_migrations.py <rev>      # upgrade (or downgrade) to a specific revision
"""

import sys
import logfire
from alembic import command
from alembic.config import Config

from tally.config import Settings
from tally.util.logging import setup_logging
from tally.util.observability import configure_logfire


def main(argv: list[str]) -> int:
    """Run migrations and log any errors to Logfire."""
    settings = Settings()
    target = argv[0] if argv else "head"

    setup_logging(settings)
    configure_logfire(settings)

    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)

    try:
        with logfire.span("run_migrations", target=target):
            if target.startswith("-"):
                command.downgrade(alembic_cfg, target)
            else:
                command.upgrade(alembic_cfg, target)

        logfire.info("Database migrations applied", target=target)
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            target=target,
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the deploy fails instead of starting with a broken schema
        raise


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
