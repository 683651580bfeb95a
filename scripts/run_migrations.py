#!/usr/bin/env python3
"""Upgrade the Plan Tour database schema.

Usage:
    python scripts/run_migrations.py [revision]

The revision defaults to ``head``. The database URL comes from ``Settings``
(``DATABASE__URL``), the same one the API uses.
"""

import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config
from sqlalchemy.engine import make_url

from plantour.config import Settings
from plantour.util.observability import configure_logfire

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def upgrade(settings: Settings, revision: str = "head") -> None:
    """Apply migrations up to ``revision``.

    Raises:
        Exception: Whatever Alembic or the driver raised; the schema is left
            at the last revision that applied cleanly
    """
    database = make_url(settings.database.url).render_as_string(hide_password=True)
    config = Config(str(ALEMBIC_INI))

    with logfire.span("migrations.upgrade", revision=revision, database=database):
        command.upgrade(config, revision)


def main(argv: list[str]) -> int:
    settings = Settings()
    configure_logfire(settings)

    revision = argv[1] if len(argv) > 1 else "head"
    try:
        upgrade(settings, revision)
    except Exception as e:
        logfire.error(
            "Schema upgrade failed",
            revision=revision,
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # The API must not start against a half-migrated schema
        raise

    logfire.info("Schema upgraded", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
