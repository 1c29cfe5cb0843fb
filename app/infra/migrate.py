from __future__ import annotations

import logging

from alembic import command
from alembic.config import Config

from app.infra.db import DATABASE_URL

logger = logging.getLogger(__name__)


def run_upgrade_head(ini_path: str = "alembic.ini") -> None:
    config = Config(ini_path)
    config.set_main_option("sqlalchemy.url", DATABASE_URL)
    logger.info("upgrading schema to head")
    command.upgrade(config, "head")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_upgrade_head()
