"""Create the database schema for development and first deploys."""
from __future__ import annotations

import argparse
import asyncio
import logging

from room_discovery.core.config import Settings, get_settings, validate_runtime_settings
from room_discovery.core.logs import configure_logging
from room_discovery.db.session import build_engine
from room_discovery.models.base import Base
import room_discovery.models  # noqa: F401 - register tables on Base.metadata

logger = logging.getLogger("room_discovery.bootstrap")


async def bootstrap(settings: Settings, *, reset: bool = False) -> None:
    engine = build_engine(settings)
    async with engine.begin() as conn:
        if reset:
            logger.warning("Dropping existing tables")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Schema ready: %s", ", ".join(sorted(Base.metadata.tables)))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="drop all tables before creating them")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    validate_runtime_settings(settings)
    asyncio.run(bootstrap(settings, reset=args.reset))


if __name__ == "__main__":
    main()
