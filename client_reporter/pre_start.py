import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from tenacity import retry, stop_after_attempt, wait_fixed

from client_reporter.core.config import settings
from client_reporter.core.logging import log_error, log_start, log_success, setup_logging

logger = logging.getLogger("client_reporter.pre_start")

max_tries = 60 * 5  # 5 minutes
wait_seconds = 1


@retry(
    stop=stop_after_attempt(max_tries),
    wait=wait_fixed(wait_seconds),
)
async def wait_for_database() -> None:
    engine = create_async_engine(settings.database_url)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        log_error(logger, f"Database not reachable yet: {e}")
        raise
    finally:
        await engine.dispose()


def main() -> None:
    setup_logging(log_level=settings.LOG_LEVEL, log_to_file=False)
    log_start(logger, "Waiting for the database")
    asyncio.run(wait_for_database())
    log_success(logger, "Database is accepting connections")


if __name__ == "__main__":
    main()
