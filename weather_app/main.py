"""Main entry point: run the whole distributed app locally."""
import asyncio
import logging

from weather_app.hosting import create_default_app_host

logger = logging.getLogger(__name__)


async def run_app_host() -> None:
    async with create_default_app_host() as app:
        await app.wait_for_resource_healthy("webfrontend")
        logger.info("=" * 50)
        logger.info(f"apiservice:  {app.get_endpoint('apiservice')}")
        logger.info(f"webfrontend: {app.get_endpoint('webfrontend')}")
        logger.info("=" * 50)
        # Run until interrupted
        await asyncio.Event().wait()


if __name__ == "__main__":
    logger.info("Starting Weather distributed application")
    try:
        asyncio.run(run_app_host())
    except KeyboardInterrupt:
        logger.info("Stopped")
