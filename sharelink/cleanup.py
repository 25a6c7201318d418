"""Cleanup — removes expired files.

Expiry is enforced when a share is accessed, so this is only about reclaiming
storage. Run standalone: python -m sharelink.cleanup
When CLEANUP_INTERVAL_SECONDS is set the app also runs it periodically.
"""

import asyncio

from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from sharelink.api.files.services.files_service import FilesService
from sharelink.logger import logger


def run_cleanup(files_service: FilesService) -> int:
    """Delete every file past its expiry. Returns the number of files cleaned up."""
    count = 0
    for file in files_service.files.get_expired(files_service.clock()):
        if files_service.delete_file(file.id):
            count += 1

    logger.info(f"[Cleanup] Removed {count} expired file(s)")
    return count


async def cleanup_loop(files_service: FilesService, interval_seconds: int):
    """Background reaper started from the application lifespan."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await run_in_threadpool(run_cleanup, files_service)
        except SQLAlchemyError as e:
            logger.error(f"[Cleanup] Run failed, retrying in {interval_seconds}s: {e}")
        except Exception:
            # Keep the reaper alive; the next run starts from a fresh scan
            logger.exception(f"[Cleanup] Unexpected error, retrying in {interval_seconds}s")


if __name__ == "__main__":
    from sharelink.dependencies import build_services

    run_cleanup(build_services().files)
