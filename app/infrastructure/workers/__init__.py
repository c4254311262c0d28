"""Background workers started from the application lifespan."""

from app.infrastructure.workers.media_cleanup_worker import MediaCleanupWorker

__all__ = ["MediaCleanupWorker"]
