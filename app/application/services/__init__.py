"""Application services: lifecycle rules, history ledger, media ownership, uploads, cleanup."""

from app.application.services.history_ledger import HistoryLedger
from app.application.services.lifecycle_guard import LifecycleGuard
from app.application.services.media_cleanup_service import MediaCleanupService
from app.application.services.media_ownership import MediaOwnership
from app.application.services.media_reference_collector import MediaReferenceCollector
from app.application.services.profile_validator import ProfileValidator
from app.application.services.upload_authorizer import UploadAuthorizer

__all__ = [
    "HistoryLedger",
    "LifecycleGuard",
    "MediaCleanupService",
    "MediaOwnership",
    "MediaReferenceCollector",
    "ProfileValidator",
    "UploadAuthorizer",
]
