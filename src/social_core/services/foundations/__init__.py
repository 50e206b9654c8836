from .base import FoundationService
from .post_service import PostService
from .profile_service import ProfileService
from .post_report_service import PostReportService
from .post_impression_service import PostImpressionService

__all__ = [
    "FoundationService",
    "PostService",
    "ProfileService",
    "PostReportService",
    "PostImpressionService",
]
