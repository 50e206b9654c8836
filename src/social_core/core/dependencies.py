"""
Wiring helpers: build foundation services over one database session.

    async with session_maker() as session:
        services = build_services(session)
        await services.posts.add_post(post)
"""

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ..brokers.datetime_broker import DateTimeBroker
from ..brokers.logging_broker import LoggingBroker
from ..brokers.storage_broker import StorageBroker
from ..services.foundations.post_impression_service import PostImpressionService
from ..services.foundations.post_report_service import PostReportService
from ..services.foundations.post_service import PostService
from ..services.foundations.profile_service import ProfileService


@dataclass(frozen=True)
class FoundationServices:
    posts: PostService
    profiles: ProfileService
    post_reports: PostReportService
    post_impressions: PostImpressionService


def build_services(
    session: AsyncSession,
    *,
    datetime_broker: DateTimeBroker | None = None,
    logging_broker: LoggingBroker | None = None,
    recency_window: timedelta | None = None,
) -> FoundationServices:
    """
    All four services sharing one storage broker (and therefore one session).

    `recency_window`, when given, overrides the configured window for every service.
    """
    storage_broker = StorageBroker(session)
    datetime_broker = datetime_broker or DateTimeBroker()
    logging_broker = logging_broker or LoggingBroker()

    def make(service_cls):
        return service_cls(
            storage_broker,
            datetime_broker,
            logging_broker,
            recency_window=recency_window,
        )

    return FoundationServices(
        posts=make(PostService),
        profiles=make(ProfileService),
        post_reports=make(PostReportService),
        post_impressions=make(PostImpressionService),
    )
