from uuid import UUID

from ...models.post_report import PostReport
from ...validators.rules import POST_REPORT_RULES
from .base import FoundationService


class PostReportService(FoundationService[PostReport]):
    model = PostReport
    rules = POST_REPORT_RULES

    async def add_post_report(self, post_report: PostReport | None) -> PostReport:
        return await self.add(post_report)

    async def modify_post_report(self, post_report: PostReport | None) -> PostReport:
        return await self.modify(post_report)

    async def retrieve_all_post_reports(self) -> list[PostReport]:
        return await self.retrieve_all()

    async def retrieve_post_report_by_id(self, post_report_id: UUID) -> PostReport:
        return await self.retrieve_by_id(post_report_id)

    async def remove_post_report_by_id(self, post_report_id: UUID) -> PostReport:
        return await self.remove_by_id(post_report_id)
