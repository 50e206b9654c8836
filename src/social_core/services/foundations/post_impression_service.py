from uuid import UUID

from ...models.post_impression import PostImpression
from ...validators.rules import POST_IMPRESSION_RULES
from .base import FoundationService


class PostImpressionService(FoundationService[PostImpression]):
    """Impressions are keyed by (post_id, profile_id); lookups take both."""

    model = PostImpression
    rules = POST_IMPRESSION_RULES

    async def add_post_impression(self, post_impression: PostImpression | None) -> PostImpression:
        return await self.add(post_impression)

    async def modify_post_impression(self, post_impression: PostImpression | None) -> PostImpression:
        return await self.modify(post_impression)

    async def retrieve_all_post_impressions(self) -> list[PostImpression]:
        return await self.retrieve_all()

    async def retrieve_post_impression_by_ids(self, post_id: UUID, profile_id: UUID) -> PostImpression:
        return await self.retrieve_by_id(post_id, profile_id)

    async def remove_post_impression_by_ids(self, post_id: UUID, profile_id: UUID) -> PostImpression:
        return await self.remove_by_id(post_id, profile_id)
