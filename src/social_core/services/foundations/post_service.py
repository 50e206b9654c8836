from uuid import UUID

from ...models.post import Post
from ...validators.rules import POST_RULES
from .base import FoundationService


class PostService(FoundationService[Post]):
    model = Post
    rules = POST_RULES

    async def add_post(self, post: Post | None) -> Post:
        return await self.add(post)

    async def modify_post(self, post: Post | None) -> Post:
        return await self.modify(post)

    async def retrieve_all_posts(self) -> list[Post]:
        return await self.retrieve_all()

    async def retrieve_post_by_id(self, post_id: UUID) -> Post:
        return await self.retrieve_by_id(post_id)

    async def remove_post_by_id(self, post_id: UUID) -> Post:
        return await self.remove_by_id(post_id)
