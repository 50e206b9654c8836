from uuid import UUID

from ...models.profile import Profile
from ...validators.rules import PROFILE_RULES
from .base import FoundationService


class ProfileService(FoundationService[Profile]):
    model = Profile
    rules = PROFILE_RULES

    async def add_profile(self, profile: Profile | None) -> Profile:
        return await self.add(profile)

    async def modify_profile(self, profile: Profile | None) -> Profile:
        return await self.modify(profile)

    async def retrieve_all_profiles(self) -> list[Profile]:
        return await self.retrieve_all()

    async def retrieve_profile_by_id(self, profile_id: UUID) -> Profile:
        return await self.retrieve_by_id(profile_id)

    async def remove_profile_by_id(self, profile_id: UUID) -> Profile:
        return await self.remove_by_id(profile_id)
