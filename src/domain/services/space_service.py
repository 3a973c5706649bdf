"""Space service layer with business logic."""

import logging
from collections.abc import Callable
from typing import Optional
from uuid import UUID

from core.exceptions import NotAMemberError, SpaceNotFoundError
from domain.entities.member import Member
from domain.entities.node import Node, NodeType
from domain.entities.profile import Profile
from domain.entities.space import Space, SpaceContext, SpaceUsage
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.space_capacity import ISpaceCapacityCache

logger = logging.getLogger(__name__)


class SpaceService:
    """Service layer for Space business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        capacity_cache: Optional[ISpaceCapacityCache] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._capacity = capacity_cache

    async def create_space(self, user_id: UUID, email: str, name: str) -> Space:
        """Create a space with its root folder and the creator as active admin.

        The creator's membership is not an invitation, so ``is_point`` is False.
        """
        async with self._uow_factory() as uow:
            # Accounts are provisioned on first use.
            if not await uow.users.get(user_id):
                await uow.users.create(Profile(id=user_id, email=email))

            space = await uow.spaces.create(Space(name=name, owner_id=user_id))

            owner = Member(
                space_id=space.id,
                email=email,
                user_id=user_id,
                is_active=True,
                is_point=False,
                is_admin=True,
            )
            owner = await uow.members.create(owner)

            await uow.nodes.create(
                Node(
                    space_id=space.id,
                    name=name,
                    node_type=NodeType.ROOT,
                    created_by=owner.id,
                )
            )

            await uow.commit()
            logger.info("Created space %s for user %s", space.id, user_id)
            return space

    async def get_space(self, space_id: UUID, user_id: UUID) -> Space:
        """Get a space. Requires active membership."""
        async with self._uow_factory() as uow:
            space = await uow.spaces.get(space_id)
            if not space:
                raise SpaceNotFoundError(str(space_id))
            await self._require_member(uow, space_id, user_id)
            return space

    async def get_space_context(self, space_id: UUID, user_id: UUID) -> SpaceContext:
        """Resolve the caller's membership for a space-scoped request.

        Raises:
            SpaceNotFoundError: If the space does not exist.
            NotAMemberError: If the user has no active membership in it.
        """
        async with self._uow_factory() as uow:
            space = await uow.spaces.get(space_id)
            if not space:
                raise SpaceNotFoundError(str(space_id))
            member = await self._require_member(uow, space_id, user_id)
            return SpaceContext(
                space_id=space_id,
                user_id=user_id,
                member_id=member.id,
                is_admin=member.is_admin,
            )

    async def get_usage(self, space_id: UUID, user_id: UUID) -> SpaceUsage:
        """Get node count and attachment bytes, served from the capacity cache."""
        async with self._uow_factory() as uow:
            space = await uow.spaces.get(space_id)
            if not space:
                raise SpaceNotFoundError(str(space_id))
            await self._require_member(uow, space_id, user_id)

            if self._capacity is not None:
                cached = self._capacity.get(space_id)
                if cached is not None:
                    return cached

            usage = SpaceUsage(
                node_count=await uow.nodes.count_live(space_id),
                attachment_bytes=await uow.attachments.total_size(space_id),
            )
            if self._capacity is not None:
                self._capacity.set(space_id, usage)
            return usage

    # --- Internal helpers ---

    async def _require_member(self, uow: IUnitOfWork, space_id: UUID, user_id: UUID) -> Member:
        member = await uow.members.get_by_user_and_space(user_id, space_id)
        if not member or not member.is_active:
            raise NotAMemberError(str(space_id))
        return member
