"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Annotated, Callable
from uuid import UUID

from fastapi import Depends, Header

from api.dependencies.auth import CurrentUser
from core.config import settings
from domain.entities.space import SpaceContext
from domain.services.attachment_service import AttachmentService
from domain.services.event_publisher import IEventPublisher, InvitationNotifier
from domain.services.member_service import MemberService
from domain.services.node_rubbish_service import NodeRubbishService
from domain.services.node_service import NodeService
from domain.services.space_service import SpaceService
from domain.services.user_service import UserService
from infrastructure.cache.space_capacity import InMemorySpaceCapacityCache
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.events.structlog_publisher import StructlogEventPublisher


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_event_publisher() -> IEventPublisher:
    """Get the outbound event publisher."""
    return StructlogEventPublisher()


@lru_cache
def get_capacity_cache() -> InMemorySpaceCapacityCache:
    """Get the process-wide space capacity cache."""
    return InMemorySpaceCapacityCache(
        max_size=settings.capacity_cache_max_size,
        ttl_seconds=settings.capacity_cache_ttl_seconds,
    )


@lru_cache
def get_space_service() -> SpaceService:
    """Get Space service instance."""
    return SpaceService(get_uow_factory(), capacity_cache=get_capacity_cache())


@lru_cache
def get_member_service() -> MemberService:
    """Get Member service instance."""
    return MemberService(
        get_uow_factory(),
        notifier=InvitationNotifier(get_event_publisher()),
        event_publisher=get_event_publisher(),
    )


@lru_cache
def get_node_service() -> NodeService:
    """Get Node service instance."""
    return NodeService(get_uow_factory())


@lru_cache
def get_node_rubbish_service() -> NodeRubbishService:
    """Get rubbish bin service instance."""
    return NodeRubbishService(
        get_uow_factory(),
        retention_days=settings.rubbish_retention_days,
        capacity_cache=get_capacity_cache(),
        event_publisher=get_event_publisher(),
    )


@lru_cache
def get_attachment_service() -> AttachmentService:
    """Get Attachment service instance."""
    return AttachmentService(
        get_uow_factory(),
        capacity_cache=get_capacity_cache(),
        event_publisher=get_event_publisher(),
    )


@lru_cache
def get_user_service() -> UserService:
    """Get User service instance."""
    return UserService(
        get_uow_factory(),
        event_publisher=get_event_publisher(),
        code_ttl_minutes=settings.verification_code_ttl_minutes,
    )


async def get_space_context(
    user: CurrentUser,
    x_space_id: Annotated[UUID, Header(description="Space the request operates on")],
    service: SpaceService = Depends(get_space_service),
) -> SpaceContext:
    """
    Resolve the caller's membership in the space named by X-Space-Id.

    Raises:
        SpaceNotFoundError: If the space does not exist
        NotAMemberError: If the caller is not an active member
    """
    return await service.get_space_context(x_space_id, user.id)


CurrentSpace = Annotated[SpaceContext, Depends(get_space_context)]
