"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.attachment_repository import IAttachmentRepository
from domain.repositories.member_repository import IMemberRepository
from domain.repositories.node_repository import INodeRepository
from domain.repositories.space_repository import ISpaceRepository
from domain.repositories.user_repository import IUserRepository
from domain.repositories.verification_code_repository import IVerificationCodeRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    spaces: ISpaceRepository
    members: IMemberRepository
    users: IUserRepository
    nodes: INodeRepository
    attachments: IAttachmentRepository
    verification_codes: IVerificationCodeRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
