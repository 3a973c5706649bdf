"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_attachment_repo import (
    SQLAlchemyAttachmentRepository,
)
from infrastructure.database.repositories.sqlalchemy_member_repo import SQLAlchemyMemberRepository
from infrastructure.database.repositories.sqlalchemy_node_repo import SQLAlchemyNodeRepository
from infrastructure.database.repositories.sqlalchemy_space_repo import SQLAlchemySpaceRepository
from infrastructure.database.repositories.sqlalchemy_user_repo import SQLAlchemyUserRepository
from infrastructure.database.repositories.sqlalchemy_verification_code_repo import (
    SQLAlchemyVerificationCodeRepository,
)


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def spaces(self) -> SQLAlchemySpaceRepository:
        """Get space repository."""
        return SQLAlchemySpaceRepository(self._require_session())

    @property
    def members(self) -> SQLAlchemyMemberRepository:
        """Get member repository."""
        return SQLAlchemyMemberRepository(self._require_session())

    @property
    def users(self) -> SQLAlchemyUserRepository:
        """Get user directory."""
        return SQLAlchemyUserRepository(self._require_session())

    @property
    def nodes(self) -> SQLAlchemyNodeRepository:
        """Get node repository."""
        return SQLAlchemyNodeRepository(self._require_session())

    @property
    def attachments(self) -> SQLAlchemyAttachmentRepository:
        """Get attachment repository."""
        return SQLAlchemyAttachmentRepository(self._require_session())

    @property
    def verification_codes(self) -> SQLAlchemyVerificationCodeRepository:
        """Get verification code repository."""
        return SQLAlchemyVerificationCodeRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager and cleanup."""
        if self._session:
            if exc_type:
                await self.rollback()
            await self._session.close()
            self._session = None
