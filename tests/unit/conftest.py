"""Shared fixtures for unit tests."""

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from domain.entities.audit import DomainEvent
from domain.entities.member import Member, MemberStatus
from domain.entities.profile import Profile
from domain.entities.space import Space


class FakeUnitOfWork:
    """Fake Unit of Work with all 6 repository mocks for unit testing."""

    def __init__(self) -> None:
        self.spaces = AsyncMock()
        self.members = AsyncMock()
        self.users = AsyncMock()
        self.nodes = AsyncMock()
        self.attachments = AsyncMock()
        self.verification_codes = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class RecordingPublisher:
    """IEventPublisher that records events, optionally failing on publish."""

    def __init__(self, fail: bool = False) -> None:
        self.events: list[DomainEvent] = []
        self.fail = fail

    async def publish(self, event: DomainEvent) -> None:
        if self.fail:
            raise ConnectionError("publisher unavailable")
        self.events.append(event)

    def of_type(self, event_type: type) -> list[Any]:
        return [e for e in self.events if isinstance(e, event_type)]


def unique_violation() -> IntegrityError:
    return IntegrityError(
        "INSERT INTO members",
        {},
        Exception("UNIQUE constraint failed: members.space_id, members.email"),
    )


class InMemoryMemberStore:
    """Members table with the (space_id, email) unique constraint.

    Every call yields to the event loop so concurrent invitations interleave.
    """

    def __init__(self) -> None:
        self.rows: dict[UUID, Member] = {}
        self.spaces: dict[UUID, Space] = {}
        self.users: dict[str, Profile] = {}

    async def find_including_deleted(self, space_id: UUID, email: str) -> Member | None:
        await asyncio.sleep(0)
        for row in self.rows.values():
            if row.space_id == space_id and row.email == email:
                return replace(row)
        return None

    async def create(self, member: Member) -> Member:
        await asyncio.sleep(0)
        for row in self.rows.values():
            if row.space_id == member.space_id and row.email == member.email:
                raise unique_violation()
        self.rows[member.id] = replace(member)
        return replace(member)

    async def restore(self, id: UUID, user_id: UUID | None = None) -> Member:
        await asyncio.sleep(0)
        row = self.rows[id]
        row.deleted_at = None
        row.is_active = False
        row.status = MemberStatus.INACTIVE
        if row.user_id is None:
            row.user_id = user_id
        return replace(row)

    async def get_by_user_and_space(self, user_id: UUID, space_id: UUID) -> Member | None:
        for row in self.rows.values():
            if row.space_id == space_id and row.user_id == user_id and not row.is_deleted:
                return replace(row)
        return None

    async def soft_delete(self, space_id: UUID, ids: Any) -> list[UUID]:
        removed = []
        for member_id in ids:
            row = self.rows.get(member_id)
            if row and row.space_id == space_id and not row.is_deleted:
                row.deleted_at = datetime.utcnow()
                removed.append(member_id)
        return removed

    def live(self, space_id: UUID, email: str) -> list[Member]:
        return [
            r
            for r in self.rows.values()
            if r.space_id == space_id and r.email == email and not r.is_deleted
        ]

    def all_for(self, space_id: UUID, email: str) -> list[Member]:
        return [r for r in self.rows.values() if r.space_id == space_id and r.email == email]


class _SpaceRepo:
    def __init__(self, store: InMemoryMemberStore) -> None:
        self._store = store

    async def get(self, id: UUID) -> Space | None:
        return self._store.spaces.get(id)


class _UserRepo:
    def __init__(self, store: InMemoryMemberStore) -> None:
        self._store = store

    async def get_by_email(self, email: str) -> Profile | None:
        return self._store.users.get(email)


class InMemoryUnitOfWork:
    """Unit of Work over InMemoryMemberStore; writes are visible immediately."""

    def __init__(self, store: InMemoryMemberStore) -> None:
        self.members = store
        self.spaces = _SpaceRepo(store)
        self.users = _UserRepo(store)
        self.committed = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        pass

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def space_id() -> UUID:
    """A random space ID."""
    return uuid4()


@pytest.fixture
def member_id() -> UUID:
    """A random member ID."""
    return uuid4()
