"""Unit tests for AttachmentService."""

from uuid import UUID

import pytest

from core.exceptions import AttachmentNotFoundError
from domain.entities.attachment import Attachment
from domain.entities.audit import AuditSpaceAction, AuditSpaceEvent
from domain.entities.space import SpaceUsage
from domain.services.attachment_service import AttachmentService
from infrastructure.cache.space_capacity import InMemorySpaceCapacityCache
from tests.unit.conftest import FakeUnitOfWork, RecordingPublisher


@pytest.fixture
def cache() -> InMemorySpaceCapacityCache:
    return InMemorySpaceCapacityCache()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def service(
    uow: FakeUnitOfWork, cache: InMemorySpaceCapacityCache, publisher: RecordingPublisher
) -> AttachmentService:
    return AttachmentService(lambda: uow, capacity_cache=cache, event_publisher=publisher)


@pytest.fixture
def attachment(space_id: UUID) -> Attachment:
    return Attachment(space_id=space_id, token="space/abc.png", name="abc.png", size=512)


class TestApplyAuditResult:
    @pytest.mark.asyncio
    async def test_disable_verdict(
        self,
        service: AttachmentService,
        uow: FakeUnitOfWork,
        cache: InMemorySpaceCapacityCache,
        publisher: RecordingPublisher,
        attachment: Attachment,
        space_id: UUID,
    ) -> None:
        uow.attachments.get_by_token.return_value = attachment
        uow.attachments.update.side_effect = lambda a: a
        cache.set(space_id, SpaceUsage(node_count=1, attachment_bytes=512))

        updated = await service.apply_audit_result(
            attachment.token, disable=True, result={"porn": {"suggestion": "block"}}
        )

        assert updated.is_disabled is True
        assert updated.audit_result == {"porn": {"suggestion": "block"}}
        assert updated.audited_at is not None
        assert uow.committed
        assert cache.get(space_id) is None
        events = publisher.of_type(AuditSpaceEvent)
        assert events[0].action == AuditSpaceAction.DISABLE_ATTACHMENT
        assert events[0].info == {"token": attachment.token}

    @pytest.mark.asyncio
    async def test_pass_verdict_keeps_attachment_enabled(
        self,
        service: AttachmentService,
        uow: FakeUnitOfWork,
        publisher: RecordingPublisher,
        attachment: Attachment,
    ) -> None:
        uow.attachments.get_by_token.return_value = attachment
        uow.attachments.update.side_effect = lambda a: a

        updated = await service.apply_audit_result(attachment.token, disable=False)

        assert updated.is_disabled is False
        assert updated.audited_at is not None
        assert publisher.events == []

    @pytest.mark.asyncio
    async def test_pass_verdict_does_not_re_enable(
        self,
        service: AttachmentService,
        uow: FakeUnitOfWork,
        publisher: RecordingPublisher,
        attachment: Attachment,
    ) -> None:
        attachment.is_disabled = True
        uow.attachments.get_by_token.return_value = attachment
        uow.attachments.update.side_effect = lambda a: a

        updated = await service.apply_audit_result(attachment.token, disable=False)

        assert updated.is_disabled is True
        assert publisher.events == []

    @pytest.mark.asyncio
    async def test_unknown_token(self, service: AttachmentService, uow: FakeUnitOfWork) -> None:
        uow.attachments.get_by_token.return_value = None

        with pytest.raises(AttachmentNotFoundError):
            await service.apply_audit_result("missing", disable=True)

        assert not uow.committed


class TestRegister:
    @pytest.mark.asyncio
    async def test_invalidates_usage(
        self,
        service: AttachmentService,
        uow: FakeUnitOfWork,
        cache: InMemorySpaceCapacityCache,
        space_id: UUID,
    ) -> None:
        uow.attachments.create.side_effect = lambda a: a
        cache.set(space_id, SpaceUsage(node_count=1, attachment_bytes=0))

        created = await service.register(space_id, "space/new.pdf", "new.pdf", size=10)

        assert created.size == 10
        assert cache.get(space_id) is None
