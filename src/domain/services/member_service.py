"""Member service layer: invitation, restoration and removal of memberships."""

import logging
from collections.abc import Callable, Iterable
from typing import ClassVar, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AppException,
    CannotRemoveOwnerError,
    ErrorCode,
    InsufficientPermissionsError,
    MemberConflictError,
    MemberNotFoundError,
    NotAMemberError,
    PermissionDeniedError,
    SpaceNotFoundError,
)
from core.locks import KeyedLock
from domain.entities.audit import AuditSpaceAction, AuditSpaceEvent
from domain.entities.member import (
    EmailInvitation,
    InvitationOutcome,
    InvitationResult,
    Member,
    normalize_email,
)
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.event_publisher import (
    IEventPublisher,
    InvitationNotifier,
    publish_quietly,
)

logger = logging.getLogger(__name__)


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for unique-constraint clashes, False for NOT NULL, FK, etc."""
    orig = str(exc.orig).lower() if exc.orig else ""
    return "unique" in orig or "duplicate" in orig


def dedupe_emails(emails: Iterable[str]) -> list[str]:
    """Normalise addresses and drop repeats and blanks, keeping first-seen order."""
    seen: dict[str, None] = {}
    for email in emails:
        normalized = normalize_email(email)
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)


class MemberService:
    """Service layer for the membership lifecycle of a space."""

    # Serialises lookup-then-create/restore per (space_id, email) inside this
    # process. Across processes the unique constraint plus retry does the job.
    _invite_locks: ClassVar[KeyedLock] = KeyedLock()

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notifier: Optional[InvitationNotifier] = None,
        event_publisher: Optional[IEventPublisher] = None,
        conflict_retries: int = 2,
    ) -> None:
        self._uow_factory = uow_factory
        self._notifier = notifier
        self._events = event_publisher
        self._conflict_retries = conflict_retries

    async def invite_by_email(
        self,
        space_id: UUID,
        inviter_user_id: UUID,
        emails: Iterable[str],
    ) -> InvitationResult:
        """Invite email addresses into a space.

        Each address is an independent unit of work: it ends up with exactly
        one live membership, created fresh, restored from a soft-deleted row,
        or left untouched when one already exists. A failure on one address
        is reported in the result and does not affect the others.

        Args:
            space_id: The space to invite into.
            inviter_user_id: The inviting user (must be an active admin).
            emails: Addresses to invite. Duplicates collapse to one effect.

        Returns:
            Per-email outcomes in input order.

        Raises:
            SpaceNotFoundError: If the space does not exist.
            NotAMemberError: If the inviter is not an active member.
            InsufficientPermissionsError: If the inviter is not an admin.
        """
        async with self._uow_factory() as uow:
            space = await uow.spaces.get(space_id)
            if not space:
                raise SpaceNotFoundError(str(space_id))
            await self._require_admin(uow, space_id, inviter_user_id)

        result = InvitationResult(space_id=space_id)
        for email in dedupe_emails(emails):
            result.items.append(await self._invite_one(space_id, inviter_user_id, email))

        logger.info(
            "Processed %d invitation(s) for space %s, %d failed",
            len(result.items),
            space_id,
            len(result.failed),
        )
        return result

    async def _invite_one(
        self, space_id: UUID, inviter_user_id: UUID, email: str
    ) -> EmailInvitation:
        try:
            async with self._invite_locks.hold((space_id, email)):
                member, outcome = await self._resolve_invitation(space_id, email)
        except AppException as exc:
            logger.warning("Invitation of %s to space %s failed: %s", email, space_id, exc.message)
            return EmailInvitation(
                email=email,
                outcome=InvitationOutcome.FAILED,
                error_code=exc.error_code.value,
            )
        except Exception:
            logger.exception("Invitation of %s to space %s failed", email, space_id)
            return EmailInvitation(
                email=email,
                outcome=InvitationOutcome.FAILED,
                error_code=ErrorCode.INTERNAL_ERROR.value,
            )

        if outcome != InvitationOutcome.UNCHANGED:
            await publish_quietly(
                self._events,
                AuditSpaceEvent(
                    action=AuditSpaceAction.INVITE_MEMBER,
                    space_id=space_id,
                    user_id=inviter_user_id,
                    member_ids=(member.id,),
                    info={"email": email, "outcome": outcome.value},
                ),
            )
        # Confirmed members need no invitation notice.
        if self._notifier and not member.is_active:
            await self._notifier.invitation_sent(space_id, inviter_user_id, email, member.id)

        return EmailInvitation(email=email, outcome=outcome, member_id=member.id)

    async def _resolve_invitation(
        self, space_id: UUID, email: str
    ) -> tuple[Member, InvitationOutcome]:
        """Create, restore or keep the membership row for (space, email)."""
        for attempt in range(self._conflict_retries + 1):
            try:
                async with self._uow_factory() as uow:
                    user = await uow.users.get_by_email(email)
                    user_id = user.id if user else None

                    existing = await uow.members.find_including_deleted(space_id, email)

                    if existing is None:
                        created = await uow.members.create(
                            Member.invited(space_id, email, user_id=user_id)
                        )
                        await uow.commit()
                        return created, InvitationOutcome.CREATED

                    if existing.is_deleted:
                        # Restoration keeps the id and is_point of the old row.
                        restored = await uow.members.restore(
                            existing.id, user_id=existing.user_id or user_id
                        )
                        await uow.commit()
                        return restored, InvitationOutcome.RESTORED

                    return existing, InvitationOutcome.UNCHANGED
            except IntegrityError as exc:
                if not is_unique_violation(exc):
                    raise
                # Another writer created the row first; re-read and take the
                # "row exists" branch.
                logger.debug(
                    "Membership for %s in space %s created concurrently (attempt %d)",
                    email,
                    space_id,
                    attempt + 1,
                )

        raise MemberConflictError(str(space_id), email)

    async def remove_members(
        self,
        space_id: UUID,
        operator_user_id: UUID,
        member_ids: Iterable[UUID],
    ) -> int:
        """Soft-delete members of a space so a later invitation can restore them.

        Ids that are already removed or belong to another space are no-ops.

        Returns:
            The number of memberships newly soft-deleted.

        Raises:
            SpaceNotFoundError: If the space does not exist.
            InsufficientPermissionsError: If the operator is not an admin.
            CannotRemoveOwnerError: If the owner's membership is listed.
        """
        ids = set(member_ids)
        async with self._uow_factory() as uow:
            space = await uow.spaces.get(space_id)
            if not space:
                raise SpaceNotFoundError(str(space_id))
            await self._require_admin(uow, space_id, operator_user_id)

            owner = await uow.members.get_by_user_and_space(space.owner_id, space_id)
            if owner and owner.id in ids:
                raise CannotRemoveOwnerError(str(owner.id))

            removed = await uow.members.soft_delete(space_id, ids) if ids else []
            await uow.commit()

        if removed:
            logger.info("Removed %d member(s) from space %s", len(removed), space_id)
            await publish_quietly(
                self._events,
                AuditSpaceEvent(
                    action=AuditSpaceAction.REMOVE_MEMBER,
                    space_id=space_id,
                    user_id=operator_user_id,
                    member_ids=tuple(removed),
                ),
            )
        return len(removed)

    async def activate(self, space_id: UUID, user_id: UUID, email: str) -> Member:
        """Confirm the invitation addressed to ``email`` for the joining account.

        Raises:
            SpaceNotFoundError: If the space does not exist.
            MemberNotFoundError: If no live invitation exists for the email.
            PermissionDeniedError: If the invitation is linked to another account.
        """
        email = normalize_email(email)
        async with self._uow_factory() as uow:
            space = await uow.spaces.get(space_id)
            if not space:
                raise SpaceNotFoundError(str(space_id))

            member = await uow.members.get_by_space_and_email(space_id, email)
            if not member:
                raise MemberNotFoundError(email)
            if member.user_id is not None and member.user_id != user_id:
                raise PermissionDeniedError("This invitation belongs to another account")
            if member.is_active:
                return member

            if not await uow.users.get(user_id):
                await uow.users.create(Profile(id=user_id, email=email))
            member.activate(user_id)
            updated = await uow.members.update(member)
            await uow.commit()
            return updated

    async def get_by_id(self, member_id: UUID) -> Member | None:
        """Get a membership by id, including soft-deleted rows."""
        async with self._uow_factory() as uow:
            return await uow.members.get(member_id)

    async def get_by_space_and_email(self, space_id: UUID, email: str) -> Member | None:
        async with self._uow_factory() as uow:
            return await uow.members.get_by_space_and_email(space_id, normalize_email(email))

    async def get_by_user_and_space(self, user_id: UUID, space_id: UUID) -> Member | None:
        async with self._uow_factory() as uow:
            return await uow.members.get_by_user_and_space(user_id, space_id)

    async def list_members(self, space_id: UUID, user_id: UUID) -> list[Member]:
        """List live members of a space. Requires active membership."""
        async with self._uow_factory() as uow:
            space = await uow.spaces.get(space_id)
            if not space:
                raise SpaceNotFoundError(str(space_id))
            await self._require_member(uow, space_id, user_id)
            return await uow.members.list_for_space(space_id)

    # --- Internal helpers ---

    async def _require_member(self, uow: IUnitOfWork, space_id: UUID, user_id: UUID) -> Member:
        member = await uow.members.get_by_user_and_space(user_id, space_id)
        if not member or not member.is_active:
            raise NotAMemberError(str(space_id))
        return member

    async def _require_admin(self, uow: IUnitOfWork, space_id: UUID, user_id: UUID) -> Member:
        """Verify the user is an active admin of the space. Raises on failure."""
        member = await self._require_member(uow, space_id, user_id)
        if not member.is_admin:
            raise InsufficientPermissionsError("admin")
        return member
