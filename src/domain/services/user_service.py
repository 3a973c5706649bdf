"""User service layer: verification codes and password updates."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from secrets import compare_digest
from typing import Optional
from uuid import UUID

from core.exceptions import UserNotFoundError, ValidationFailedError, VerificationCodeError
from core.security import generate_code, hash_code, hash_password, is_valid_password
from domain.entities.audit import VerificationCodeSentEvent
from domain.entities.profile import Profile
from domain.entities.verification import (
    VERIFICATION_CODE_TTL_MINUTES,
    ValidateType,
    VerificationCode,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.event_publisher import IEventPublisher

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for account credentials."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        event_publisher: Optional[IEventPublisher] = None,
        code_ttl_minutes: int = VERIFICATION_CODE_TTL_MINUTES,
    ) -> None:
        self._uow_factory = uow_factory
        self._events = event_publisher
        self._code_ttl = timedelta(minutes=code_ttl_minutes)

    async def send_verification_code(self, user_id: UUID, validate_type: ValidateType) -> None:
        """Issue a one-time code and hand it to the delivery channel.

        Raises:
            UserNotFoundError: If the account does not exist.
            ValidationFailedError: If the account has no target for the channel.
        """
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(str(user_id))
            target = self._delivery_target(user, validate_type)

            code = generate_code()
            now = datetime.utcnow()
            await uow.verification_codes.create(
                VerificationCode(
                    user_id=user_id,
                    validate_type=validate_type,
                    code_hash=hash_code(code),
                    created_at=now,
                    expires_at=now + self._code_ttl,
                )
            )
            await uow.commit()

        # Unlike notices, a code that cannot be delivered is an error for the caller.
        if self._events is not None:
            await self._events.publish(
                VerificationCodeSentEvent(
                    user_id=user_id,
                    validate_type=validate_type.value,
                    target=target,
                    code=code,
                )
            )

    async def update_password(
        self,
        user_id: UUID,
        validate_type: ValidateType,
        code: str,
        password: str,
    ) -> None:
        """Set a new password after checking a verification code.

        Raises:
            ValidationFailedError: If the password does not meet the rules.
            UserNotFoundError: If the account does not exist.
            VerificationCodeError: If the code is wrong, used or expired.
        """
        if not is_valid_password(password):
            raise ValidationFailedError(
                "Password must be 8-32 characters and contain letters and digits",
                details={"field": "password"},
            )

        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(str(user_id))

            issued = await uow.verification_codes.get_latest_usable(user_id, validate_type)
            if not issued or not issued.is_usable:
                raise VerificationCodeError()
            if not compare_digest(issued.code_hash, hash_code(code)):
                raise VerificationCodeError()

            await uow.verification_codes.consume(issued.id)
            await uow.users.update_password(user_id, hash_password(password), datetime.utcnow())
            await uow.commit()

        logger.info("Password updated for user %s", user_id)

    @staticmethod
    def _delivery_target(user: Profile, validate_type: ValidateType) -> str:
        if validate_type == ValidateType.SMS_CODE:
            if not user.mobile:
                raise ValidationFailedError(
                    "No mobile number is bound to this account",
                    details={"field": "type"},
                )
            return user.mobile
        return user.email
