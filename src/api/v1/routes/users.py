"""Account credential routes."""

from fastapi import Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_user_service
from api.v1.routing import Route, build_router
from api.v1.schemas.common import MessageResponse
from api.v1.schemas.user import SendCodeRequest, UpdatePasswordRequest
from core.rate_limit import limiter
from domain.services.user_service import UserService


@limiter.limit("3/minute")  # type: ignore[untyped-decorator]
async def send_verification_code(
    request: Request,
    body: SendCodeRequest,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Send a verification code to the caller's phone or mailbox."""
    await service.send_verification_code(user.id, body.type)
    return MessageResponse(message="Verification code sent")


@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def update_password(
    request: Request,
    body: UpdatePasswordRequest,
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Change the caller's password using a verification code."""
    await service.update_password(user.id, body.type, body.code, body.password)
    return MessageResponse(message="Password updated")


routes = [
    Route(
        ("POST",),
        "/password/code",
        send_verification_code,
        response_model=MessageResponse,
        status_code=status.HTTP_202_ACCEPTED,
        summary="Send verification code",
        responses={400: {"description": "No phone number bound to the account"}},
    ),
    Route(
        ("POST",),
        "/password",
        update_password,
        response_model=MessageResponse,
        summary="Update password",
        responses={400: {"description": "Verification code invalid or expired"}},
    ),
]

router = build_router(routes, prefix="/user", tags=["users"])
