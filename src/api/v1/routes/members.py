"""Member API routes: invitation, join and removal."""

from uuid import UUID

from fastapi import Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_member_service
from api.v1.routing import Route, build_router
from api.v1.schemas.member import (
    InvitationItemResponse,
    InvitationResultResponse,
    InviteMembersRequest,
    MemberListResponse,
    MemberResponse,
    RemoveMembersRequest,
    RemoveMembersResponse,
)
from core.rate_limit import limiter
from domain.entities.member import Member
from domain.services.member_service import MemberService


def _to_response(member: Member) -> MemberResponse:
    return MemberResponse(
        id=member.id,
        space_id=member.space_id,
        user_id=member.user_id,
        email=member.email,
        name=member.name,
        is_active=member.is_active,
        is_point=member.is_point,
        is_admin=member.is_admin,
        status=member.status.value,
        created_at=member.created_at,
    )


@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    space_id: UUID,
    user: CurrentUser,
    service: MemberService = Depends(get_member_service),
) -> MemberListResponse:
    """List live memberships of a space. Requires membership."""
    members = await service.list_members(space_id, user.id)
    data = [_to_response(m) for m in members]
    return MemberListResponse(data=data, meta={"total": len(data)})


@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def invite_members(
    request: Request,
    space_id: UUID,
    body: InviteMembersRequest,
    user: CurrentUser,
    service: MemberService = Depends(get_member_service),
) -> InvitationResultResponse:
    """
    Invite email addresses into a space. Requires admin.

    Previously removed members are restored with their old membership.
    Each address is reported separately; one failure does not fail the batch.
    """
    result = await service.invite_by_email(space_id, user.id, body.emails)
    data = [
        InvitationItemResponse(
            email=item.email,
            outcome=item.outcome.value,
            member_id=item.member_id,
            error_code=item.error_code,
        )
        for item in result.items
    ]
    return InvitationResultResponse(
        data=data,
        meta={"total": len(data), "failed": len(result.failed)},
    )


@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def join_space(
    request: Request,
    space_id: UUID,
    user: CurrentUser,
    service: MemberService = Depends(get_member_service),
) -> MemberResponse:
    """Accept the invitation addressed to the caller's email."""
    member = await service.activate(space_id, user.id, user.email)
    return _to_response(member)


@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_members(
    request: Request,
    space_id: UUID,
    body: RemoveMembersRequest,
    user: CurrentUser,
    service: MemberService = Depends(get_member_service),
) -> RemoveMembersResponse:
    """Remove members from a space. Requires admin."""
    removed = await service.remove_members(space_id, user.id, body.member_ids)
    return RemoveMembersResponse(removed=removed)


routes = [
    Route(
        ("GET",),
        "",
        list_members,
        response_model=MemberListResponse,
        summary="List members",
        responses={403: {"description": "Not a member"}},
    ),
    Route(
        ("POST",),
        "/invitations",
        invite_members,
        response_model=InvitationResultResponse,
        summary="Invite members by email",
        responses={
            403: {"description": "Insufficient permissions (Admin only)"},
            404: {"description": "Space not found"},
        },
    ),
    Route(
        ("POST",),
        "/join",
        join_space,
        response_model=MemberResponse,
        summary="Join space",
        responses={404: {"description": "No invitation for this email"}},
    ),
    Route(
        ("DELETE",),
        "",
        remove_members,
        response_model=RemoveMembersResponse,
        summary="Remove members",
        responses={
            400: {"description": "The owner cannot be removed"},
            403: {"description": "Insufficient permissions (Admin only)"},
        },
    ),
]

router = build_router(routes, prefix="/spaces/{space_id}/members", tags=["members"])
