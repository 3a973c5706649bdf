"""Space API routes."""

from uuid import UUID

from fastapi import Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_space_service
from api.v1.routing import Route, build_router
from api.v1.schemas.space import CreateSpaceRequest, SpaceResponse, SpaceUsageResponse
from core.rate_limit import limiter
from domain.services.space_service import SpaceService


@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_space(
    request: Request,
    body: CreateSpaceRequest,
    user: CurrentUser,
    service: SpaceService = Depends(get_space_service),
) -> SpaceResponse:
    """Create a space. The caller becomes its owner and first admin."""
    space = await service.create_space(user_id=user.id, email=user.email, name=body.name)
    return SpaceResponse.model_validate(space)


@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_space(
    request: Request,
    space_id: UUID,
    user: CurrentUser,
    service: SpaceService = Depends(get_space_service),
) -> SpaceResponse:
    """Get a space. Requires membership."""
    space = await service.get_space(space_id, user.id)
    return SpaceResponse.model_validate(space)


@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_space_usage(
    request: Request,
    space_id: UUID,
    user: CurrentUser,
    service: SpaceService = Depends(get_space_service),
) -> SpaceUsageResponse:
    """Get node count and attachment bytes of a space."""
    usage = await service.get_usage(space_id, user.id)
    return SpaceUsageResponse(
        space_id=space_id,
        node_count=usage.node_count,
        attachment_bytes=usage.attachment_bytes,
    )


routes = [
    Route(
        ("POST",),
        "",
        create_space,
        response_model=SpaceResponse,
        status_code=status.HTTP_201_CREATED,
        summary="Create space",
    ),
    Route(
        ("GET",),
        "/{space_id}",
        get_space,
        response_model=SpaceResponse,
        summary="Get space",
        responses={403: {"description": "Not a member"}, 404: {"description": "Space not found"}},
    ),
    Route(
        ("GET",),
        "/{space_id}/usage",
        get_space_usage,
        response_model=SpaceUsageResponse,
        summary="Get space usage",
        responses={403: {"description": "Not a member"}, 404: {"description": "Space not found"}},
    ),
]

router = build_router(routes, prefix="/spaces", tags=["spaces"])
