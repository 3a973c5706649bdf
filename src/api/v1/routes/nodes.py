"""Node API routes."""

from uuid import UUID

from fastapi import Depends, Request, status

from api.v1.dependencies import CurrentSpace, get_node_service
from api.v1.routing import Route, build_router
from api.v1.schemas.node import CreateNodeRequest, NodeInfoResponse
from core.rate_limit import limiter
from domain.services.node_service import NodeService


@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_node(
    request: Request,
    body: CreateNodeRequest,
    ctx: CurrentSpace,
    service: NodeService = Depends(get_node_service),
) -> NodeInfoResponse:
    """Create a node under a folder, or under the space root when no parent is given."""
    info = await service.create_node(ctx, body.name, body.node_type, body.parent_id)
    return NodeInfoResponse.model_validate(info)


@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_node(
    request: Request,
    node_id: UUID,
    ctx: CurrentSpace,
    service: NodeService = Depends(get_node_service),
) -> NodeInfoResponse:
    info = await service.get_node_info(ctx, node_id)
    return NodeInfoResponse.model_validate(info)


@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_node(
    request: Request,
    node_id: UUID,
    ctx: CurrentSpace,
    service: NodeService = Depends(get_node_service),
) -> None:
    """Move a node to the rubbish bin."""
    await service.move_to_rubbish(ctx, node_id)
    return None


routes = [
    Route(
        ("POST",),
        "",
        create_node,
        response_model=NodeInfoResponse,
        status_code=status.HTTP_201_CREATED,
        summary="Create node",
        responses={
            403: {"description": "Node operation denied"},
            404: {"description": "Parent node not found"},
        },
    ),
    Route(
        ("GET",),
        "/{node_id}",
        get_node,
        response_model=NodeInfoResponse,
        summary="Get node info",
        responses={404: {"description": "Node not found"}},
    ),
    Route(
        ("DELETE",),
        "/{node_id}",
        delete_node,
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Move node to rubbish bin",
        responses={
            400: {"description": "The root node cannot be deleted"},
            403: {"description": "Node operation denied"},
        },
    ),
]

router = build_router(routes, prefix="/nodes", tags=["nodes"])
