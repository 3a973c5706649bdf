"""Rubbish bin API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Query, Request

from api.v1.dependencies import CurrentSpace, get_node_rubbish_service
from api.v1.routing import Route, build_router
from api.v1.schemas.node import (
    DeleteRubbishNodeResponse,
    NodeInfoResponse,
    RecoverRubbishNodeRequest,
    RubbishNodeListResponse,
    RubbishNodeResponse,
)
from core.config import settings
from core.rate_limit import limiter
from domain.services.node_rubbish_service import NodeRubbishService


@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_rubbish_nodes(
    request: Request,
    ctx: CurrentSpace,
    size: Annotated[int, Query(description="Page size, 5 to 100")] = (
        settings.rubbish_page_size_default
    ),
    is_over_limit: Annotated[bool, Query(alias="isOverLimit")] = False,
    last_node_id: Annotated[UUID | None, Query(alias="lastNodeId")] = None,
    service: NodeRubbishService = Depends(get_node_rubbish_service),
) -> RubbishNodeListResponse:
    """
    List rubbish nodes, newest deletion first.

    Pass the last node of the previous page as ``lastNodeId`` to continue.
    A 422 means that node has left the bin and the page must be reloaded.
    """
    nodes = await service.list_rubbish_nodes(
        ctx,
        size=size,
        last_node_id=last_node_id,
        is_over_limit=is_over_limit,
    )
    data = [RubbishNodeResponse.model_validate(n) for n in nodes]
    return RubbishNodeListResponse(
        data=data,
        meta={
            "size": size,
            "has_more": len(data) == size,
            "last_node_id": str(data[-1].node_id) if data else None,
        },
    )


@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def recover_rubbish_node(
    request: Request,
    body: RecoverRubbishNodeRequest,
    ctx: CurrentSpace,
    service: NodeRubbishService = Depends(get_node_rubbish_service),
) -> NodeInfoResponse:
    """Recover a rubbish node into ``parentId``, or into the space root."""
    info = await service.recover(ctx, body.node_id, body.parent_id)
    return NodeInfoResponse.model_validate(info)


@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_rubbish_node(
    request: Request,
    node_id: UUID,
    ctx: CurrentSpace,
    service: NodeRubbishService = Depends(get_node_rubbish_service),
) -> DeleteRubbishNodeResponse:
    """Permanently delete a rubbish node and everything below it."""
    deleted = await service.delete(ctx, node_id)
    return DeleteRubbishNodeResponse(deleted_count=deleted)


routes = [
    Route(
        ("GET",),
        "/list",
        list_rubbish_nodes,
        response_model=RubbishNodeListResponse,
        summary="List rubbish nodes",
        responses={
            400: {"description": "Page size out of range"},
            422: {"description": "lastNodeId is no longer in the rubbish bin"},
        },
    ),
    Route(
        ("POST",),
        "/recover",
        recover_rubbish_node,
        response_model=NodeInfoResponse,
        summary="Recover rubbish node",
        responses={
            403: {"description": "Node operation denied"},
            404: {"description": "Node is not in the rubbish bin"},
        },
    ),
    Route(
        ("POST", "DELETE"),
        "/delete/{node_id}",
        delete_rubbish_node,
        response_model=DeleteRubbishNodeResponse,
        summary="Delete rubbish node permanently",
        responses={
            403: {"description": "Node operation denied"},
            404: {"description": "Node is not in the rubbish bin"},
        },
    ),
]

router = build_router(routes, prefix="/node/rubbish", tags=["rubbish"])
