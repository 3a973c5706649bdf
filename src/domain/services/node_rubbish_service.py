"""Rubbish bin service: listing, recovering and purging deleted nodes."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from core.exceptions import (
    NodeNotFoundError,
    NodeOperationDeniedError,
    NodeOperationError,
    RubbishNodeNotFoundError,
    RubbishNodePositionError,
    ValidationFailedError,
)
from domain.entities.audit import AuditSpaceAction, AuditSpaceEvent
from domain.entities.node import Node, NodeInfo, NodePermission, NodeRole, RubbishNode
from domain.entities.space import SpaceContext
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.event_publisher import IEventPublisher, publish_quietly
from domain.services.node_service import build_node_info, get_live_node, has_node_permission
from domain.services.space_capacity import ISpaceCapacityCache

logger = logging.getLogger(__name__)

MIN_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100


class NodeRubbishService:
    """Service layer for the rubbish bin of a space."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        retention_days: int = 90,
        capacity_cache: Optional[ISpaceCapacityCache] = None,
        event_publisher: Optional[IEventPublisher] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._retention_days = retention_days
        self._capacity = capacity_cache
        self._events = event_publisher

    async def list_rubbish_nodes(
        self,
        ctx: SpaceContext,
        size: int = 20,
        last_node_id: UUID | None = None,
        is_over_limit: bool = False,
    ) -> list[RubbishNode]:
        """List rubbish nodes visible to the member, newest deletion first.

        Admins see the whole bin, other members only what they deleted.
        ``is_over_limit`` selects nodes deleted before the retention window
        instead of within it.

        Args:
            ctx: The space context of the caller.
            size: Page size, between 5 and 100.
            last_node_id: Last node of the previously loaded page.
            is_over_limit: Whether to list nodes past the retention window.

        Raises:
            ValidationFailedError: If size is out of range.
            RubbishNodePositionError: If ``last_node_id`` is no longer in the bin.
        """
        if not MIN_PAGE_SIZE <= size <= MAX_PAGE_SIZE:
            raise ValidationFailedError(
                f"size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}",
                details={"size": size},
            )

        now = datetime.utcnow()
        threshold = now - timedelta(days=self._retention_days)

        async with self._uow_factory() as uow:
            cursor = None
            if last_node_id is not None:
                last = await uow.nodes.get(last_node_id)
                if (
                    not last
                    or last.space_id != ctx.space_id
                    or not last.is_rubbish
                    or last.deleted_at is None
                ):
                    raise RubbishNodePositionError(str(last_node_id))
                cursor = (last.deleted_at, last.id)

            nodes = await uow.nodes.list_rubbish(
                ctx.space_id,
                deleted_by=None if ctx.is_admin else ctx.member_id,
                deleted_after=None if is_over_limit else threshold,
                deleted_before=threshold if is_over_limit else None,
                cursor=cursor,
                limit=size,
            )

        return [self._to_rubbish_node(node, now) for node in nodes]

    async def check_rubbish_node(self, ctx: SpaceContext, node_id: UUID) -> Node:
        """Verify the node is in the space's bin and the member may manage it."""
        async with self._uow_factory() as uow:
            return await self._check_rubbish_node(uow, ctx, node_id)

    async def recover(
        self,
        ctx: SpaceContext,
        node_id: UUID,
        parent_id: UUID | None = None,
    ) -> NodeInfo:
        """Move a rubbish node back into the tree.

        The node goes under ``parent_id`` when given (the member needs
        CREATE_NODE there), otherwise under the space root.

        Raises:
            RubbishNodeNotFoundError: If the node is not in the bin.
            NodeOperationDeniedError: If the member may not manage the node
                or create under the parent.
            NodeNotFoundError: If the parent is not a live node of the space.
        """
        async with self._uow_factory() as uow:
            node = await self._check_rubbish_node(uow, ctx, node_id)

            if parent_id is not None:
                parent = await get_live_node(uow, ctx.space_id, parent_id)
                if not has_node_permission(ctx, parent, NodePermission.CREATE_NODE):
                    raise NodeOperationDeniedError(str(parent_id))
                if not parent.is_folder:
                    raise NodeOperationError(
                        "Nodes can only be recovered into folders", str(parent_id)
                    )
            else:
                parent = await uow.nodes.get_root(ctx.space_id)
                if not parent:
                    raise NodeNotFoundError(f"root of {ctx.space_id}")

            node.recover(parent.id)
            await uow.nodes.update(node)
            info = await build_node_info(uow, node, NodeRole.MANAGER)
            await uow.commit()

        logger.info("Recovered rubbish node %s into %s", node_id, parent.id)
        await self._after_change(ctx, node_id, AuditSpaceAction.RECOVER_RUBBISH_NODE)
        return info

    async def delete(self, ctx: SpaceContext, node_id: UUID) -> int:
        """Permanently delete a rubbish node and its whole subtree.

        Returns:
            Number of nodes removed.
        """
        async with self._uow_factory() as uow:
            node = await self._check_rubbish_node(uow, ctx, node_id)

            ids = [node.id]
            frontier = [node.id]
            while frontier:
                frontier = await uow.nodes.get_children_ids(frontier)
                ids.extend(frontier)

            deleted = await uow.nodes.delete_many(ids)
            await uow.commit()

        logger.info("Permanently deleted %d node(s) under rubbish node %s", deleted, node_id)
        await self._after_change(
            ctx, node_id, AuditSpaceAction.DELETE_RUBBISH_NODE, {"deleted_count": deleted}
        )
        return deleted

    # --- Internal helpers ---

    async def _check_rubbish_node(self, uow: IUnitOfWork, ctx: SpaceContext, node_id: UUID) -> Node:
        node = await uow.nodes.get(node_id)
        if not node or node.space_id != ctx.space_id or not node.is_rubbish:
            raise RubbishNodeNotFoundError(str(node_id))
        if not has_node_permission(ctx, node, NodePermission.MANAGE_RUBBISH):
            raise NodeOperationDeniedError(str(node_id))
        return node

    async def _after_change(
        self,
        ctx: SpaceContext,
        node_id: UUID,
        action: AuditSpaceAction,
        info: dict | None = None,
    ) -> None:
        if self._capacity is not None:
            self._capacity.invalidate(ctx.space_id)
        await publish_quietly(
            self._events,
            AuditSpaceEvent(
                action=action,
                space_id=ctx.space_id,
                user_id=ctx.user_id,
                node_id=node_id,
                info=info or {},
            ),
        )

    def _to_rubbish_node(self, node: Node, now: datetime) -> RubbishNode:
        deleted_at = node.deleted_at or now
        days_left = self._retention_days - (now - deleted_at).days
        return RubbishNode(
            node_id=node.id,
            name=node.name,
            node_type=node.node_type,
            parent_id=node.parent_id,
            deleted_at=deleted_at,
            deleted_by=node.deleted_by,
            retention_days_left=max(days_left, 0),
        )
