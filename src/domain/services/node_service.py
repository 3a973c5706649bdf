"""Node service layer: node creation, info and moving nodes to the rubbish bin."""

import logging
from collections.abc import Callable
from uuid import UUID

from core.exceptions import NodeNotFoundError, NodeOperationDeniedError, NodeOperationError
from domain.entities.node import Node, NodeInfo, NodePermission, NodeRole, NodeType
from domain.entities.space import SpaceContext
from domain.repositories.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)


def has_node_permission(ctx: SpaceContext, node: Node, permission: NodePermission) -> bool:
    """Delegated node permission check.

    Space admins hold every permission. Other members may create nodes under
    any live node and manage only the rubbish entries they deleted.
    """
    if ctx.is_admin:
        return True
    if permission is NodePermission.CREATE_NODE:
        return not node.is_rubbish
    if permission is NodePermission.MANAGE_RUBBISH:
        return node.is_rubbish and node.deleted_by == ctx.member_id
    return False


def role_for(ctx: SpaceContext) -> NodeRole:
    return NodeRole.MANAGER if ctx.is_admin else NodeRole.EDITOR


async def get_live_node(uow: IUnitOfWork, space_id: UUID, node_id: UUID) -> Node:
    """Get a node of the space that is neither in the rubbish bin nor under a rubbish node."""
    node = await uow.nodes.get(node_id)
    if not node or node.space_id != space_id:
        raise NodeNotFoundError(str(node_id))

    current: Node | None = node
    while current is not None:
        if current.is_rubbish:
            raise NodeNotFoundError(str(node_id))
        current = await uow.nodes.get(current.parent_id) if current.parent_id else None
    return node


async def build_node_info(uow: IUnitOfWork, node: Node, role: NodeRole) -> NodeInfo:
    return NodeInfo(
        node_id=node.id,
        space_id=node.space_id,
        parent_id=node.parent_id,
        name=node.name,
        node_type=node.node_type,
        role=role,
        child_count=await uow.nodes.count_children(node.id),
        created_at=node.created_at,
    )


class NodeService:
    """Service layer for Node business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def create_node(
        self,
        ctx: SpaceContext,
        name: str,
        node_type: NodeType,
        parent_id: UUID | None = None,
    ) -> NodeInfo:
        """Create a node under ``parent_id`` (the space root when omitted).

        Raises:
            NodeNotFoundError: If the parent is not a live node of the space.
            NodeOperationDeniedError: If the member may not create under the parent.
            NodeOperationError: If the parent is not a folder or a root is requested.
        """
        if node_type == NodeType.ROOT:
            raise NodeOperationError("A space has exactly one root node", str(parent_id))

        async with self._uow_factory() as uow:
            if parent_id is None:
                parent = await self._root(uow, ctx.space_id)
            else:
                parent = await get_live_node(uow, ctx.space_id, parent_id)

            if not has_node_permission(ctx, parent, NodePermission.CREATE_NODE):
                raise NodeOperationDeniedError(str(parent.id))
            if not parent.is_folder:
                raise NodeOperationError("Nodes can only be created inside folders", str(parent.id))

            node = await uow.nodes.create(
                Node(
                    space_id=ctx.space_id,
                    name=name,
                    node_type=node_type,
                    parent_id=parent.id,
                    created_by=ctx.member_id,
                )
            )
            info = await build_node_info(uow, node, role_for(ctx))
            await uow.commit()
            return info

    async def move_to_rubbish(self, ctx: SpaceContext, node_id: UUID) -> None:
        """Move a live node (and implicitly its subtree) to the rubbish bin."""
        async with self._uow_factory() as uow:
            node = await get_live_node(uow, ctx.space_id, node_id)
            if node.is_root:
                raise NodeOperationError("The root node cannot be deleted", str(node_id))

            parent = await uow.nodes.get(node.parent_id) if node.parent_id else None
            if parent is None or not has_node_permission(ctx, parent, NodePermission.CREATE_NODE):
                raise NodeOperationDeniedError(str(node_id))

            node.move_to_rubbish(ctx.member_id)
            await uow.nodes.update(node)
            await uow.commit()
            logger.info("Node %s moved to rubbish by member %s", node_id, ctx.member_id)

    async def get_node_info(self, ctx: SpaceContext, node_id: UUID) -> NodeInfo:
        async with self._uow_factory() as uow:
            node = await get_live_node(uow, ctx.space_id, node_id)
            return await build_node_info(uow, node, role_for(ctx))

    async def get_root_node_id(self, space_id: UUID) -> UUID:
        async with self._uow_factory() as uow:
            return (await self._root(uow, space_id)).id

    async def check_node_exists(self, space_id: UUID, node_id: UUID) -> Node:
        async with self._uow_factory() as uow:
            return await get_live_node(uow, space_id, node_id)

    @staticmethod
    async def _root(uow: IUnitOfWork, space_id: UUID) -> Node:
        root = await uow.nodes.get_root(space_id)
        if not root:
            raise NodeNotFoundError(f"root of {space_id}")
        return root
