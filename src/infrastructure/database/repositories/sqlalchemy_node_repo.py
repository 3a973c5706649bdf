"""SQLAlchemy implementation of Node repository."""

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.node import Node, NodeType
from infrastructure.database.models import NodeModel


class SQLAlchemyNodeRepository:
    """SQLAlchemy implementation of INodeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Node | None:
        """Get a node by ID."""
        model = await self._session.get(NodeModel, id)
        return self._to_entity(model) if model else None

    async def get_root(self, space_id: UUID) -> Node | None:
        """Get the root folder of a space."""
        stmt = select(NodeModel).where(
            NodeModel.space_id == space_id,
            NodeModel.node_type == NodeType.ROOT.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_children_ids(self, parent_ids: Iterable[UUID]) -> list[UUID]:
        """Get the ids of all direct children of the given nodes."""
        parent_ids = list(parent_ids)
        if not parent_ids:
            return []
        stmt = select(NodeModel.id).where(NodeModel.parent_id.in_(parent_ids))
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def count_children(self, parent_id: UUID) -> int:
        """Count live direct children of a node."""
        stmt = select(func.count()).where(
            NodeModel.parent_id == parent_id,
            NodeModel.is_rubbish.is_(False),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def count_live(self, space_id: UUID) -> int:
        """Count nodes of a space that are not in the rubbish bin."""
        stmt = select(func.count()).where(
            NodeModel.space_id == space_id,
            NodeModel.is_rubbish.is_(False),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def list_rubbish(
        self,
        space_id: UUID,
        *,
        deleted_by: UUID | None = None,
        deleted_after: datetime | None = None,
        deleted_before: datetime | None = None,
        cursor: tuple[datetime, UUID] | None = None,
        limit: int = 20,
    ) -> list[Node]:
        """Rubbish nodes newest first, optionally after a (deleted_at, id) cursor."""
        stmt = select(NodeModel).where(
            NodeModel.space_id == space_id,
            NodeModel.is_rubbish.is_(True),
        )
        if deleted_by is not None:
            stmt = stmt.where(NodeModel.deleted_by == deleted_by)
        if deleted_after is not None:
            stmt = stmt.where(NodeModel.deleted_at >= deleted_after)
        if deleted_before is not None:
            stmt = stmt.where(NodeModel.deleted_at < deleted_before)
        if cursor is not None:
            cursor_at, cursor_id = cursor
            stmt = stmt.where(
                or_(
                    NodeModel.deleted_at < cursor_at,
                    and_(NodeModel.deleted_at == cursor_at, NodeModel.id < cursor_id),
                )
            )
        stmt = stmt.order_by(NodeModel.deleted_at.desc(), NodeModel.id.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, node: Node) -> Node:
        """Create a new node."""
        model = self._to_model(node)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, node: Node) -> Node:
        """Persist placement and rubbish state of a node."""
        model = await self._session.get(NodeModel, node.id)
        if not model:
            raise ValueError(f"Node {node.id} not found")

        model.parent_id = node.parent_id
        model.name = node.name
        model.is_rubbish = node.is_rubbish
        model.deleted_at = node.deleted_at
        model.deleted_by = node.deleted_by
        model.updated_at = node.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete_many(self, ids: Iterable[UUID]) -> int:
        """Permanently delete nodes. Returns count of deleted rows."""
        ids = list(ids)
        if not ids:
            return 0
        # Rows removed by the parent_id cascade are not in rowcount; count first.
        count_stmt = select(func.count()).where(NodeModel.id.in_(ids))
        existing = (await self._session.execute(count_stmt)).scalar_one()
        stmt = (
            delete(NodeModel)
            .where(NodeModel.id.in_(ids))
            .execution_options(synchronize_session="fetch")
        )
        await self._session.execute(stmt)
        await self._session.flush()
        return existing

    def _to_entity(self, model: NodeModel) -> Node:
        """Convert ORM model to domain entity."""
        return Node(
            id=model.id,
            space_id=model.space_id,
            parent_id=model.parent_id,
            name=model.name,
            node_type=NodeType(model.node_type),
            created_by=model.created_by,
            is_rubbish=model.is_rubbish,
            deleted_at=model.deleted_at,
            deleted_by=model.deleted_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Node) -> NodeModel:
        """Convert domain entity to ORM model."""
        return NodeModel(
            id=entity.id,
            space_id=entity.space_id,
            parent_id=entity.parent_id,
            name=entity.name,
            node_type=entity.node_type.value,
            created_by=entity.created_by,
            is_rubbish=entity.is_rubbish,
            deleted_at=entity.deleted_at,
            deleted_by=entity.deleted_by,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
