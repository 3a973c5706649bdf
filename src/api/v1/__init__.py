"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.assets import router as assets_router
from api.v1.routes.members import router as members_router
from api.v1.routes.node_rubbish import router as node_rubbish_router
from api.v1.routes.nodes import router as nodes_router
from api.v1.routes.spaces import router as spaces_router
from api.v1.routes.users import router as users_router

router = APIRouter()
router.include_router(spaces_router)
router.include_router(members_router)
router.include_router(nodes_router)
router.include_router(node_rubbish_router)
router.include_router(assets_router)
router.include_router(users_router)
