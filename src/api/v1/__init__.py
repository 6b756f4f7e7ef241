"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.groups import router as groups_router
from api.v1.routes.messages import router as messages_router

router = APIRouter()
router.include_router(groups_router)
router.include_router(messages_router)
