"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, family_tree, health, members, relationships, search

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(members.router, prefix="/members", tags=["members"])
router.include_router(search.router, prefix="/search", tags=["members"])
router.include_router(relationships.router, prefix="/relationships", tags=["relationships"])
router.include_router(family_tree.router, prefix="/family-tree", tags=["family-tree"])
