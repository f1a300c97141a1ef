"""API routes."""

from fastapi import APIRouter

from scribe.api.v1 import auth, blogs, health

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(blogs.router, prefix="/blogs", tags=["blogs"])
