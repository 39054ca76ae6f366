"""API routes."""

from fastapi import APIRouter

from app.api import admin, auth, status, user

router = APIRouter()
router.include_router(status.router, tags=["status"])
router.include_router(auth.router, tags=["auth"])
router.include_router(user.router, tags=["user"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
