"""API module.

Contains the file API routes.
"""

from fastapi import APIRouter

from blob_gateway.api.files import router as files_router

router = APIRouter()
router.include_router(files_router)

__all__ = ["router"]
