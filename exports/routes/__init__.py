"""Export route handlers."""

from fastapi import APIRouter

from exports.routes.bcf import router as bcf_router

# Main router that aggregates all export-related routes
router = APIRouter()

router.include_router(bcf_router, tags=["bcf-exports"])

__all__ = ["bcf_router", "router"]
