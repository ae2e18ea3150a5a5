"""API v1 router - aggregates all v1 endpoints."""

from fastapi import APIRouter

from research_records.api.v1.auth import router as auth_router
from research_records.api.v1.book_chapters import router as book_chapters_router
from research_records.api.v1.copyrights import router as copyrights_router
from research_records.api.v1.journals import router as journals_router
from research_records.api.v1.special_users import router as special_users_router
from research_records.api.v1.users import router as users_router

router = APIRouter(prefix="/api/v1")

router.include_router(auth_router)
router.include_router(users_router)
router.include_router(special_users_router)
router.include_router(book_chapters_router)
router.include_router(copyrights_router)
router.include_router(journals_router)


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
