"""Liveness endpoint."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Report that the service is up. Never touches the cache or upstream."""
    return {"status": "ok"}
