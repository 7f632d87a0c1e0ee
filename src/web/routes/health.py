"""
Route de sante de l'application (sans authentification).
"""

from fastapi import APIRouter

router = APIRouter()


@router.get("/api/health")
async def health() -> dict:
    return {"status": "ok"}
