"""
Routes de l'historique de visionnage de l'utilisateur courant.
"""

from fastapi import APIRouter, Depends, Request

from ...core.entities import User
from ...core.value_objects import HistoryEntryCreate
from ..deps import current_user, get_container

router = APIRouter(prefix="/api/history")


@router.get("")
async def get_history(request: Request, user: User = Depends(current_user)) -> list[dict]:
    entries = await get_container(request).history_service().get(user.username)
    return [entry.to_document() for entry in entries]


@router.post("")
async def add_history_entry(
    request: Request, payload: HistoryEntryCreate, user: User = Depends(current_user)
) -> list[dict]:
    entries = await get_container(request).history_service().append(user.username, payload)
    return [entry.to_document() for entry in entries]
