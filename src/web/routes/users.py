"""
Routes des comptes utilisateurs et de l'identite courante.
"""

from fastapi import APIRouter, Depends, Request, status

from ...core.entities import User
from ...core.value_objects import UserCreate, UserPatch
from ...services.users import AuditAction
from ..deps import audit, current_user, get_container, public_user, require_admin

router = APIRouter(prefix="/api")


def _update_action(patch: UserPatch) -> AuditAction:
    if patch.active is False:
        return AuditAction.DISABLE_USER
    if patch.password is not None:
        return AuditAction.RESET_PASSWORD
    return AuditAction.UPDATE


@router.get("/auth/me")
async def me(request: Request, user: User = Depends(current_user)) -> dict:
    await audit(request, user.username, AuditAction.LOGIN, f"user:{user.username}")
    return public_user(user)


@router.get("/users")
async def list_users(request: Request, admin: User = Depends(require_admin)) -> list[dict]:
    users = await get_container(request).user_service().list_users()
    return [public_user(user) for user in users]


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(request: Request, payload: UserCreate, admin: User = Depends(require_admin)) -> dict:
    user = await get_container(request).user_service().create_user(payload)
    await audit(request, admin.username, AuditAction.CREATE, f"user:{user.username}", {"role": user.role.value})
    return public_user(user)


@router.put("/users/{username}")
async def update_user(
    request: Request, username: str, patch: UserPatch, admin: User = Depends(require_admin)
) -> dict:
    user = await get_container(request).user_service().update_user(username, patch)
    fields = sorted(patch.supplied(exclude={"password"}))
    await audit(request, admin.username, _update_action(patch), f"user:{username}", {"fields": fields})
    return public_user(user)
