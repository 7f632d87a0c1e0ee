"""
Routes des categories.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from ....core.entities import User
from ....core.value_objects import CategoryCreate, CategoryOrder, CategoryPatch
from ....services.users import AuditAction
from ...deps import audit, current_user, get_container, require_admin

router = APIRouter(prefix="/categories")


@router.get("")
async def list_categories(request: Request, user: User = Depends(current_user)) -> list[dict]:
    categories = await get_container(request).category_service().list_all()
    return [category.to_document() for category in categories]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    request: Request, payload: CategoryCreate, admin: User = Depends(require_admin)
) -> dict:
    category = await get_container(request).category_service().create(payload)
    await audit(request, admin.username, AuditAction.CREATE, f"category:{category.id}", {"slug": category.slug})
    return category.to_document()


@router.post("/reorder")
async def reorder_categories(
    request: Request, payload: CategoryOrder, admin: User = Depends(require_admin)
) -> list[dict]:
    categories = await get_container(request).category_service().reorder(payload.ids)
    await audit(request, admin.username, AuditAction.UPDATE, "categories", {"order": payload.ids})
    return [category.to_document() for category in categories]


@router.put("/{category_id}")
async def update_category(
    request: Request,
    category_id: str,
    patch: CategoryPatch,
    admin: User = Depends(require_admin),
) -> dict:
    category = await get_container(request).category_service().update(category_id, patch)
    await audit(request, admin.username, AuditAction.UPDATE, f"category:{category.id}", patch.supplied())
    return category.to_document()


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    request: Request, category_id: str, admin: User = Depends(require_admin)
) -> Response:
    await get_container(request).category_service().delete(category_id)
    await audit(request, admin.username, AuditAction.DELETE, f"category:{category_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
