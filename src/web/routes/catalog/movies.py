"""
Routes des films.

Les comptes non administrateurs ne voient que les films publies.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from ....core.entities import User
from ....core.errors import NotFoundError
from ....core.value_objects import FeatureToggle, MovieCreate, MoviePatch, PublishToggle
from ....services.users import AuditAction
from ...deps import audit, current_user, get_container, require_admin

router = APIRouter(prefix="/movies")


@router.get("")
async def list_movies(request: Request, user: User = Depends(current_user)) -> list[dict]:
    movies = await get_container(request).movie_service().list_all(published_only=not user.is_admin)
    return [movie.to_document() for movie in movies]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_movie(
    request: Request, payload: MovieCreate, admin: User = Depends(require_admin)
) -> dict:
    movie = await get_container(request).movie_service().create(payload)
    await audit(request, admin.username, AuditAction.CREATE, f"movie:{movie.id}", {"slug": movie.slug})
    return movie.to_document()


@router.get("/{movie_id}")
async def get_movie(request: Request, movie_id: str, user: User = Depends(current_user)) -> dict:
    movie = await get_container(request).movie_service().get(movie_id)
    if not movie.published and not user.is_admin:
        raise NotFoundError(f"Film introuvable : {movie_id}")
    return movie.to_document()


@router.put("/{movie_id}")
async def update_movie(
    request: Request, movie_id: str, patch: MoviePatch, admin: User = Depends(require_admin)
) -> dict:
    movie = await get_container(request).movie_service().update(movie_id, patch)
    await audit(request, admin.username, AuditAction.UPDATE, f"movie:{movie.id}", {"fields": sorted(patch.supplied())})
    return movie.to_document()


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_movie(request: Request, movie_id: str, admin: User = Depends(require_admin)) -> Response:
    await get_container(request).movie_service().delete(movie_id)
    await audit(request, admin.username, AuditAction.DELETE, f"movie:{movie_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{movie_id}/publish")
async def publish_movie(
    request: Request, movie_id: str, payload: PublishToggle, admin: User = Depends(require_admin)
) -> dict:
    movie = await get_container(request).movie_service().set_published(movie_id, payload.published)
    action = AuditAction.PUBLISH if payload.published else AuditAction.UNPUBLISH
    await audit(request, admin.username, action, f"movie:{movie.id}")
    return movie.to_document()


@router.post("/{movie_id}/feature")
async def feature_movie(
    request: Request, movie_id: str, payload: FeatureToggle, admin: User = Depends(require_admin)
) -> dict:
    movie = await get_container(request).movie_service().set_featured(movie_id, payload.featured)
    await audit(request, admin.username, AuditAction.FEATURE, f"movie:{movie.id}", {"featured": payload.featured})
    return movie.to_document()


@router.post("/{movie_id}/views")
async def count_movie_view(request: Request, movie_id: str, user: User = Depends(current_user)) -> dict:
    movie = await get_container(request).movie_service().increment_view(movie_id)
    return {"views": movie.views if movie else None}
