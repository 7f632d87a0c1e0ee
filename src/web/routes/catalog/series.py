"""
Routes des series, saisons et episodes.

POST /series cree la serie ou la fusionne avec la serie de meme slug.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from ....core.entities import User
from ....core.errors import NotFoundError
from ....core.value_objects import (
    EpisodeRef,
    EpisodeUpsert,
    FeatureToggle,
    PublishToggle,
    SeriesPatch,
    SeriesPayload,
)
from ....services.users import AuditAction
from ...deps import audit, current_user, get_container, require_admin

router = APIRouter(prefix="/series")


@router.get("")
async def list_series(request: Request, user: User = Depends(current_user)) -> list[dict]:
    series_list = await get_container(request).series_service().list_all(published_only=not user.is_admin)
    return [series.to_document() for series in series_list]


@router.post("")
async def create_or_merge_series(
    request: Request, payload: SeriesPayload, admin: User = Depends(require_admin)
) -> dict:
    series = await get_container(request).series_service().create_or_merge(payload)
    await audit(request, admin.username, AuditAction.CREATE, f"series:{series.slug}")
    return series.to_document()


@router.get("/{slug}")
async def get_series(request: Request, slug: str, user: User = Depends(current_user)) -> dict:
    series = await get_container(request).series_service().get(slug)
    if not series.published and not user.is_admin:
        raise NotFoundError(f"Serie introuvable : {slug}")
    return series.to_document()


@router.put("/{slug}")
async def update_series(
    request: Request, slug: str, patch: SeriesPatch, admin: User = Depends(require_admin)
) -> dict:
    series = await get_container(request).series_service().update(slug, patch)
    await audit(request, admin.username, AuditAction.UPDATE, f"series:{slug}", {"fields": sorted(patch.supplied())})
    return series.to_document()


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_series(request: Request, slug: str, admin: User = Depends(require_admin)) -> Response:
    await get_container(request).series_service().delete(slug)
    await audit(request, admin.username, AuditAction.DELETE, f"series:{slug}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{slug}/episodes")
async def merge_episode(
    request: Request, slug: str, payload: EpisodeUpsert, admin: User = Depends(require_admin)
) -> dict:
    series = await get_container(request).series_service().merge_episode(slug, payload)
    await audit(
        request,
        admin.username,
        AuditAction.UPDATE,
        f"series:{slug}",
        {"season": payload.season, "episode": payload.episode},
    )
    return series.to_document()


@router.post("/{slug}/publish")
async def publish_series(
    request: Request, slug: str, payload: PublishToggle, admin: User = Depends(require_admin)
) -> dict:
    series = await get_container(request).series_service().set_published(slug, payload.published)
    action = AuditAction.PUBLISH if payload.published else AuditAction.UNPUBLISH
    await audit(request, admin.username, action, f"series:{slug}")
    return series.to_document()


@router.post("/{slug}/feature")
async def feature_series(
    request: Request, slug: str, payload: FeatureToggle, admin: User = Depends(require_admin)
) -> dict:
    series = await get_container(request).series_service().set_featured(slug, payload.featured)
    await audit(request, admin.username, AuditAction.FEATURE, f"series:{slug}", {"featured": payload.featured})
    return series.to_document()


@router.post("/{slug}/views")
async def count_episode_view(
    request: Request, slug: str, payload: EpisodeRef, user: User = Depends(current_user)
) -> dict:
    episode = await get_container(request).series_service().increment_view(
        slug, payload.season, payload.episode
    )
    return {"views": episode.views if episode else None}
