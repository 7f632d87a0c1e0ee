"""
Service des series du catalogue.

Chaque serie est stockee dans son propre fichier, nomme par son slug :
deux series differentes se modifient sans se bloquer. Les saisons et
episodes passent toujours par le moteur de merge (src.services.catalog.merge).
"""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from src.core.entities import Episode, Series
from src.core.entities.base import validate_entity, validation_context
from src.core.errors import NotFoundError
from src.core.ports.storage import IDocumentStore
from src.core.value_objects.payloads import EpisodeUpsert, SeriesPatch, SeriesPayload
from src.infrastructure.persistence.layout import StorageLayout
from src.services.catalog.merge import merge_seasons, merge_series, series_slug, upsert_episode
from src.utils.constants import DEFAULT_MEDIA_HOSTS, SLUG_RE
from src.utils.helpers import title_sort_key, utc_now


class SeriesService:
    """
    Gestion des series, saisons et episodes.

    Example:
        service = SeriesService(store, layout)
        series = await service.create_or_merge(payload)
        await service.merge_episode(
            series.slug, EpisodeUpsert(season=1, episode=1, title="Pilot Extended")
        )
    """

    def __init__(
        self,
        store: IDocumentStore,
        layout: StorageLayout,
        allowed_hosts: tuple[str, ...] | list[str] = DEFAULT_MEDIA_HOSTS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._layout = layout
        self._allowed_hosts = tuple(allowed_hosts)
        self._context = validation_context(allowed_hosts)
        self.clock = clock

    def _path(self, slug: str) -> Path:
        # Le slug sert de nom de fichier : tout autre alphabet est inconnu
        if not SLUG_RE.fullmatch(slug):
            raise NotFoundError(f"Serie introuvable : {slug}")
        return self._layout.series(slug)

    async def _load_existing(self, path: Path, slug: str) -> Series:
        series = await self._store.load_optional(path, Series)
        if series is None:
            raise NotFoundError(f"Serie introuvable : {slug}")
        return series

    async def list_all(self, published_only: bool = False) -> list[Series]:
        """
        Retourne toutes les series triees par nom.

        Les egalites conservent l'ordre des fichiers. Un fichier supprime
        entre le listing et la lecture est ignore.
        """
        series_list = []
        for path in await self._store.list_paths(self._layout.series_dir):
            series = await self._store.load_optional(path, Series)
            if series is not None and (series.published or not published_only):
                series_list.append(series)
        return sorted(series_list, key=lambda s: title_sort_key(s.name))

    async def get(self, slug: str) -> Series:
        """
        Raises:
            NotFoundError: Serie inexistante
        """
        return await self._load_existing(self._path(slug), slug)

    async def create_or_merge(self, payload: SeriesPayload) -> Series:
        """
        Cree une serie, ou la fusionne avec la serie de meme slug.

        Raises:
            ValidationError: Serie resultante non conforme
        """
        slug = series_slug(payload)
        path = self._path(slug)
        async with self._store.lock(path):
            existing = await self._store.load_optional(path, Series)
            series = merge_series(existing, payload, self.clock(), self._allowed_hosts)
            await self._store.save(path, series)

        logger.info(f"Serie {'fusionnee' if existing else 'creee'} : {slug}")
        return series

    async def _apply(self, slug: str, fields: dict[str, Any]) -> Series:
        path = self._path(slug)
        async with self._store.lock(path):
            current = await self._load_existing(path, slug)
            data = current.model_dump()
            data.update(fields)
            data["updated_at"] = self.clock()
            series = validate_entity(Series, data, self._context, f"Serie '{slug}'")
            await self._store.save(path, series)
        return series

    async def update(self, slug: str, patch: SeriesPatch) -> Series:
        """
        Applique un patch ; les saisons fournies sont fusionnees.

        Raises:
            NotFoundError: Serie inexistante
            ValidationError: Serie resultante non conforme
        """
        path = self._path(slug)
        async with self._store.lock(path):
            current = await self._load_existing(path, slug)
            now = self.clock()
            data = current.model_dump(exclude={"seasons"})
            data.update(patch.supplied(exclude={"seasons"}))
            data["seasons"] = merge_seasons(
                current.seasons, patch.seasons or [], now, self._allowed_hosts
            )
            data["updated_at"] = now
            series = validate_entity(Series, data, self._context, f"Serie '{slug}'")
            await self._store.save(path, series)

        logger.debug(f"Serie mise a jour : {slug}")
        return series

    async def merge_episode(self, slug: str, payload: EpisodeUpsert) -> Series:
        """
        Cree ou met a jour un episode unique.

        Raises:
            NotFoundError: Serie inexistante
            ValidationError: Episode resultant non conforme
        """
        path = self._path(slug)
        async with self._store.lock(path):
            current = await self._load_existing(path, slug)
            series = upsert_episode(current, payload, self.clock(), self._allowed_hosts)
            await self._store.save(path, series)

        logger.debug(f"Episode S{payload.season:02d}E{payload.episode:02d} fusionne : {slug}")
        return series

    async def set_published(self, slug: str, published: bool) -> Series:
        return await self._apply(slug, {"published": published})

    async def set_featured(self, slug: str, featured: bool) -> Series:
        return await self._apply(slug, {"featured": featured})

    async def increment_view(
        self, slug: str, season_number: int, episode_number: int
    ) -> Optional[Episode]:
        """
        Incremente le compteur de vues d'un episode.

        Le lastUpdated de l'episode est restampe ; updatedAt de la serie
        ne change pas. Serie ou episode inconnu : ignore silencieusement
        (retourne None).
        """
        if not SLUG_RE.fullmatch(slug):
            return None
        path = self._layout.series(slug)
        async with self._store.lock(path):
            series = await self._store.load_optional(path, Series)
            episode = series.find_episode(season_number, episode_number) if series else None
            if episode is None:
                logger.debug(f"Vue ignoree, episode inconnu : {slug} S{season_number}E{episode_number}")
                return None
            episode.views += 1
            episode.last_updated = self.clock()
            await self._store.save(path, series)
        return episode

    async def delete(self, slug: str) -> None:
        """
        Supprime le fichier d'une serie.

        Raises:
            NotFoundError: Serie inexistante
        """
        path = self._path(slug)
        async with self._store.lock(path):
            await self._store.delete(path)
        logger.info(f"Serie supprimee : {slug}")
