"""
Service des films du catalogue.

Tous les films partagent un fichier unique trie par titre (casse et
accents ignores). Chaque mutation est un cycle lecture-modification-
ecriture sous le verrou de ce fichier : deux increments de vues
concurrents sont serialises, jamais perdus.
"""

import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional

from loguru import logger

from src.core.entities import Movie
from src.core.entities.base import validate_entity, validation_context
from src.core.errors import ConflictError, NotFoundError
from src.core.ports.storage import IDocumentStore
from src.core.value_objects.payloads import MovieCreate, MoviePatch
from src.infrastructure.persistence.documents import MoviesDocument
from src.infrastructure.persistence.layout import StorageLayout
from src.utils.constants import DEFAULT_MEDIA_HOSTS
from src.utils.helpers import slugify, title_sort_key, utc_now


def _sorted(movies: list[Movie]) -> list[Movie]:
    return sorted(movies, key=lambda movie: title_sort_key(movie.title))


def _index_of(movies: list[Movie], movie_id: str) -> Optional[int]:
    for index, movie in enumerate(movies):
        if movie.id == movie_id:
            return index
    return None


def _check_slug_free(movies: list[Movie], slug: str, exclude_id: Optional[str] = None) -> None:
    for movie in movies:
        if movie.slug == slug and movie.id != exclude_id:
            raise ConflictError(f"Le slug de film '{slug}' existe deja")


class MovieService:
    """
    Gestion des films.

    Attributes:
        clock: Source de l'horodatage (injectable pour les tests)
    """

    def __init__(
        self,
        store: IDocumentStore,
        layout: StorageLayout,
        allowed_hosts: tuple[str, ...] | list[str] = DEFAULT_MEDIA_HOSTS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._path = layout.movies()
        self._context = validation_context(allowed_hosts)
        self.clock = clock

    async def _load(self) -> MoviesDocument:
        return await self._store.load(self._path, MoviesDocument, MoviesDocument())

    async def list_all(self, published_only: bool = False) -> list[Movie]:
        """Retourne les films tries par titre, eventuellement publies seulement."""
        async with self._store.lock(self._path):
            document = await self._load()
        movies = _sorted(document.movies)
        if published_only:
            return [movie for movie in movies if movie.published]
        return movies

    async def get(self, movie_id: str) -> Movie:
        """
        Raises:
            NotFoundError: Film inexistant
        """
        async with self._store.lock(self._path):
            document = await self._load()
        index = _index_of(document.movies, movie_id)
        if index is None:
            raise NotFoundError(f"Film introuvable : {movie_id}")
        return document.movies[index]

    async def create(self, payload: MovieCreate) -> Movie:
        """
        Cree un film (id neuf, 0 vue, horodatages).

        Le slug vaut slugify(titre) s'il n'est pas fourni.

        Raises:
            ValidationError: Payload non conforme (annee, URL, ...)
            ConflictError: Slug deja utilise par un autre film
        """
        now = self.clock()
        data = {
            **payload.model_dump(exclude={"slug"}),
            "id": str(uuid.uuid4()),
            "slug": payload.slug or slugify(payload.title),
            "views": 0,
            "created_at": now,
            "updated_at": now,
        }
        movie = validate_entity(Movie, data, self._context, "Film")

        async with self._store.lock(self._path):
            document = await self._load()
            _check_slug_free(document.movies, movie.slug)
            document.movies = _sorted([*document.movies, movie])
            await self._store.save(self._path, document)

        logger.info(f"Film cree : {movie.slug}")
        return movie

    async def _apply(self, movie_id: str, fields: dict[str, Any]) -> Movie:
        """Applique des champs a un film sous verrou et restampe updatedAt."""
        async with self._store.lock(self._path):
            document = await self._load()
            index = _index_of(document.movies, movie_id)
            if index is None:
                raise NotFoundError(f"Film introuvable : {movie_id}")
            current = document.movies[index]

            if "slug" in fields:
                _check_slug_free(document.movies, fields["slug"], exclude_id=current.id)

            data = current.model_dump()
            data.update(fields)
            data["updated_at"] = self.clock()
            updated = validate_entity(Movie, data, self._context, f"Film '{current.slug}'")

            document.movies[index] = updated
            document.movies = _sorted(document.movies)
            await self._store.save(self._path, document)
        return updated

    async def update(self, movie_id: str, patch: MoviePatch) -> Movie:
        """
        Applique les champs fournis d'un patch.

        Raises:
            NotFoundError: Film inexistant
            ConflictError: Nouveau slug deja utilise
            ValidationError: Film resultant non conforme
        """
        movie = await self._apply(movie_id, patch.supplied())
        logger.debug(f"Film mis a jour : {movie.slug}")
        return movie

    async def set_published(self, movie_id: str, published: bool) -> Movie:
        return await self._apply(movie_id, {"published": published})

    async def set_featured(self, movie_id: str, featured: bool) -> Movie:
        return await self._apply(movie_id, {"featured": featured})

    async def delete(self, movie_id: str) -> None:
        """
        Raises:
            NotFoundError: Film inexistant
        """
        async with self._store.lock(self._path):
            document = await self._load()
            index = _index_of(document.movies, movie_id)
            if index is None:
                raise NotFoundError(f"Film introuvable : {movie_id}")
            removed = document.movies.pop(index)
            await self._store.save(self._path, document)
        logger.info(f"Film supprime : {removed.slug}")

    async def increment_view(self, movie_id: str) -> Optional[Movie]:
        """
        Incremente le compteur de vues d'un film.

        updatedAt est restampe. Un id inconnu est ignore silencieusement
        (retourne None).
        """
        async with self._store.lock(self._path):
            document = await self._load()
            index = _index_of(document.movies, movie_id)
            if index is None:
                logger.debug(f"Vue ignoree, film inconnu : {movie_id}")
                return None
            movie = document.movies[index]
            movie.views += 1
            movie.updated_at = self.clock()
            await self._store.save(self._path, document)
        return movie
