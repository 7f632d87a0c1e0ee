"""
Service des categories du catalogue.

Les categories sont stockees dans un seul fichier, triees par ordre
d'affichage puis par nom. Le slug est unique parmi les categories.
"""

import uuid

from loguru import logger

from src.core.entities import Category
from src.core.entities.base import validate_entity
from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.core.ports.storage import IDocumentStore
from src.core.value_objects.payloads import CategoryCreate, CategoryPatch
from src.infrastructure.persistence.documents import CategoriesDocument
from src.infrastructure.persistence.layout import StorageLayout
from src.utils.helpers import slugify, title_sort_key


def _sorted(categories: list[Category]) -> list[Category]:
    return sorted(categories, key=lambda c: (c.order, title_sort_key(c.name)))


def _find(categories: list[Category], category_id: str) -> int:
    for index, category in enumerate(categories):
        if category.id == category_id:
            return index
    raise NotFoundError(f"Categorie introuvable : {category_id}")


class CategoryService:
    """
    Gestion des categories (creation, patch, suppression, reordonnancement).

    Example:
        service = CategoryService(store, layout)
        category = await service.create(CategoryCreate(name="Science-fiction"))
        await service.reorder([category.id, other.id])
    """

    def __init__(self, store: IDocumentStore, layout: StorageLayout) -> None:
        self._store = store
        self._path = layout.categories()

    async def _load(self) -> CategoriesDocument:
        return await self._store.load(self._path, CategoriesDocument, CategoriesDocument())

    async def list_all(self) -> list[Category]:
        """Retourne les categories triees (ordre, nom)."""
        async with self._store.lock(self._path):
            document = await self._load()
        return _sorted(document.categories)

    async def create(self, payload: CategoryCreate) -> Category:
        """
        Cree une categorie avec un id neuf.

        Raises:
            ValidationError: Nom ou slug invalide
            ConflictError: Slug deja utilise
        """
        slug = payload.slug or slugify(payload.name)
        if not slug:
            raise ValidationError(f"Impossible de deriver un slug de '{payload.name}'")
        data = {"id": str(uuid.uuid4()), "name": payload.name, "slug": slug, "order": payload.order}
        category = validate_entity(Category, data, {}, "Categorie")

        async with self._store.lock(self._path):
            document = await self._load()
            if any(existing.slug == category.slug for existing in document.categories):
                raise ConflictError(f"Le slug de categorie '{category.slug}' existe deja")
            document.categories = _sorted([*document.categories, category])
            await self._store.save(self._path, document)

        logger.info(f"Categorie creee : {category.slug}")
        return category

    async def update(self, category_id: str, patch: CategoryPatch) -> Category:
        """
        Applique les champs fournis a une categorie.

        Raises:
            NotFoundError: Categorie inexistante
            ConflictError: Nouveau slug deja utilise par une autre categorie
        """
        fields = patch.supplied()
        async with self._store.lock(self._path):
            document = await self._load()
            index = _find(document.categories, category_id)
            current = document.categories[index]

            slug = fields.get("slug")
            if slug and any(
                other.slug == slug for other in document.categories if other.id != current.id
            ):
                raise ConflictError(f"Le slug de categorie '{slug}' existe deja")

            updated = validate_entity(Category, {**current.model_dump(), **fields}, {}, "Categorie")
            document.categories[index] = updated
            document.categories = _sorted(document.categories)
            await self._store.save(self._path, document)

        logger.debug(f"Categorie mise a jour : {updated.slug}")
        return updated

    async def delete(self, category_id: str) -> None:
        """
        Supprime une categorie.

        Les films et series qui la referencent ne sont pas modifies.

        Raises:
            NotFoundError: Categorie inexistante
        """
        async with self._store.lock(self._path):
            document = await self._load()
            removed = document.categories.pop(_find(document.categories, category_id))
            await self._store.save(self._path, document)
        logger.info(f"Categorie supprimee : {removed.slug}")

    async def reorder(self, category_ids: list[str]) -> list[Category]:
        """
        Reordonne les categories : la position dans la liste devient l'ordre.

        Les ids inconnus sont ignores ; les categories absentes de la liste
        conservent leur ordre.
        """
        positions = {category_id: index for index, category_id in enumerate(category_ids)}
        async with self._store.lock(self._path):
            document = await self._load()
            for category in document.categories:
                if category.id in positions:
                    category.order = positions[category.id]
            document.categories = _sorted(document.categories)
            await self._store.save(self._path, document)
        return document.categories
