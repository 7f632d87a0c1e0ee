"""
Service de l'historique de visionnage.

Un fichier par utilisateur. Une seule entree par contenu : un nouvel
ajout remplace l'ancienne entree et passe en tete de liste.
"""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from src.core.entities import HistoryEntry
from src.core.entities.base import validate_entity
from src.core.errors import NotFoundError
from src.core.ports.storage import IDocumentStore
from src.core.value_objects.payloads import HistoryEntryCreate
from src.infrastructure.persistence.documents import HistoryDocument
from src.infrastructure.persistence.layout import StorageLayout
from src.utils.constants import USERNAME_RE
from src.utils.helpers import utc_now


class HistoryService:
    """Lecture et ajout dans l'historique d'un utilisateur."""

    def __init__(
        self,
        store: IDocumentStore,
        layout: StorageLayout,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._layout = layout
        self.clock = clock

    def _path(self, username: str) -> Path:
        if not USERNAME_RE.fullmatch(username):
            raise NotFoundError(f"Historique introuvable : {username}")
        return self._layout.history(username)

    async def get(self, username: str) -> list[HistoryEntry]:
        """Retourne l'historique, du plus recent au plus ancien."""
        path = self._path(username)
        async with self._store.lock(path):
            document = await self._store.load(path, HistoryDocument, HistoryDocument())
        return document.history

    async def append(self, username: str, payload: HistoryEntryCreate) -> list[HistoryEntry]:
        """
        Ajoute une entree en tete ; l'entree existante du meme contenu est retiree.

        Returns:
            Le nouvel historique complet
        """
        data = payload.supplied()
        data.setdefault("last_watched", self.clock())
        entry = validate_entity(HistoryEntry, data, {}, "Entree d'historique")

        path = self._path(username)
        async with self._store.lock(path):
            document = await self._store.load(path, HistoryDocument, HistoryDocument())
            document.history = [entry] + [
                item for item in document.history if item.content_id != entry.content_id
            ]
            await self._store.save(path, document)
        return document.history
