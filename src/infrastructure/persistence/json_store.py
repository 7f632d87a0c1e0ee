"""
Store de documents JSON valides par schema.

Implemente IDocumentStore :
- chargement avec creation du document par defaut si absent
- validation pydantic a chaque chargement et a chaque sauvegarde
- ecriture atomique (fichier temporaire + rename)
- verrou inter-processus par chemin de fichier

Les operations disque s'executent dans l'executor par defaut
(run_in_executor) pour ne pas bloquer la boucle d'evenements.
"""

import asyncio
import json
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from functools import partial
from pathlib import Path
from typing import Any, Optional, TypeVar

from loguru import logger
from pydantic import BaseModel

from src.core.entities.base import validate_entity, validation_context
from src.core.errors import IOFailureError, NotFoundError, ValidationError
from src.core.ports.storage import IDocumentStore
from src.infrastructure.persistence.atomic_writer import (
    append_line,
    read_json,
    write_json_atomic,
)
from src.infrastructure.persistence.file_lock import FileLockManager
from src.utils.constants import DEFAULT_MEDIA_HOSTS

DocumentT = TypeVar("DocumentT", bound=BaseModel)
T = TypeVar("T")


def _serialize(document: BaseModel) -> dict:
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def _list_sorted(directory: Path, pattern: str) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(path for path in directory.glob(pattern) if path.is_file())


class JsonDocumentStore(IDocumentStore):
    """
    Store de documents JSON avec verrouillage et validation.

    Example:
        store = JsonDocumentStore(FileLockManager())
        async with store.lock(path):
            doc = await store.load(path, MoviesDocument, MoviesDocument())
            doc.movies.append(movie)
            await store.save(path, doc)
    """

    def __init__(
        self,
        lock_manager: FileLockManager,
        allowed_hosts: tuple[str, ...] | list[str] = DEFAULT_MEDIA_HOSTS,
    ) -> None:
        """
        Initialise le store.

        Args:
            lock_manager: Gestionnaire de verrous par chemin
            allowed_hosts: Hotes autorises pour les URLs des documents
        """
        self._locks = lock_manager
        self._context = validation_context(allowed_hosts)

    @property
    def context(self) -> dict:
        """Contexte de validation pydantic (hotes autorises)."""
        return self._context

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args))

    def validate(self, model: type[DocumentT], data: Any, source: str) -> DocumentT:
        """
        Valide des donnees brutes contre un modele.

        Raises:
            ValidationError: Donnees non conformes (jamais corrigees en silence)
        """
        return validate_entity(model, data, self._context, source)

    def lock(self, path: Path) -> AbstractAsyncContextManager[None]:
        return self._locks.lock(path)

    async def _read(self, path: Path) -> Any:
        try:
            return await self._run(read_json, path)
        except json.JSONDecodeError as e:
            raise ValidationError(f"{path.name} n'est pas un JSON valide : {e}") from e
        except FileNotFoundError:
            raise
        except OSError as e:
            logger.error(f"Lecture impossible de {path}: {e}")
            raise IOFailureError(path, str(e)) from e

    async def _write(self, path: Path, data: dict) -> None:
        try:
            await self._run(write_json_atomic, path, data)
        except OSError as e:
            logger.error(f"Ecriture impossible de {path}: {e}")
            raise IOFailureError(path, str(e)) from e

    async def load(
        self, path: Path, model: type[DocumentT], default: DocumentT
    ) -> DocumentT:
        try:
            raw = await self._read(path)
        except FileNotFoundError:
            logger.debug(f"Creation du document par defaut {path}")
            await self.save(path, default)
            return self.validate(model, _serialize(default), path.name)
        return self.validate(model, raw, path.name)

    async def load_optional(
        self, path: Path, model: type[DocumentT]
    ) -> Optional[DocumentT]:
        try:
            raw = await self._read(path)
        except FileNotFoundError:
            return None
        return self.validate(model, raw, path.name)

    async def save(self, path: Path, document: BaseModel) -> None:
        # Aller-retour par le schema : une violation annule l'ecriture
        validated = self.validate(type(document), _serialize(document), path.name)
        await self._write(path, _serialize(validated))

    async def delete(self, path: Path) -> None:
        try:
            await self._run(path.unlink)
        except FileNotFoundError as e:
            raise NotFoundError(f"Document introuvable : {path.name}") from e
        except OSError as e:
            raise IOFailureError(path, str(e)) from e

    async def list_paths(self, directory: Path, pattern: str = "*.json") -> list[Path]:
        try:
            return await self._run(_list_sorted, directory, pattern)
        except OSError as e:
            raise IOFailureError(directory, str(e)) from e

    async def append_line(self, path: Path, line: str) -> None:
        try:
            await self._run(append_line, path, line)
        except OSError as e:
            raise IOFailureError(path, str(e)) from e
