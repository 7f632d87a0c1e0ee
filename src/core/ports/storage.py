"""
Interfaces ports pour le stockage de documents.

Interfaces abstraites (ports) definissant les contrats de persistance des
documents JSON. L'implementation (adaptateur) fournit l'ecriture atomique,
le verrouillage inter-processus et la validation de schema.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import Optional, TypeVar

from pydantic import BaseModel

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class IDocumentStore(ABC):
    """
    Interface du store de documents valides.

    Toute sequence lecture-modification-ecriture d'un service doit
    s'executer dans un seul bloc `async with store.lock(path)`.
    """

    @abstractmethod
    def lock(self, path: Path) -> AbstractAsyncContextManager[None]:
        """Verrou exclusif (inter-processus) sur un chemin de document."""
        ...

    @abstractmethod
    async def load(
        self, path: Path, model: type[DocumentT], default: DocumentT
    ) -> DocumentT:
        """
        Charge et valide le document ; le cree avec `default` s'il est absent.

        Raises :
            ValidationError : document non conforme au schema
            IOFailureError : erreur de lecture autre que "fichier absent"
        """
        ...

    @abstractmethod
    async def load_optional(
        self, path: Path, model: type[DocumentT]
    ) -> Optional[DocumentT]:
        """Charge et valide le document, ou retourne None s'il est absent."""
        ...

    @abstractmethod
    async def save(self, path: Path, document: BaseModel) -> None:
        """
        Valide puis ecrit atomiquement le document.

        Un echec de validation annule la sauvegarde sans toucher au fichier.
        """
        ...

    @abstractmethod
    async def delete(self, path: Path) -> None:
        """Supprime un document (NotFoundError s'il est absent)."""
        ...

    @abstractmethod
    async def list_paths(self, directory: Path, pattern: str = "*.json") -> list[Path]:
        """Liste triee des documents d'un repertoire."""
        ...

    @abstractmethod
    async def append_line(self, path: Path, line: str) -> None:
        """Ajoute une ligne a un fichier texte en ajout seul."""
        ...
