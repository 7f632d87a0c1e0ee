"""
Erreurs du domaine StreamVault.

Chaque type d'erreur correspond a une categorie de reponse de la couche HTTP :
- ValidationError : donnees (payload ou document stocke) non conformes au schema
- NotFoundError : id, slug ou username inexistant
- ConflictError : violation d'unicite (slug, username)
- LockTimeoutError : verrou non obtenu dans le budget de tentatives
- IOFailureError : echec de lecture/ecriture/renommage autre que "fichier absent"
"""

from pathlib import Path
from typing import Optional


class CatalogError(Exception):
    """Classe de base des erreurs du catalogue."""


class ValidationError(CatalogError):
    """
    Donnees non conformes au schema attendu.

    Attributes:
        errors: Liste des erreurs detaillees (format pydantic) si disponible
    """

    def __init__(self, message: str, errors: Optional[list[dict]] = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class NotFoundError(CatalogError):
    """L'enregistrement reference n'existe pas."""


class ConflictError(CatalogError):
    """Violation d'une contrainte d'unicite."""


class LockTimeoutError(CatalogError):
    """Le verrou sur un fichier n'a pas pu etre obtenu."""

    def __init__(self, path: Path, attempts: int) -> None:
        self.path = path
        self.attempts = attempts
        super().__init__(f"Verrou indisponible pour {path} apres {attempts} tentatives")


class IOFailureError(CatalogError):
    """Echec d'entree/sortie sur le stockage."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Echec d'E/S sur {path}: {reason}")


def format_pydantic_errors(errors: list[dict]) -> str:
    """Resume une liste d'erreurs pydantic en un message lisible."""
    parts = []
    for error in errors:
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalide")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Donnees invalides"
