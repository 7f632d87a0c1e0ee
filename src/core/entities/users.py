"""
Entites utilisateurs : comptes et historique de visionnage.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from src.core.entities.base import CatalogModel, Username, UuidStr


class Role(str, Enum):
    """Role d'un compte."""

    ADMIN = "admin"
    USER = "user"


class StreamType(str, Enum):
    """Type de contenu regarde."""

    MOVIE = "movie"
    SERIES = "series"


class User(CatalogModel):
    """
    Compte utilisateur.

    Le compte administrateur est stocke seul dans un fichier dedie ;
    les autres comptes partagent un fichier liste. Les usernames sont
    uniques sur l'ensemble des deux fichiers (sensibles a la casse).
    """

    id: UuidStr
    username: Username
    password_hash: str = Field(min_length=1)
    role: Role
    active: bool = True
    created_at: datetime
    updated_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class HistoryEntry(CatalogModel):
    """
    Entree de l'historique de visionnage d'un utilisateur.

    Attributes:
        content_id: Id du film ou slug de la serie
        type: Type de contenu
        progress: Progression dans [0, 1]
        last_watched: Horodatage du dernier visionnage
        season: Numero de saison (series uniquement)
        episode: Numero d'episode (series uniquement)
    """

    content_id: str = Field(min_length=1)
    type: StreamType
    progress: float = Field(ge=0, le=1)
    last_watched: datetime
    season: Optional[int] = Field(default=None, ge=1)
    episode: Optional[int] = Field(default=None, ge=1)
