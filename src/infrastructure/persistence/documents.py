"""
Enveloppes des documents JSON stockes sur disque.

Chaque fichier collection contient un objet a une seule cle
({"movies": [...]}, {"categories": [...]}, ...). Le document d'une serie
est l'entite Series elle-meme.
"""

from typing import Optional

from pydantic import Field

from src.core.entities import Category, HistoryEntry, Movie, User
from src.core.entities.base import CatalogModel


class CategoriesDocument(CatalogModel):
    categories: list[Category] = Field(default_factory=list)


class MoviesDocument(CatalogModel):
    movies: list[Movie] = Field(default_factory=list)


class UsersDocument(CatalogModel):
    users: list[User] = Field(default_factory=list)


class AdminDocument(CatalogModel):
    """Fichier singleton du compte administrateur."""

    admin: Optional[User] = None


class HistoryDocument(CatalogModel):
    history: list[HistoryEntry] = Field(default_factory=list)
