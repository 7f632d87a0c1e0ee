"""
Correspondance entre identite logique d'un enregistrement et fichier de stockage.

Le chemin retourne sert aussi de cle de verrou : tout enregistrement d'un
meme fichier partage le meme verrou.
"""

from dataclasses import dataclass
from pathlib import Path

from src.utils.constants import (
    ADMIN_FILENAME,
    AUDIT_LOG_FILENAME,
    CATALOG_DIRNAME,
    CATEGORIES_FILENAME,
    HISTORY_DIRNAME,
    LOG_FILENAME,
    LOGS_DIRNAME,
    MOVIES_FILENAME,
    SERIES_DIRNAME,
    USERS_DIRNAME,
    USERS_FILENAME,
)


@dataclass(frozen=True)
class StorageLayout:
    """Arborescence du repertoire de donnees."""

    data_dir: Path

    @property
    def catalog_dir(self) -> Path:
        return self.data_dir / CATALOG_DIRNAME

    @property
    def series_dir(self) -> Path:
        return self.catalog_dir / SERIES_DIRNAME

    @property
    def users_dir(self) -> Path:
        return self.data_dir / USERS_DIRNAME

    @property
    def history_dir(self) -> Path:
        return self.users_dir / HISTORY_DIRNAME

    def movies(self) -> Path:
        return self.catalog_dir / MOVIES_FILENAME

    def categories(self) -> Path:
        return self.catalog_dir / CATEGORIES_FILENAME

    def series(self, slug: str) -> Path:
        """Fichier d'une serie, nomme par son slug."""
        return self.series_dir / f"{slug}.json"

    def users(self) -> Path:
        return self.users_dir / USERS_FILENAME

    def admin(self) -> Path:
        return self.users_dir / ADMIN_FILENAME

    def history(self, username: str) -> Path:
        return self.history_dir / f"{username}.json"

    def audit_log(self) -> Path:
        return self.data_dir / AUDIT_LOG_FILENAME

    def log_file(self) -> Path:
        """Journal applicatif par defaut (JSON, rotation)."""
        return self.data_dir / LOGS_DIRNAME / LOG_FILENAME
