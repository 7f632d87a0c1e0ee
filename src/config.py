"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe STREAMVAULT_,
et peut optionnellement être fournie via un fichier .env.

Tous les chemins de stockage dérivent de data_dir (voir StorageLayout).
"""

from pathlib import Path
from typing import Annotated, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from src.infrastructure.persistence.layout import StorageLayout
from src.utils.constants import DEFAULT_MEDIA_HOSTS

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe STREAMVAULT_.
    Exemple : STREAMVAULT_DATA_DIR=/srv/streamvault
              STREAMVAULT_ALLOWED_MEDIA_HOSTS=cdn.example.com,videos.local

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMVAULT_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Stockage
    data_dir: Path = Field(default=Path("data"))

    # Hôtes autorisés pour les URLs de flux, affiches et sous-titres
    allowed_media_hosts: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_MEDIA_HOSTS)
    )

    # Verrous de fichiers (5 relances, attente 50-200 ms)
    lock_retries: int = Field(default=5, ge=0)
    lock_min_wait_ms: int = Field(default=50, ge=1)
    lock_max_wait_ms: int = Field(default=200, ge=1)

    # Limitation de débit des routes d'administration
    rate_limit_window_seconds: int = Field(default=60, ge=1)
    rate_limit_max_requests: int = Field(default=10, ge=1)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    # Sans log_file, le journal est écrit sous data_dir/logs/
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = Field(default=None)
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("data_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path | None) -> Optional[Path]:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser() if v else None

    @field_validator("allowed_media_hosts", mode="before")
    @classmethod
    def split_hosts(cls, v: str | list[str]) -> list[str]:
        """Accepte une liste ou une chaîne séparée par des virgules."""
        if isinstance(v, str):
            v = v.split(",")
        hosts = [host.strip().lower() for host in v if host.strip()]
        if not hosts:
            raise ValueError("au moins un hôte autorisé est requis")
        return hosts

    @property
    def layout(self) -> StorageLayout:
        """Arborescence des fichiers de données."""
        return StorageLayout(self.data_dir)

    @property
    def log_path(self) -> Path:
        """Fichier du journal applicatif (log_file, sinon sous data_dir)."""
        return self.log_file or self.layout.log_file()

    @property
    def media_hosts(self) -> tuple[str, ...]:
        return tuple(self.allowed_media_hosts)

    @property
    def lock_min_wait(self) -> float:
        """Attente minimale entre deux tentatives de verrou (secondes)."""
        return self.lock_min_wait_ms / 1000

    @property
    def lock_max_wait(self) -> float:
        """Attente maximale entre deux tentatives de verrou (secondes)."""
        return max(self.lock_max_wait_ms, self.lock_min_wait_ms) / 1000
