"""
Configuration du logging de StreamVault via loguru.

Deux sorties, réglées par Settings :
- console (stderr) : colorée, au niveau log_level ; les messages de la
  couche de stockage (verrous, entrées/sorties) sont préfixés [stockage]
- fichier JSON avec rotation, niveau DEBUG, sous data_dir/logs/ par défaut

Chaque enregistrement porte le répertoire de données (extra.data_dir) :
plusieurs instances peuvent partager un même collecteur de logs.
"""

import sys
from pathlib import Path

from loguru import logger

from .config import Settings

STORAGE_MODULE_PREFIX = "src.infrastructure.persistence"

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "{extra[scope]}<level>{message}</level>\n{exception}"
)


def is_storage_record(record: dict) -> bool:
    """Vrai si l'enregistrement provient de la couche de stockage."""
    return (record["name"] or "").startswith(STORAGE_MODULE_PREFIX)


def _tag_scope(record: dict) -> None:
    record["extra"]["scope"] = "[stockage] " if is_storage_record(record) else ""


def configure_logging(settings: Settings) -> Path:
    """Configure les sorties de log à partir des paramètres.

    Args :
        settings : Paramètres (niveau, fichier, rotation, rétention, data_dir)

    Returns :
        Le chemin du fichier de log JSON
    """
    log_file = settings.log_path

    logger.remove()
    logger.configure(extra={"data_dir": str(settings.data_dir), "scope": ""}, patcher=_tag_scope)

    logger.add(sys.stderr, level=settings.log_level, format=_CONSOLE_FORMAT, colorize=True)

    # Fichier JSON : la contention des verrous n'apparaît qu'en DEBUG
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=settings.log_rotation_size,
        retention=settings.log_retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configuré", log_file=str(log_file))
    return log_file
