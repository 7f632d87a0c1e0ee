"""
Ecriture atomique des documents JSON.

Le document est serialise dans un fichier temporaire unique du meme
repertoire, synchronise sur disque, puis renomme sur la cible :
un lecteur concurrent observe toujours l'ancien ou le nouveau contenu,
jamais une ecriture partielle (rename atomique sur un meme filesystem).
"""

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any


def write_json_atomic(path: Path, data: Any) -> None:
    """
    Ecrit `data` en JSON dans `path` de maniere atomique.

    Args:
        path: Fichier cible (le repertoire parent est cree si absent)
        data: Donnees serialisables en JSON

    Raises:
        ValueError: Si les donnees ne sont pas serialisables
        OSError: Si l'ecriture ou le renommage echoue (fichier cible intact)
    """
    path = Path(path)
    try:
        json_str = json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Donnees non serialisables en JSON: {e}") from e

    path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(
        suffix=".tmp",
        prefix=f".{path.name}.",
        dir=path.parent,
        text=True,
    )
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(json_str)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(temp_path)
        raise


def read_json(path: Path) -> Any:
    """
    Lit et parse un fichier JSON.

    Raises:
        FileNotFoundError: Si le fichier n'existe pas
        json.JSONDecodeError: Si le contenu n'est pas du JSON valide
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def append_line(path: Path, line: str) -> None:
    """Ajoute une ligne (terminee par un saut de ligne) a un fichier texte."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{line}\n")
        f.flush()
