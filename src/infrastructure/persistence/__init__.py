"""
Module de persistance fichier pour StreamVault.

Ce module fournit le stockage des documents JSON :

- atomic_writer.py : Ecriture atomique (temp + fsync + rename)
- file_lock.py : Verrou flock inter-processus avec retry tenacity
- json_store.py : Store valide par les modeles pydantic
- documents.py : Enveloppes des fichiers collection
- layout.py : Chemins des fichiers dans le repertoire de donnees

Usage:
    from src.infrastructure.persistence import JsonDocumentStore, FileLockManager

    store = JsonDocumentStore(FileLockManager())
    async with store.lock(path):
        doc = await store.load(path, MoviesDocument, MoviesDocument())
"""

from src.infrastructure.persistence.atomic_writer import append_line, read_json, write_json_atomic
from src.infrastructure.persistence.documents import (
    AdminDocument,
    CategoriesDocument,
    HistoryDocument,
    MoviesDocument,
    UsersDocument,
)
from src.infrastructure.persistence.file_lock import FileLockManager, lock_path_for
from src.infrastructure.persistence.json_store import JsonDocumentStore
from src.infrastructure.persistence.layout import StorageLayout

__all__ = [
    "append_line",
    "read_json",
    "write_json_atomic",
    "AdminDocument",
    "CategoriesDocument",
    "HistoryDocument",
    "MoviesDocument",
    "UsersDocument",
    "FileLockManager",
    "lock_path_for",
    "JsonDocumentStore",
    "StorageLayout",
]
