"""
Journal d'audit en ajout seul.

Format d'une ligne :
    <horodatage ISO> | <acteur> | <ACTION> | <cible> | <details JSON>
"""

import json
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from loguru import logger

from src.core.ports.storage import IDocumentStore
from src.infrastructure.persistence.layout import StorageLayout
from src.utils.helpers import utc_now

SEPARATOR = " | "


class AuditAction(str, Enum):
    """Actions tracees dans le journal d'audit."""

    LOGIN = "LOGIN"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    PUBLISH = "PUBLISH"
    UNPUBLISH = "UNPUBLISH"
    FEATURE = "FEATURE"
    RESET_PASSWORD = "RESET_PASSWORD"
    DISABLE_USER = "DISABLE_USER"
    VIEW = "VIEW"


def _one_line(value: str) -> str:
    return " ".join(value.replace(SEPARATOR.strip(), "/").split())


class AuditService:
    """Ecriture seule : le journal n'est jamais relu par l'application."""

    def __init__(
        self,
        store: IDocumentStore,
        layout: StorageLayout,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._path = layout.audit_log()
        self.clock = clock

    def format_line(
        self,
        actor: str,
        action: AuditAction,
        target: str,
        details: Optional[dict[str, Any]] = None,
    ) -> str:
        fields = [
            self.clock().isoformat(),
            _one_line(actor),
            action.value,
            _one_line(target),
            json.dumps(details or {}, ensure_ascii=False, sort_keys=True, default=str),
        ]
        return SEPARATOR.join(fields)

    async def record(
        self,
        actor: str,
        action: AuditAction,
        target: str,
        details: Optional[dict[str, Any]] = None,
    ) -> str:
        """Ajoute une ligne au journal et la retourne."""
        line = self.format_line(actor, action, target, details)
        async with self._store.lock(self._path):
            await self._store.append_line(self._path, line)
        logger.debug(f"Audit : {action.value} {target} par {actor}")
        return line
