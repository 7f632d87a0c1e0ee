"""
Services des utilisateurs : comptes, historique de visionnage, audit.
"""

from .audit_service import AuditAction, AuditService
from .history_service import HistoryService
from .user_service import UserService

__all__ = [
    "AuditAction",
    "AuditService",
    "HistoryService",
    "UserService",
]
