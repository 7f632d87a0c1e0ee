"""
Utilitaires et constantes pour StreamVault.

Ce module contient les constantes et fonctions utilitaires partagees.
"""

from src.utils.constants import (
    DEFAULT_MEDIA_HOSTS,
    SLUG_PATTERN,
    USERNAME_PATTERN,
)
from src.utils.helpers import slugify, utc_now

__all__ = [
    "DEFAULT_MEDIA_HOSTS",
    "SLUG_PATTERN",
    "USERNAME_PATTERN",
    "slugify",
    "utc_now",
]
