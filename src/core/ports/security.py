"""
Interface port pour le hachage des mots de passe.
"""

from abc import ABC, abstractmethod


class IPasswordHasher(ABC):
    """Hachage et verification des mots de passe."""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Retourne le hash du mot de passe."""
        ...

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Verifie un mot de passe contre son hash."""
        ...
