"""
Hachage des mots de passe (argon2 via passlib).
"""

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

from src.core.ports.security import IPasswordHasher


class PasswordHasher(IPasswordHasher):
    """
    Implementation argon2 de IPasswordHasher.

    Un hash inconnu ou corrompu est traite comme un mot de passe faux.
    """

    def __init__(self) -> None:
        self._context = CryptContext(schemes=["argon2"], deprecated="auto")

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._context.verify(password, password_hash)
        except (UnknownHashError, ValueError):
            return False
