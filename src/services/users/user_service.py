"""
Service des comptes utilisateurs.

Le compte administrateur est un singleton stocke dans son propre fichier ;
les autres comptes partagent un fichier liste. L'unicite des usernames
porte sur les deux fichiers : la creation les verrouille tous les deux,
toujours dans le meme ordre (admin puis users).
"""

import asyncio
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Optional

from loguru import logger

from src.core.entities import Role, User
from src.core.entities.base import validate_entity
from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.core.ports.security import IPasswordHasher
from src.core.ports.storage import IDocumentStore
from src.core.value_objects.payloads import UserCreate, UserPatch
from src.infrastructure.persistence.documents import AdminDocument, UsersDocument
from src.infrastructure.persistence.layout import StorageLayout
from src.utils.helpers import utc_now


class UserService:
    """
    Gestion des comptes et verification des identifiants.

    Le hachage argon2 est couteux : il s'execute dans l'executor, avant
    la prise des verrous.
    """

    def __init__(
        self,
        store: IDocumentStore,
        layout: StorageLayout,
        hasher: IPasswordHasher,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._admin_path = layout.admin()
        self._users_path = layout.users()
        self._hasher = hasher
        self.clock = clock

    async def _hash(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._hasher.hash, password)

    async def _load_admin(self) -> AdminDocument:
        return await self._store.load(self._admin_path, AdminDocument, AdminDocument())

    async def _load_users(self) -> UsersDocument:
        return await self._store.load(self._users_path, UsersDocument, UsersDocument())

    async def get_admin(self) -> Optional[User]:
        """Retourne le compte administrateur, ou None s'il n'existe pas encore."""
        async with self._store.lock(self._admin_path):
            document = await self._load_admin()
        return document.admin

    async def list_users(self) -> list[User]:
        """Retourne l'administrateur (s'il existe) puis les autres comptes."""
        admin = await self.get_admin()
        async with self._store.lock(self._users_path):
            document = await self._load_users()
        return ([admin] if admin else []) + document.users

    async def find_by_username(self, username: str) -> Optional[User]:
        """Recherche un compte par username (sensible a la casse)."""
        admin = await self.get_admin()
        if admin is not None and admin.username == username:
            return admin
        async with self._store.lock(self._users_path):
            document = await self._load_users()
        return next((user for user in document.users if user.username == username), None)

    async def create_user(self, payload: UserCreate) -> User:
        """
        Cree un compte.

        Raises:
            ConflictError: Username deja pris, ou administrateur deja present
            ValidationError: Compte resultant non conforme
        """
        password_hash = await self._hash(payload.password)
        now = self.clock()
        user = validate_entity(
            User,
            {
                "id": str(uuid.uuid4()),
                "username": payload.username,
                "password_hash": password_hash,
                "role": payload.role,
                "active": True,
                "created_at": now,
                "updated_at": now,
            },
            {},
            "Utilisateur",
        )

        async with self._store.lock(self._admin_path), self._store.lock(self._users_path):
            admin_document = await self._load_admin()
            users_document = await self._load_users()

            taken = [u.username for u in users_document.users]
            if admin_document.admin is not None:
                taken.append(admin_document.admin.username)
            if user.username in taken:
                raise ConflictError(f"Le nom d'utilisateur '{user.username}' existe deja")

            if user.is_admin:
                if admin_document.admin is not None:
                    raise ConflictError("Un compte administrateur existe deja")
                admin_document.admin = user
                await self._store.save(self._admin_path, admin_document)
            else:
                users_document.users.append(user)
                await self._store.save(self._users_path, users_document)

        logger.info(f"Utilisateur cree : {user.username} ({user.role.value})")
        return user

    async def update_user(self, username: str, patch: UserPatch) -> User:
        """
        Modifie le mot de passe, l'etat actif ou le role d'un compte.

        Le role ne peut pas faire passer un compte du fichier administrateur
        a la liste des utilisateurs (ni l'inverse).

        Raises:
            NotFoundError: Compte inexistant
            ValidationError: Changement de role non supporte
        """
        fields = patch.supplied(exclude={"password"})
        if patch.password is not None:
            fields["password_hash"] = await self._hash(patch.password)

        async with self._store.lock(self._admin_path), self._store.lock(self._users_path):
            admin_document = await self._load_admin()
            users_document = await self._load_users()

            if admin_document.admin is not None and admin_document.admin.username == username:
                current = admin_document.admin
            else:
                current = next(
                    (u for u in users_document.users if u.username == username), None
                )
            if current is None:
                raise NotFoundError(f"Utilisateur introuvable : {username}")

            if "role" in fields and fields["role"] != current.role:
                raise ValidationError(
                    f"Changement de role non supporte pour '{username}' "
                    f"({current.role.value} -> {Role(fields['role']).value})"
                )

            data = current.model_dump()
            data.update(fields)
            data["updated_at"] = self.clock()
            updated = validate_entity(User, data, {}, f"Utilisateur '{username}'")

            if updated.is_admin:
                admin_document.admin = updated
                await self._store.save(self._admin_path, admin_document)
            else:
                users_document.users = [
                    updated if u.username == username else u for u in users_document.users
                ]
                await self._store.save(self._users_path, users_document)

        logger.info(f"Utilisateur mis a jour : {username} ({', '.join(sorted(fields))})")
        return updated

    async def verify_credentials(self, username: str, password: str) -> Optional[User]:
        """
        Verifie des identifiants.

        Returns:
            Le compte si le mot de passe est correct et le compte actif,
            None sinon (username inconnu, compte desactive, mot de passe faux)
        """
        user = await self.find_by_username(username)
        if user is None or not user.active:
            return None
        loop = asyncio.get_running_loop()
        valid = await loop.run_in_executor(
            None, self._hasher.verify, password, user.password_hash
        )
        return user if valid else None
