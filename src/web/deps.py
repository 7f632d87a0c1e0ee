"""
Dépendances partagées de l'application web.

Fournit l'accès au Container DI, l'authentification HTTP Basic contre le
store des utilisateurs, le contrôle du rôle administrateur (soumis au
limiteur de débit) et l'écriture du journal d'audit.
"""

from typing import Any, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from loguru import logger

from ..container import Container
from ..core.entities import User
from ..services.users import AuditAction

_basic = HTTPBasic(realm="StreamVault")


def get_container(request: Request) -> Container:
    return request.app.state.container


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Identifiants invalides",
        headers={"WWW-Authenticate": 'Basic realm="StreamVault"'},
    )


async def audit(
    request: Request,
    actor: str,
    action: AuditAction,
    target: str,
    details: Optional[dict[str, Any]] = None,
) -> None:
    """Trace une action dans le journal d'audit."""
    details = {"ip": _client_ip(request), **(details or {})}
    await get_container(request).audit_service().record(actor, action, target, details)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def current_user(
    request: Request,
    credentials: HTTPBasicCredentials = Depends(_basic),
) -> User:
    """Authentifie la requete ; 401 si identifiants inconnus, faux ou compte inactif."""
    user = await get_container(request).user_service().verify_credentials(
        credentials.username, credentials.password
    )
    if user is None:
        logger.warning(f"Authentification refusee pour '{credentials.username}'")
        await audit(request, credentials.username, AuditAction.LOGIN_FAILED, "auth")
        raise _unauthorized()
    return user


async def require_admin(request: Request, user: User = Depends(current_user)) -> User:
    """Exige le role administrateur ; chaque appel passe par le limiteur de debit."""
    limiter = get_container(request).rate_limiter()
    key = f"{_client_ip(request)}:{user.username}"
    if not limiter.hit(key):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Trop de requetes, reessayez plus tard",
            headers={"Retry-After": str(limiter.retry_after(key))},
        )
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acces reserve a l'administrateur")
    return user


def public_user(user: User) -> dict:
    """Representation d'un compte sans son hash de mot de passe."""
    document = user.to_document()
    document.pop("passwordHash", None)
    return document
