"""
Application FastAPI de StreamVault.

Initialise l'application web avec le Container DI, traduit les erreurs
du domaine en reponses HTTP et monte les routes.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from ..container import Container
from ..core.errors import (
    CatalogError,
    ConflictError,
    IOFailureError,
    LockTimeoutError,
    NotFoundError,
    ValidationError,
)
from .routes.catalog import router as catalog_router
from .routes.health import router as health_router
from .routes.history import router as history_router
from .routes.users import router as users_router


def _status_for(error: CatalogError) -> int:
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, LockTimeoutError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Erreurs client avec leur message ; erreurs serveur sans detail interne."""
    code = _status_for(exc)
    if code >= 500:
        logger.error(f"{request.method} {request.url.path} : {exc}")
        message = (
            "Service temporairement indisponible"
            if isinstance(exc, LockTimeoutError)
            else "Erreur interne du stockage"
        )
        return JSONResponse(status_code=code, content={"detail": message})

    content = {"detail": str(exc)}
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=code, content=content)


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Construit l'application.

    Args:
        container: Container a utiliser (tests) ; par defaut un Container
            est cree au demarrage
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Installe le Container DI au démarrage."""
        app.state.container = container or Container()
        settings = app.state.container.config()
        logger.info(f"StreamVault demarre (donnees : {settings.data_dir})")
        yield

    app = FastAPI(title="StreamVault", lifespan=lifespan)
    app.add_exception_handler(CatalogError, catalog_error_handler)

    app.include_router(health_router)
    app.include_router(catalog_router)
    app.include_router(users_router)
    app.include_router(history_router)
    return app


app = create_app()
