"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web :
store de documents, hachage des mots de passe, limiteur de debit et services.
"""

from dependency_injector import containers, providers

from .adapters.security import PasswordHasher
from .config import Settings
from .infrastructure.persistence.file_lock import FileLockManager
from .infrastructure.persistence.json_store import JsonDocumentStore
from .services.catalog import CategoryService, MovieService, SeriesService
from .services.users import AuditService, HistoryService, UserService
from .web.rate_limit import RateLimiter


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Le store et le limiteur de debit sont des singletons : un seul etat
    partage par processus, explicitement possede par le container.

    Utilisation :
        container = Container()
        container.config.override(Settings(data_dir=tmp_path))  # tests
        movies = container.movie_service()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    layout = providers.Singleton(lambda settings: settings.layout, config)

    # Stockage
    lock_manager = providers.Singleton(
        FileLockManager,
        retries=config.provided.lock_retries,
        min_wait=config.provided.lock_min_wait,
        max_wait=config.provided.lock_max_wait,
    )
    document_store = providers.Singleton(
        JsonDocumentStore,
        lock_manager=lock_manager,
        allowed_hosts=config.provided.media_hosts,
    )

    # Adapters
    password_hasher = providers.Singleton(PasswordHasher)
    rate_limiter = providers.Singleton(
        RateLimiter,
        max_requests=config.provided.rate_limit_max_requests,
        window_seconds=config.provided.rate_limit_window_seconds,
    )

    # Services du catalogue (sans etat propre - Factory)
    category_service = providers.Factory(
        CategoryService,
        store=document_store,
        layout=layout,
    )
    movie_service = providers.Factory(
        MovieService,
        store=document_store,
        layout=layout,
        allowed_hosts=config.provided.media_hosts,
    )
    series_service = providers.Factory(
        SeriesService,
        store=document_store,
        layout=layout,
        allowed_hosts=config.provided.media_hosts,
    )

    # Services utilisateurs
    user_service = providers.Factory(
        UserService,
        store=document_store,
        layout=layout,
        hasher=password_hasher,
    )
    history_service = providers.Factory(
        HistoryService,
        store=document_store,
        layout=layout,
    )
    audit_service = providers.Factory(
        AuditService,
        store=document_store,
        layout=layout,
    )
