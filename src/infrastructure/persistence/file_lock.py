"""
Verrou de fichier inter-processus avec retry et backoff.

Le verrou est un flock(2) exclusif consultatif pose sur un fichier annexe
`<document>.lock`. Chaque acquisition ouvre son propre descripteur : deux
coroutines du meme processus s'excluent donc comme deux processus distincts.

L'appel flock est non bloquant (LOCK_NB) ; en cas de contention, la
tentative est relancee par tenacity avec un delai croissant (asyncio.sleep),
ce qui laisse la boucle d'evenements traiter les autres requetes.

Usage:
    locks = FileLockManager(retries=5, min_wait=0.05, max_wait=0.2)
    async with locks.lock(movies_file):
        ...  # section critique
"""

import fcntl
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.errors import IOFailureError, LockTimeoutError

LOCK_SUFFIX = ".lock"


def lock_path_for(path: Path) -> Path:
    """Chemin du fichier de verrou associe a un document."""
    path = Path(os.path.abspath(path))
    return path.with_name(path.name + LOCK_SUFFIX)


def _try_lock(lock_path: Path) -> int:
    """
    Tente de poser le verrou exclusif sans attendre.

    Returns:
        Le descripteur de fichier portant le verrou

    Raises:
        BlockingIOError: Si le verrou est detenu par un autre descripteur
    """
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(lock_path, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except BaseException:
        os.close(fd)
        raise
    return fd


def _release(fd: int) -> None:
    """Libere le verrou et ferme le descripteur."""
    try:
        fcntl.flock(fd, fcntl.LOCK_UN)
    finally:
        os.close(fd)


class FileLockManager:
    """
    Fabrique de verrous par chemin de fichier.

    Les verrous sont indexes par chemin, pas par entite : deux entites
    d'un meme fichier sont serialisees ensemble, deux fichiers differents
    se verrouillent independamment.

    Attributes:
        retries: Nombre de relances apres la premiere tentative
        min_wait: Premier delai d'attente (secondes)
        max_wait: Delai d'attente maximal (secondes)
    """

    def __init__(self, retries: int = 5, min_wait: float = 0.05, max_wait: float = 0.2) -> None:
        self.retries = retries
        self.min_wait = min_wait
        self.max_wait = max_wait

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    async def _acquire(self, path: Path) -> int:
        lock_path = lock_path_for(path)
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(BlockingIOError),
            wait=wait_exponential(multiplier=self.min_wait, min=self.min_wait, max=self.max_wait),
            stop=stop_after_attempt(self.max_attempts),
            before_sleep=lambda state: logger.debug(
                f"Verrou occupe sur {path}, tentative {state.attempt_number}"
            ),
            reraise=True,
        )
        fd = -1
        try:
            async for attempt in retrying:
                with attempt:
                    fd = _try_lock(lock_path)
        except BlockingIOError:
            logger.warning(f"Verrou non obtenu sur {path} ({self.max_attempts} tentatives)")
            raise LockTimeoutError(path, self.max_attempts) from None
        except OSError as e:
            raise IOFailureError(lock_path, str(e)) from e
        return fd

    @asynccontextmanager
    async def lock(self, path: Path) -> AsyncIterator[None]:
        """
        Acquisition scopee : le verrou est libere exactement une fois,
        en sortie normale comme en cas d'exception.

        Raises:
            LockTimeoutError: Budget de tentatives epuise
            IOFailureError: Fichier de verrou inaccessible
        """
        fd = await self._acquire(path)
        try:
            yield
        finally:
            _release(fd)
