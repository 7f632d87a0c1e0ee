"""
Limiteur de debit a fenetre fixe.

L'etat (compteurs par cle) est possede par l'instance, elle-meme fournie
par le container : une instance par processus. Un deploiement multi-instances
devra lui substituer un store partage.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class _Window:
    started_at: float
    count: int


class RateLimiter:
    """
    Autorise au plus `max_requests` requetes par cle et par fenetre.

    La fenetre d'une cle est remise a zero a son expiration.

    Example:
        limiter = RateLimiter(max_requests=10, window_seconds=60)
        if not limiter.hit(f"{client_ip}:{username}"):
            ...  # 429
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str) -> bool:
        """Compte une requete ; retourne False si la limite est depassee."""
        now = self._clock()
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            self._windows[key] = _Window(started_at=now, count=1)
            self._purge(now)
            return True
        window.count += 1
        return window.count <= self.max_requests

    def retry_after(self, key: str) -> int:
        """Secondes restantes avant la fin de la fenetre d'une cle."""
        window = self._windows.get(key)
        if window is None:
            return 0
        remaining = self.window_seconds - (self._clock() - window.started_at)
        return max(0, int(remaining + 0.999))

    def reset(self) -> None:
        self._windows.clear()

    def _purge(self, now: float) -> None:
        expired = [
            key for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
