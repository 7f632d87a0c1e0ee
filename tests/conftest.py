"""
Fixtures pytest partagees pour les tests StreamVault.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec un repertoire de donnees temporaire
- Store de documents et layout associes
- Horloge fixe pour des horodatages deterministes
- Hacheur de mots de passe rapide (argon2 est volontairement lent)
"""

from datetime import datetime, timedelta, timezone
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from src.config import Settings
from src.container import Container
from src.core.ports.security import IPasswordHasher
from src.core.value_objects import EpisodePayload, MovieCreate, SeasonPayload, SeriesPayload
from src.infrastructure.persistence.file_lock import FileLockManager
from src.infrastructure.persistence.json_store import JsonDocumentStore
from src.infrastructure.persistence.layout import StorageLayout


class FixedClock:
    """Horloge de test : retourne un instant fixe, avance a la demande."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 60) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


class PlainHasher(IPasswordHasher):
    """Hacheur trivial pour les tests (non securise)."""

    def hash(self, password: str) -> str:
        return f"plain${password}"

    def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"plain${password}"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Attentes de verrou courtes pour que les tests de contention restent rapides.
    """
    return Settings(
        data_dir=tmp_path / "data",
        log_file=tmp_path / "logs" / "test.log",
        lock_retries=20,
        lock_min_wait_ms=5,
        lock_max_wait_ms=20,
        rate_limit_max_requests=1000,
    )


@pytest.fixture
def layout(test_settings: Settings) -> StorageLayout:
    return test_settings.layout


@pytest.fixture
def store(test_settings: Settings) -> JsonDocumentStore:
    locks = FileLockManager(
        retries=test_settings.lock_retries,
        min_wait=test_settings.lock_min_wait,
        max_wait=test_settings.lock_max_wait,
    )
    return JsonDocumentStore(locks, test_settings.media_hosts)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def hasher() -> PlainHasher:
    return PlainHasher()


@pytest.fixture
def container(test_settings: Settings, hasher: PlainHasher) -> Iterator[Container]:
    """Container DI pointant sur le repertoire temporaire."""
    container = Container()
    container.config.override(test_settings)
    container.password_hasher.override(hasher)
    yield container
    container.reset_override()


def make_movie(**overrides: Any) -> MovieCreate:
    """Payload de film valide, surchargeable champ par champ."""
    data = {
        "title": "Blade Runner",
        "year": 1982,
        "duration": 117,
        "poster_url": "https://cdn.example.com/posters/blade-runner.jpg",
        "stream_url": "https://stream.local/movies/blade-runner.m3u8",
    }
    data.update(overrides)
    return MovieCreate(**data)


def make_episode(episode: int, **overrides: Any) -> EpisodePayload:
    data = {
        "episode": episode,
        "title": f"Episode {episode}",
        "duration": 42,
        "stream_url": f"https://videos.local/ep{episode}.m3u8",
    }
    data.update(overrides)
    return EpisodePayload(**data)


def make_series(name: str = "Echoes of Atlas", seasons: dict[int, list[EpisodePayload]] | None = None, **overrides: Any) -> SeriesPayload:
    """Payload de serie ; `seasons` associe un numero de saison a ses episodes."""
    data = {
        "name": name,
        "poster_url": "https://cdn.example.com/posters/atlas.jpg",
        "seasons": [
            SeasonPayload(season=number, episodes=episodes)
            for number, episodes in (seasons or {}).items()
        ],
    }
    data.update(overrides)
    return SeriesPayload(**data)


@pytest.fixture
def movie_payload() -> Callable[..., MovieCreate]:
    return make_movie


@pytest.fixture
def episode_payload() -> Callable[..., EpisodePayload]:
    return make_episode


@pytest.fixture
def series_payload() -> Callable[..., SeriesPayload]:
    return make_series
