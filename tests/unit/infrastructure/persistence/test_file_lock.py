"""
Tests unitaires pour le verrou de fichier inter-processus.

Tests couvrant:
- Serialisation des sections critiques sur un meme chemin
- Independance des verrous de chemins differents
- Epuisement du budget de tentatives (LockTimeoutError)
- Liberation du verrou sur toutes les sorties
"""

import asyncio
import fcntl
import os
from pathlib import Path

import pytest

from src.core.errors import LockTimeoutError
from src.infrastructure.persistence.file_lock import FileLockManager, lock_path_for


@pytest.fixture
def locks() -> FileLockManager:
    """Gestionnaire patient : 20 relances de 5 a 20 ms."""
    return FileLockManager(retries=20, min_wait=0.005, max_wait=0.02)


class TestLockPath:
    def test_sidecar_lock_file(self, tmp_path: Path) -> None:
        assert lock_path_for(tmp_path / "movies.json") == tmp_path / "movies.json.lock"

    def test_relative_paths_resolve_to_same_key(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert lock_path_for(Path("movies.json")) == lock_path_for(tmp_path / "movies.json")


class TestSerialization:
    """Les sections critiques d'un meme chemin ne se chevauchent jamais."""

    @pytest.mark.asyncio
    async def test_same_path_sections_never_overlap(self, tmp_path: Path, locks: FileLockManager) -> None:
        target = tmp_path / "movies.json"
        events: list[tuple[str, int]] = []

        async def critical(index: int) -> None:
            async with locks.lock(target):
                events.append(("enter", index))
                await asyncio.sleep(0.01)
                events.append(("exit", index))

        await asyncio.gather(*(critical(i) for i in range(3)))

        assert len(events) == 6
        for position in range(0, 6, 2):
            enter, exit_ = events[position], events[position + 1]
            assert enter[0] == "enter"
            assert exit_ == ("exit", enter[1])

    @pytest.mark.asyncio
    async def test_different_paths_may_overlap(self, tmp_path: Path, locks: FileLockManager) -> None:
        """Deux fichiers differents se verrouillent independamment."""
        inside_a = asyncio.Event()
        inside_b = asyncio.Event()

        async def hold(path: Path, mine: asyncio.Event, other: asyncio.Event) -> None:
            async with locks.lock(path):
                mine.set()
                await asyncio.wait_for(other.wait(), timeout=2)

        await asyncio.gather(
            hold(tmp_path / "a.json", inside_a, inside_b),
            hold(tmp_path / "b.json", inside_b, inside_a),
        )

        assert inside_a.is_set() and inside_b.is_set()

    @pytest.mark.asyncio
    async def test_concurrent_read_modify_write_loses_no_update(
        self, tmp_path: Path, locks: FileLockManager
    ) -> None:
        counter = tmp_path / "counter.txt"
        counter.write_text("0")

        async def increment() -> None:
            async with locks.lock(counter):
                value = int(counter.read_text())
                await asyncio.sleep(0)
                counter.write_text(str(value + 1))

        await asyncio.gather(*(increment() for _ in range(10)))

        assert counter.read_text() == "10"


class TestTimeout:
    """Epuisement du budget de tentatives."""

    @pytest.mark.asyncio
    async def test_raises_lock_timeout_when_held(self, tmp_path: Path) -> None:
        target = tmp_path / "movies.json"
        holder = FileLockManager(retries=0)
        impatient = FileLockManager(retries=2, min_wait=0.001, max_wait=0.002)

        async with holder.lock(target):
            with pytest.raises(LockTimeoutError) as exc_info:
                async with impatient.lock(target):
                    pass

        assert exc_info.value.attempts == 3
        assert exc_info.value.path == target

    @pytest.mark.asyncio
    async def test_lock_held_by_another_descriptor(self, tmp_path: Path) -> None:
        """Un flock pose hors du gestionnaire (autre processus) est respecte."""
        target = tmp_path / "users.json"
        lock_file = lock_path_for(target)
        fd = os.open(lock_file, os.O_RDWR | os.O_CREAT, 0o644)
        fcntl.flock(fd, fcntl.LOCK_EX)
        try:
            with pytest.raises(LockTimeoutError):
                async with FileLockManager(retries=1, min_wait=0.001, max_wait=0.001).lock(target):
                    pass
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

        async with FileLockManager(retries=0).lock(target):
            pass

    @pytest.mark.asyncio
    async def test_waiter_acquires_after_release(self, tmp_path: Path, locks: FileLockManager) -> None:
        target = tmp_path / "movies.json"
        acquired = asyncio.Event()

        async def holder() -> None:
            async with locks.lock(target):
                acquired.set()
                await asyncio.sleep(0.03)

        async def waiter() -> str:
            await acquired.wait()
            async with locks.lock(target):
                return "ok"

        _, result = await asyncio.gather(holder(), waiter())
        assert result == "ok"


class TestRelease:
    """Liberation du verrou sur toutes les sorties."""

    @pytest.mark.asyncio
    async def test_released_after_exception(self, tmp_path: Path) -> None:
        target = tmp_path / "movies.json"
        locks = FileLockManager(retries=0)

        with pytest.raises(RuntimeError):
            async with locks.lock(target):
                raise RuntimeError("boom")

        async with locks.lock(target):
            pass

    @pytest.mark.asyncio
    async def test_released_after_cancellation(self, tmp_path: Path) -> None:
        target = tmp_path / "movies.json"
        locks = FileLockManager(retries=0)
        entered = asyncio.Event()

        async def hold_forever() -> None:
            async with locks.lock(target):
                entered.set()
                await asyncio.sleep(3600)

        task = asyncio.create_task(hold_forever())
        await entered.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        async with locks.lock(target):
            pass
