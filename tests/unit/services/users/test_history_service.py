"""
Tests unitaires pour HistoryService.
"""

import pytest

from src.core.entities import StreamType
from src.core.errors import NotFoundError, ValidationError
from src.core.value_objects import HistoryEntryCreate
from src.services.users import HistoryService


@pytest.fixture
def service(store, layout, clock) -> HistoryService:
    return HistoryService(store, layout, clock=clock)


def entry(content_id: str, progress: float = 0.5, **extra) -> HistoryEntryCreate:
    return HistoryEntryCreate(content_id=content_id, type=StreamType.MOVIE, progress=progress, **extra)


class TestHistory:
    @pytest.mark.asyncio
    async def test_empty_history_created(self, service: HistoryService, layout) -> None:
        assert await service.get("alice") == []
        assert layout.history("alice").exists()

    @pytest.mark.asyncio
    async def test_new_entry_first(self, service: HistoryService) -> None:
        await service.append("alice", entry("m1"))

        history = await service.append("alice", entry("m2"))

        assert [e.content_id for e in history] == ["m2", "m1"]

    @pytest.mark.asyncio
    async def test_existing_content_replaced_and_moved_first(self, service: HistoryService, clock) -> None:
        """Une seule entree par contenu, la plus recente en tete."""
        await service.append("alice", entry("m1", progress=0.1))
        await service.append("alice", entry("m2"))
        clock.advance(120)

        history = await service.append("alice", entry("m1", progress=0.9))

        assert [e.content_id for e in history] == ["m1", "m2"]
        assert history[0].progress == 0.9
        assert history[0].last_watched == clock.now
        assert await service.get("alice") == history

    @pytest.mark.asyncio
    async def test_series_entry_keeps_episode(self, service: HistoryService) -> None:
        payload = HistoryEntryCreate(
            content_id="echoes-of-atlas", type=StreamType.SERIES, progress=0.3, season=1, episode=2
        )

        history = await service.append("alice", payload)

        assert (history[0].season, history[0].episode) == (1, 2)

    @pytest.mark.asyncio
    async def test_histories_are_per_user(self, service: HistoryService) -> None:
        await service.append("alice", entry("m1"))

        assert await service.get("bob") == []

    @pytest.mark.parametrize("progress", [-0.1, 1.5])
    @pytest.mark.asyncio
    async def test_progress_out_of_range(self, service: HistoryService, progress: float) -> None:
        with pytest.raises(ValidationError):
            await service.append("alice", entry("m1", progress=progress))

    @pytest.mark.asyncio
    async def test_invalid_username_path(self, service: HistoryService) -> None:
        with pytest.raises(NotFoundError):
            await service.get("../admin")
