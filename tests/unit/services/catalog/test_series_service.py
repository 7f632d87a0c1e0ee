"""
Tests unitaires pour SeriesService.

Tests couvrant:
- Creation et fusion par slug (un fichier par serie)
- Patch avec saisons fusionnees
- Merge unitaire d'episode (scenario echoes-of-atlas persiste)
- Increments de vues (episode inconnu ignore)
- Listing trie par nom, suppression
"""

import asyncio

import pytest
import pytest_asyncio

from src.core.errors import NotFoundError, ValidationError
from src.core.value_objects import EpisodePayload, EpisodeUpsert, SeasonPayload, SeriesPatch
from src.infrastructure.persistence.atomic_writer import read_json
from src.services.catalog import SeriesService


@pytest.fixture
def service(store, layout, clock) -> SeriesService:
    return SeriesService(store, layout, clock=clock)


@pytest_asyncio.fixture
async def atlas(service: SeriesService, series_payload, episode_payload):
    return await service.create_or_merge(
        series_payload(seasons={1: [episode_payload(1, title="Pilot", published=True)]})
    )


class TestCreateOrMerge:
    @pytest.mark.asyncio
    async def test_creates_file_named_by_slug(self, service: SeriesService, series_payload, layout) -> None:
        series = await service.create_or_merge(series_payload())

        document = read_json(layout.series("echoes-of-atlas"))
        assert document["id"] == series.id
        assert document["posterUrl"] == "https://cdn.example.com/posters/atlas.jpg"

    @pytest.mark.asyncio
    async def test_second_import_merges(
        self, service: SeriesService, atlas, series_payload, episode_payload, clock
    ) -> None:
        clock.advance(60)

        merged = await service.create_or_merge(series_payload(seasons={1: [episode_payload(2)]}))

        assert merged.id == atlas.id
        assert merged.created_at == atlas.created_at
        assert [e.episode for e in merged.seasons[0].episodes] == [1, 2]
        assert merged.find_episode(1, 1).title == "Pilot"

    @pytest.mark.asyncio
    async def test_invalid_series_not_written(self, service: SeriesService, series_payload, layout) -> None:
        with pytest.raises(ValidationError):
            await service.create_or_merge(series_payload(poster_url="https://evil.test/p.jpg"))

        assert not layout.series("echoes-of-atlas").exists()


class TestMergeEpisode:
    @pytest.mark.asyncio
    async def test_echoes_of_atlas_scenario(self, service: SeriesService, atlas, clock) -> None:
        """Titre modifie, published intact, rien de cree, horodatages restampes."""
        clock.advance(60)

        await service.merge_episode("echoes-of-atlas", EpisodeUpsert(season=1, episode=1, title="Pilot Extended"))

        stored = await service.get("echoes-of-atlas")
        assert len(stored.seasons) == 1
        assert len(stored.seasons[0].episodes) == 1
        episode = stored.find_episode(1, 1)
        assert episode.title == "Pilot Extended"
        assert episode.published is True
        assert episode.last_updated == clock.now
        assert stored.updated_at == clock.now

    @pytest.mark.asyncio
    async def test_unknown_series_not_found(self, service: SeriesService) -> None:
        with pytest.raises(NotFoundError):
            await service.merge_episode("nope", EpisodeUpsert(season=1, episode=1, title="X"))

    @pytest.mark.asyncio
    async def test_concurrent_merges_on_same_series(self, service: SeriesService, atlas) -> None:
        payloads = [
            EpisodeUpsert(
                season=1, episode=n, title=f"E{n}", duration=30, stream_url=f"https://videos.local/{n}.m3u8"
            )
            for n in range(2, 6)
        ]

        await asyncio.gather(*(service.merge_episode("echoes-of-atlas", p) for p in payloads))

        stored = await service.get("echoes-of-atlas")
        assert [e.episode for e in stored.seasons[0].episodes] == [1, 2, 3, 4, 5]


class TestUpdate:
    @pytest.mark.asyncio
    async def test_patch_merges_seasons(self, service: SeriesService, atlas, episode_payload) -> None:
        patch = SeriesPatch(
            description="Space opera",
            seasons=[SeasonPayload(season=2, episodes=[episode_payload(1)])],
        )

        updated = await service.update("echoes-of-atlas", patch)

        assert updated.description == "Space opera"
        assert [s.season for s in updated.seasons] == [1, 2]
        assert updated.find_episode(1, 1).title == "Pilot"

    @pytest.mark.asyncio
    async def test_patch_partial_episode(self, service: SeriesService, atlas) -> None:
        patch = SeriesPatch(seasons=[SeasonPayload(season=1, episodes=[EpisodePayload(episode=1, duration=99)])])

        updated = await service.update("echoes-of-atlas", patch)

        episode = updated.find_episode(1, 1)
        assert episode.duration == 99
        assert episode.title == "Pilot"

    @pytest.mark.asyncio
    async def test_publish_and_feature(self, service: SeriesService, atlas) -> None:
        await service.set_published("echoes-of-atlas", True)
        series = await service.set_featured("echoes-of-atlas", True)

        assert series.published and series.featured

    @pytest.mark.parametrize("slug", ["missing", "../users/admin", "Echoes"])
    @pytest.mark.asyncio
    async def test_unknown_or_invalid_slug_not_found(self, service: SeriesService, slug: str) -> None:
        with pytest.raises(NotFoundError):
            await service.update(slug, SeriesPatch(description="x"))


class TestViews:
    @pytest.mark.asyncio
    async def test_increment_episode_views(self, service: SeriesService, atlas) -> None:
        await asyncio.gather(*(service.increment_view("echoes-of-atlas", 1, 1) for _ in range(3)))

        assert (await service.get("echoes-of-atlas")).find_episode(1, 1).views == 3

    @pytest.mark.asyncio
    async def test_increment_restamps_episode_last_updated(self, service: SeriesService, atlas, clock) -> None:
        viewed_at = clock.advance(300)

        episode = await service.increment_view("echoes-of-atlas", 1, 1)

        stored = await service.get("echoes-of-atlas")
        assert episode.last_updated == viewed_at
        assert stored.find_episode(1, 1).last_updated == viewed_at
        assert stored.updated_at == atlas.updated_at

    @pytest.mark.parametrize(
        "slug, season, episode",
        [("echoes-of-atlas", 1, 9), ("echoes-of-atlas", 4, 1), ("missing", 1, 1), ("../x", 1, 1)],
    )
    @pytest.mark.asyncio
    async def test_unknown_target_is_silent_noop(
        self, service: SeriesService, atlas, slug: str, season: int, episode: int
    ) -> None:
        assert await service.increment_view(slug, season, episode) is None


class TestListDelete:
    @pytest.mark.asyncio
    async def test_list_sorted_by_name(self, service: SeriesService, series_payload) -> None:
        for name in ("Zeta", "alpha", "Mu"):
            await service.create_or_merge(series_payload(name))

        assert [s.name for s in await service.list_all()] == ["alpha", "Mu", "Zeta"]

    @pytest.mark.asyncio
    async def test_list_published_only(self, service: SeriesService, series_payload) -> None:
        await service.create_or_merge(series_payload("Hidden"))
        await service.create_or_merge(series_payload("Shown", published=True))

        assert [s.name for s in await service.list_all(published_only=True)] == ["Shown"]

    @pytest.mark.asyncio
    async def test_delete(self, service: SeriesService, atlas, layout) -> None:
        await service.delete("echoes-of-atlas")

        assert not layout.series("echoes-of-atlas").exists()
        with pytest.raises(NotFoundError):
            await service.get("echoes-of-atlas")
        with pytest.raises(NotFoundError):
            await service.delete("echoes-of-atlas")
