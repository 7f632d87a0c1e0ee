"""
Tests unitaires pour JsonDocumentStore.

Tests couvrant:
- Creation du document par defaut
- Validation au chargement (JSON invalide, schema non respecte, hote interdit)
- Validation a la sauvegarde (fichier intact si echec)
- Suppression, listing, erreurs d'E/S
"""

import json
from pathlib import Path

import pytest

from src.core.errors import IOFailureError, NotFoundError, ValidationError
from src.infrastructure.persistence.atomic_writer import read_json, write_json_atomic
from src.infrastructure.persistence.documents import (
    AdminDocument,
    CategoriesDocument,
    MoviesDocument,
)
from src.infrastructure.persistence.json_store import JsonDocumentStore

MOVIE_ID = "3f2b8c1e-7d4a-4c59-9e0b-1a2b3c4d5e6f"


def raw_movie(**overrides) -> dict:
    """Film au format JSON stocke (cles camelCase)."""
    data = {
        "id": MOVIE_ID,
        "title": "Blade Runner",
        "slug": "blade-runner",
        "year": 1982,
        "duration": 117,
        "posterUrl": "https://cdn.example.com/blade-runner.jpg",
        "streamUrl": "https://stream.local/blade-runner.m3u8",
        "views": 3,
        "createdAt": "2025-01-01T12:00:00Z",
        "updatedAt": "2025-01-01T12:00:00Z",
    }
    data.update(overrides)
    return data


class TestLoad:
    """Tests de load et load_optional."""

    @pytest.mark.asyncio
    async def test_missing_file_is_created_with_default(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        path = tmp_path / "catalog" / "categories.json"

        document = await store.load(path, CategoriesDocument, CategoriesDocument())

        assert document.categories == []
        assert read_json(path) == {"categories": []}

    @pytest.mark.asyncio
    async def test_load_optional_returns_none_when_absent(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        path = tmp_path / "admin.json"

        assert await store.load_optional(path, AdminDocument) is None
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_loads_camel_case_document(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        path = tmp_path / "movies.json"
        write_json_atomic(path, {"movies": [raw_movie()]})

        document = await store.load(path, MoviesDocument, MoviesDocument())

        movie = document.movies[0]
        assert movie.poster_url == "https://cdn.example.com/blade-runner.jpg"
        assert movie.views == 3

    @pytest.mark.asyncio
    async def test_invalid_json_raises_validation_error(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        path = tmp_path / "movies.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValidationError):
            await store.load(path, MoviesDocument, MoviesDocument())

    @pytest.mark.parametrize(
        "overrides",
        [
            {"views": -1},
            {"duration": 0},
            {"id": "not-a-uuid"},
            {"slug": "Blade Runner"},
            {"streamUrl": "https://evil.test/stream.m3u8"},
            {"posterUrl": "ftp://cdn.example.com/poster.jpg"},
            {"rating": 5},
        ],
    )
    @pytest.mark.asyncio
    async def test_schema_violation_raises_validation_error(
        self, store: JsonDocumentStore, tmp_path: Path, overrides: dict
    ) -> None:
        """Un document non conforme n'est jamais corrige en silence."""
        path = tmp_path / "movies.json"
        write_json_atomic(path, {"movies": [raw_movie(**overrides)]})

        with pytest.raises(ValidationError) as exc_info:
            await store.load(path, MoviesDocument, MoviesDocument())

        assert exc_info.value.errors

    @pytest.mark.asyncio
    async def test_configured_hosts_replace_defaults(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        custom = JsonDocumentStore(store._locks, ["media.internal"])
        path = tmp_path / "movies.json"
        write_json_atomic(
            path,
            {
                "movies": [
                    raw_movie(
                        posterUrl="https://media.internal/p.jpg",
                        streamUrl="https://media.internal/s.m3u8",
                    )
                ]
            },
        )

        document = await custom.load(path, MoviesDocument, MoviesDocument())
        assert document.movies[0].stream_url == "https://media.internal/s.m3u8"

        with pytest.raises(ValidationError):
            await store.load(path, MoviesDocument, MoviesDocument())

    @pytest.mark.asyncio
    async def test_unreadable_path_raises_io_failure(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        """Une erreur autre que 'fichier absent' devient IOFailureError."""
        path = tmp_path / "movies.json"
        path.mkdir()

        with pytest.raises(IOFailureError):
            await store.load(path, MoviesDocument, MoviesDocument())


class TestSave:
    """Tests de save."""

    @pytest.mark.asyncio
    async def test_saves_camel_case_keys(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        path = tmp_path / "movies.json"
        write_json_atomic(path, {"movies": [raw_movie()]})
        document = await store.load(path, MoviesDocument, MoviesDocument())

        document.movies[0].views = 4
        await store.save(path, document)

        saved = read_json(path)["movies"][0]
        assert saved["views"] == 4
        assert "streamUrl" in saved
        assert "stream_url" not in saved

    @pytest.mark.asyncio
    async def test_invalid_document_aborts_without_touching_file(
        self, store: JsonDocumentStore, tmp_path: Path
    ) -> None:
        path = tmp_path / "movies.json"
        write_json_atomic(path, {"movies": [raw_movie()]})
        before = path.read_text(encoding="utf-8")
        document = await store.load(path, MoviesDocument, MoviesDocument())

        document.movies[0].views = -5
        with pytest.raises(ValidationError):
            await store.save(path, document)

        assert path.read_text(encoding="utf-8") == before

    @pytest.mark.asyncio
    async def test_empty_admin_singleton_round_trip(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        path = tmp_path / "admin.json"

        await store.save(path, AdminDocument())

        assert json.loads(path.read_text(encoding="utf-8")) == {}
        loaded = await store.load_optional(path, AdminDocument)
        assert loaded is not None and loaded.admin is None


class TestFiles:
    """Tests de delete, list_paths et append_line."""

    @pytest.mark.asyncio
    async def test_delete_removes_file(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        path = tmp_path / "series" / "atlas.json"
        write_json_atomic(path, {})

        await store.delete(path)

        assert not path.exists()

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError):
            await store.delete(tmp_path / "missing.json")

    @pytest.mark.asyncio
    async def test_list_paths_sorted_and_json_only(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        series_dir = tmp_path / "series"
        for name in ("b.json", "a.json", "a.json.lock", ".c.json.123.tmp"):
            (series_dir / name).parent.mkdir(parents=True, exist_ok=True)
            (series_dir / name).write_text("{}", encoding="utf-8")

        paths = await store.list_paths(series_dir)

        assert [p.name for p in paths] == ["a.json", "b.json"]

    @pytest.mark.asyncio
    async def test_list_paths_missing_directory(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        assert await store.list_paths(tmp_path / "nope") == []

    @pytest.mark.asyncio
    async def test_append_line(self, store: JsonDocumentStore, tmp_path: Path) -> None:
        log = tmp_path / "audit.log"

        await store.append_line(log, "one")
        await store.append_line(log, "two")

        assert log.read_text(encoding="utf-8") == "one\ntwo\n"
