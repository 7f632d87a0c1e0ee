"""
Tests unitaires pour la configuration du logging (loguru).

Tests couvrant:
- Emplacement du journal (sous data_dir par defaut, ou log_file)
- Enregistrements JSON portant le repertoire de donnees
- Prefixe des messages de la couche de stockage
"""

import json
from pathlib import Path

import pytest
from loguru import logger

from src.config import Settings
from src.core.errors import LockTimeoutError
from src.infrastructure.persistence.file_lock import FileLockManager
from src.logging_config import configure_logging, is_storage_record


@pytest.fixture
def reset_logger():
    """Retire les handlers ajoutes par le test."""
    yield
    logger.remove()
    logger.configure(extra={}, patcher=None)


def read_records(path: Path) -> list[dict]:
    return [json.loads(line)["record"] for line in path.read_text(encoding="utf-8").splitlines()]


class TestLogPath:
    def test_defaults_under_data_dir(self, tmp_path: Path) -> None:
        settings = Settings(_env_file=None, data_dir=tmp_path)

        assert settings.log_path == tmp_path / "logs" / "streamvault.log"

    def test_explicit_log_file(self, tmp_path: Path) -> None:
        settings = Settings(_env_file=None, data_dir=tmp_path / "data", log_file=tmp_path / "app.log")

        assert settings.log_path == tmp_path / "app.log"


class TestConfigureLogging:
    def test_json_records_carry_data_dir(self, tmp_path: Path, reset_logger) -> None:
        settings = Settings(_env_file=None, data_dir=tmp_path / "data")

        log_file = configure_logging(settings)
        logger.info("Film cree : alien")
        logger.complete()

        assert log_file == tmp_path / "data" / "logs" / "streamvault.log"
        record = read_records(log_file)[-1]
        assert record["message"] == "Film cree : alien"
        assert record["extra"]["data_dir"] == str(tmp_path / "data")
        assert record["extra"]["scope"] == ""

    @pytest.mark.asyncio
    async def test_storage_records_are_tagged(self, tmp_path: Path, reset_logger) -> None:
        """Un verrou non obtenu est journalise par la couche de stockage."""
        log_file = configure_logging(Settings(_env_file=None, data_dir=tmp_path))
        locks = FileLockManager(retries=0)
        target = tmp_path / "movies.json"

        async with locks.lock(target):
            with pytest.raises(LockTimeoutError):
                async with locks.lock(target):
                    pass
        await logger.complete()

        assert read_records(log_file)[-1]["extra"]["scope"] == "[stockage] "


class TestStorageRecord:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("src.infrastructure.persistence.json_store", True),
            ("src.services.catalog.movie_service", False),
            (None, False),
        ],
    )
    def test_is_storage_record(self, name, expected: bool) -> None:
        assert is_storage_record({"name": name}) is expected
