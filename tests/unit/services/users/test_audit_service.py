"""
Tests unitaires pour AuditService.
"""

import json

import pytest

from src.services.users import AuditAction, AuditService


@pytest.fixture
def service(store, layout, clock) -> AuditService:
    return AuditService(store, layout, clock=clock)


class TestAudit:
    @pytest.mark.asyncio
    async def test_line_format(self, service: AuditService, layout, clock) -> None:
        line = await service.record("root", AuditAction.CREATE, "movie:42", {"slug": "alien"})

        timestamp, actor, action, target, details = line.split(" | ")
        assert timestamp == clock.now.isoformat()
        assert (actor, action, target) == ("root", "CREATE", "movie:42")
        assert json.loads(details) == {"slug": "alien"}
        assert layout.audit_log().read_text(encoding="utf-8") == f"{line}\n"

    @pytest.mark.asyncio
    async def test_lines_are_appended(self, service: AuditService, layout) -> None:
        await service.record("root", AuditAction.LOGIN, "user:root")
        await service.record("root", AuditAction.LOGOUT, "user:root")

        lines = layout.audit_log().read_text(encoding="utf-8").splitlines()
        assert [line.split(" | ")[2] for line in lines] == ["LOGIN", "LOGOUT"]

    def test_separators_and_newlines_neutralized(self, service: AuditService) -> None:
        line = service.format_line("evil | actor\nINJECTED", AuditAction.LOGIN_FAILED, "auth")

        assert "\n" not in line
        assert len(line.split(" | ")) == 5
