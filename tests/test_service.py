import logging

from httpx import AsyncClient

from socialconnect.core import logging as app_logging


async def test_root_and_health(client: AsyncClient) -> None:
    root = await client.get("/")
    assert root.status_code == 200
    assert root.json()["api"] == "/api"

    health = await client.get("/health")
    assert health.json() == {"status": "ok"}


async def test_ready_pings_database(client: AsyncClient) -> None:
    resp = await client.get("/ready")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "connected"}


async def test_unknown_route_is_404(client: AsyncClient) -> None:
    assert (await client.get("/api/nope")).status_code == 404


def test_configure_logging_installs_one_handler(monkeypatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(app_logging, "_configured", False)
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    monkeypatch.setattr(root, "level", root.level)
    before = len(root.handlers)

    app_logging.configure_logging("debug")
    app_logging.configure_logging("debug")

    assert len(root.handlers) == before + 1
    assert root.level == logging.DEBUG


def test_mask_database_url() -> None:
    masked = app_logging.mask_database_url("postgresql+asyncpg://user:secret@db:5432/app?ssl=1")
    assert masked == "...@db:5432/app"
    assert "secret" not in masked
