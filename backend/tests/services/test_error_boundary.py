"""Error Boundary — integrity and unexpected failures on a bare app with the handlers registered."""

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError

from backoffice.api.error_handlers import register_error_handlers


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret connection string")

    @app.get("/integrity")
    async def integrity():
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    return app


async def _get(path: str):
    transport = ASGITransport(app=_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.get(path)


async def test_unexpected_error_is_generic_500():
    resp = await _get("/boom")
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/problem+json")
    body = resp.json()
    assert body["title"] == "An unexpected error occurred"
    assert "secret" not in resp.text


async def test_integrity_error_is_409_conflict():
    resp = await _get("/integrity")
    assert resp.status_code == 409
    assert resp.json()["title"] == "Conflict"
