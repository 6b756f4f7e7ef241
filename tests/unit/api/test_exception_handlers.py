"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.exception_handlers import setup_exception_handlers
from core.exceptions import (
    CryptoError,
    GroupNotFoundError,
    JoinCooldownError,
    StoreUnavailableError,
)


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise GroupNotFoundError("some-id")

        response = await _get(app, "/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "GROUP_NOT_FOUND"
        assert "some-id" in body["message"]
        assert body["details"]["group_id"] == "some-id"

    async def test_cooldown_exposes_retry_after(self) -> None:
        app = _create_test_app()

        @app.get("/raise-cooldown")
        async def _() -> None:
            raise JoinCooldownError("g-1", retry_after_seconds=3600)

        response = await _get(app, "/raise-cooldown")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "JOIN_COOLDOWN"
        assert body["details"]["retry_after_seconds"] == 3600

    async def test_crypto_error_hides_cause(self) -> None:
        app = _create_test_app()

        @app.get("/raise-crypto")
        async def _() -> None:
            try:
                bytes.fromhex("zz")
            except ValueError as exc:
                raise CryptoError() from exc

        response = await _get(app, "/raise-crypto")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "CRYPTO_ERROR"
        assert "fromhex" not in body["message"]
        assert body["details"] is None

    async def test_store_unavailable_returns_503(self) -> None:
        app = _create_test_app()

        @app.get("/raise-store")
        async def _() -> None:
            raise StoreUnavailableError()

        response = await _get(app, "/raise-store")

        assert response.status_code == 503
        assert response.json()["error_code"] == "STORE_UNAVAILABLE"

    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    async def test_validation_error_returns_field_details(self) -> None:
        from pydantic import BaseModel, Field

        app = _create_test_app()

        class Body(BaseModel):
            text: str = Field(..., min_length=1)

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"text": ""})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert isinstance(body["details"], list)
        assert body["details"][0]["field"] == "body.text"

    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()

        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        exc = RuntimeError("Something went wrong")
        response = await handler(mock_request, exc)  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
