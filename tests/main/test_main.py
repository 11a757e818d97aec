from pathlib import Path

from httpx import AsyncClient
from pytest import mark

from app.services.storage import LocalStorage


@mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test health check endpoint."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "1.0.0"
    assert data["storage"] == "local"
    assert data["timestamp"]


@mark.asyncio
async def test_security_headers(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


@mark.asyncio
async def test_request_id_echoed(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@mark.asyncio
async def test_openapi_lists_blog_routes(client: AsyncClient) -> None:
    response = await client.get("/openapi.json")

    paths = response.json()["paths"]
    assert set(paths["/blogs/"]) == {"get", "post"}
    assert set(paths["/blogs/{blog_id}"]) == {"put", "delete"}
    assert "/blogs/category/id/{category_id}" in paths
    assert "/blogs/category/{slug}" in paths


@mark.asyncio
async def test_local_uploads_are_served(client: AsyncClient, tmp_path: Path) -> None:
    staged = tmp_path / "staged.jpg"
    staged.write_bytes(b"\xff\xd8\xff\xe0 fake jpeg")

    url = await LocalStorage().upload(staged, "main_image")
    response = await client.get(url.removeprefix("http://test"))

    assert response.status_code == 200
    assert response.content == staged.read_bytes()


@mark.asyncio
async def test_unknown_route(client: AsyncClient) -> None:
    response = await client.get("/nope/nothing/here")
    assert response.status_code == 404
