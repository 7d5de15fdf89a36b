"""
HTTP tests for articles, user lookup and the end-to-end flow.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from tests.conftest import auth_headers, login, register

ARTICLE = {
    "title": "How to Build a REST API",
    "body": "This article explains how to build a REST API...",
    "category": "Technology",
}


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_register_login_post_list(self, client):
        reg = await register(client, "a@b.com", "Secret1!")
        assert reg.status_code == 201
        assert reg.json()["message"] == "User registered successfully"
        user_id = reg.json()["user"]["id"]
        assert reg.json()["user"] == {"id": user_id, "email": "a@b.com"}

        log = await login(client, "a@b.com", "Secret1!")
        assert log.status_code == 200
        token = log.json()["token"]
        assert isinstance(token, str) and token

        created = await client.post(
            "/articles",
            json={**ARTICLE, "submitted_by": user_id},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert created.status_code == 201
        assert created.json()["message"] == "Article created successfully"
        article_id = created.json()["articleId"]
        assert isinstance(article_id, int)

        listing = await client.get("/articles")
        assert listing.status_code == 200
        [article] = [a for a in listing.json() if a["id"] == article_id]
        assert article["email"] == "a@b.com"
        assert article["submitted_by"] == user_id
        assert article["title"] == ARTICLE["title"]
        assert article["category"] == ARTICLE["category"]


class TestArticles:
    @pytest.mark.asyncio
    async def test_empty_listing(self, client):
        resp = await client.get("/articles")
        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_create_requires_token(self, client):
        resp = await client.post("/articles", json=ARTICLE)
        assert resp.status_code == 401
        assert resp.json() == {"error": "Access token required"}

    @pytest.mark.asyncio
    async def test_create_rejects_bad_token(self, client):
        resp = await client.post(
            "/articles", json=ARTICLE, headers={"Authorization": "Bearer garbage"}
        )
        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid or expired token"}

    @pytest.mark.asyncio
    async def test_create_rejects_expired_token(self, client, app):
        reg = await register(client)
        token = app.state.token_issuer.issue(reg.json()["user"]["id"], now=0)
        resp = await client.post(
            "/articles", json=ARTICLE, headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_submitter_derived_from_token(self, client):
        headers = await auth_headers(client)
        resp = await client.post("/articles", json=ARTICLE, headers=headers)
        assert resp.status_code == 201

        [article] = (await client.get("/articles")).json()
        assert article["email"] == "a@b.com"

    @pytest.mark.asyncio
    async def test_cannot_submit_as_someone_else(self, client):
        other = await register(client, email="other@b.com")
        headers = await auth_headers(client)
        resp = await client.post(
            "/articles",
            json={**ARTICLE, "submitted_by": other.json()["user"]["id"]},
            headers=headers,
        )
        assert resp.status_code == 403
        assert (await client.get("/articles")).json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "body", "category"])
    async def test_missing_article_field(self, client, missing):
        headers = await auth_headers(client)
        payload = {k: v for k, v in ARTICLE.items() if k != missing}
        resp = await client.post("/articles", json=payload, headers=headers)
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Validation failed"
        assert any(d.startswith(missing) for d in body["details"])

    @pytest.mark.asyncio
    async def test_blank_article_fields_rejected(self, client):
        headers = await auth_headers(client)
        resp = await client.post(
            "/articles",
            json={"title": "   ", "body": "  ", "category": " "},
            headers=headers,
        )
        assert resp.status_code == 400
        details = resp.json()["details"]
        for field in ("title", "body", "category"):
            assert any(d.startswith(f"{field}:") for d in details)
        assert (await client.get("/articles")).json() == []

    @pytest.mark.asyncio
    async def test_surrounding_whitespace_trimmed(self, client):
        headers = await auth_headers(client)
        await client.post(
            "/articles", json={**ARTICLE, "title": "  Padded  "}, headers=headers
        )
        [article] = (await client.get("/articles")).json()
        assert article["title"] == "Padded"

    @pytest.mark.asyncio
    async def test_create_store_failure(self, client):
        headers = await auth_headers(client)
        with patch(
            "api.routes.create_article",
            new_callable=AsyncMock,
            side_effect=OperationalError("INSERT", {}, Exception("db down")),
        ):
            resp = await client.post("/articles", json=ARTICLE, headers=headers)
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to create article"}

    @pytest.mark.asyncio
    async def test_listing_joins_each_author(self, client):
        first = await auth_headers(client, email="first@b.com")
        second = await auth_headers(client, email="second@b.com")
        await client.post("/articles", json={**ARTICLE, "title": "one"}, headers=first)
        await client.post("/articles", json={**ARTICLE, "title": "two"}, headers=second)

        articles = (await client.get("/articles")).json()
        assert [(a["title"], a["email"]) for a in articles] == [
            ("one", "first@b.com"),
            ("two", "second@b.com"),
        ]

    @pytest.mark.asyncio
    async def test_store_failure_is_500_without_detail(self, client):
        with patch(
            "api.routes.list_articles_with_authors",
            new_callable=AsyncMock,
            side_effect=OperationalError("SELECT", {}, Exception("db down")),
        ):
            resp = await client.get("/articles")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to fetch articles"}


class TestUsers:
    @pytest.mark.asyncio
    async def test_get_user(self, client):
        headers = await auth_headers(client)
        user_id = (await login(client)).json()["user"]["id"]
        resp = await client.get(f"/users/{user_id}", headers=headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == user_id
        assert body["email"] == "a@b.com"
        assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_non_numeric_id(self, client):
        headers = await auth_headers(client)
        resp = await client.get("/users/abc", headers=headers)
        assert resp.status_code == 400
        assert resp.json() == {"error": "User Id is invalid"}

    @pytest.mark.asyncio
    async def test_unknown_user(self, client):
        headers = await auth_headers(client)
        resp = await client.get("/users/9999", headers=headers)
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found"}

    @pytest.mark.asyncio
    async def test_requires_token(self, client):
        resp = await client.get("/users/1")
        assert resp.status_code == 401


class TestServer:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.json() == {"status": "ok"}
        assert "X-Request-ID" in resp.headers
        assert "X-Process-Time" in resp.headers

    @pytest.mark.asyncio
    async def test_swagger_docs_served(self, client):
        resp = await client.get("/api-docs")
        assert resp.status_code == 200
        openapi = (await client.get("/openapi.json")).json()
        assert openapi["info"]["title"] == "User Authentication API"
        assert "/auth/register" in openapi["paths"]
        assert "/articles" in openapi["paths"]

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_shape(self, client):
        resp = await client.get("/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}

    @pytest.mark.asyncio
    async def test_cors_preflight(self, client):
        resp = await client.options(
            "/articles",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert resp.status_code == 200
        assert "access-control-allow-origin" in resp.headers
