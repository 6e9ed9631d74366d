"""
Fleet Management API — HTTP Endpoint Tests
==========================================

What:  Request → response behavior of every router, through the real app.
How:   `test_client` overrides the session (in-memory SQLite with taxis 7
       and 8), the auth service (fast argon2) and the email service (mock).
"""

import pytest
import pytest_asyncio
from sqlalchemy import select

from fleet_api.models import User


async def sign_up(client, email="ana@example.com", role="USER", password="s3cret"):
    response = await client.post(
        "/api/auth/sign-up",
        json={"name": "Ana", "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def auth_headers(client, email="user@example.com"):
    body = await sign_up(client, email=email, role="USER")
    return {"Authorization": f"Bearer {body['accessToken']}"}


@pytest_asyncio.fixture
async def admin_headers(fleet_data, auth_service):
    """Bearer header of an administrator provisioned directly through AuthService."""
    created = await auth_service.create_user(
        fleet_data, "Admin", "admin@example.com", "s3cret", "ADMIN"
    )
    await fleet_data.commit()
    return {"Authorization": f"Bearer {created.access_token}"}


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_database_and_mail(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["database"] == "connected"
        assert body["mail"] == "not_configured"
        assert body["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"


class TestAuthRoutes:

    @pytest.mark.asyncio
    async def test_sign_up_returns_token_and_user(self, test_client):
        body = await sign_up(test_client)

        assert body["accessToken"]
        assert body["user"]["email"] == "ana@example.com"
        assert isinstance(body["user"]["id"], int)

    @pytest.mark.asyncio
    async def test_log_in(self, test_client):
        created = await sign_up(test_client)

        response = await test_client.post(
            "/api/auth/log-in", json={"email": "ana@example.com", "password": "s3cret"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == created["user"]["id"]

    @pytest.mark.asyncio
    async def test_log_in_wrong_password(self, test_client):
        await sign_up(test_client)

        response = await test_client.post(
            "/api/auth/log-in", json={"email": "ana@example.com", "password": "nope"}
        )

        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "invalid_credentials"
        assert body["message"] == "Incorrect Password"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_log_in_unknown_email(self, test_client):
        response = await test_client.post(
            "/api/auth/log-in", json={"email": "ghost@example.com", "password": "pw"}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_sign_up_unknown_role(self, test_client):
        response = await test_client.post(
            "/api/auth/sign-up",
            json={"name": "Ana", "email": "ana@example.com", "password": "pw", "role": "PILOT"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "The roles specified does not exist."

    @pytest.mark.asyncio
    async def test_sign_up_duplicate_email(self, test_client):
        await sign_up(test_client)

        response = await test_client.post(
            "/api/auth/sign-up",
            json={"name": "Ana", "email": "ana@example.com", "password": "pw", "role": "USER"},
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_me(self, test_client, admin_headers):
        response = await test_client.get("/api/auth/me", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["authorities"] == ["ROLE_ADMIN"]
        assert response.json()["email"] == "admin@example.com"


class TestAdminSignUp:

    @staticmethod
    async def post_admin(client, headers=None, role="ADMIN"):
        return await client.post(
            "/api/auth/sign-up",
            json={"name": "Eve", "email": "eve@example.com", "password": "pw", "role": role},
            headers=headers,
        )

    @staticmethod
    async def stored_user(db, email):
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["ADMIN", "admin", " Admin "])
    async def test_anonymous_caller_cannot_create_admin(self, test_client, fleet_data, role):
        response = await self.post_admin(test_client, role=role)

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"
        assert await self.stored_user(fleet_data, "eve@example.com") is None

    @pytest.mark.asyncio
    async def test_anonymous_admin_cannot_reach_admin_routes(self, test_client, mock_email_service):
        response = await self.post_admin(test_client)
        assert "accessToken" not in response.json()

        response = await test_client.post(
            "/api/emails/plain-text", json={"email": "ops@example.com"}
        )
        assert response.status_code == 401
        mock_email_service.send_plain_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_caller_cannot_create_admin(self, test_client, fleet_data):
        headers = await auth_headers(test_client)

        response = await self.post_admin(test_client, headers=headers)

        assert response.status_code == 403
        assert await self.stored_user(fleet_data, "eve@example.com") is None

    @pytest.mark.asyncio
    async def test_invalid_token_is_rejected_not_ignored(self, test_client):
        response = await self.post_admin(
            test_client, headers={"Authorization": "Bearer not-a-token"}, role="USER"
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_admin_caller_creates_admin(self, test_client, admin_headers):
        response = await self.post_admin(test_client, headers=admin_headers)

        assert response.status_code == 201
        new_headers = {"Authorization": f"Bearer {response.json()['accessToken']}"}
        me = await test_client.get("/api/auth/me", headers=new_headers)
        assert me.json()["authorities"] == ["ROLE_ADMIN"]

    @pytest.mark.asyncio
    async def test_anonymous_caller_still_creates_user(self, test_client):
        response = await self.post_admin(test_client, role="USER")
        assert response.status_code == 201


class TestTrajectoryRoutes:

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client):
        response = await test_client.get(
            "/api/trajectories", params={"taxiId": 7, "date": "01-03-2024"}
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_rejects_garbage_token(self, test_client):
        response = await test_client.get(
            "/api/trajectories",
            params={"taxiId": 7, "date": "01-03-2024"},
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_paginated_query(self, test_client):
        headers = await auth_headers(test_client)

        response = await test_client.get(
            "/api/trajectories",
            params={"taxiId": 7, "date": "01-03-2024", "page": 1, "limit": 1},
            headers=headers,
        )

        assert response.status_code == 200
        [record] = response.json()
        assert record["id"] == 2
        assert record["taxi_id"] == 7

    @pytest.mark.asyncio
    async def test_malformed_date(self, test_client):
        headers = await auth_headers(test_client)

        response = await test_client.get(
            "/api/trajectories", params={"taxiId": 7, "date": "2024-13-40"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_format"

    @pytest.mark.asyncio
    async def test_missing_taxi_id(self, test_client):
        headers = await auth_headers(test_client)

        response = await test_client.get(
            "/api/trajectories", params={"date": "01-03-2024"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Missing taxiId value."

    @pytest.mark.asyncio
    async def test_unknown_taxi(self, test_client):
        headers = await auth_headers(test_client)

        response = await test_client.get(
            "/api/trajectories", params={"taxiId": 404, "date": "01-03-2024"}, headers=headers
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Taxi ID 404 not found."

    @pytest.mark.asyncio
    async def test_latest(self, test_client):
        headers = await auth_headers(test_client)

        response = await test_client.get("/api/trajectories/latest", headers=headers)

        assert response.status_code == 200
        assert [r["plate"] for r in response.json()] == ["ABC-7007", "XYZ-8008"]

    @pytest.mark.asyncio
    async def test_export_emails_the_spreadsheet(self, test_client, mock_email_service):
        headers = await auth_headers(test_client)

        response = await test_client.get(
            "/api/trajectories/export",
            params={"taxiId": 7, "date": "01-03-2024", "email": "ops@example.com"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["records"] == 2
        mock_email_service.send_with_excel_attachment.assert_awaited_once()
        args = mock_email_service.send_with_excel_attachment.await_args.args
        assert args[:3] == ("ops@example.com", 7, "01-03-2024")
        assert args[3][:2] == b"PK"

    @pytest.mark.asyncio
    async def test_export_of_unknown_taxi_sends_nothing(self, test_client, mock_email_service):
        headers = await auth_headers(test_client)

        response = await test_client.get(
            "/api/trajectories/export",
            params={"taxiId": 404, "date": "01-03-2024", "email": "ops@example.com"},
            headers=headers,
        )

        assert response.status_code == 404
        mock_email_service.send_with_excel_attachment.assert_not_awaited()


class TestTaxiRoutes:

    @pytest.mark.asyncio
    async def test_search_by_plate(self, test_client):
        headers = await auth_headers(test_client)

        response = await test_client.get("/api/taxis", params={"plate": "abc"}, headers=headers)

        assert response.status_code == 200
        assert response.json() == [{"id": 7, "plate": "ABC-7007"}]


class TestEmailRoutes:

    @pytest.mark.asyncio
    async def test_user_role_is_forbidden(self, test_client, mock_email_service):
        headers = await auth_headers(test_client)

        response = await test_client.post(
            "/api/emails/plain-text", json={"email": "ops@example.com"}, headers=headers
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"
        mock_email_service.send_plain_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_admin_sends_plain_text(self, test_client, mock_email_service, admin_headers):
        response = await test_client.post(
            "/api/emails/plain-text", json={"email": "ops@example.com"}, headers=admin_headers
        )

        assert response.status_code == 200
        mock_email_service.send_plain_text.assert_awaited_once_with("ops@example.com")

    @pytest.mark.asyncio
    async def test_admin_sends_attachment(self, test_client, mock_email_service, admin_headers):
        response = await test_client.post(
            "/api/emails/attachment", json={"email": "ops@example.com"}, headers=admin_headers
        )

        assert response.status_code == 200
        mock_email_service.send_with_static_attachment.assert_awaited_once_with("ops@example.com")

    @pytest.mark.asyncio
    async def test_transport_failure_is_502(self, test_client, mock_email_service, admin_headers):
        from fleet_api.exceptions import MailTransportError

        mock_email_service.send_plain_text.side_effect = MailTransportError("The email could not be sent.")

        response = await test_client.post(
            "/api/emails/plain-text", json={"email": "ops@example.com"}, headers=admin_headers
        )

        assert response.status_code == 502
        assert response.json()["error"] == "mail_transport_error"
