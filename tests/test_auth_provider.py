import json

import httpx
import pytest

from fleet_api.core.errors import AuthError
from fleet_api.services.clients.auth_provider import AuthProviderClient, AuthProviderError

BASE_URL = "https://fleet-test.supabase.co"


def make_client(handler):
    return AuthProviderClient(
        base_url=BASE_URL,
        anon_key="anon-key",
        service_key="service-key",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_get_user_sends_the_access_token_with_anon_key():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["apikey"] = request.headers["apikey"]
        seen["authorization"] = request.headers["authorization"]
        return httpx.Response(200, json={"id": "user-1", "email": "fm@fleet.test"})

    user = await make_client(handler).get_user("access-123")

    assert user["id"] == "user-1"
    assert seen == {
        "url": f"{BASE_URL}/auth/v1/user",
        "apikey": "anon-key",
        "authorization": "Bearer access-123",
    }


@pytest.mark.asyncio
async def test_get_user_with_rejected_token_is_unauthorized():
    client = make_client(lambda request: httpx.Response(401, json={"msg": "invalid JWT"}))

    with pytest.raises(AuthError, match="Unauthorized"):
        await client.get_user("expired")


@pytest.mark.asyncio
async def test_sign_in_uses_password_grant():
    def handler(request):
        assert request.method == "POST"
        assert request.url.path == "/auth/v1/token"
        assert request.url.params["grant_type"] == "password"
        assert json.loads(request.content) == {"email": "d@fleet.test", "password": "secret1"}
        return httpx.Response(200, json={"access_token": "tok", "user": {"id": "user-2"}})

    session = await make_client(handler).sign_in_with_password("d@fleet.test", "secret1")

    assert session["access_token"] == "tok"


@pytest.mark.asyncio
async def test_sign_in_with_bad_credentials():
    client = make_client(lambda request: httpx.Response(
        400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"}
    ))

    with pytest.raises(AuthError, match="Invalid login credentials"):
        await client.sign_in_with_password("d@fleet.test", "wrong")


@pytest.mark.asyncio
async def test_admin_calls_use_the_service_role_key():
    requests = []

    def handler(request):
        requests.append(request)
        if request.method == "POST":
            return httpx.Response(200, json={"id": "user-3", "email": "new@fleet.test"})
        return httpx.Response(200)

    client = make_client(handler)
    user = await client.create_user("new@fleet.test", "secret1")
    await client.delete_user(user["id"])

    create, delete = requests
    assert create.url.path == "/auth/v1/admin/users"
    assert json.loads(create.content)["email_confirm"] is True
    assert delete.method == "DELETE"
    assert delete.url.path == "/auth/v1/admin/users/user-3"
    for request in requests:
        assert request.headers["apikey"] == "service-key"
        assert request.headers["authorization"] == "Bearer service-key"


@pytest.mark.asyncio
async def test_password_reset_passes_redirect_url():
    def handler(request):
        assert request.url.path == "/auth/v1/recover"
        assert request.url.params["redirect_to"] == "http://localhost:5173/reset-password"
        return httpx.Response(200, json={})

    await make_client(handler).send_password_reset("fm@fleet.test")


@pytest.mark.asyncio
async def test_provider_errors_keep_status_and_message():
    client = make_client(lambda request: httpx.Response(422, json={"msg": "User already registered"}))

    with pytest.raises(AuthProviderError) as exc_info:
        await client.create_user("fm@fleet.test", "secret1")

    assert exc_info.value.status_code == 422
    assert exc_info.value.message == "User already registered"


@pytest.mark.asyncio
async def test_unreachable_provider_is_a_bad_gateway():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AuthProviderError) as exc_info:
        await make_client(handler).get_user("token")

    assert exc_info.value.status_code == 502


def test_client_requires_keys():
    with pytest.raises(ValueError):
        AuthProviderClient(base_url=BASE_URL, anon_key="", service_key="")
