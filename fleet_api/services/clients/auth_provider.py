import httpx
import logging
from typing import Any, Dict, Optional

from fleet_api.core.config import settings
from fleet_api.core.errors import AuthError, FleetError

logger = logging.getLogger(__name__)

class AuthProviderError(FleetError):
    """The hosted auth provider rejected a request or could not be reached."""
    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code

class AuthProviderClient:
    """
    A client for the hosted auth provider's REST API (GoTrue).

    User-facing calls (sign in, token verification, password recovery) go
    out with the restricted anon key; user management (create/delete) uses
    the elevated service-role key.
    """

    def __init__(
        self,
        base_url: str = None,
        anon_key: str = None,
        service_key: str = None,
        timeout: int = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the auth provider client.

        Args:
            base_url: Project URL of the hosted backend
            anon_key: Restricted API key
            service_key: Service-role API key
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.base_url = base_url if base_url is not None else settings.SUPABASE_URL
        self.anon_key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY
        self.service_key = service_key if service_key is not None else settings.SUPABASE_SERVICE_ROLE_KEY
        self.timeout = timeout or settings.AUTH_TIMEOUT
        self._transport = transport

        if not self.base_url:
            raise ValueError("Auth provider URL is required")
        if not self.anon_key or not self.service_key:
            raise ValueError("Auth provider anon and service-role keys are required")

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        *,
        admin: bool = False,
        access_token: Optional[str] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        """
        Make an HTTP request to the auth API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: Path below ``/auth/v1``
            admin: Authenticate with the service-role key instead of the anon key
            access_token: User access token to send as the bearer token
            **kwargs: Additional arguments to pass to the request

        Returns:
            JSON response from the API (empty dict for empty bodies)

        Raises:
            AuthProviderError: If the request fails
        """
        url = f"{self.base_url.rstrip('/')}/auth/v1/{endpoint.lstrip('/')}"
        key = self.service_key if admin else self.anon_key
        headers = {
            "apikey": key,
            "Authorization": f"Bearer {access_token or key}",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, headers=headers, **kwargs)
                response.raise_for_status()
                return response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.error(f"Auth provider error ({e.response.status_code}) on {endpoint}: {message}")
            raise AuthProviderError(message, status_code=e.response.status_code)
        except httpx.HTTPError as e:
            error_msg = f"Error making request to auth provider: {str(e)}"
            logger.error(error_msg)
            raise AuthProviderError(error_msg, status_code=502)

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        """
        Resolve an access token to the provider's user record.

        Raises:
            AuthError: If the token is missing, expired or unknown
        """
        try:
            return await self._make_request("GET", "user", access_token=access_token)
        except AuthProviderError as e:
            if e.status_code in (400, 401, 403, 404):
                raise AuthError("Unauthorized")
            raise

    async def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        """
        Password grant. Returns the session (``access_token``, ``user``...).

        Raises:
            AuthError: If the provider rejects the credentials
        """
        try:
            return await self._make_request(
                "POST",
                "token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        except AuthProviderError as e:
            if e.status_code < 500:
                raise AuthError(e.message)
            raise

    async def create_user(self, email: str, password: str) -> Dict[str, Any]:
        """Create an already confirmed user through the admin API."""
        return await self._make_request(
            "POST",
            "admin/users",
            admin=True,
            json={"email": email, "password": password, "email_confirm": True},
        )

    async def delete_user(self, user_id: str) -> None:
        await self._make_request("DELETE", f"admin/users/{user_id}", admin=True)

    async def send_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        params = {"redirect_to": redirect_to or settings.PASSWORD_RESET_REDIRECT_URL}
        await self._make_request("POST", "recover", params=params, json={"email": email})


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.text or f"HTTP {response.status_code}"
