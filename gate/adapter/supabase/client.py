"""Supabase identity provider client.

Talks to the GoTrue admin REST API with the project's service-role key.
Identities are created pre-confirmed, so operators never receive a
verification email.
"""

import asyncio
import secrets
from typing import Any

import httpx
import logfire

from gate.adapter.error import IdentityAlreadyExistsError, IdentityProviderError
from gate.domain.model.identity import ExternalIdentity, Session
from gate.domain.service.identity_provider import IdentityProviderClient
from gate.domain.value import ExternalIdentityId

# GoTrue error codes meaning "an account with this email already exists"
DUPLICATE_ERROR_CODES = frozenset({"email_exists", "user_already_exists", "phone_exists"})

# Compatibility shim for GoTrue versions that return no error_code
LEGACY_DUPLICATE_MARKERS = ("already", "exists", "registered")


def error_message(body: Any) -> str:
    """Extract the human-readable message from a GoTrue error body."""
    if not isinstance(body, dict):
        return ""
    for key in ("msg", "message", "error_description", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def is_duplicate_error(body: Any) -> bool:
    """Classify a failed create call as "identity already exists".

    A structured ``error_code`` decides on its own. Only when the provider
    sends none is the message searched for the legacy markers.

    Args:
        body: Decoded JSON error body

    Returns:
        True if the failure means the identity already exists
    """
    if isinstance(body, dict):
        error_code = body.get("error_code")
        if error_code:
            return error_code in DUPLICATE_ERROR_CODES

    message = error_message(body).lower()
    return any(marker in message for marker in LEGACY_DUPLICATE_MARKERS)


def _to_identity(user: dict) -> ExternalIdentity:
    return ExternalIdentity(id=ExternalIdentityId(str(user["id"])), email=user.get("email"))


class RealSupabaseIdentityClient(IdentityProviderClient):
    """GoTrue admin API client."""

    def __init__(
        self,
        url: str,
        service_key: str,
        timeout: float = 30.0,
        page_size: int = 1000,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Supabase identity client.

        Args:
            url: Supabase project URL
            service_key: Service-role key
            timeout: Seconds per request
            page_size: Users fetched per page when listing
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.base_url = f"{url.rstrip('/')}/auth/v1"
        self.service_key = service_key
        self.timeout = timeout
        self.page_size = page_size
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "apikey": self.service_key,
                "Authorization": f"Bearer {self.service_key}",
            },
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(
        self, method: str, path: str, **kwargs: Any
    ) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logfire.error(
                "Identity provider HTTP error", method=method, path=path, error=str(e)
            )
            raise IdentityProviderError(f"HTTP error calling identity provider: {e}")

    @staticmethod
    def _body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    def _failure(self, action: str, response: httpx.Response) -> IdentityProviderError:
        body = self._body(response)
        message = error_message(body) or response.reason_phrase
        logfire.error(
            "Identity provider request failed",
            action=action,
            status_code=response.status_code,
            error_code=body.get("error_code") if isinstance(body, dict) else None,
            error=message,
        )
        return IdentityProviderError(
            f"{action} failed: {message}", status_code=response.status_code
        )

    async def create_identity(self, email: str, password: str) -> ExternalIdentity:
        """Create a pre-confirmed identity.

        Raises:
            IdentityAlreadyExistsError: If the email is already taken
            IdentityProviderError: On any other failure
        """
        response = await self._request(
            "POST",
            "/admin/users",
            json={"email": email, "password": password, "email_confirm": True},
        )

        if response.status_code in (200, 201):
            identity = _to_identity(response.json())
            logfire.info("Identity created", identity_id=identity.id)
            return identity

        body = self._body(response)
        if is_duplicate_error(body):
            logfire.info(
                "Identity already exists",
                status_code=response.status_code,
                error_code=body.get("error_code") if isinstance(body, dict) else None,
            )
            raise IdentityAlreadyExistsError(
                error_message(body) or "Identity already exists",
                status_code=response.status_code,
            )

        raise self._failure("Create identity", response)

    async def get_identity(
        self, identity_id: ExternalIdentityId
    ) -> ExternalIdentity | None:
        response = await self._request("GET", f"/admin/users/{identity_id}")

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise self._failure("Get identity", response)

        return _to_identity(response.json())

    async def list_identities(self) -> list[ExternalIdentity]:
        """List all identities, following pages until a short one."""
        identities: list[ExternalIdentity] = []
        page = 1

        while True:
            response = await self._request(
                "GET",
                "/admin/users",
                params={"page": page, "per_page": self.page_size},
            )
            if response.status_code != 200:
                raise self._failure("List identities", response)

            users = response.json().get("users", [])
            identities.extend(_to_identity(user) for user in users)

            if len(users) < self.page_size:
                break
            page += 1

        return identities

    async def update_password(
        self, identity_id: ExternalIdentityId, password: str
    ) -> ExternalIdentity:
        response = await self._request(
            "PUT", f"/admin/users/{identity_id}", json={"password": password}
        )

        if response.status_code != 200:
            raise self._failure("Update password", response)

        logfire.info("Identity password updated", identity_id=identity_id)
        return _to_identity(response.json())

    async def sign_in(self, email: str, password: str) -> Session:
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

        if response.status_code != 200:
            raise self._failure("Sign in", response)

        result = response.json()
        return Session(
            access_token=result["access_token"],
            refresh_token=result["refresh_token"],
            expires_in=result["expires_in"],
            token_type=result.get("token_type", "bearer"),
            user=result.get("user") or {},
        )


class MockIdentityClient(IdentityProviderClient):
    """In-memory identity provider for testing.

    Keeps identities and their passwords so sign-in behaves like the real
    provider. Failures can be switched on per operation.
    """

    def __init__(self) -> None:
        self.identities: dict[ExternalIdentityId, ExternalIdentity] = {}
        self.passwords: dict[ExternalIdentityId, str] = {}
        self.calls: list[str] = []

        self.fail_create = False
        self.fail_update = False
        self.fail_list = False
        self.fail_sign_in = False
        # Report duplicates on create without ever finding them when listing
        self.hide_from_listing: set[ExternalIdentityId] = set()
        # Seconds each write waits, to interleave concurrent requests
        self.latency = 0.0

    def add_identity(self, email: str, password: str) -> ExternalIdentity:
        """Seed an identity directly, bypassing create_identity."""
        identity = ExternalIdentity(
            id=ExternalIdentityId(f"mock-{secrets.token_hex(8)}"), email=email
        )
        self.identities[identity.id] = identity
        self.passwords[identity.id] = password
        return identity

    def remove_identity(self, identity_id: ExternalIdentityId) -> None:
        self.identities.pop(identity_id, None)
        self.passwords.pop(identity_id, None)

    def find_by_email(self, email: str) -> ExternalIdentity | None:
        for identity in self.identities.values():
            if identity.matches_email(email):
                return identity
        return None

    async def create_identity(self, email: str, password: str) -> ExternalIdentity:
        self.calls.append("create_identity")
        await asyncio.sleep(self.latency)
        if self.fail_create:
            raise IdentityProviderError("Create identity failed: mock failure", 500)
        if self.find_by_email(email):
            raise IdentityAlreadyExistsError(
                "A user with this email address has already been registered", 422
            )
        return self.add_identity(email, password)

    async def get_identity(
        self, identity_id: ExternalIdentityId
    ) -> ExternalIdentity | None:
        self.calls.append("get_identity")
        return self.identities.get(identity_id)

    async def list_identities(self) -> list[ExternalIdentity]:
        self.calls.append("list_identities")
        if self.fail_list:
            raise IdentityProviderError("List identities failed: mock failure", 500)
        return [
            identity
            for identity in self.identities.values()
            if identity.id not in self.hide_from_listing
        ]

    async def update_password(
        self, identity_id: ExternalIdentityId, password: str
    ) -> ExternalIdentity:
        self.calls.append("update_password")
        await asyncio.sleep(self.latency)
        if self.fail_update:
            raise IdentityProviderError("Update password failed: mock failure", 500)
        identity = self.identities.get(identity_id)
        if identity is None:
            raise IdentityProviderError("Update password failed: User not found", 404)
        self.passwords[identity_id] = password
        return identity

    async def sign_in(self, email: str, password: str) -> Session:
        self.calls.append("sign_in")
        if self.fail_sign_in:
            raise IdentityProviderError("Sign in failed: mock failure", 500)
        identity = self.find_by_email(email)
        if identity is None or self.passwords.get(identity.id) != password:
            raise IdentityProviderError("Sign in failed: Invalid login credentials", 400)
        return Session(
            access_token=f"mock-access-{secrets.token_hex(8)}",
            refresh_token=f"mock-refresh-{secrets.token_hex(8)}",
            expires_in=3600,
            user={"id": identity.id, "email": identity.email},
        )
