"""
Auth service client for the harness.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from shared.errors import AuthenticationError, MissingFieldError
from shared.logging import get_logger

from ..domain.models import Credential, Identity, LoginResponse


class AuthClient:
    """Acquires bearer credentials from the auth service login endpoint."""

    def __init__(self, auth_service_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self.auth_service_url = auth_service_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self.logger = get_logger("ratecheck.auth_client")

    @property
    def login_url(self) -> str:
        return f"{self.auth_service_url}/auth/login"

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def acquire(self, identity: Identity) -> Credential:
        """Log in once and return the credential.

        Raises:
            AuthenticationError: the call failed or did not return 200.
            MissingFieldError: the 200 body has no usable ``token``.
        """
        try:
            async with self._http() as client:
                response = await client.post(
                    self.login_url,
                    json={"username": identity.username, "password": identity.password},
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            self.logger.error("Login request failed", username=identity.username, error=str(e))
            raise AuthenticationError(
                "Auth service unavailable",
                details={"username": identity.username, "http_error": str(e)}
            ) from e

        if response.status_code != 200:
            self.logger.error(
                "Login rejected",
                username=identity.username,
                status_code=response.status_code,
            )
            raise AuthenticationError(
                f"login failed: status={response.status_code}",
                details={
                    "username": identity.username,
                    "status_code": response.status_code,
                    "body": response.text[:512],
                }
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MissingFieldError(
                "token",
                "login response is not JSON",
                details={"username": identity.username, "body": response.text[:512]},
            ) from e

        try:
            decoded = LoginResponse.decode(payload)
        except PydanticValidationError as e:
            self.logger.error("Login response missing token", username=identity.username)
            raise MissingFieldError(
                "token",
                details={"username": identity.username, "errors": e.errors(include_url=False)},
            ) from e

        self.logger.info("Login succeeded", username=identity.username, identity=identity.name)
        return Credential(username=identity.username, token=decoded.token, label=identity.label)
