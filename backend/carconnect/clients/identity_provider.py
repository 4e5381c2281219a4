from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import settings

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    pass


RetryableError = (requests.ConnectionError, requests.Timeout)


def _retryable():
    return retry(
        retry=retry_if_exception_type(RetryableError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )


@dataclass(frozen=True)
class ProviderIdentity:
    provider_id: Optional[str]
    email: str
    full_name: str
    avatar_url: Optional[str] = None


def identity_from_payload(data: Dict[str, Any]) -> ProviderIdentity:
    """Normalize the provider's user payload (Clerk-style field names or flat ones)."""
    email = data.get("email") or ""
    addresses = data.get("email_addresses") or []
    if not email and addresses:
        primary_id = data.get("primary_email_address_id")
        primary = next((a for a in addresses if a.get("id") == primary_id), addresses[0])
        email = primary.get("email_address") or ""
    full_name = data.get("full_name") or " ".join(
        part for part in (data.get("first_name"), data.get("last_name")) if part
    )
    return ProviderIdentity(
        provider_id=data.get("id") or data.get("user_id"),
        email=email.strip().lower(),
        full_name=(full_name or email.split("@")[0]).strip(),
        avatar_url=data.get("image_url") or data.get("avatar_url"),
    )


class IdentityProviderClient:
    """Exchanges a provider session token for the signed-in user's identity."""

    def __init__(self, base_url: str, secret: Optional[str], timeout: int = 10) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        if secret:
            self.session.headers["Authorization"] = f"Bearer {secret}"

    @_retryable()
    def _get(self, path: str) -> Dict[str, Any]:
        res = self.session.get(f"{self.base_url}{path}", timeout=self.timeout)
        if res.status_code in (401, 403, 404):
            raise IdentityProviderError(f"session rejected status={res.status_code}")
        res.raise_for_status()
        return res.json()

    def fetch_identity(self, session_token: str) -> ProviderIdentity:
        session = self._get(f"/sessions/{session_token}")
        if session.get("status") not in (None, "active"):
            raise IdentityProviderError(f"session not active status={session.get('status')}")
        user_id = session.get("user_id")
        if not user_id:
            return ProviderIdentity(provider_id=None, email="", full_name="")
        user = self._get(f"/users/{user_id}")
        identity = identity_from_payload(user)
        logger.info("identity_fetched provider_id=%s", identity.provider_id)
        return identity


def get_identity_provider() -> IdentityProviderClient:
    return IdentityProviderClient(
        settings.IDENTITY_PROVIDER_URL,
        settings.IDENTITY_PROVIDER_SECRET,
        timeout=settings.IDENTITY_PROVIDER_TIMEOUT_SECONDS,
    )


__all__ = [
    "IdentityProviderClient",
    "IdentityProviderError",
    "ProviderIdentity",
    "get_identity_provider",
    "identity_from_payload",
]
