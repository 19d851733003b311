from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from src.services.errors import ProviderError

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    def get_delegated_token(self, user_identity: str, provider: str) -> Optional[str]:  # pragma: no cover - interface
        ...


@dataclass
class ClerkTokenStore:
    """Reads OAuth access tokens a user granted through Clerk."""

    secret_key: str
    api_url: str = "https://api.clerk.com/v1"
    timeout: float = 10.0

    def get_delegated_token(self, user_identity: str, provider: str) -> Optional[str]:
        if not self.secret_key:
            raise ProviderError("Credential store configured without a secret key")

        url = f"{self.api_url.rstrip('/')}/users/{user_identity}/oauth_access_tokens/{provider}"
        headers = {"Authorization": f"Bearer {self.secret_key}"}
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ProviderError(f"Failed to reach credential store: {exc}") from exc

        if response.status_code == 404:
            logger.info("No %s connection for user %s", provider, user_identity)
            return None
        if response.status_code != 200:
            raise ProviderError(
                f"Credential store rejected token request (status {response.status_code}): {response.text}"
            )

        tokens = response.json()
        if isinstance(tokens, dict):
            tokens = tokens.get("data") or []
        for entry in tokens:
            token = entry.get("token") if isinstance(entry, dict) else None
            if token:
                return token
        return None
