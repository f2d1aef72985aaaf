from collections.abc import Mapping
from typing import Protocol


class Authenticator(Protocol):
    async def authenticate(self, credentials: str | None) -> str | None:
        """Return the caller's user id, or None when the caller is anonymous."""
        ...


class StaticAuthenticator:
    """Treats every caller as one fixed user; for the CLI and local tooling."""

    def __init__(self, user_id: str | None = "local"):
        self.user_id = user_id

    async def authenticate(self, credentials: str | None) -> str | None:
        return self.user_id


class TokenAuthenticator:
    def __init__(self, tokens: Mapping[str, str]):
        self.tokens = dict(tokens)

    async def authenticate(self, credentials: str | None) -> str | None:
        if not credentials:
            return None
        return self.tokens.get(credentials)
