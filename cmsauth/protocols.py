from typing import Protocol

from cmsauth.models.tokens import LoginResult


class KeyValueStore(Protocol):
    """String key-value persistence used for session tokens."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class IdentityClient(Protocol):
    async def login(self, email: str, password: str) -> LoginResult: ...

    async def refresh(self, refresh_token: str) -> LoginResult: ...
