import logging

from cmsauth.models.tokens import TokenData, TokenPair
from cmsauth.protocols import KeyValueStore

logger = logging.getLogger("cmsauth.storage")


class MemoryStore:
    """Dict-backed KeyValueStore."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class TokenStore:
    """
    Reads and writes the session token pair as three string entries.
    A pair with any entry missing or unparsable is treated as absent.
    """

    def __init__(self, kv: KeyValueStore, prefix: str = "session_"):
        self.kv = kv
        self.access_key = f"{prefix}access_token"
        self.refresh_key = f"{prefix}refresh_token"
        self.expiry_key = f"{prefix}expiry_timestamp"

    def load(self) -> TokenPair | None:
        access_token = self.kv.get(self.access_key)
        refresh_token = self.kv.get(self.refresh_key)
        expiry = self.kv.get(self.expiry_key)

        if not (access_token and refresh_token and expiry):
            return None

        try:
            expiry_timestamp = int(expiry)
        except ValueError:
            logger.warning("Stored expiry timestamp is not an integer")
            return None

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expiry_timestamp=expiry_timestamp,
        )

    def has_any(self) -> bool:
        return any(
            self.kv.get(key) is not None
            for key in (self.access_key, self.refresh_key, self.expiry_key)
        )

    def save(self, data: TokenData, now_ms: int) -> TokenPair:
        pair = TokenPair.from_token_data(data, now_ms)
        self.save_pair(pair)
        return pair

    def save_pair(self, pair: TokenPair) -> None:
        self.kv.set(self.access_key, pair.access_token)
        self.kv.set(self.refresh_key, pair.refresh_token)
        self.kv.set(self.expiry_key, str(pair.expiry_timestamp))
        logger.info("Session tokens stored, access token expires at %s", pair.expiry_timestamp)

    def clear(self) -> None:
        self.kv.remove(self.access_key)
        self.kv.remove(self.refresh_key)
        self.kv.remove(self.expiry_key)
