import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """
    cmsauth settings loaded from environment variables.
    Independent of application settings.
    """

    # Directus identity/CMS backend
    DIRECTUS_URL: str = os.getenv("DIRECTUS_URL", "https://cms.businessfalkenberg.se").rstrip("/")
    DIRECTUS_TIMEOUT_SECONDS: float = float(os.getenv("DIRECTUS_TIMEOUT_SECONDS", "10"))

    # Refresh the access token if it expires within this buffer
    TOKEN_EXPIRY_BUFFER_SECONDS: int = int(os.getenv("TOKEN_EXPIRY_BUFFER_SECONDS", "60"))

    # Cookie mode
    USE_COOKIE_AUTH: bool = os.getenv("USE_COOKIE_AUTH", "true").lower() == "true"
    COOKIE_ACCESS_NAME: str = os.getenv("COOKIE_ACCESS_NAME", "session_access_token")
    COOKIE_REFRESH_NAME: str = os.getenv("COOKIE_REFRESH_NAME", "session_refresh_token")
    ACCESS_COOKIE_MAX_AGE: int = int(os.getenv("ACCESS_COOKIE_MAX_AGE", "3600"))
    REFRESH_COOKIE_MAX_AGE: int = int(os.getenv("REFRESH_COOKIE_MAX_AGE", str(30 * 24 * 60 * 60)))
    COOKIE_DOMAIN: str | None = os.getenv("COOKIE_DOMAIN")
    COOKIE_SECURE: bool = (
        os.getenv("COOKIE_SECURE", "false").lower() == "true"
        or os.getenv("APP_URL", "").startswith("https://")
    )
    COOKIE_HTTPONLY: bool = True
    COOKIE_SAMESITE: str = os.getenv("COOKIE_SAMESITE", "lax")

    # Route guard
    LOGIN_PATH: str = os.getenv("LOGIN_PATH", "/login")
    HOME_PATH: str = os.getenv("HOME_PATH", "/")


settings = Settings()
