import os

from dotenv import load_dotenv

load_dotenv()


class Settings:

    POSTGRES_DB: str = os.getenv("POSTGRES_DB")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD")
    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_PORT: int = int(os.getenv("POSTGRES_PORT", "5432"))

    # Overrides the POSTGRES_* settings when set
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")

    # Only these email domains may log in with local credentials
    ALLOWED_DOMAINS: list[str] = [
        d.strip().lower()
        for d in os.getenv("ALLOWED_DOMAINS", "falkenberg.se,ecoera.se").split(",")
        if d.strip()
    ]

    COMPANIES_DEFAULT_LIMIT: int = int(os.getenv("COMPANIES_DEFAULT_LIMIT", "20"))
    PEOPLE_DEFAULT_LIMIT: int = int(os.getenv("PEOPLE_DEFAULT_LIMIT", "60"))

    # Cookie settings
    USE_COOKIE_AUTH: bool = os.getenv("USE_COOKIE_AUTH", "true").lower() == "true"


settings = Settings()
