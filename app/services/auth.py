import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.users import User
from app.settings import settings

logger = logging.getLogger(__name__)


def is_allowed_domain(email: str) -> bool:
    """True if the part after the last "@" is an allow-listed domain."""
    if "@" not in email:
        return False
    domain = email.rsplit("@", 1)[1].strip().lower()
    return domain in settings.ALLOWED_DOMAINS


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Case-insensitive exact email lookup."""
    result = await session.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def authenticate_user(
    session: AsyncSession,
    email: str,
    password: str,
) -> User | None:
    """Validate local credentials and return user, or None."""
    if not is_allowed_domain(email):
        logger.info("Login rejected, domain not allowed: %s", email)
        return None

    user = await get_user_by_email(session, email)

    if not user:
        logger.info("No user found with email: %s", email)
        return None

    if not user.verify_password(password):
        logger.info("Password mismatch for %s", email)
        return None

    return user


async def upsert_user(
    session: AsyncSession,
    email: str,
    name: str,
    password: str,
) -> tuple[User, bool]:
    """
    Insert or update a user by case-insensitive email.
    Returns the user and whether it was created. Commits the session.
    """
    user = await get_user_by_email(session, email)
    created = user is None

    if created:
        user = User(email=email.strip())
        session.add(user)

    user.name = name
    user.set_password(password)
    await session.commit()

    return user, created
