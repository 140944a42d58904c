import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import asyncio
import re
import logging
from getpass import getpass
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.db import async_session_maker, engine
from app.models.base import Base
from app.services.auth import is_allowed_domain, upsert_user

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[a-zA-Z0-9]+$")


async def create_user():
    """
    Add or update a user in the local credential list.
    Supports non-interactive mode via EMAIL, NAME and PASSWORD env vars.
    """
    logger.info("Starting user provisioning")

    email = os.getenv("EMAIL")
    name = os.getenv("NAME")
    password = os.getenv("PASSWORD")

    if email and password:
        email = email.strip()
        name = (name or "").strip()
    else:
        email = input("User email: ").strip()
        if not EMAIL_RE.match(email):
            logger.error("Invalid email format: %s", email)
            return

        name = input("Display name: ").strip()
        password = getpass("Password: ").strip()
        password_confirm = getpass("Repeat password: ").strip()

        if password != password_confirm:
            logger.error("Passwords do not match.")
            return

    if not EMAIL_RE.match(email):
        logger.error("Invalid email format: %s", email)
        return
    if not is_allowed_domain(email):
        logger.warning("Domain of %s is not allow-listed; the user will not be able to log in.", email)
    if len(password) < 5:
        logger.error("Password too short (min. 5 characters).")
        return

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        try:
            _, created = await upsert_user(session, email, name, password)
            if created:
                logger.info("Added new user: %s", email)
            else:
                logger.info("Updated user: %s", email)

        except IntegrityError:
            await session.rollback()
            logger.error("Email (%s) is already in use.", email)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Database error: %s", e)

    await engine.dispose()
    logger.info("User provisioning finished")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        asyncio.run(create_user())
    except KeyboardInterrupt:
        logger.warning("Cancelled by user.")
