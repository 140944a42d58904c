import uuid
from datetime import datetime
from passlib.hash import hex_sha256
from sqlalchemy import Column, String, DateTime, Index, Uuid, func
from app.models.base import Base


class User(Base):
    """
    Provisioned user allowed to sign in with local credentials.
    Rows are written by scripts/create_user.py only.
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=True)
    password_hash = Column(String, nullable=True)
    created = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Emails are matched case-insensitively, so uniqueness is on lower(email)
    __table_args__ = (
        Index("ix_users_email_lower", func.lower(email), unique=True),
    )

    def __repr__(self):
        return f"<User {self.email}>"

    def set_password(self, password: str):
        """Hash password with unsalted SHA-256 (hex) and store in password_hash field."""
        self.password_hash = hex_sha256.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify password against stored hash."""
        if not self.password_hash:
            return False
        try:
            return hex_sha256.verify(password, self.password_hash)
        except ValueError:
            # Stored value is not a 64-char hex digest
            return False
