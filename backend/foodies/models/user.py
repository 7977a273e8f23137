"""
Foodies Backend — User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table plus the `user_followers` join table.
Why:   Users own recipes, favorite recipes and follow each other.
How:   Integer primary key, unique email checked against EMAIL_PATTERN by an
       ORM validator before any INSERT/UPDATE is emitted.

Follows Relation:
    `user_followers(follower_id, following_id)` stores one directed edge per
    row. "Who follows X" and "whom does X follow" are two queries over the
    same table (see UserService); no relationship() is mapped, so nothing
    ever walks a cyclic object graph.

    The table does not forbid follower_id == following_id. UserService
    rejects self-follows before inserting.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
)
from sqlalchemy.orm import Mapped, mapped_column, validates

from foodies.database import Base
from foodies.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.[A-Za-z]{2,}$")


user_followers = Table(
    "user_followers",
    Base.metadata,
    Column(
        "follower_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "following_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    ),
)


class User(Base):
    """
    A registered account.

    password holds a hash produced by the auth service; this API never reads
    it. token holds the currently valid access token (NULL after logout) and
    is compared against the bearer token on every authenticated request.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    password: Mapped[str] = mapped_column(String(255), nullable=False)

    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    token: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True, default=None)

    verify: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    verification_token: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @validates("email")
    def validate_email(self, key: str, value: str) -> str:
        """Normalizes to lowercase and rejects malformed addresses."""
        normalized = (value or "").strip().lower()
        if not EMAIL_PATTERN.match(normalized):
            raise ValidationError(message="Email has an invalid format", field=key)
        return normalized

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
