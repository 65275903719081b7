from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from freesip.db.base import Base

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_MAX_LENGTH = 100
COMPANY_MAX_LENGTH = 100
MESSAGE_MAX_LENGTH = 1000


class ContactSubmission(Base):
    __tablename__ = "contact_submissions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    company: Mapped[str] = mapped_column(String(COMPANY_MAX_LENGTH), nullable=False, default="")
    message: Mapped[str] = mapped_column(Text, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # Store-side checks; the API validates first, these catch anything that slips past.
    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        value = (value or "").strip()
        if not value or len(value) > NAME_MAX_LENGTH:
            raise ValueError(f"invalid {key}")
        return value

    @validates("email")
    def _validate_email(self, key: str, value: str) -> str:
        value = (value or "").strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError(f"invalid {key}")
        return value

    @validates("company")
    def _validate_company(self, key: str, value: str | None) -> str:
        value = (value or "").strip()
        if len(value) > COMPANY_MAX_LENGTH:
            raise ValueError(f"invalid {key}")
        return value

    @validates("message")
    def _validate_message(self, key: str, value: str) -> str:
        value = (value or "").strip()
        if not value or len(value) > MESSAGE_MAX_LENGTH:
            raise ValueError(f"invalid {key}")
        return value


Index(
    "ix_contact_submissions_email_submitted_at",
    ContactSubmission.email,
    ContactSubmission.submitted_at.desc(),
)
Index("ix_contact_submissions_submitted_at", ContactSubmission.submitted_at.desc())
