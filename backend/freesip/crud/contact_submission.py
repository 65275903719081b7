from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from freesip.core.errors import StoreWriteRejected
from freesip.models.contact_submission import ContactSubmission


def create_contact_submission(
    db: Session,
    *,
    name: str,
    email: str,
    company: str,
    message: str,
    ip_address: Optional[str],
    user_agent: Optional[str],
) -> ContactSubmission:
    try:
        submission = ContactSubmission(
            name=name,
            email=email,
            company=company,
            message=message,
            ip_address=ip_address,
            user_agent=user_agent,
        )
    except ValueError as e:
        raise StoreWriteRejected() from e

    db.add(submission)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise StoreWriteRejected() from e
    db.refresh(submission)
    return submission


def get_recent_submission(db: Session, *, email: str, since: datetime) -> Optional[ContactSubmission]:
    stmt = (
        select(ContactSubmission)
        .where(ContactSubmission.email == email, ContactSubmission.submitted_at >= since)
        .order_by(ContactSubmission.submitted_at.desc())
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def list_contact_submissions(db: Session, *, offset: int = 0, limit: int = 10) -> list[ContactSubmission]:
    stmt = (
        select(ContactSubmission)
        .order_by(ContactSubmission.submitted_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def count_contact_submissions(db: Session) -> int:
    return db.execute(select(func.count()).select_from(ContactSubmission)).scalar_one()
