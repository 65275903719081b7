from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from freesip.core.config import settings
from freesip.core.errors import (
    ClientValidationError,
    RateLimitExceeded,
    StoreUnavailable,
    StoreWriteRejected,
)
from freesip.crud.contact_submission import (
    count_contact_submissions,
    create_contact_submission,
    get_recent_submission,
    list_contact_submissions,
)
from freesip.models.contact_submission import (
    COMPANY_MAX_LENGTH,
    EMAIL_PATTERN,
    MESSAGE_MAX_LENGTH,
    NAME_MAX_LENGTH,
    ContactSubmission,
)
from freesip.schemas.contact import ContactSubmitIn

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Thank you for your message! We'll get back to you soon."
DUPLICATE_MESSAGE = "You have already submitted a message recently. Please wait before submitting again."


@dataclass(frozen=True)
class ContactPage:
    items: list[ContactSubmission]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def validate_submission(form: ContactSubmitIn) -> None:
    """Raise ``ClientValidationError`` for the first problem found, in a fixed order."""
    if not form.name or not form.email or not form.message:
        raise ClientValidationError("Name, email, and message are required fields.")

    if not EMAIL_PATTERN.match(form.email):
        raise ClientValidationError("Please enter a valid email address.")

    if len(form.name.strip()) > NAME_MAX_LENGTH:
        raise ClientValidationError("Name must be less than 100 characters.")

    if len(form.message.strip()) > MESSAGE_MAX_LENGTH:
        raise ClientValidationError("Message must be less than 1000 characters.")

    if form.company and len(form.company.strip()) > COMPANY_MAX_LENGTH:
        raise ClientValidationError("Company name must be less than 100 characters.")


def submit_contact(
    db: Session,
    form: ContactSubmitIn,
    *,
    ip_address: Optional[str],
    user_agent: Optional[str],
    now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
) -> ContactSubmission:
    validate_submission(form)

    email = form.email.strip().lower()
    since = now() - timedelta(seconds=settings.DUPLICATE_WINDOW_SECONDS)

    # Check-then-insert is not atomic: two concurrent requests for the same
    # email can both pass. A rare duplicate is accepted.
    try:
        if get_recent_submission(db, email=email, since=since) is not None:
            raise RateLimitExceeded(DUPLICATE_MESSAGE)

        submission = create_contact_submission(
            db,
            name=form.name.strip(),
            email=email,
            company=form.company.strip() if form.company else "",
            message=form.message.strip(),
            ip_address=ip_address,
            user_agent=user_agent,
        )
    except StoreWriteRejected:
        logger.warning("Contact submission rejected by store for %s", email, exc_info=True)
        raise
    except SQLAlchemyError as e:
        logger.exception("Contact form submission error")
        raise StoreUnavailable() from e

    logger.info(
        "New contact form submission: name=%s email=%s timestamp=%s",
        submission.name,
        submission.email,
        now().isoformat(),
    )
    return submission


def list_contacts(db: Session, *, page: int, limit: int) -> ContactPage:
    try:
        items = list_contact_submissions(db, offset=(page - 1) * limit, limit=limit)
        total = count_contact_submissions(db)
    except (SQLAlchemyError, OverflowError) as e:
        logger.exception("Error fetching contacts")
        raise StoreUnavailable("Error fetching contacts") from e
    return ContactPage(items=items, page=page, limit=limit, total=total)
