from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from freesip.api import deps
from freesip.db.session import get_db
from freesip.schemas.contact import (
    ContactListOut,
    ContactOut,
    ContactSubmitIn,
    ContactSubmitOut,
    Pagination,
)
from freesip.services.contact_service import SUCCESS_MESSAGE, list_contacts, submit_contact

router = APIRouter(tags=["contact"])

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_QUERY_VALUE = 2**31 - 1


def _positive_int(value: Optional[str], default: int) -> int:
    try:
        parsed = int(value) if value is not None else 0
    except ValueError:
        return default
    if parsed <= 0:
        return default
    return min(parsed, MAX_QUERY_VALUE)


@router.post(
    "/contact/submit",
    response_model=ContactSubmitOut,
    dependencies=[Depends(deps.contact_rate_limit)],
)
def submit_contact_form(
    request: Request,
    form: Optional[ContactSubmitIn] = None,
    db: Session = Depends(get_db),
) -> ContactSubmitOut:
    submission = submit_contact(
        db,
        form or ContactSubmitIn(),
        ip_address=deps.get_client_ip(request),
        user_agent=deps.get_user_agent(request),
    )
    return ContactSubmitOut(message=SUCCESS_MESSAGE, submission_id=submission.id)


@router.get(
    "/contacts",
    response_model=ContactListOut,
    dependencies=[Depends(deps.require_admin_key)],
)
def read_contacts(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db),
) -> ContactListOut:
    result = list_contacts(
        db,
        page=_positive_int(page, DEFAULT_PAGE),
        limit=_positive_int(limit, DEFAULT_LIMIT),
    )
    return ContactListOut(
        data=[ContactOut.model_validate(s) for s in result.items],
        pagination=Pagination(
            current_page=result.page,
            total_pages=result.total_pages,
            total_contacts=result.total,
            limit=result.limit,
        ),
    )
