from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ContactSubmitIn(BaseModel):
    # Presence and length are checked by the contact service so each failure
    # gets its own message.
    name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    message: Optional[str] = None


class ContactSubmitOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    submission_id: str = Field(alias="submissionId")


class ContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    email: str
    company: str
    message: str
    submitted_at: datetime = Field(alias="submittedAt")


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total_contacts: int = Field(alias="totalContacts")
    limit: int


class ContactListOut(BaseModel):
    success: bool = True
    data: list[ContactOut]
    pagination: Pagination
