from __future__ import annotations

from freesip.schemas.contact import (
    ContactListOut,
    ContactOut,
    ContactSubmitIn,
    ContactSubmitOut,
    Pagination,
)

__all__ = [
    "ContactSubmitIn",
    "ContactSubmitOut",
    "ContactOut",
    "ContactListOut",
    "Pagination",
]
