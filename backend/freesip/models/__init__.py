from __future__ import annotations

from freesip.models.contact_submission import ContactSubmission

__all__ = ["ContactSubmission"]
