from __future__ import annotations

from freesip.api.api_v1.api import api_router

__all__ = ["api_router"]
