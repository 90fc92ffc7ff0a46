# =============================================================================
# 📦 models/__init__.py
# =============================================================================

from .user import User
from .saved_payload import SavedPayload

__all__ = [
    "User",
    "SavedPayload",
]
