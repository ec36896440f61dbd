"""
Preference Presentation Layer - 偏好表示层
"""

from domains.preference.presentation.router import (
    anonymous_preference_router,
    user_preference_router,
)

__all__ = ["anonymous_preference_router", "user_preference_router"]
