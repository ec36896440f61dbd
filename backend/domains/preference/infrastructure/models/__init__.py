"""
Preference Models - 偏好模型
"""

from domains.preference.infrastructure.models.preference import (
    AnonymousUserPreference,
    PreferenceMixin,
    UserPreference,
)

__all__ = ["AnonymousUserPreference", "PreferenceMixin", "UserPreference"]
