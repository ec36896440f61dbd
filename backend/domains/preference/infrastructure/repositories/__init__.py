"""
Preference Repositories - 偏好仓储实现
"""

from domains.preference.infrastructure.repositories.sqlalchemy_preference_repository import (
    AnonymousPreferenceRepository,
    SQLAlchemyPreferenceRepository,
    UserPreferenceRepository,
)

__all__ = [
    "AnonymousPreferenceRepository",
    "SQLAlchemyPreferenceRepository",
    "UserPreferenceRepository",
]
