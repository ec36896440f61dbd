"""
Preference Application Layer - 偏好应用层
"""

from domains.preference.application.preference_use_case import PreferenceUseCase

__all__ = ["PreferenceUseCase"]
