"""
Preference Domain - 偏好领域
"""

from domains.preference.domain.types import LocationUpdate, PreferenceRecord

__all__ = ["LocationUpdate", "PreferenceRecord"]
