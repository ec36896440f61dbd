"""
Identity Presentation Layer - 身份表示层
"""

from domains.identity.presentation.router import router

__all__ = ["router"]
