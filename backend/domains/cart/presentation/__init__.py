"""
Cart Presentation Layer - 购物车表示层
"""

from domains.cart.presentation.router import anonymous_cart_router, user_cart_router

__all__ = ["anonymous_cart_router", "user_cart_router"]
